"""FastAPI dependencies for dependency injection."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from api.services import ApplicationService, JobRoleService
from core.context import AppContext

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Caller:
    """Identity of the already-authenticated caller."""

    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_job_role_service(context: AppContext = Depends(get_context)) -> JobRoleService:
    return context.job_role_service


def get_application_service(context: AppContext = Depends(get_context)) -> ApplicationService:
    return context.application_service


async def get_caller(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Caller:
    """
    Read the caller from headers set by the authenticating proxy.

    Identity is trusted as already verified; this only checks it is present
    and well formed.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity",
        ) from None

    return Caller(user_id=user_id, role=(x_user_role or "user").lower())


async def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    """Require the caller to be an admin."""
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return caller
