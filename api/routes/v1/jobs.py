"""
Job role endpoints.

Anyone identified may browse roles; creating, editing and deleting them is
admin-only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from api.dependencies import Caller, get_caller, get_job_role_service, require_admin
from api.schemas.jobs import (
    DeleteJobRoleResult,
    JobRoleCreate,
    JobRoleList,
    JobRoleRead,
    JobRoleUpdate,
)
from api.services import JobRoleService
from database.repositories.job_roles import JobRoleFilters

router = APIRouter()


@router.get(
    "",
    response_model=JobRoleList,
    summary="List Job Roles",
    description="List job roles with optional name search and exact filters.",
)
async def list_job_roles(
    search: Optional[str] = Query(None, description="Case-insensitive match on the name"),
    location: Optional[str] = Query(None),
    capability: Optional[str] = Query(None),
    band: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: Optional[int] = Query(None, ge=0),
    caller: Caller = Depends(get_caller),
    service: JobRoleService = Depends(get_job_role_service),
):
    return await service.get_all_job_roles(
        limit=limit,
        offset=offset,
        search=search,
        filters=JobRoleFilters(location=location, capability=capability, band=band),
    )


@router.get(
    "/status/{job_status}",
    response_model=list[JobRoleRead],
    summary="List Job Roles By Status",
)
async def list_job_roles_by_status(
    job_status: str = Path(..., description="open or closed"),
    caller: Caller = Depends(get_caller),
    service: JobRoleService = Depends(get_job_role_service),
):
    return await service.get_job_roles_by_status(job_status)


@router.get(
    "/{job_role_id}",
    response_model=JobRoleRead,
    summary="Get Job Role",
)
async def get_job_role(
    job_role_id: int = Path(..., description="Job role ID"),
    caller: Caller = Depends(get_caller),
    service: JobRoleService = Depends(get_job_role_service),
):
    result = await service.get_job_role_by_id(job_role_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Job role not found")
    return result


@router.post(
    "",
    response_model=JobRoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job Role",
    description="Create a job role. Admin only.",
)
async def create_job_role(
    payload: JobRoleCreate,
    caller: Caller = Depends(require_admin),
    service: JobRoleService = Depends(get_job_role_service),
):
    return await service.create_job_role(payload)


@router.put(
    "/{job_role_id}",
    response_model=JobRoleRead,
    summary="Update Job Role",
    description=(
        "Partially update a job role. Closing a role with applications still "
        "in progress is refused with 409. Admin only."
    ),
)
async def update_job_role(
    payload: JobRoleUpdate,
    job_role_id: int = Path(..., description="Job role ID"),
    caller: Caller = Depends(require_admin),
    service: JobRoleService = Depends(get_job_role_service),
):
    return await service.update_job_role(job_role_id, payload)


@router.delete(
    "/{job_role_id}",
    response_model=DeleteJobRoleResult,
    summary="Delete Job Role",
    description=(
        "Delete a job role and its applications. Refused with 409 while any "
        "application is in progress unless force=true. Admin only."
    ),
)
async def delete_job_role(
    job_role_id: int = Path(..., description="Job role ID"),
    force: bool = Query(False, description="Delete even with applications in progress"),
    caller: Caller = Depends(require_admin),
    service: JobRoleService = Depends(get_job_role_service),
):
    return await service.delete_job_role(job_role_id, force_delete=force)
