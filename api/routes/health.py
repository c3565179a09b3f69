"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_context
from core.context import AppContext

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="0.1.0")


@router.get("/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """Readiness check: the database answers a trivial query."""
    try:
        async with context.db.session() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {type(e).__name__}")
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
