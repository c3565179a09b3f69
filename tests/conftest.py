"""Shared fixtures and utilities for tests."""

from typing import Any

import pytest
import pytest_asyncio

from api.schemas.applications import ApplicationCreate
from api.schemas.jobs import JobRoleCreate
from core.config import Settings
from core.context import build_context
from factories import CV_TEXT, job_role_data


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and upload directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        cv_upload_dir=str(tmp_path / "cvs"),
        json_logs=False,
    )


@pytest_asyncio.fixture
async def context(settings):
    """Application context with a freshly created schema."""
    ctx = build_context(settings)
    await ctx.db.create_all()
    yield ctx
    await ctx.close()


@pytest.fixture
def job_role_service(context):
    return context.job_role_service


@pytest.fixture
def application_service(context):
    return context.application_service


@pytest.fixture
def create_job_role(job_role_service):
    """Factory creating a job role through the service."""

    async def _create(**overrides: Any):
        return await job_role_service.create_job_role(JobRoleCreate(**job_role_data(**overrides)))

    return _create


@pytest.fixture
def apply(application_service):
    """Factory submitting a text-CV application through the service."""

    async def _apply(job_role_id: int, user_id: int = 1, cv_text: str = CV_TEXT):
        return await application_service.create_application(
            ApplicationCreate(user_id=user_id, job_role_id=job_role_id, cv_text=cv_text)
        )

    return _apply
