"""Tests for JobRoleService."""

import logging
from unittest.mock import MagicMock

import pytest

from api.schemas.applications import ApplicationCreate
from api.schemas.jobs import JobRoleCreate, JobRoleUpdate
from core.errors import DomainError, ErrorKind
from database.models.jobs import JobRoleStatus
from database.repositories import JobRoleFilters
from factories import docx_upload, job_role_data


class TestReads:
    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, job_role_service, create_job_role):
        created = await create_job_role(closing_date="2030-01-31")

        found = await job_role_service.get_job_role_by_id(created.id)

        assert found == created
        assert found.model_dump(mode="json")["closing_date"] == "2030-01-31T00:00:00.000Z"
        assert found.status is JobRoleStatus.OPEN

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, job_role_service):
        assert await job_role_service.get_job_role_by_id(404) is None

    @pytest.mark.asyncio
    async def test_list_reports_total_beyond_page(self, job_role_service, create_job_role):
        for i in range(3):
            await create_job_role(name=f"Engineer {i}")
        await create_job_role(name="Tester", location="London")

        result = await job_role_service.get_all_job_roles(limit=2, search="engineer")

        assert [j.name for j in result["jobs"]] == ["Engineer 0", "Engineer 1"]
        assert result["total"] == 3

        london = await job_role_service.get_all_job_roles(filters=JobRoleFilters(location="London"))
        assert [j.name for j in london["jobs"]] == ["Tester"]

    @pytest.mark.asyncio
    async def test_by_status(self, job_role_service, create_job_role):
        await create_job_role(name="Open")
        await create_job_role(name="Closed", status="closed")

        closed = await job_role_service.get_job_roles_by_status("closed")

        assert [j.name for j in closed] == ["Closed"]

    @pytest.mark.asyncio
    async def test_by_unknown_status(self, job_role_service):
        with pytest.raises(DomainError) as exc_info:
            await job_role_service.get_job_roles_by_status("draft")
        assert exc_info.value.kind is ErrorKind.VALIDATION


class TestCreate:
    @pytest.mark.asyncio
    async def test_invalid_payload(self, job_role_service):
        with pytest.raises(DomainError) as exc_info:
            await job_role_service.create_job_role(
                JobRoleCreate(**job_role_data(number_of_open_positions=-2))
            )

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.message == "number_of_open_positions must be a non-negative number"

    @pytest.mark.asyncio
    async def test_missing_fields(self, job_role_service):
        with pytest.raises(DomainError) as exc_info:
            await job_role_service.create_job_role(JobRoleCreate(name="Engineer"))

        assert exc_info.value.message.startswith("Missing required fields")


class TestUpdate:
    @pytest.mark.asyncio
    async def test_partial_update(self, job_role_service, create_job_role):
        job = await create_job_role()

        updated = await job_role_service.update_job_role(
            job.id, JobRoleUpdate(number_of_open_positions=4)
        )

        assert updated.number_of_open_positions == 4
        assert updated.name == job.name

    @pytest.mark.asyncio
    async def test_empty_update_returns_existing(self, job_role_service, create_job_role):
        job = await create_job_role()
        assert await job_role_service.update_job_role(job.id, JobRoleUpdate()) == job

    @pytest.mark.asyncio
    async def test_update_missing(self, job_role_service):
        with pytest.raises(DomainError) as exc_info:
            await job_role_service.update_job_role(404, JobRoleUpdate(name="New"))
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_close_blocked_by_active_application(self, job_role_service, create_job_role, apply):
        job = await create_job_role()
        await apply(job.id)

        with pytest.raises(DomainError) as exc_info:
            await job_role_service.update_job_role(job.id, JobRoleUpdate(status="closed"))

        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert "1 active application(s)" in exc_info.value.message
        assert (await job_role_service.get_job_role_by_id(job.id)).status is JobRoleStatus.OPEN

    @pytest.mark.asyncio
    async def test_close_after_applications_processed(
        self, job_role_service, application_service, create_job_role, apply
    ):
        job = await create_job_role()
        application = await apply(job.id)
        await application_service.reject_applicant(application.id)

        updated = await job_role_service.update_job_role(job.id, JobRoleUpdate(status="closed"))

        assert updated.status is JobRoleStatus.CLOSED

    @pytest.mark.asyncio
    async def test_reopen_accepts_any_positions(self, job_role_service, create_job_role):
        job = await create_job_role(status="closed", number_of_open_positions=0)

        reopened = await job_role_service.update_job_role(
            job.id, JobRoleUpdate(status="open", number_of_open_positions=0)
        )

        assert reopened.status is JobRoleStatus.OPEN
        assert reopened.number_of_open_positions == 0


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_without_applications(self, job_role_service, create_job_role):
        job = await create_job_role()

        result = await job_role_service.delete_job_role(job.id)

        assert result.success is True
        assert result.job.name == "Engineer"
        assert result.deleted_applications_count == 0
        assert await job_role_service.get_job_role_by_id(job.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, job_role_service):
        with pytest.raises(DomainError) as exc_info:
            await job_role_service.delete_job_role(404)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_active_application_requires_force(
        self, job_role_service, application_service, create_job_role, apply
    ):
        job = await create_job_role(number_of_open_positions=2)
        active = await apply(job.id, user_id=1)
        rejected = await apply(job.id, user_id=2)
        await application_service.reject_applicant(rejected.id)

        with pytest.raises(DomainError) as exc_info:
            await job_role_service.delete_job_role(job.id)
        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert "use force delete" in exc_info.value.message

        result = await job_role_service.delete_job_role(job.id, force_delete=True)

        assert result.deleted_applications_count == 2
        assert await application_service.get_application_by_id(active.id) is None
        assert await application_service.get_application_by_id(rejected.id) is None

    @pytest.mark.asyncio
    async def test_force_delete_removes_cv_files(
        self, context, job_role_service, application_service, create_job_role
    ):
        job = await create_job_role()
        application = await application_service.create_application(
            ApplicationCreate(user_id=1, job_role_id=job.id, cv_file=docx_upload())
        )
        stored_path = (await context.applications.find_by_id(application.id)).cv_file_path
        assert context.storage.exists(stored_path)

        await job_role_service.delete_job_role(job.id, force_delete=True)

        assert not context.storage.exists(stored_path)

    @pytest.mark.asyncio
    async def test_cv_cleanup_failure_does_not_fail_delete(
        self, context, job_role_service, application_service, create_job_role, caplog
    ):
        job = await create_job_role()
        await application_service.create_application(
            ApplicationCreate(user_id=1, job_role_id=job.id, cv_file=docx_upload())
        )
        job_role_service.storage = MagicMock()
        job_role_service.storage.delete.side_effect = OSError("disk gone")

        with caplog.at_level(logging.ERROR, logger="api.services.jobs"):
            result = await job_role_service.delete_job_role(job.id, force_delete=True)

        assert result.deleted_applications_count == 1
        assert "disk gone" in caplog.text
