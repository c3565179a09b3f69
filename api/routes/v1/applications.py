"""
Application endpoints.

Applicants submit and view their own applications; admins list applications
per role and move them to hired or rejected.
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, Response, UploadFile, status

from api.dependencies import Caller, get_application_service, get_caller, require_admin
from api.schemas.applications import (
    ApplicationCreate,
    ApplicationList,
    ApplicationRead,
    ApplicationTextBody,
    CVFileInfo,
    HireResult,
)
from api.services import ApplicationService
from core.storage.local import CVUpload

router = APIRouter()


async def _get_visible_application(
    application_id: int, caller: Caller, service: ApplicationService
) -> ApplicationRead:
    application = await service.get_application_by_id(application_id)
    # Other users' applications are reported as missing, not forbidden
    if application is None or (not caller.is_admin and application.user_id != caller.user_id):
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.post(
    "",
    response_model=ApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Apply With CV Text",
)
async def create_application(
    body: ApplicationTextBody,
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.create_application(
        ApplicationCreate(
            user_id=caller.user_id,
            job_role_id=body.job_role_id,
            cv_text=body.cv_text,
        )
    )


@router.post(
    "/upload",
    response_model=ApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Apply With CV File",
    description="Multipart submission with a job_role_id field and a cv_file part.",
)
async def upload_application(
    job_role_id: int = Form(...),
    cv_file: UploadFile = File(...),
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    data = await cv_file.read()
    upload = CVUpload(
        filename=cv_file.filename or "",
        content_type=cv_file.content_type or "application/octet-stream",
        size=len(data),
        data=data,
    )
    return await service.create_application(
        ApplicationCreate(user_id=caller.user_id, job_role_id=job_role_id, cv_file=upload)
    )


@router.get(
    "/mine",
    response_model=ApplicationList,
    summary="List My Applications",
)
async def list_my_applications(
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    applications = await service.get_applications_by_user_id(caller.user_id)
    return ApplicationList(applications=applications, count=len(applications))


@router.get(
    "/job-role/{job_role_id}",
    response_model=ApplicationList,
    summary="List Applications For Job Role",
    description="Applications for a job role, newest first. Admin only.",
)
async def list_job_role_applications(
    job_role_id: int = Path(..., description="Job role ID"),
    caller: Caller = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service),
):
    applications = await service.get_applications_by_job_role(job_role_id)
    return ApplicationList(applications=applications, count=len(applications))


@router.get(
    "/{application_id}",
    response_model=ApplicationRead,
    summary="Get Application",
)
async def get_application(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    return await _get_visible_application(application_id, caller, service)


@router.get(
    "/{application_id}/cv",
    summary="Download CV File",
)
async def download_cv(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    await _get_visible_application(application_id, caller, service)
    cv = await service.get_cv_file(application_id)
    return Response(
        content=cv.data,
        media_type=cv.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{cv.filename}"'},
    )


@router.get(
    "/{application_id}/cv/info",
    response_model=CVFileInfo,
    summary="Get CV File Info",
    description="Stored CV metadata without downloading the file.",
)
async def get_cv_file_info(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    await _get_visible_application(application_id, caller, service)
    return await service.get_cv_file_info(application_id)


@router.put(
    "/{application_id}/hire",
    response_model=HireResult,
    summary="Hire Applicant",
    description="Mark an in-progress application hired and take one open position. Admin only.",
)
async def hire_applicant(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.hire_applicant(application_id)


@router.put(
    "/{application_id}/reject",
    response_model=ApplicationRead,
    summary="Reject Applicant",
    description="Mark an in-progress application rejected. Admin only.",
)
async def reject_applicant(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.reject_applicant(application_id)


@router.delete(
    "/{application_id}",
    response_model=ApplicationRead,
    summary="Delete Application",
)
async def delete_application(
    application_id: int = Path(..., description="Application ID"),
    caller: Caller = Depends(get_caller),
    service: ApplicationService = Depends(get_application_service),
):
    await _get_visible_application(application_id, caller, service)
    return await service.delete_application(application_id)
