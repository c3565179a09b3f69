"""Payload builders shared by the tests."""

from typing import Any

from core.storage.local import CVUpload

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

CV_TEXT = (
    "Software engineer with six years of experience building Python services, "
    "REST APIs and data pipelines."
)


def job_role_data(**overrides: Any) -> dict[str, Any]:
    """A complete, valid job role payload."""
    data = {
        "name": "Engineer",
        "location": "Belfast",
        "capability": "Engineering",
        "band": "Consultant",
        "closing_date": "2030-01-31T00:00:00.000Z",
        "summary": "Build and run backend services.",
        "key_responsibilities": "Design, code, review and operate services.",
        "status": "open",
        "number_of_open_positions": 1,
    }
    data.update(overrides)
    return data


def docx_upload(filename: str = "cv.docx", data: bytes = b"PK\x03\x04 fake docx") -> CVUpload:
    return CVUpload(filename=filename, content_type=DOCX_MIME, size=len(data), data=data)
