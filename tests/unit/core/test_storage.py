"""Tests for local CV storage."""

import io
import re
from datetime import datetime, timezone
from pathlib import Path

import pytest

from core.storage.local import CVUpload, LocalCVStorage, generate_file_name
from factories import DOCX_MIME, docx_upload


@pytest.fixture
def storage(tmp_path):
    return LocalCVStorage(
        str(tmp_path / "cvs"),
        clock=lambda: datetime(2025, 3, 14, tzinfo=timezone.utc),
    )


def test_generated_name_keeps_extension():
    name = generate_file_name("My CV.DOCX")
    assert re.fullmatch(r"\d{13}-[0-9a-f]{12}\.docx", name)


def test_generated_names_are_unique():
    assert generate_file_name("cv.doc") != generate_file_name("cv.doc")


def test_save_bytes_under_year_month(storage, tmp_path):
    stored = storage.save(docx_upload(data=b"hello"))

    path = Path(stored.path)
    assert path.parent == tmp_path / "cvs" / "2025" / "03"
    assert path.read_bytes() == b"hello"
    assert stored.size == 5
    assert stored.mime_type == DOCX_MIME


def test_save_file_object(storage):
    upload = CVUpload(filename="cv.doc", content_type="application/msword", size=3, data=io.BytesIO(b"abc"))

    stored = storage.save(upload)

    assert storage.read(stored.path) == b"abc"
    assert stored.size == 3


def test_delete_is_idempotent(storage):
    stored = storage.save(docx_upload())

    storage.delete(stored.path)
    storage.delete(stored.path)

    assert not storage.exists(stored.path)


def test_read_missing_file(storage, tmp_path):
    with pytest.raises(FileNotFoundError):
        storage.read(str(tmp_path / "nope.docx"))


def test_size_of_stored_file(storage, tmp_path):
    stored = storage.save(docx_upload(data=b"12345"))

    assert storage.size(stored.path) == 5
    with pytest.raises(FileNotFoundError):
        storage.size(str(tmp_path / "nope.docx"))
