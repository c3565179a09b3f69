"""Local file storage for uploaded CVs."""

import secrets
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Callable, Protocol
import logging

from core.utils.datetime import now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CVUpload:
    """An uploaded CV file as received from the transport layer."""

    filename: str
    content_type: str
    size: int
    data: bytes | BinaryIO


@dataclass(frozen=True)
class StoredFile:
    """Where and what the blob store saved."""

    path: str
    size: int
    mime_type: str


class BlobStore(Protocol):
    """Storage collaborator consumed by the application service."""

    def save(self, upload: CVUpload) -> StoredFile: ...

    def delete(self, path: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def read(self, path: str) -> bytes: ...

    def size(self, path: str) -> int: ...


def generate_file_name(original_name: str) -> str:
    """
    Build a collision-resistant name that keeps the original extension.

    Example: ``1718000000000-k3j9x2m1q8ab.docx``
    """
    extension = Path(original_name).suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}"


class LocalCVStorage:
    """Stores CV files on local disk under ``<base>/<YYYY>/<MM>/``."""

    def __init__(
        self,
        base_path: str = "./uploads/cvs",
        clock: Callable[[], datetime] = now,
    ):
        """
        Initialize local storage.

        Args:
            base_path: Base directory for file storage
            clock: Source of the current time, used for the year/month folders
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.clock = clock

    def _storage_path(self, file_name: str) -> Path:
        current = self.clock()
        return self.base_path / f"{current.year:04d}" / f"{current.month:02d}" / file_name

    def save(self, upload: CVUpload) -> StoredFile:
        """
        Save an uploaded CV.

        Args:
            upload: The uploaded file

        Returns:
            Storage path, size and MIME type of the saved file
        """
        file_path = self._storage_path(generate_file_name(upload.filename))
        file_path.parent.mkdir(parents=True, exist_ok=True)

        if isinstance(upload.data, bytes):
            file_path.write_bytes(upload.data)
        else:
            with open(file_path, "wb") as f:
                shutil.copyfileobj(upload.data, f)

        size = file_path.stat().st_size
        logger.info(f"Saved CV file to {file_path}")
        return StoredFile(path=str(file_path), size=size, mime_type=upload.content_type)

    def delete(self, path: str) -> None:
        """
        Delete a stored file. Deleting a file that is already gone is a no-op.

        Args:
            path: Path returned by ``save``
        """
        file_path = Path(path)
        try:
            file_path.unlink()
        except FileNotFoundError:
            return
        logger.info(f"Deleted file: {file_path}")

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read(self, path: str) -> bytes:
        """
        Read a stored file.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        return file_path.read_bytes()

    def size(self, path: str) -> int:
        """
        Size in bytes of a stored file.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``
        """
        return Path(path).stat().st_size
