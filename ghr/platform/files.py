"""Filesystem helpers."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from ghr.core.result import Err, Ok, Result

__all__ = ["FileError", "file_size", "mime_type_of", "read_bytes"]


@dataclass(frozen=True, slots=True)
class FileError:
    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.path}"


def _os_error(path: Path, e: OSError) -> FileError:
    if isinstance(e, FileNotFoundError):
        return FileError(path=path, message="file not found")
    if isinstance(e, PermissionError):
        return FileError(path=path, message="permission denied")
    if isinstance(e, IsADirectoryError):
        return FileError(path=path, message="is a directory")
    return FileError(path=path, message=e.strerror or str(e))


def file_size(path: Path) -> Result[int, FileError]:
    try:
        st = path.stat()
    except OSError as e:
        return Err(_os_error(path, e))
    if not path.is_file():
        return Err(FileError(path=path, message="not a regular file"))
    return Ok(st.st_size)


def read_bytes(path: Path) -> Result[bytes, FileError]:
    try:
        return Ok(path.read_bytes())
    except OSError as e:
        return Err(_os_error(path, e))


def mime_type_of(path: Path) -> str | None:
    """Content type guessed from the file name, or None when unknown."""
    mime, _ = mimetypes.guess_type(path.name, strict=False)
    return mime
