"""Local filesystem access."""

from .files import FileError, file_size, mime_type_of, read_bytes

__all__ = [
    "FileError",
    "file_size",
    "mime_type_of",
    "read_bytes",
]
