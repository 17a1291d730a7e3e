from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ghr.core.errors import ErrorCode

ReleaseErrorKind = Literal[
    "not_found",
    "conflict",
    "unexpected",
    "exhausted_retries",
    "upload_failed",
    "local_file",
    "missing_tag",
    "unmatched_files",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    status: int | None = None
    hint: str | None = None


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"missing_tag", "unmatched_files"}:
        return ErrorCode.USER_ERROR
    if kind in {"local_file"}:
        return ErrorCode.IO_ERROR
    if kind in {"exhausted_retries"}:
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.RELEASE_ERROR
