"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (missing tag, unmatched file patterns)
    - 2: Configuration error (invalid environment inputs)
    - 3: Release error (the release API refused a mutation)
    - 4: Network error (API unreachable, retries exhausted)
    - 5: I/O error (asset or body file unreadable)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    RELEASE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
