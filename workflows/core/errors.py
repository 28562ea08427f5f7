"""Exit codes for the workflows CLI.

These values are used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad arguments, invalid pipeline file)
    - 2: Step error (a step reported failure)
    - 3: Network error (request failed, API unreachable)
    - 4: I/O error (file not found, permission denied)
    """

    OK = 0
    USER_ERROR = 1
    STEP_ERROR = 2
    NETWORK_ERROR = 3
    IO_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
