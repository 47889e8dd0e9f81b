"""Exit codes for the mvn-gitflow command.

Invocation and environment problems (missing tool, git-flow not
initialized, bad phase selector, existing release branch, missing
release.properties) all exit with 1. A failing git or mvn invocation
exits with 3 so scripts can tell "refused to start" from "broke midway".
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are part of the CLI contract."""

    OK = 0
    USER_ERROR = 1
    TOOL_ERROR = 3
