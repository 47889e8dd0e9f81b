"""Error payload for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from mgf.core.errors import ErrorCode

FlowErrorKind = Literal[
    "missing_tool",
    "unconfigured_branching",
    "invalid_config",
    "no_phase",
    "unknown_phase",
    "branch_exists",
    "missing_metadata",
    "tool_failed",
    "artifact_missing",
]

_TOOL_KINDS: frozenset[str] = frozenset({"tool_failed", "artifact_missing"})


@dataclass(frozen=True, slots=True)
class FlowError:
    """Why a run or a phase stopped.

    Every FlowError is fatal to the run; there is no continue-on-error mode.
    """

    kind: FlowErrorKind
    message: str
    hint: str | None = None

    @property
    def exit_code(self) -> ErrorCode:
        if self.kind in _TOOL_KINDS:
            return ErrorCode.TOOL_ERROR
        return ErrorCode.USER_ERROR

    @property
    def shows_usage(self) -> bool:
        return self.kind in ("no_phase", "unknown_phase")
