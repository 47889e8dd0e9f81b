from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mgf.pipeline.errors import FlowError

UNRESOLVED_TAG = "<unresolved:scm.tag>"
UNRESOLVED_DEV = "<unresolved:project.dev>"


class Phase(Enum):
    """Release phases in canonical order. Values are the CLI selectors."""

    PREPARE = "prepare"
    START = "start"
    APPLY = "apply"
    FINISH = "finish"
    PUSH = "push"
    DEPLOY = "deploy"
    CLEAN = "clean"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ReleaseMetadata:
    """Identifiers computed by `mvn release:prepare`.

    `resolved` is False only for the dry-run placeholder, whose fields are
    tokens that cannot be mistaken for real versions.
    """

    development_version: str
    release_tag: str
    resolved: bool = True

    @classmethod
    def placeholder(cls) -> ReleaseMetadata:
        return cls(development_version=UNRESOLVED_DEV, release_tag=UNRESOLVED_TAG, resolved=False)


@dataclass(frozen=True, slots=True)
class ActionPlan:
    """What a phase would do, one line per external call or file mutation."""

    phase: Phase
    lines: tuple[str, ...]
    # Some of the phase is skipped by an offline mode.
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    phase: Phase
    succeeded: bool
    message: str | None = None
    # Succeeded, but part or all of the phase was skipped (offline modes).
    warning: bool = False
    error: FlowError | None = None
    # Description of every action performed (or planned, in dry-run).
    actions: tuple[str, ...] = ()

    @classmethod
    def failed(
        cls, phase: Phase, error: FlowError, actions: tuple[str, ...] = ()
    ) -> ExecutionOutcome:
        return cls(
            phase=phase, succeeded=False, message=error.message, error=error, actions=actions
        )
