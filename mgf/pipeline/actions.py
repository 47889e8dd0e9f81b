"""Typed steps a phase is made of.

The planner renders these with `describe()`; the executor performs them.
Both consume the same tuple, so a dry run lists exactly what a real run
would do.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class ToolCall:
    tool: str
    args: tuple[str, ...]

    @property
    def argv(self) -> tuple[str, ...]:
        return (self.tool, *self.args)

    def describe(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True, slots=True)
class ReplaceFile:
    """Overwrite `target` with the contents of `source`; `source` is kept."""

    source: str
    target: str

    def describe(self) -> str:
        return f"replace {self.target} with {self.source}"


@dataclass(frozen=True, slots=True)
class RemoveFiles:
    """Delete every path; fails if any of them is already gone."""

    paths: tuple[str, ...]

    def describe(self) -> str:
        return f"remove {' '.join(self.paths)}"


@dataclass(frozen=True, slots=True)
class EnsureBranchAbsent:
    branch: str

    def describe(self) -> str:
        return f"check branch {self.branch} does not exist"


@dataclass(frozen=True, slots=True)
class Skip:
    reason: str

    def describe(self) -> str:
        return f"skip: {self.reason}"


Action: TypeAlias = ToolCall | ReplaceFile | RemoveFiles | EnsureBranchAbsent | Skip


def git(*args: str) -> ToolCall:
    return ToolCall("git", args)
