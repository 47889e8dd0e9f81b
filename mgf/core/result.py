"""Result type for explicit error handling.

Every fallible operation in mgf (running git or mvn, reading
release.properties, resolving a phase selector) returns a Result instead
of raising. Callers branch on Ok/Err, usually with pattern matching:

    match store.load():
        case Ok(metadata):
            console.info(f"release tag: {metadata.release_tag}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result carrying an error payload."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
