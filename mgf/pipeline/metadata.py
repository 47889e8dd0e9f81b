"""Reading `release.properties`.

`mvn release:prepare -DdryRun=true` writes the computed versions into a
Java properties file. Two keys matter to the pipeline:

- `scm.tag`: name of the release tag (and suffix of the release branch)
- `project.dev`: next development version, committed on develop
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from mgf.core.result import Err, Ok, Result
from mgf.pipeline.errors import FlowError
from mgf.pipeline.model import Phase, ReleaseMetadata

DEV_VERSION_KEY = "project.dev"
RELEASE_TAG_KEY = "scm.tag"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(raw: str) -> str:
    out: list[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append(_ESCAPES.get(nxt, nxt))
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    """Split at the first unescaped `=`, `:` or whitespace."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:" or ch.isspace():
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return _unescape(key), _unescape(rest)


def _logical_lines(text: str) -> Iterator[str]:
    """Yield entries, joining lines that end in an unescaped backslash."""
    pending = ""
    for raw in text.splitlines():
        line = raw.strip()
        if not pending and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def parse_properties(text: str) -> dict[str, str]:
    """Parse a flat properties listing. The first occurrence of a key wins.

    Continuation lines are joined with their leading whitespace dropped.
    """
    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        if key and key not in entries:
            entries[key] = value
    return entries


class MetadataStore:
    """Loads release metadata once and keeps it for the rest of the run."""

    def __init__(self, path: Path, *, develop_branch: str) -> None:
        self.path = path
        self._develop_branch = develop_branch
        self._loaded: ReleaseMetadata | None = None

    def load(self) -> Result[ReleaseMetadata, FlowError]:
        if self._loaded is not None:
            return Ok(self._loaded)

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(self._missing(f"{self.path.name} not found"))
        except OSError as e:
            return Err(self._missing(f"cannot read {self.path.name}: {e}"))

        entries = parse_properties(text)
        dev = entries.get(DEV_VERSION_KEY)
        if not dev:
            return Err(self._missing(f"{self.path.name} has no {DEV_VERSION_KEY} entry"))
        tag = entries.get(RELEASE_TAG_KEY)
        if not tag:
            return Err(self._missing(f"{self.path.name} has no {RELEASE_TAG_KEY} entry"))

        self._loaded = ReleaseMetadata(development_version=dev, release_tag=tag)
        return Ok(self._loaded)

    def _missing(self, message: str) -> FlowError:
        return FlowError(
            kind="missing_metadata",
            message=message,
            hint=f"run the '{Phase.PREPARE}' phase on branch '{self._develop_branch}' first",
        )
