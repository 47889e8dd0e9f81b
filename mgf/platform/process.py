"""Subprocess execution with Result-based error handling.

This is the only module that spawns git and mvn. Two flavours exist:

- `run` captures output, for short read-only queries
  (`git config --get`, `git show-ref`).
- `run_streaming` lets the child inherit the terminal, for the
  state-changing commands of a release (merges, commits, `mvn deploy`),
  so the operator sees Maven's output and can answer its prompts.

`ProcessGateway` bundles both behind the `ToolGateway` protocol that the
phase executor depends on; tests substitute a recording fake.

Usage:
    gateway = ProcessGateway(cwd=Path("."))
    match gateway.run("git", ["checkout", "develop"]):
        case Ok(_):
            pass
        case Err(error):
            print(f"{error} - {error.stderr}")
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from mgf.core.result import Err, Ok, Result

__all__ = [
    "ProcessError",
    "ProcessGateway",
    "ToolGateway",
    "missing_tools",
    "run",
    "run_streaming",
]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (empty when not captured).
        stderr: Standard error, or the OS error when spawning failed.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        return f"{' '.join(self.command)} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command attached to the current terminal.

    stdin, stdout and stderr are inherited, so interactive prompts
    (`mvn release:prepare` without batch mode, the commit editor) work.
    The tool prints its own diagnostics; only the exit code is kept.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


def _has_dir_part(name: str) -> bool:
    return os.sep in name or (os.altsep is not None and os.altsep in name)


def missing_tools(names: Iterable[str], cwd: Path | None = None) -> list[str]:
    """Return the executables from `names` that cannot be found.

    Bare names are looked up on PATH. A name with a directory part, such
    as `./mvnw`, is resolved against `cwd`, where the tool will run.
    """
    missing: list[str] = []
    for name in names:
        candidate = str(cwd / name) if cwd is not None and _has_dir_part(name) else name
        if shutil.which(candidate) is None:
            missing.append(name)
    return missing


class ToolGateway(Protocol):
    """Executes external tools on behalf of the release pipeline."""

    def run(self, tool: str, args: Sequence[str]) -> Result[None, ProcessError]:
        """Run a state-changing command attached to the terminal."""
        ...

    def capture(self, tool: str, args: Sequence[str]) -> Result[str, ProcessError]:
        """Run a read-only query and return its output."""
        ...


_QUERY_TIMEOUT_SECONDS = 30.0


class ProcessGateway:
    """`ToolGateway` that spawns real processes in the repository root."""

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd

    def run(self, tool: str, args: Sequence[str]) -> Result[None, ProcessError]:
        return run_streaming([tool, *args], cwd=self.cwd)

    def capture(self, tool: str, args: Sequence[str]) -> Result[str, ProcessError]:
        return run([tool, *args], cwd=self.cwd, timeout=_QUERY_TIMEOUT_SECONDS)
