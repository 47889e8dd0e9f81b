from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mgf.core.config import PipelineConfig, load_file_config_or_default
from mgf.core.result import Err, Ok, Result
from mgf.git.repository import Repository
from mgf.pipeline.errors import FlowError
from mgf.platform.process import missing_tools


@dataclass(frozen=True, slots=True)
class RunFlags:
    """Command-line switches, before they are merged with the environment."""

    dry_run: bool = False
    interactive_version: bool = False
    interactive_commit: bool = False
    offline_git: bool = False
    offline_build: bool = False
    remote: str | None = None


def _normalize_remote(remote: str | None) -> str | None:
    if remote is None:
        return None
    # Accept the `-g=upstream` spelling.
    name = remote.strip().removeprefix("=").strip()
    return name or None


def build_config(root: Path, flags: RunFlags) -> Result[PipelineConfig, FlowError]:
    """Resolve the run configuration, checking the environment first.

    Checks, in order: the optional config file, required executables on
    PATH, and the git-flow branch configuration of the repository.
    """
    file_result = load_file_config_or_default(root)
    if isinstance(file_result, Err):
        return Err(FlowError(kind="invalid_config", message=file_result.error.message))
    file_config = file_result.value

    missing = missing_tools(file_config.required_tools, cwd=root)
    if missing:
        return Err(
            FlowError(
                kind="missing_tool",
                message=f"required tool not found on PATH: {', '.join(missing)}",
            )
        )

    repo = Repository(root)
    if not repo.exists():
        return Err(
            FlowError(
                kind="unconfigured_branching",
                message=f"not a git repository: {root}",
                hint="run from the project root or pass --directory",
            )
        )

    model_result = repo.branching_model()
    if isinstance(model_result, Err):
        return Err(
            FlowError(
                kind="unconfigured_branching",
                message="cannot read git-flow configuration",
                hint=model_result.error.message,
            )
        )
    if model_result.value is None:
        return Err(
            FlowError(
                kind="unconfigured_branching",
                message="git-flow is not initialized in this repository",
                hint="run 'git flow init' first",
            )
        )

    return Ok(
        PipelineConfig(
            root=root,
            branching=model_result.value,
            dry_run=flags.dry_run,
            interactive_version=flags.interactive_version,
            interactive_commit=flags.interactive_commit,
            offline_git=flags.offline_git,
            offline_build=flags.offline_build,
            remote=_normalize_remote(flags.remote) or file_config.remote,
            build_tool=file_config.build_tool,
            files=file_config.files,
            messages=file_config.messages,
        )
    )
