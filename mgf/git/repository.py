"""Read-only git queries used by the release pipeline.

State-changing git commands (checkout, merge, tag, push) are described
as pipeline actions and run by the executor. This module only answers
questions about the repository: the git-flow branch names recorded by
`git flow init`, and whether a branch already exists.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.branching_model():
        case Ok(model):
            print(f"develop: {model.develop}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mgf.core.config import BranchingModel
from mgf.core.result import Err, Ok, Result
from mgf.platform.process import ProcessError, ProcessGateway, ToolGateway

__all__ = [
    "GitError",
    "Repository",
    "GITFLOW_DEVELOP_KEY",
    "GITFLOW_MAIN_KEY",
    "GITFLOW_MASTER_KEY",
    "GITFLOW_RELEASE_PREFIX_KEY",
]

GITFLOW_MASTER_KEY = "gitflow.branch.master"
GITFLOW_MAIN_KEY = "gitflow.branch.main"
GITFLOW_DEVELOP_KEY = "gitflow.branch.develop"
GITFLOW_RELEASE_PREFIX_KEY = "gitflow.prefix.release"


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git repository rooted at `path`.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path, gateway: ToolGateway | None = None) -> None:
        self.path = path
        self._gateway = gateway or ProcessGateway(path)

    def exists(self) -> bool:
        """Check if this is a valid git repository (or worktree)."""
        return (self.path / ".git").exists()

    def config_get(self, key: str) -> Result[str | None, GitError]:
        """Read a git config value.

        Returns:
            Ok(value) when set (possibly ""), Ok(None) when unset,
            Err(GitError) when git itself fails.
        """
        result = self._gateway.capture("git", ["config", "--get", key])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                # git config --get exits 1 for an unset key
                if e.returncode == 1:
                    return Ok(None)
                return Err(_git_error("config --get", e))

    def branching_model(self) -> Result[BranchingModel | None, GitError]:
        """Read the branch names written by `git flow init`.

        Newer git-flow versions record `gitflow.branch.main` instead of
        `gitflow.branch.master`; either is accepted.

        Returns:
            Ok(BranchingModel) when fully configured, Ok(None) when any
            name is missing, Err(GitError) on git failure.
        """
        values: dict[str, str | None] = {}
        for key in (
            GITFLOW_MASTER_KEY,
            GITFLOW_MAIN_KEY,
            GITFLOW_DEVELOP_KEY,
            GITFLOW_RELEASE_PREFIX_KEY,
        ):
            result = self.config_get(key)
            if isinstance(result, Err):
                return result
            values[key] = result.value

        master = values[GITFLOW_MASTER_KEY] or values[GITFLOW_MAIN_KEY]
        develop = values[GITFLOW_DEVELOP_KEY]
        prefix = values[GITFLOW_RELEASE_PREFIX_KEY]
        # An empty release prefix is legal; empty branch names are not.
        if not master or not develop or prefix is None:
            return Ok(None)

        return Ok(BranchingModel(master=master, develop=develop, release_prefix=prefix))

    def branch_exists(self, branch: str) -> Result[bool, GitError]:
        """Check whether a local branch exists.

        Uses `git show-ref --verify --quiet`, which exits 1 for a missing ref.
        """
        result = self._gateway.capture(
            "git", ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"]
        )
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e):
                if e.returncode == 1:
                    return Ok(False)
                return Err(_git_error("show-ref", e))


def _git_error(command: str, e: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or f"git {command} failed",
        returncode=e.returncode,
    )
