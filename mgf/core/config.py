"""Typed run configuration.

A `PipelineConfig` is built once per invocation from the command-line
flags, the git-flow settings of the repository and the optional
`.mvn-gitflow.toml` file, then passed read-only to every component.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "BranchingModel",
    "CommitMessages",
    "ConfigError",
    "FileConfig",
    "PipelineConfig",
    "ReleaseFiles",
    "load_file_config",
    "load_file_config_or_default",
    "CONFIG_FILE_NAME",
    "DEFAULT_BUILD_TOOL",
    "DEFAULT_REMOTE",
]

CONFIG_FILE_NAME = ".mvn-gitflow.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_BUILD_TOOL = "mvn"
DEFAULT_VERSION_FILE = "pom.xml"
DEFAULT_METADATA_FILE = "release.properties"

DEFAULT_RELEASE_MESSAGE = "[mvn-gitflow] prepare release {tag}"
DEFAULT_NEXT_MESSAGE = "[mvn-gitflow] prepare for next development iteration {dev}"
DEFAULT_TAG_MESSAGE = "[mvn-gitflow] release {tag}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the config file cannot be read or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BranchingModel:
    """Branch names declared by `git flow init`."""

    master: str
    develop: str
    release_prefix: str

    def release_branch(self, tag: str) -> str:
        """Name of the release branch for a given release tag."""
        return f"{self.release_prefix}{tag}"


@dataclass(frozen=True, slots=True)
class ReleaseFiles:
    """Files produced by `mvn release:prepare` and consumed by later phases.

    The Maven release plugin writes `<version_file>.tag` (release version),
    `<version_file>.next` (next snapshot), `<version_file>.releaseBackup`
    and the metadata file next to the project's version file.
    """

    version_file: str = DEFAULT_VERSION_FILE
    metadata_file: str = DEFAULT_METADATA_FILE

    @property
    def tag_variant(self) -> str:
        return f"{self.version_file}.tag"

    @property
    def next_variant(self) -> str:
        return f"{self.version_file}.next"

    @property
    def backup(self) -> str:
        return f"{self.version_file}.releaseBackup"

    def generated(self) -> tuple[str, ...]:
        """All artifacts removed by the clean phase, in removal order."""
        return (self.tag_variant, self.next_variant, self.backup, self.metadata_file)


@dataclass(frozen=True, slots=True)
class CommitMessages:
    """Templates for non-interactive commit and tag messages.

    `{tag}` expands to the release tag, `{dev}` to the next development
    version. Other braces are left untouched.
    """

    release: str = DEFAULT_RELEASE_MESSAGE
    next: str = DEFAULT_NEXT_MESSAGE
    tag: str = DEFAULT_TAG_MESSAGE

    @staticmethod
    def render(template: str, *, tag: str, dev: str) -> str:
        return template.replace("{tag}", tag).replace("{dev}", dev)


@dataclass(frozen=True, slots=True)
class FileConfig:
    """Values read from `.mvn-gitflow.toml`. Every key is optional."""

    remote: str = DEFAULT_REMOTE
    build_tool: str = DEFAULT_BUILD_TOOL
    files: ReleaseFiles = field(default_factory=ReleaseFiles)
    messages: CommitMessages = field(default_factory=CommitMessages)

    @property
    def required_tools(self) -> tuple[str, ...]:
        return ("git", self.build_tool)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FileConfig:
        """Create FileConfig from a mapping (parsed TOML)."""
        files: StrDict = get_table(data, "files") or {}
        messages: StrDict = get_table(data, "messages") or {}

        return cls(
            remote=get_str(data, "remote") or DEFAULT_REMOTE,
            build_tool=get_str(data, "build_tool") or DEFAULT_BUILD_TOOL,
            files=ReleaseFiles(
                version_file=get_str(files, "version_file") or DEFAULT_VERSION_FILE,
                metadata_file=get_str(files, "metadata_file") or DEFAULT_METADATA_FILE,
            ),
            messages=CommitMessages(
                release=get_str(messages, "release") or DEFAULT_RELEASE_MESSAGE,
                next=get_str(messages, "next") or DEFAULT_NEXT_MESSAGE,
                tag=get_str(messages, "tag") or DEFAULT_TAG_MESSAGE,
            ),
        )


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable configuration for one pipeline run.

    Attributes:
        root: Repository root; git and mvn run here and artifact paths
            are relative to it.
        branching: git-flow branch names.
        dry_run: Print the plan instead of acting.
        interactive_version: Let mvn prompt for release/next versions.
        interactive_commit: Open the commit editor instead of using templates.
        offline_git: Skip every interaction with the remote.
        offline_build: Skip the Maven deploy.
        remote: Remote used for pull and push.
        build_tool: Maven executable.
        files: Release artifact names.
        messages: Commit and tag message templates.
    """

    root: Path
    branching: BranchingModel
    dry_run: bool = False
    interactive_version: bool = False
    interactive_commit: bool = False
    offline_git: bool = False
    offline_build: bool = False
    remote: str = DEFAULT_REMOTE
    build_tool: str = DEFAULT_BUILD_TOOL
    files: ReleaseFiles = field(default_factory=ReleaseFiles)
    messages: CommitMessages = field(default_factory=CommitMessages)

    def path(self, name: str) -> Path:
        return self.root / name


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_file_config(path: Path) -> Result[FileConfig, ConfigError]:
    """Load and parse `.mvn-gitflow.toml`.

    Args:
        path: Path to the config file

    Returns:
        Ok(FileConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(FileConfig.from_dict(result.value))


def load_file_config_or_default(root: Path) -> Result[FileConfig, ConfigError]:
    """Load the repository's config file, or defaults when it is absent.

    A present but broken file is still an error.
    """
    path = root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(FileConfig())
    return load_file_config(path)
