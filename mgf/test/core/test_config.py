"""Tests for mgf.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from mgf.core.config import (
    CONFIG_FILE_NAME,
    BranchingModel,
    CommitMessages,
    FileConfig,
    PipelineConfig,
    ReleaseFiles,
    load_file_config,
    load_file_config_or_default,
)
from mgf.core.errors import ErrorCode
from mgf.core.result import Err, Ok


class TestBranchingModel:
    def test_release_branch_concatenates_prefix(self) -> None:
        model = BranchingModel(master="master", develop="develop", release_prefix="release-")
        assert model.release_branch("release-2.0.0") == "release-release-2.0.0"

    def test_empty_prefix(self) -> None:
        model = BranchingModel(master="main", develop="dev", release_prefix="")
        assert model.release_branch("1.0") == "1.0"


class TestReleaseFiles:
    def test_defaults(self) -> None:
        files = ReleaseFiles()
        assert files.version_file == "pom.xml"
        assert files.tag_variant == "pom.xml.tag"
        assert files.next_variant == "pom.xml.next"
        assert files.backup == "pom.xml.releaseBackup"

    def test_generated_lists_four_artifacts(self) -> None:
        assert ReleaseFiles().generated() == (
            "pom.xml.tag",
            "pom.xml.next",
            "pom.xml.releaseBackup",
            "release.properties",
        )


class TestCommitMessages:
    def test_render_substitutes_tag_and_dev(self) -> None:
        out = CommitMessages.render("release {tag}, next {dev}", tag="v2", dev="3-SNAPSHOT")
        assert out == "release v2, next 3-SNAPSHOT"

    def test_render_leaves_other_braces(self) -> None:
        assert CommitMessages.render("{ticket} {tag}", tag="v1", dev="x") == "{ticket} v1"


class TestPipelineConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = PipelineConfig(
            root=tmp_path,
            branching=BranchingModel("master", "develop", "release/"),
        )
        assert config.dry_run is False
        assert config.remote == "origin"
        assert config.path("pom.xml") == tmp_path / "pom.xml"

    def test_frozen(self, tmp_path: Path) -> None:
        config = PipelineConfig(root=tmp_path, branching=BranchingModel("m", "d", "r"))
        with pytest.raises(AttributeError):
            config.dry_run = True  # type: ignore[misc]


class TestLoadFileConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(
            'remote = "upstream"\n'
            'build_tool = "./mvnw"\n'
            "[files]\n"
            'version_file = "parent/pom.xml"\n'
            "[messages]\n"
            'release = "chore: release {tag}"\n',
            encoding="utf-8",
        )

        result = load_file_config(path)

        assert isinstance(result, Ok)
        config = result.value
        assert config.remote == "upstream"
        assert config.build_tool == "./mvnw"
        assert config.files.version_file == "parent/pom.xml"
        assert config.files.metadata_file == "release.properties"
        assert config.messages.release == "chore: release {tag}"
        assert config.messages.next == CommitMessages().next

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("remote = \n", encoding="utf-8")

        result = load_file_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_missing_file_is_error(self, tmp_path: Path) -> None:
        result = load_file_config(tmp_path / CONFIG_FILE_NAME)
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_or_default_without_file(self, tmp_path: Path) -> None:
        result = load_file_config_or_default(tmp_path)
        assert result == Ok(FileConfig())

    def test_required_tools_follow_build_tool(self) -> None:
        assert FileConfig().required_tools == ("git", "mvn")
        assert FileConfig(build_tool="./mvnw").required_tools == ("git", "./mvnw")

    def test_or_default_with_broken_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE_NAME).write_text("[[[", encoding="utf-8")
        assert isinstance(load_file_config_or_default(tmp_path), Err)


class TestErrorCode:
    def test_values(self) -> None:
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.TOOL_ERROR == 3
