from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from mgf.core.config import BranchingModel, PipelineConfig
from mgf.core.errors import ErrorCode
from mgf.core.result import Err, Ok, Result
from mgf.output.console import MockConsole
from mgf.pipeline.executor import PhaseExecutor
from mgf.pipeline.metadata import MetadataStore
from mgf.pipeline.model import Phase
from mgf.platform.process import ProcessError


@dataclass
class FakeGateway:
    """Records calls; fails any command whose argv starts with a `fail_on` prefix."""

    branches: set[str] = field(default_factory=set)
    fail_on: dict[tuple[str, ...], int] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)
    queries: list[tuple[str, ...]] = field(default_factory=list)

    def run(self, tool: str, args: Sequence[str]) -> Result[None, ProcessError]:
        argv = (tool, *args)
        self.calls.append(argv)
        for prefix, code in self.fail_on.items():
            if argv[: len(prefix)] == prefix:
                return Err(ProcessError(argv, code, "", "CONFLICT (content)"))
        return Ok(None)

    def capture(self, tool: str, args: Sequence[str]) -> Result[str, ProcessError]:
        argv = (tool, *args)
        self.queries.append(argv)
        branch = args[-1].removeprefix("refs/heads/")
        if branch in self.branches:
            return Ok("")
        return Err(ProcessError(argv, 1, "", ""))


def _config(tmp_path: Path, **overrides: object) -> PipelineConfig:
    config = PipelineConfig(
        root=tmp_path,
        branching=BranchingModel(master="master", develop="develop", release_prefix="release-"),
    )
    return replace(config, **overrides)


def _prepared(root: Path) -> None:
    """Lay out what `mvn release:prepare -DdryRun=true` leaves behind."""
    (root / "release.properties").write_text(
        "project.dev=2.1.0-SNAPSHOT\nscm.tag=release-2.0.0\n", encoding="utf-8"
    )
    (root / "pom.xml").write_text("<version>2.0.0-SNAPSHOT</version>", encoding="utf-8")
    (root / "pom.xml.tag").write_text("<version>2.0.0</version>", encoding="utf-8")
    (root / "pom.xml.next").write_text("<version>2.1.0-SNAPSHOT</version>", encoding="utf-8")
    (root / "pom.xml.releaseBackup").write_text("backup", encoding="utf-8")


def _executor(
    config: PipelineConfig, gateway: FakeGateway, console: MockConsole | None = None
) -> PhaseExecutor:
    store = MetadataStore(config.path("release.properties"), develop_branch="develop")
    return PhaseExecutor(config, console or MockConsole(), store, gateway)


def test_prepare_runs_maven_dry_run(tmp_path: Path) -> None:
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.PREPARE)

    assert outcome.succeeded
    assert gateway.calls == [
        ("mvn", "clean", "release:prepare", "-DdryRun=true", "--batch-mode")
    ]


def test_start_creates_branch(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.START)

    assert outcome.succeeded
    assert gateway.queries == [
        ("git", "show-ref", "--verify", "--quiet", "refs/heads/release-release-2.0.0")
    ]
    assert gateway.calls == [("git", "checkout", "-b", "release-release-2.0.0", "develop")]


def test_start_refuses_existing_branch(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway(branches={"release-release-2.0.0"})

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.START)

    assert not outcome.succeeded
    assert outcome.error is not None
    assert outcome.error.kind == "branch_exists"
    assert outcome.error.exit_code == ErrorCode.USER_ERROR
    assert gateway.calls == []


def test_start_without_metadata(tmp_path: Path) -> None:
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.START)

    assert not outcome.succeeded
    assert outcome.error is not None
    assert outcome.error.kind == "missing_metadata"
    assert gateway.calls == []
    assert gateway.queries == []


def test_apply_writes_release_version(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.APPLY)

    assert outcome.succeeded
    assert (tmp_path / "pom.xml").read_text(encoding="utf-8") == "<version>2.0.0</version>"
    assert (tmp_path / "pom.xml.tag").exists()
    assert gateway.calls == [
        ("git", "checkout", "release-release-2.0.0"),
        ("git", "add", "pom.xml"),
        ("git", "commit", "-m", "[mvn-gitflow] prepare release release-2.0.0"),
    ]
    assert outcome.actions[1] == "replace pom.xml with pom.xml.tag"


def test_apply_without_tag_variant(tmp_path: Path) -> None:
    _prepared(tmp_path)
    (tmp_path / "pom.xml.tag").unlink()

    outcome = _executor(_config(tmp_path), FakeGateway()).run_phase(Phase.APPLY)

    assert outcome.error is not None
    assert outcome.error.kind == "artifact_missing"
    assert outcome.actions == ("git checkout release-release-2.0.0",)


def test_finish_merge_failure_stops_phase(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway(fail_on={("git", "merge", "--no-ff"): 1})
    console = MockConsole()

    outcome = _executor(_config(tmp_path), gateway, console).run_phase(Phase.FINISH)

    assert not outcome.succeeded
    assert outcome.error is not None
    assert outcome.error.kind == "tool_failed"
    assert outcome.error.exit_code == ErrorCode.TOOL_ERROR
    assert "git merge --no-ff release-release-2.0.0" in outcome.error.message
    assert "exit 1" in outcome.error.message
    assert outcome.error.hint == "CONFLICT (content)"
    assert gateway.calls[-1] == ("git", "merge", "--no-ff", "release-release-2.0.0")
    assert not any(call[1] == "tag" for call in gateway.calls)
    # No rollback attempted.
    assert (tmp_path / "pom.xml").read_text(encoding="utf-8") == "<version>2.0.0-SNAPSHOT</version>"


def test_finish_writes_next_version(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path, interactive_commit=True), gateway).run_phase(
        Phase.FINISH
    )

    assert outcome.succeeded
    assert (tmp_path / "pom.xml").read_text(encoding="utf-8") == "<version>2.1.0-SNAPSHOT</version>"
    assert ("git", "commit") in gateway.calls
    assert gateway.calls[-1] == ("git", "branch", "-d", "release-release-2.0.0")


def test_push_offline_makes_no_calls(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()
    console = MockConsole()

    outcome = _executor(_config(tmp_path, offline_git=True), gateway, console).run_phase(
        Phase.PUSH
    )

    assert outcome.succeeded
    assert outcome.warning
    assert outcome.error is None
    assert gateway.calls == []
    assert gateway.queries == []
    assert console.has_warning()


def test_push_uses_remote(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()

    _executor(_config(tmp_path, remote="upstream"), gateway).run_phase(Phase.PUSH)

    assert gateway.calls == [
        ("git", "push", "upstream", "develop"),
        ("git", "push", "upstream", "release-2.0.0"),
        ("git", "push", "upstream", "master"),
    ]


def test_deploy_offline_build_only_returns_to_develop(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway()

    outcome = _executor(_config(tmp_path, offline_build=True), gateway).run_phase(Phase.DEPLOY)

    assert outcome.succeeded
    assert outcome.warning
    assert gateway.calls == [("git", "checkout", "develop")]


def test_deploy_failure(tmp_path: Path) -> None:
    _prepared(tmp_path)
    gateway = FakeGateway(fail_on={("mvn",): 1})

    outcome = _executor(_config(tmp_path), gateway).run_phase(Phase.DEPLOY)

    assert outcome.error is not None
    assert outcome.error.kind == "tool_failed"
    assert gateway.calls == [("git", "checkout", "release-2.0.0"), ("mvn", "clean", "deploy")]


def test_clean_twice_fails_second_time(tmp_path: Path) -> None:
    _prepared(tmp_path)
    executor = _executor(_config(tmp_path), FakeGateway())

    first = executor.run_phase(Phase.CLEAN)
    second = executor.run_phase(Phase.CLEAN)

    assert first.succeeded
    assert sorted(p.name for p in tmp_path.iterdir()) == ["pom.xml"]
    assert not second.succeeded
    assert second.error is not None
    assert second.error.kind == "artifact_missing"
    assert "no artifact found" in second.error.message


def test_clean_removes_present_files_and_reports_missing(tmp_path: Path) -> None:
    _prepared(tmp_path)
    (tmp_path / "pom.xml.next").unlink()

    outcome = _executor(_config(tmp_path), FakeGateway()).run_phase(Phase.CLEAN)

    assert outcome.error is not None
    assert outcome.error.message == "no artifact found: pom.xml.next"
    assert not (tmp_path / "pom.xml.tag").exists()
    assert not (tmp_path / "release.properties").exists()


def test_sync_checks_out_and_pulls(tmp_path: Path) -> None:
    gateway = FakeGateway()

    result = _executor(_config(tmp_path), gateway).sync()

    assert isinstance(result, Ok)
    assert gateway.calls == [
        ("git", "checkout", "master"),
        ("git", "pull", "origin", "master"),
        ("git", "checkout", "develop"),
        ("git", "pull", "origin", "develop"),
    ]


def test_sync_offline(tmp_path: Path) -> None:
    gateway = FakeGateway()
    console = MockConsole()

    result = _executor(_config(tmp_path, offline_git=True), gateway, console).sync()

    assert isinstance(result, Ok)
    assert gateway.calls == []
    assert console.has_warning()
