"""Real mode: perform each phase's actions.

Actions run strictly in order; the first failure ends the phase with a
failed outcome. Nothing is rolled back: a failed merge leaves the working
tree exactly as git left it.
"""

from __future__ import annotations

import shutil

from mgf.core.config import PipelineConfig
from mgf.core.result import Err, Ok, Result
from mgf.git.repository import Repository
from mgf.output.console import ConsoleProtocol, Style
from mgf.pipeline.actions import (
    Action,
    EnsureBranchAbsent,
    RemoveFiles,
    ReplaceFile,
    Skip,
    ToolCall,
)
from mgf.pipeline.errors import FlowError
from mgf.pipeline.metadata import MetadataStore
from mgf.pipeline.model import ExecutionOutcome, Phase, ReleaseMetadata
from mgf.pipeline.phases import phase_actions, sync_actions
from mgf.pipeline.registry import spec_for
from mgf.platform.process import ToolGateway


class PhaseExecutor:
    def __init__(
        self,
        config: PipelineConfig,
        console: ConsoleProtocol,
        store: MetadataStore,
        gateway: ToolGateway,
    ) -> None:
        self._config = config
        self._console = console
        self._store = store
        self._gateway = gateway
        self._repo = Repository(config.root, gateway)

    def sync(self) -> Result[tuple[str, ...], FlowError]:
        done: list[str] = []
        for action in sync_actions(self._config):
            result = self._perform(action)
            if isinstance(result, Err):
                return result
            done.append(action.describe())
        return Ok(tuple(done))

    def run_phase(self, phase: Phase) -> ExecutionOutcome:
        metadata: ReleaseMetadata | None = None
        if spec_for(phase).needs_metadata:
            loaded = self._store.load()
            if isinstance(loaded, Err):
                return ExecutionOutcome.failed(phase, loaded.error)
            metadata = loaded.value

        done: list[str] = []
        skipped = False
        for action in phase_actions(phase, self._config, metadata):
            result = self._perform(action)
            if isinstance(result, Err):
                return ExecutionOutcome.failed(phase, result.error, tuple(done))
            done.append(action.describe())
            skipped = skipped or isinstance(action, Skip)

        return ExecutionOutcome(
            phase=phase,
            succeeded=True,
            message="completed with skipped steps" if skipped else "completed",
            warning=skipped,
            actions=tuple(done),
        )

    def _perform(self, action: Action) -> Result[None, FlowError]:
        match action:
            case ToolCall():
                return self._call(action)
            case ReplaceFile():
                return self._replace(action)
            case RemoveFiles():
                return self._remove(action)
            case EnsureBranchAbsent():
                return self._ensure_absent(action)
            case Skip(reason=reason):
                self._console.warning(f"skipped {reason}")
                return Ok(None)

    def _call(self, call: ToolCall) -> Result[None, FlowError]:
        self._console.print(f"$ {call.describe()}", Style.DIM)
        result = self._gateway.run(call.tool, call.args)
        if isinstance(result, Err):
            e = result.error
            return Err(
                FlowError(
                    kind="tool_failed",
                    message=f"{call.describe()} failed (exit {e.returncode})",
                    hint=e.stderr.strip() or None,
                )
            )
        return Ok(None)

    def _replace(self, action: ReplaceFile) -> Result[None, FlowError]:
        self._console.print(action.describe(), Style.DIM)
        source = self._config.path(action.source)
        try:
            shutil.copyfile(source, self._config.path(action.target))
        except FileNotFoundError:
            return Err(
                FlowError(
                    kind="artifact_missing",
                    message=f"{action.source} not found",
                    hint=f"run the '{Phase.PREPARE}' phase first",
                )
            )
        except OSError as e:
            return Err(FlowError(kind="tool_failed", message=f"{action.describe()} failed: {e}"))
        return Ok(None)

    def _remove(self, action: RemoveFiles) -> Result[None, FlowError]:
        self._console.print(action.describe(), Style.DIM)
        missing: list[str] = []
        for name in action.paths:
            try:
                self._config.path(name).unlink()
            except FileNotFoundError:
                missing.append(name)
            except OSError as e:
                return Err(FlowError(kind="tool_failed", message=f"cannot remove {name}: {e}"))

        if missing:
            return Err(
                FlowError(
                    kind="artifact_missing",
                    message=f"no artifact found: {', '.join(missing)}",
                )
            )
        return Ok(None)

    def _ensure_absent(self, action: EnsureBranchAbsent) -> Result[None, FlowError]:
        exists = self._repo.branch_exists(action.branch)
        if isinstance(exists, Err):
            e = exists.error
            return Err(
                FlowError(
                    kind="tool_failed",
                    message=f"git {e.command} failed (exit {e.returncode})",
                    hint=e.message,
                )
            )
        if exists.value:
            return Err(
                FlowError(
                    kind="branch_exists",
                    message=f"release branch {action.branch} already exists",
                    hint="finish or delete the previous release branch first",
                )
            )
        return Ok(None)
