from __future__ import annotations

from typing import Protocol

from mgf.core.config import PipelineConfig
from mgf.core.result import Err, Ok, Result
from mgf.output.console import ConsoleProtocol, Style
from mgf.pipeline.errors import FlowError
from mgf.pipeline.executor import PhaseExecutor
from mgf.pipeline.metadata import MetadataStore
from mgf.pipeline.model import ExecutionOutcome, Phase
from mgf.pipeline.planner import DryRunPlanner
from mgf.pipeline.registry import resolve, spec_for
from mgf.platform.process import ProcessGateway, ToolGateway


class PhaseMode(Protocol):
    """How phases are carried out: planned (dry run) or performed."""

    def sync(self) -> Result[tuple[str, ...], FlowError]: ...

    def run_phase(self, phase: Phase) -> ExecutionOutcome: ...


def select_mode(
    config: PipelineConfig,
    console: ConsoleProtocol,
    *,
    gateway: ToolGateway | None = None,
) -> PhaseMode:
    """Pick the mode for this run. Dry runs never get a gateway."""
    store = MetadataStore(
        config.path(config.files.metadata_file),
        develop_branch=config.branching.develop,
    )
    if config.dry_run:
        return DryRunPlanner(config, console, store)
    return PhaseExecutor(config, console, store, gateway or ProcessGateway(config.root))


class PipelineRunner:
    def __init__(self, config: PipelineConfig, mode: PhaseMode, console: ConsoleProtocol) -> None:
        self._config = config
        self._mode = mode
        self._console = console

    def run(self, selector: str | None) -> Result[tuple[ExecutionOutcome, ...], FlowError]:
        """Run the selected phases in canonical order.

        Returns Err when nothing could start (bad selector, failed sync).
        Otherwise returns the outcomes of every phase that ran; the last
        one is the failure when the run stopped early.
        """
        resolved = resolve(selector)
        if isinstance(resolved, Err):
            return resolved

        if self._config.dry_run:
            self._console.print("DRY-RUN", Style.WARNING)

        if not self._config.offline_git:
            self._console.header(
                f"sync {self._config.branching.master} and {self._config.branching.develop}"
                f" with {self._config.remote}"
            )
        synced = self._mode.sync()
        if isinstance(synced, Err):
            return synced

        outcomes: list[ExecutionOutcome] = []
        for phase in resolved.value:
            self._console.header(f"{phase}: {spec_for(phase).summary}")
            outcome = self._mode.run_phase(phase)
            outcomes.append(outcome)
            if not outcome.succeeded:
                break

        return Ok(tuple(outcomes))


def run_pipeline(
    selector: str | None,
    config: PipelineConfig,
    console: ConsoleProtocol,
    *,
    gateway: ToolGateway | None = None,
) -> Result[tuple[ExecutionOutcome, ...], FlowError]:
    mode = select_mode(config, console, gateway=gateway)
    return PipelineRunner(config, mode, console).run(selector)
