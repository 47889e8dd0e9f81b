"""Dry-run mode: print what a run would do without touching anything.

The planner renders the same actions the executor performs. It never
calls the tool gateway and never fails for lack of release metadata:
when `release.properties` is unavailable (or would only be produced by
a prepare phase planned earlier in this run) identifiers are shown as
`<unresolved:...>` tokens.
"""

from __future__ import annotations

from mgf.core.config import PipelineConfig
from mgf.core.result import Ok, Result
from mgf.output.console import ConsoleProtocol, Style
from mgf.pipeline.actions import Action, Skip
from mgf.pipeline.errors import FlowError
from mgf.pipeline.metadata import MetadataStore
from mgf.pipeline.model import ActionPlan, ExecutionOutcome, Phase, ReleaseMetadata
from mgf.pipeline.phases import phase_actions, sync_actions
from mgf.pipeline.registry import spec_for


def _to_plan(phase: Phase, actions: tuple[Action, ...]) -> ActionPlan:
    return ActionPlan(
        phase=phase,
        lines=tuple(a.describe() for a in actions),
        skipped=any(isinstance(a, Skip) for a in actions),
    )


class DryRunPlanner:
    def __init__(
        self,
        config: PipelineConfig,
        console: ConsoleProtocol,
        store: MetadataStore,
    ) -> None:
        self._config = config
        self._console = console
        self._store = store
        self._prepare_planned = False

    def plan(self, phase: Phase, metadata: ReleaseMetadata | None) -> ActionPlan:
        return _to_plan(phase, phase_actions(phase, self._config, metadata))

    def sync(self) -> Result[tuple[str, ...], FlowError]:
        return Ok(self._render(sync_actions(self._config)))

    def run_phase(self, phase: Phase) -> ExecutionOutcome:
        metadata = self._metadata_for(phase)
        plan = self.plan(phase, metadata)
        for line in plan.lines:
            self._console.print(f"  {line}", Style.DIM)

        if phase is Phase.PREPARE:
            self._prepare_planned = True

        message = "planned"
        if metadata is not None and not metadata.resolved:
            message = "planned with unresolved release identifiers"
        return ExecutionOutcome(
            phase=phase,
            succeeded=True,
            message=message,
            warning=plan.skipped,
            actions=plan.lines,
        )

    def _metadata_for(self, phase: Phase) -> ReleaseMetadata | None:
        if not spec_for(phase).needs_metadata:
            return None
        if self._prepare_planned:
            return ReleaseMetadata.placeholder()

        loaded = self._store.load()
        if isinstance(loaded, Ok):
            return loaded.value

        self._console.print(
            f"{self._store.path.name} unavailable; release identifiers shown as placeholders",
            Style.DIM,
        )
        return ReleaseMetadata.placeholder()

    def _render(self, actions: tuple[Action, ...]) -> tuple[str, ...]:
        lines = tuple(a.describe() for a in actions)
        for line in lines:
            self._console.print(f"  {line}", Style.DIM)
        return lines
