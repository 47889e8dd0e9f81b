"""Release pipeline: phases, planning and execution.

Layout:
- model / errors: phases, metadata, outcomes, error payload
- registry: phase table and selector resolution
- metadata: release.properties loading
- actions / phases: what each phase does
- planner / executor: the two modes (dry run, real)
- runner: sequencing and halting on failure
"""

from __future__ import annotations

from .errors import FlowError
from .model import ActionPlan, ExecutionOutcome, Phase, ReleaseMetadata
from .runner import PhaseMode, PipelineRunner, run_pipeline, select_mode

__all__ = [
    "ActionPlan",
    "ExecutionOutcome",
    "FlowError",
    "Phase",
    "PhaseMode",
    "PipelineRunner",
    "ReleaseMetadata",
    "run_pipeline",
    "select_mode",
]
