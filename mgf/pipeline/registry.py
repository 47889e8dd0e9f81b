"""Static phase table and selector resolution.

A single selected phase never pulls in its predecessors: each phase may
run in its own invocation, and the operator is trusted to have run the
earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass

from mgf.core.result import Err, Ok, Result
from mgf.pipeline.errors import FlowError
from mgf.pipeline.model import Phase

ALL_SELECTOR = "all"


@dataclass(frozen=True, slots=True)
class PhaseSpec:
    phase: Phase
    requires: Phase | None
    needs_metadata: bool
    summary: str


PHASES: tuple[PhaseSpec, ...] = (
    PhaseSpec(Phase.PREPARE, None, False, "compute release versions (mvn release:prepare dry run)"),
    PhaseSpec(Phase.START, Phase.PREPARE, True, "create the release branch from develop"),
    PhaseSpec(Phase.APPLY, Phase.START, True, "commit the release version on the release branch"),
    PhaseSpec(Phase.FINISH, Phase.APPLY, True, "merge, tag, and bump develop to the next version"),
    PhaseSpec(Phase.PUSH, Phase.FINISH, True, "push develop, the tag and master"),
    PhaseSpec(Phase.DEPLOY, Phase.PUSH, True, "build and deploy the tagged release"),
    PhaseSpec(Phase.CLEAN, Phase.DEPLOY, False, "remove release:prepare artifacts"),
)

_BY_PHASE: dict[Phase, PhaseSpec] = {s.phase: s for s in PHASES}


def spec_for(phase: Phase) -> PhaseSpec:
    return _BY_PHASE[phase]


def phase_names() -> tuple[str, ...]:
    return tuple(s.phase.value for s in PHASES)


def selector_help() -> str:
    return " | ".join((ALL_SELECTOR, *phase_names()))


def phase_help() -> str:
    """Describe every phase and the one it follows, for `--help`."""
    parts: list[str] = []
    for spec in PHASES:
        after = f", after {spec.requires}" if spec.requires is not None else ""
        parts.append(f"{spec.phase} ({spec.summary}{after})")
    return f"Phase to run: {ALL_SELECTOR}, or one of " + "; ".join(parts)


def resolve(selector: str | None) -> Result[tuple[Phase, ...], FlowError]:
    """Turn a selector into the ordered phases to run.

    `all` yields every phase in canonical order; a phase name yields just
    that phase.
    """
    if selector is None or not selector.strip():
        return Err(
            FlowError(
                kind="no_phase",
                message="no phase selected",
                hint=f"choose one of: {selector_help()}",
            )
        )

    name = selector.strip().lower()
    if name == ALL_SELECTOR:
        return Ok(tuple(s.phase for s in PHASES))

    for spec in PHASES:
        if spec.phase.value == name:
            return Ok((spec.phase,))

    return Err(
        FlowError(
            kind="unknown_phase",
            message=f"unknown phase: {selector.strip()}",
            hint=f"choose one of: {selector_help()}",
        )
    )
