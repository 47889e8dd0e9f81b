"""What each release phase does.

`phase_actions` is the single description of every phase. It depends
only on the run configuration and the release metadata, never on the
repository state, so planning and executing always agree.
"""

from __future__ import annotations

from mgf.core.config import CommitMessages, PipelineConfig
from mgf.pipeline.actions import (
    Action,
    EnsureBranchAbsent,
    RemoveFiles,
    ReplaceFile,
    Skip,
    ToolCall,
    git,
)
from mgf.pipeline.model import Phase, ReleaseMetadata


def sync_actions(config: PipelineConfig) -> tuple[Action, ...]:
    """Bring master and develop up to date before any phase runs."""
    if config.offline_git:
        return (Skip("synchronization with remote (offline git)"),)

    b = config.branching
    return (
        git("checkout", b.master),
        git("pull", config.remote, b.master),
        git("checkout", b.develop),
        git("pull", config.remote, b.develop),
    )


def _commit(config: PipelineConfig, template: str, meta: ReleaseMetadata) -> ToolCall:
    if config.interactive_commit:
        return git("commit")
    message = CommitMessages.render(
        template, tag=meta.release_tag, dev=meta.development_version
    )
    return git("commit", "-m", message)


def _prepare(config: PipelineConfig) -> tuple[Action, ...]:
    args = ["clean", "release:prepare", "-DdryRun=true"]
    if not config.interactive_version:
        args.append("--batch-mode")
    return (ToolCall(config.build_tool, tuple(args)),)


def _start(config: PipelineConfig, meta: ReleaseMetadata) -> tuple[Action, ...]:
    branch = config.branching.release_branch(meta.release_tag)
    return (
        EnsureBranchAbsent(branch),
        git("checkout", "-b", branch, config.branching.develop),
    )


def _apply(config: PipelineConfig, meta: ReleaseMetadata) -> tuple[Action, ...]:
    files = config.files
    return (
        git("checkout", config.branching.release_branch(meta.release_tag)),
        ReplaceFile(source=files.tag_variant, target=files.version_file),
        git("add", files.version_file),
        _commit(config, config.messages.release, meta),
    )


def _finish(config: PipelineConfig, meta: ReleaseMetadata) -> tuple[Action, ...]:
    b = config.branching
    files = config.files
    branch = b.release_branch(meta.release_tag)
    tag_message = CommitMessages.render(
        config.messages.tag, tag=meta.release_tag, dev=meta.development_version
    )
    return (
        git("checkout", b.master),
        git("merge", "--no-ff", branch),
        git("tag", "-a", meta.release_tag, "-m", tag_message),
        git("checkout", b.develop),
        git("merge", branch),
        ReplaceFile(source=files.next_variant, target=files.version_file),
        git("add", files.version_file),
        _commit(config, config.messages.next, meta),
        git("branch", "-d", branch),
    )


def _push(config: PipelineConfig, meta: ReleaseMetadata) -> tuple[Action, ...]:
    if config.offline_git:
        return (Skip("push to remote (offline git)"),)

    b = config.branching
    return (
        git("push", config.remote, b.develop),
        git("push", config.remote, meta.release_tag),
        git("push", config.remote, b.master),
    )


def _deploy(config: PipelineConfig, meta: ReleaseMetadata) -> tuple[Action, ...]:
    develop = config.branching.develop
    if config.offline_build:
        return (Skip("build and deploy (offline build)"), git("checkout", develop))

    return (
        git("checkout", meta.release_tag),
        ToolCall(config.build_tool, ("clean", "deploy")),
        git("checkout", develop),
    )


def _clean(config: PipelineConfig) -> tuple[Action, ...]:
    return (RemoveFiles(config.files.generated()),)


def phase_actions(
    phase: Phase,
    config: PipelineConfig,
    meta: ReleaseMetadata | None,
) -> tuple[Action, ...]:
    """Ordered actions for one phase.

    `meta` may be None only for phases that do not need metadata.
    """
    match phase:
        case Phase.PREPARE:
            return _prepare(config)
        case Phase.CLEAN:
            return _clean(config)
        case _:
            pass

    if meta is None:
        raise ValueError(f"phase {phase} needs release metadata")

    match phase:
        case Phase.START:
            return _start(config, meta)
        case Phase.APPLY:
            return _apply(config, meta)
        case Phase.FINISH:
            return _finish(config, meta)
        case Phase.PUSH:
            return _push(config, meta)
        case Phase.DEPLOY:
            return _deploy(config, meta)
        case _:
            raise ValueError(f"unhandled phase: {phase}")
