from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from mgf import __version__
from mgf.cli.context import RunFlags, build_config
from mgf.core.errors import ErrorCode
from mgf.core.result import Err
from mgf.output.console import ConsoleProtocol, RichConsole
from mgf.pipeline.errors import FlowError
from mgf.pipeline.registry import phase_help, resolve, selector_help
from mgf.pipeline.runner import run_pipeline


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _usage() -> str:
    return f"usage: mvn-gitflow [OPTIONS] {{{selector_help()}}}"


def _fail(console: ConsoleProtocol, error: FlowError) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.hint(error.hint)
    if error.shows_usage:
        typer.echo(_usage(), err=True)
    raise typer.Exit(code=int(error.exit_code))


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def release(
    phase: str | None = typer.Argument(None, metavar="PHASE", help=phase_help()),
    dry_run: bool = typer.Option(
        False, "-d", "--dry-run", help="Print the commands a run would execute; change nothing."
    ),
    interactive_version: bool = typer.Option(
        False, "-i", "--interactive-version", help="Let Maven prompt for release and next versions."
    ),
    interactive_commit: bool = typer.Option(
        False, "-m", "--interactive-commit", help="Write commit messages in the editor."
    ),
    offline_git: bool = typer.Option(
        False, "-o", "--offline-git", help="Never pull from or push to the remote."
    ),
    offline_build: bool = typer.Option(
        False, "-r", "--offline-build", help="Skip the Maven deploy."
    ),
    remote: str | None = typer.Option(
        None, "-g", "--remote", help="Git remote to sync with (default: origin)."
    ),
    directory: Path | None = typer.Option(
        None, "-C", "--directory", help="Project root (default: current directory)."
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Release a Maven project with git-flow, one phase at a time or all at once."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = RichConsole()

    selected = resolve(phase)
    if isinstance(selected, Err):
        _fail(console, selected.error)

    try:
        root = (directory or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --directory: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    flags = RunFlags(
        dry_run=dry_run,
        interactive_version=interactive_version,
        interactive_commit=interactive_commit,
        offline_git=offline_git,
        offline_build=offline_build,
        remote=remote,
    )
    config_result = build_config(root, flags)
    if isinstance(config_result, Err):
        _fail(console, config_result.error)

    result = run_pipeline(phase, config_result.value, console)
    if isinstance(result, Err):
        _fail(console, result.error)

    outcomes = result.value
    last = outcomes[-1]
    if not last.succeeded and last.error is not None:
        _fail(console, last.error)

    console.newline()
    verb = "planned" if dry_run else "done"
    console.success(f"{verb}: {', '.join(str(o.phase) for o in outcomes)}")


def main() -> None:
    app()
