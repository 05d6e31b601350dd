import json
from typing import Optional

import questionary
import typer
from rich.console import Console

from coauthor_cli.commit_message import append_attribution, generate_commit_message
from coauthor_cli.config import ConfigError, Settings
from coauthor_cli.detectors.attribution import attribute_changes
from coauthor_cli.git_client import (
    GitOperationError,
    commit,
    get_repo,
    get_status_lines,
    push,
    stage_all,
    working_tree_root,
)
from coauthor_cli.logging_config import get_logger, setup_logging
from coauthor_cli.ui import (
    build_lines_table,
    print_banner,
    render_commit_message,
    render_similarity_chart,
    render_verdict,
)

console = Console()
logger = get_logger(__name__)
app = typer.Typer(
    help="Estimate how much of your pending change was written by an AI assistant.",
    add_completion=False,
    no_args_is_help=True,
)

PathOption = typer.Option(".", help="Path to the Git repository")
ThresholdOption = typer.Option(None, "--threshold", "-t", help="Similarity at which a line counts as AI-generated (default 0.85)")
LimitOption = typer.Option(None, "--limit", help="Maximum number of recent snapshots to compare against (default 5)")
WindowOption = typer.Option(None, "--window-hours", help="Only use snapshots recorded within this many hours (default 4)")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Show debug logging")
QuietOption = typer.Option(False, "--quiet", "-q", help="Only log errors")


def _fail(message: str, export_json: bool = False, code: int = 1):
    if export_json:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[bold red]Error[/bold red]: {message}")
    raise typer.Exit(code=code)


def _get_attribution_data(path: str, threshold, limit, window_hours):
    """Open the repository, resolve settings and run the attribution."""
    repo = get_repo(path)
    if not repo:
        return None, None, None, f"'{path}' is not a valid Git repository."

    root = working_tree_root(repo, path)
    try:
        settings = Settings.from_env(repo_root=root).with_overrides(
            threshold=threshold,
            snapshot_limit=limit,
            retention_hours=window_hours,
        )
    except ConfigError as e:
        return repo, None, None, f"Invalid configuration: {e}"

    result = attribute_changes(
        root,
        threshold=settings.threshold,
        limit=settings.snapshot_limit,
        window=settings.retention_window,
        changes_dir=settings.changes_dir,
    )
    return repo, settings, result, None


def _exit_code_for(repo, settings) -> int:
    # An open repository without settings means the configuration was rejected
    return 2 if repo is not None and settings is None else 1


@app.command(name="analyze")
def analyze_cmd(
    path: str = PathOption,
    threshold: Optional[float] = ThresholdOption,
    limit: Optional[int] = LimitOption,
    window_hours: Optional[float] = WindowOption,
    export_json: bool = typer.Option(False, "--json", help="Export the result as JSON"),
    show_lines: bool = typer.Option(False, "--lines", help="Show the best snapshot match for every added line"),
    chart: bool = typer.Option(False, "--chart", help="Plot per-line similarity against the threshold"),
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Attribute the pending diff against recent AI editing snapshots."""
    setup_logging(verbose=verbose, quiet=quiet)

    repo, settings, result, err = _get_attribution_data(path, threshold, limit, window_hours)
    if err:
        _fail(err, export_json, code=_exit_code_for(repo, settings))

    if export_json:
        payload = result.to_dict()
        if show_lines:
            payload["lines"] = [
                {"file": s.file, "text": s.text, "similarity": round(s.similarity, 4), "ai_generated": s.ai_generated}
                for s in result.lines
            ]
        print(json.dumps(payload, indent=2))
        return

    if show_lines and result.lines:
        console.print(build_lines_table(result, settings.threshold))

    render_verdict(result, settings.threshold)

    if chart:
        render_similarity_chart(result, settings.threshold)


@app.command(name="message")
def message_cmd(
    path: str = PathOption,
    threshold: Optional[float] = ThresholdOption,
    limit: Optional[int] = LimitOption,
    window_hours: Optional[float] = WindowOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Print a conventional commit message with AI attribution trailers."""
    setup_logging(verbose=verbose, quiet=quiet)

    repo, settings, result, err = _get_attribution_data(path, threshold, limit, window_hours)
    if err:
        _fail(err, code=_exit_code_for(repo, settings))

    try:
        status_lines = get_status_lines(repo)
    except GitOperationError as e:
        _fail(str(e))

    message = append_attribution(generate_commit_message(status_lines), result, settings.co_author)
    # Plain stdout so the output can be piped into `git commit -F -`
    print(message)


@app.command(name="commit")
def commit_cmd(
    path: str = PathOption,
    threshold: Optional[float] = ThresholdOption,
    limit: Optional[int] = LimitOption,
    window_hours: Optional[float] = WindowOption,
    do_push: bool = typer.Option(True, "--push/--no-push", help="Push after committing"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the attribution and message without committing"),
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Attribute, stage everything, commit with trailers and push."""
    setup_logging(verbose=verbose, quiet=quiet)
    if not quiet:
        print_banner()

    repo = get_repo(path)
    if not repo:
        _fail(f"'{path}' is not a valid Git repository.")

    try:
        status_lines = get_status_lines(repo)
    except GitOperationError as e:
        _fail(str(e))

    if not status_lines:
        console.print("[green]✔ Nothing to commit.[/green]")
        return

    repo, settings, result, err = _get_attribution_data(path, threshold, limit, window_hours)
    if err:
        _fail(err, code=_exit_code_for(repo, settings))

    render_verdict(result, settings.threshold)

    message = append_attribution(generate_commit_message(status_lines), result, settings.co_author)
    render_commit_message(message)

    if dry_run:
        console.print("[dim]Dry run: nothing was staged or committed.[/dim]")
        return

    if not yes:
        action = "Stage all changes, commit and push?" if do_push else "Stage all changes and commit?"
        if not questionary.confirm(action, default=True).ask():
            console.print("[dim]Aborted.[/dim]")
            raise typer.Exit(code=1)

    try:
        stage_all(repo)
        console.print("[green]✔ Staged all changes[/green]")
        hexsha = commit(repo, message)
        console.print(f"[green]✔ Committed[/green] [dim]{hexsha[:7]}[/dim]")
        if do_push:
            push(repo)
            console.print("[green]✔ Pushed[/green]")
    except GitOperationError as e:
        logger.debug("Commit flow failed", exc_info=True)
        _fail(str(e))


def main():
    app()


if __name__ == "__main__":
    main()
