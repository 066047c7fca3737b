"""CLI for SnippetRunner - list, inspect and run teaching snippets."""

from __future__ import annotations

import inspect
import logging
import sys
from pathlib import Path

import click

from snippetrunner.registry import DEFAULT_DELAY_SCALE, UnknownSnippetError
from snippetrunner.runner import DEFAULT_TIMEOUT
from snippetrunner.schemas import RunReport, SnippetStatus

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(verbose: bool) -> None:
    # Logs go to stderr so captured snippet output stays clean
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version="0.1.0", prog_name="snippetrunner")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """SnippetRunner - run small teaching snippets and see what they print.

    Each snippet runs in isolation; a failing snippet is reported and the
    next one still runs.
    """
    _configure_logging(verbose)


def _echo_report(report: RunReport, raw: bool) -> None:
    if raw:
        click.echo(report.model_dump_json(indent=2))
        return

    for result in report.results:
        click.echo(f"{'=' * 60}")
        click.echo(f"{result.snippet_id}")
        click.echo(f"{'=' * 60}")
        for line in result.lines:
            click.echo(line)
        if result.status != SnippetStatus.COMPLETED:
            click.echo(f"[{result.status.value}] {result.error}", err=True)
        click.echo()

    click.echo(report.summary)


timeout_option = click.option(
    "--timeout",
    "timeout_seconds",
    default=DEFAULT_TIMEOUT,
    type=float,
    help="Timeout in seconds for coroutine snippets",
)
delay_scale_option = click.option(
    "--delay-scale",
    default=DEFAULT_DELAY_SCALE,
    type=click.FloatRange(min=0.0),
    help="Multiplier for illustrative delays (0 runs them instantly)",
)
raw_option = click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)


@main.command("list")
@click.option("--topic", "-t", default=None, help="Only list snippets for this topic")
def list_command(topic: str | None) -> None:
    """List registered snippets.

    \b
    Example:
        snippetrunner list
        snippetrunner list --topic event-loop
    """
    from snippetrunner.registry import list_snippets

    infos = list_snippets(topic=topic)
    if not infos:
        click.echo("No snippets found.")
        return

    for info in infos:
        marker = " (async)" if info.is_async else ""
        click.echo(f"  {info.snippet_id:<48} {info.title}{marker}")


@main.command()
@click.argument("identifiers", nargs=-1, required=True)
@timeout_option
@delay_scale_option
@raw_option
def run(
    identifiers: tuple[str, ...],
    timeout_seconds: float,
    delay_scale: float,
    raw: bool,
) -> None:
    """Run one or more snippets by id, or snippet files by path.

    \b
    Example:
        snippetrunner run js-functions/closures
        snippetrunner run event-loop/promises event-loop/nested-async
        snippetrunner run ./my_snippet.py --delay-scale 0
    """
    from snippetrunner.runner import run_snippets

    try:
        report = run_snippets(
            identifiers,
            timeout_seconds=timeout_seconds,
            delay_scale=delay_scale,
        )
    except UnknownSnippetError as e:
        raise click.ClickException(str(e)) from e

    _echo_report(report, raw)
    if report.failed:
        sys.exit(1)


@main.command("run-all")
@click.option("--topic", "-t", default=None, help="Only run snippets for this topic")
@click.option(
    "--dir", "-d",
    "directory",
    default=None,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, resolve_path=True),
    help="Run snippet files found in this directory instead",
)
@click.option("--recursive", "-r", is_flag=True, help="Search --dir recursively")
@timeout_option
@delay_scale_option
@raw_option
def run_all(
    topic: str | None,
    directory: str | None,
    recursive: bool,
    timeout_seconds: float,
    delay_scale: float,
    raw: bool,
) -> None:
    """Run every registered snippet, or every snippet file in a directory.

    \b
    Example:
        snippetrunner run-all --delay-scale 0
        snippetrunner run-all --topic operators
        snippetrunner run-all --dir ./lessons --recursive
    """
    from snippetrunner.runner import run_snippets

    if directory:
        from snippetrunner.discovery import discover_snippet_files

        patterns = ["**/*.py"] if recursive else ["*.py"]
        identifiers = [str(p) for p in discover_snippet_files(Path(directory), patterns)]
    else:
        from snippetrunner.registry import list_snippets

        identifiers = [info.snippet_id for info in list_snippets(topic=topic)]

    if not identifiers:
        click.echo("No snippets found.")
        return

    report = run_snippets(
        identifiers,
        timeout_seconds=timeout_seconds,
        delay_scale=delay_scale,
    )
    _echo_report(report, raw)
    if report.failed:
        sys.exit(1)


@main.command()
@click.argument("snippet_id")
def show(snippet_id: str) -> None:
    """Show a snippet's details and source.

    \b
    Example:
        snippetrunner show js-functions/closures
    """
    from snippetrunner.registry import get_snippet

    try:
        entry = get_snippet(snippet_id)
    except UnknownSnippetError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{entry.snippet_id} - {entry.title}")
    click.echo(f"Topic: {entry.topic}{' | async' if entry.is_async else ''}")
    if entry.description:
        click.echo(entry.description)
    click.echo(f"\n{'─' * 60}")
    click.echo(inspect.getsource(entry.func))


if __name__ == "__main__":
    main()
