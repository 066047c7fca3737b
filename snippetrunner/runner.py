"""Snippet runner: execute one snippet in isolation and capture what it prints."""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import inspect
import io
import logging
import time
from pathlib import Path
from typing import Any, Callable, Iterable

from snippetrunner.registry import (
    DEFAULT_DELAY_SCALE,
    Snippet,
    SnippetContext,
    file_snippet_id,
    get_snippet,
    load_snippet_file,
    resolve_snippet_file,
)
from snippetrunner.schemas import RunReport, SnippetResult, SnippetStatus

logger = logging.getLogger(__name__)

# Output limits
MAX_OUTPUT_BYTES = 10 * 1024  # 10KB

# Default timeout for coroutine snippets
DEFAULT_TIMEOUT = 10  # seconds

TRUNCATION_MARKER = "... [output truncated]"


def compute_output_hash(content: str | bytes) -> str:
    """Compute SHA256 hash for captured output.

    Args:
        content: String or bytes content

    Returns:
        Hash string in format "sha256:..."
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return f"sha256:{hashlib.sha256(content).hexdigest()}"


def _truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> tuple[str, bool]:
    """Truncate output to max_bytes. Returns (output, was_truncated)."""
    if len(output.encode("utf-8", errors="replace")) <= max_bytes:
        return output, False

    # Truncate by bytes, preserving valid UTF-8
    encoded = output.encode("utf-8", errors="replace")[:max_bytes]
    truncated = encoded.decode("utf-8", errors="ignore")
    return truncated + "\n" + TRUNCATION_MARKER, True


def _split_lines(output: str) -> list[str]:
    if not output:
        return []
    return output[:-1].split("\n") if output.endswith("\n") else output.split("\n")


def _invoke(func: Callable[..., Any], ctx: SnippetContext) -> Any:
    """Call a snippet, passing the context only when it takes a parameter."""
    params = inspect.signature(func).parameters
    return func(ctx) if params else func()


class _SnippetTimeout(Exception):
    """A coroutine snippet overran its time bound."""

    pass


async def _run_bounded(coro: Any, timeout_seconds: float) -> Any:
    # Unlike wait_for, a TimeoutError raised by the snippet itself passes through
    task = asyncio.ensure_future(coro)
    done, _ = await asyncio.wait({task}, timeout=timeout_seconds)
    if not done:
        task.cancel()
        raise _SnippetTimeout(f"Snippet timed out after {timeout_seconds} seconds")
    return task.result()


def _execute(snippet: Snippet, ctx: SnippetContext, timeout_seconds: float) -> None:
    if snippet.is_async:
        asyncio.run(_run_bounded(_invoke(snippet.func, ctx), timeout_seconds))
        return
    result = _invoke(snippet.func, ctx)
    # Plain functions may still hand back a coroutine
    if inspect.iscoroutine(result):
        asyncio.run(_run_bounded(result, timeout_seconds))


def execute_snippet(
    snippet: Snippet,
    timeout_seconds: float = DEFAULT_TIMEOUT,
    delay_scale: float = DEFAULT_DELAY_SCALE,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> SnippetResult:
    """Execute an already-resolved snippet and capture its output.

    A snippet that raises produces a FAILED result with the exception text
    and every line printed before it. Nothing is retried.
    """
    ctx = SnippetContext(delay_scale=delay_scale)
    buffer = io.StringIO()
    status = SnippetStatus.COMPLETED
    error: str | None = None
    error_type: str | None = None

    logger.info(f"Running snippet: {snippet.snippet_id}")
    started = time.perf_counter()
    try:
        with contextlib.redirect_stdout(buffer):
            _execute(snippet, ctx, timeout_seconds)

    except _SnippetTimeout as e:
        logger.warning(f"Snippet timed out after {timeout_seconds}s: {snippet.snippet_id}")
        status = SnippetStatus.TIMED_OUT
        error_type = "TimeoutError"
        error = str(e)

    except Exception as e:
        logger.error(f"Snippet {snippet.snippet_id} raised {type(e).__name__}: {e}")
        status = SnippetStatus.FAILED
        error_type = type(e).__name__
        error = f"{error_type}: {e}"

    duration_ms = (time.perf_counter() - started) * 1000
    output, was_truncated = _truncate_output(buffer.getvalue(), max_output_bytes)

    return SnippetResult(
        snippet_id=snippet.snippet_id,
        status=status,
        lines=_split_lines(output),
        error=error,
        error_type=error_type,
        duration_ms=duration_ms,
        output_hash=compute_output_hash(output),
        was_truncated=was_truncated,
    )


def run_snippet(
    snippet_id: str,
    timeout_seconds: float = DEFAULT_TIMEOUT,
    delay_scale: float = DEFAULT_DELAY_SCALE,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> SnippetResult:
    """Run a registered snippet by id.

    Args:
        snippet_id: Registered identifier, e.g. "js-functions/closures"
        timeout_seconds: Bound on coroutine snippets
        delay_scale: Multiplier applied to illustrative delays
        max_output_bytes: Captured output limit

    Returns:
        SnippetResult with captured lines, status and error text

    Raises:
        UnknownSnippetError: If the id is not registered
    """
    snippet = get_snippet(snippet_id)
    return execute_snippet(
        snippet,
        timeout_seconds=timeout_seconds,
        delay_scale=delay_scale,
        max_output_bytes=max_output_bytes,
    )


def _build_report(results: list[SnippetResult]) -> RunReport:
    completed = sum(1 for r in results if r.ok)
    failed = len(results) - completed
    summary = f"Ran {len(results)} snippets: {completed} completed, {failed} failed"
    return RunReport(
        results=results,
        total=len(results),
        completed=completed,
        failed=failed,
        summary=summary,
    )


def _run_file(
    path: Path,
    timeout_seconds: float,
    delay_scale: float,
    max_output_bytes: int,
) -> list[SnippetResult]:
    """Import a snippet file, then run every snippet it defines.

    The import runs like a snippet of its own, named after the file. A file
    that raises while loading becomes a single failed result. A plain script
    has nothing to run afterwards, so its import is its result.
    """
    found: list[Snippet] = []

    def import_file() -> None:
        found.extend(load_snippet_file(path))

    loader = Snippet(snippet_id=file_snippet_id(path), title=path.stem, func=import_file)
    loaded = execute_snippet(
        loader,
        timeout_seconds=timeout_seconds,
        delay_scale=delay_scale,
        max_output_bytes=max_output_bytes,
    )
    if not loaded.ok:
        return [loaded]

    results = [loaded] if loaded.lines or not found else []
    for entry in found:
        results.append(
            execute_snippet(
                entry,
                timeout_seconds=timeout_seconds,
                delay_scale=delay_scale,
                max_output_bytes=max_output_bytes,
            )
        )
    return results


def run_snippet_file(
    path: Path | str,
    timeout_seconds: float = DEFAULT_TIMEOUT,
    delay_scale: float = DEFAULT_DELAY_SCALE,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> RunReport:
    """Load a snippet file and run every snippet it defines, in order.

    Raises:
        UnknownSnippetError: If the file does not exist
    """
    results = _run_file(
        resolve_snippet_file(path),
        timeout_seconds=timeout_seconds,
        delay_scale=delay_scale,
        max_output_bytes=max_output_bytes,
    )
    return _build_report(results)


def _looks_like_path(identifier: str) -> bool:
    return identifier.endswith(".py")


def run_snippets(
    identifiers: Iterable[str],
    timeout_seconds: float = DEFAULT_TIMEOUT,
    delay_scale: float = DEFAULT_DELAY_SCALE,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> RunReport:
    """Run snippets one after another; a failing snippet never stops the batch.

    Identifiers ending in ``.py`` are treated as snippet files. A file that
    raises while being imported is reported as a failed result for that file.

    Raises:
        UnknownSnippetError: If an id is not registered or a file is missing.
            Raised before anything runs.
    """
    batch: list[Snippet | Path] = []
    for identifier in identifiers:
        if _looks_like_path(identifier):
            batch.append(resolve_snippet_file(identifier))
        else:
            batch.append(get_snippet(identifier))

    results: list[SnippetResult] = []
    for item in batch:
        if isinstance(item, Path):
            results.extend(
                _run_file(
                    item,
                    timeout_seconds=timeout_seconds,
                    delay_scale=delay_scale,
                    max_output_bytes=max_output_bytes,
                )
            )
        else:
            results.append(
                execute_snippet(
                    item,
                    timeout_seconds=timeout_seconds,
                    delay_scale=delay_scale,
                    max_output_bytes=max_output_bytes,
                )
            )
    report = _build_report(results)
    logger.info(report.summary)
    return report
