"""Registry of teaching snippets keyed by path-like identifiers."""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import inspect
import logging
import re
import sys
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from snippetrunner.schemas import SnippetInfo

logger = logging.getLogger(__name__)

# Topic modules under snippetrunner.snippets, imported on first use
BUILTIN_MODULES = [
    "snippetrunner.snippets.variables",
    "snippetrunner.snippets.dynamic_typing",
    "snippetrunner.snippets.equality",
    "snippetrunner.snippets.control_flow",
    "snippetrunner.snippets.operators",
    "snippetrunner.snippets.functions",
    "snippetrunner.snippets.event_loop",
    "snippetrunner.snippets.local_storage",
]

DEFAULT_DELAY_SCALE = 1.0

# Lowercase path segments, e.g. "event-loop/tasks-vs-microtasks"
SNIPPET_ID_PATTERN = re.compile(r"^[a-z0-9_-]+(/[a-z0-9_-]+)*$")


class UnknownSnippetError(Exception):
    """Raised when a snippet identifier is not registered."""

    pass


class DuplicateSnippetError(Exception):
    """Raised when a snippet identifier is registered twice."""

    pass


class InvalidSnippetIdError(ValueError):
    """Raised when a snippet identifier is not lowercase path segments."""

    pass



class SnippetContext:
    """Per-run context handed to every snippet.

    Lessons are written with realistic delays (one second, five seconds).
    ``delay_scale`` shrinks them so a full run stays fast; ordering of the
    printed lines never depends on it.
    """

    def __init__(self, delay_scale: float = DEFAULT_DELAY_SCALE):
        self.delay_scale = max(delay_scale, 0.0)

    def scaled(self, seconds: float) -> float:
        return seconds * self.delay_scale

    def sleep(self, seconds: float) -> None:
        """Block the whole thread, like a busy-wait loop would."""
        time.sleep(self.scaled(seconds))

    async def asleep(self, seconds: float) -> None:
        await asyncio.sleep(self.scaled(seconds))


@dataclass
class Snippet:
    """A registered snippet."""

    snippet_id: str
    title: str
    func: Callable[[SnippetContext], Any]
    description: str = ""

    @property
    def topic(self) -> str:
        return self.snippet_id.rsplit("/", 1)[0] if "/" in self.snippet_id else "misc"

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.func)

    def info(self) -> SnippetInfo:
        return SnippetInfo(
            snippet_id=self.snippet_id,
            topic=self.topic,
            title=self.title,
            description=self.description,
            is_async=self.is_async,
        )


SNIPPETS: dict[str, Snippet] = {}

_builtins_loaded = False

# Collects registrations while a file-based module is being imported
_capture: list[Snippet] | None = None


def snippet(
    snippet_id: str,
    title: str,
    description: str = "",
) -> Callable[[Callable[[SnippetContext], Any]], Callable[[SnippetContext], Any]]:
    """Register the decorated function as a snippet.

    Example:
        @snippet("js-functions/closures", "Closures")
        def closures(ctx):
            ...
    """
    if not SNIPPET_ID_PATTERN.fullmatch(snippet_id):
        raise InvalidSnippetIdError(f"Invalid snippet id: {snippet_id!r}")

    def decorator(func: Callable[[SnippetContext], Any]) -> Callable[[SnippetContext], Any]:
        entry = Snippet(
            snippet_id=snippet_id,
            title=title,
            func=func,
            description=description or (inspect.getdoc(func) or "").split("\n")[0],
        )
        if _capture is not None:
            _capture.append(entry)
            return func
        if snippet_id in SNIPPETS:
            raise DuplicateSnippetError(f"Snippet already registered: {snippet_id}")
        SNIPPETS[snippet_id] = entry
        return func

    return decorator


def load_builtin_snippets() -> None:
    """Import every built-in topic module once."""
    global _builtins_loaded
    if _builtins_loaded:
        return
    for module_name in BUILTIN_MODULES:
        importlib.import_module(module_name)
    _builtins_loaded = True
    logger.debug(f"Loaded {len(SNIPPETS)} built-in snippets")


def get_snippet(snippet_id: str) -> Snippet:
    """Get a registered snippet by id."""
    load_builtin_snippets()
    try:
        return SNIPPETS[snippet_id.strip().strip("/")]
    except KeyError:
        raise UnknownSnippetError(f"Unknown snippet: {snippet_id}") from None


def list_snippets(topic: str | None = None) -> list[SnippetInfo]:
    """List registered snippets, optionally filtered by topic."""
    load_builtin_snippets()
    infos = [s.info() for s in SNIPPETS.values()]
    if topic:
        infos = [i for i in infos if i.topic == topic]
    return sorted(infos, key=lambda i: i.snippet_id)


def list_topics() -> list[str]:
    """List distinct topics of registered snippets."""
    return sorted({info.topic for info in list_snippets()})


def file_snippet_id(path: Path | str) -> str:
    """Identifier for a snippet that comes from a file, e.g. ``file/hello_main``."""
    stem = re.sub(r"[^a-z0-9_-]+", "-", Path(path).stem.lower()).strip("-")
    return f"file/{stem or 'snippet'}"


def resolve_snippet_file(path: Path | str) -> Path:
    """Resolve a snippet file path, raising if there is no such file."""
    path = Path(path).resolve()
    if not path.is_file():
        raise UnknownSnippetError(f"Snippet file not found: {path}")
    return path


def load_snippet_file(path: Path | str) -> list[Snippet]:
    """Import a snippet file in isolation and return what it defines.

    Registrations made by the file are collected instead of being added to
    the global registry. A file without registrations but with a top-level
    ``main`` callable yields a single snippet named after the file. A plain
    script yields nothing: its module body already ran during the import.

    Whatever the module raises while being imported propagates.
    """
    global _capture
    # Built-ins imported by the file must land in the registry, not the capture
    load_builtin_snippets()
    path = resolve_snippet_file(path)

    module_name = f"_snippet_{path.stem}_{uuid.uuid4().hex[:8]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise UnknownSnippetError(f"Cannot load snippet file: {path}")
    module = importlib.util.module_from_spec(spec)

    collected: list[Snippet] = []
    _capture = collected
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        _capture = None
        sys.modules.pop(module_name, None)

    if collected:
        return collected

    main = getattr(module, "main", None)
    if callable(main):
        return [
            Snippet(
                snippet_id=file_snippet_id(path),
                title=path.stem,
                func=main,
                description=(inspect.getdoc(module) or "").split("\n")[0],
            )
        ]

    logger.debug(f"No snippets registered in {path}, module body only")
    return []
