"""Find snippet files on disk for path-based runs."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Default exclusion patterns
DEFAULT_EXCLUDES = {".venv", "venv", "node_modules", "__pycache__", ".git", ".tox", "dist", "build"}

DEFAULT_PATTERNS = ["*.py"]


def _is_excluded(file_path: Path) -> bool:
    """Check if file is in an excluded directory."""
    return any(excl in file_path.parts for excl in DEFAULT_EXCLUDES)


def _is_private(file_path: Path) -> bool:
    """Private helpers (``_util.py``, ``__init__.py``) are never snippets."""
    return file_path.name.startswith("_")


def discover_snippet_files(
    root_dir: Path | str,
    patterns: list[str] | None = None,
) -> list[Path]:
    """Return snippet files under ``root_dir`` matching glob patterns.

    Args:
        root_dir: Root directory to search from
        patterns: Glob patterns (defaults to ["*.py"]); use "**/*.py" to recurse

    Returns:
        Sorted, de-duplicated list of file paths
    """
    root = Path(root_dir)
    if not root.is_dir():
        logger.warning(f"Snippet directory does not exist: {root_dir}")
        return []

    found: set[Path] = set()
    for pattern in patterns or DEFAULT_PATTERNS:
        for file_path in root.glob(pattern):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(root)
            if _is_excluded(relative) or _is_private(file_path):
                logger.debug(f"Skipped {relative}")
                continue
            found.add(file_path)

    logger.debug(f"Discovered {len(found)} snippet files in {root}")
    return sorted(found)
