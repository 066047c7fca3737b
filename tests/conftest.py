"""Pytest configuration and fixtures for SnippetRunner tests."""

import pytest
from pathlib import Path

from snippetrunner import registry


@pytest.fixture
def isolated_registry(monkeypatch):
    """Let a test register snippets without leaking them into other tests."""
    registry.load_builtin_snippets()
    monkeypatch.setattr(registry, "SNIPPETS", dict(registry.SNIPPETS))
    return registry.SNIPPETS


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace directory for tests."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def registered_snippet_file(tmp_workspace: Path) -> Path:
    """A snippet file that registers two snippets, one of which raises."""
    path = tmp_workspace / "lessons.py"
    path.write_text(
        '''"""Lessons registered with the decorator."""

from snippetrunner.registry import snippet


@snippet("file/greeting", "Greeting")
def greeting(ctx):
    print("Hello from a file")


@snippet("file/broken", "Broken")
def broken(ctx):
    print("about to fail")
    raise ValueError("boom")
'''
    )
    return path


@pytest.fixture
def main_snippet_file(tmp_workspace: Path) -> Path:
    """A plain script with a top-level main()."""
    path = tmp_workspace / "hello_main.py"
    path.write_text(
        '''"""Prints two lines."""


def main():
    print("line one")
    print("line two")
'''
    )
    return path


@pytest.fixture
def sample_snippet_dir(tmp_workspace: Path, main_snippet_file: Path) -> Path:
    """Directory with snippet files, a private helper and a nested lesson."""
    (tmp_workspace / "_helpers.py").write_text("VALUE = 1\n")
    (tmp_workspace / "notes.md").write_text("# Notes\n")
    nested = tmp_workspace / "nested"
    nested.mkdir()
    (nested / "deep.py").write_text("def main():\n    print('deep')\n")
    cache = tmp_workspace / "__pycache__"
    cache.mkdir()
    (cache / "stale.py").write_text("def main():\n    print('stale')\n")
    return tmp_workspace


@pytest.fixture
def import_error_snippet_file(tmp_workspace: Path) -> Path:
    """A snippet file that prints and then raises while being imported."""
    path = tmp_workspace / "broken_import.py"
    path.write_text(
        '''"""Fails at import time."""

print("loading lessons")
raise ValueError("boom")


def main():
    print("never reached")
'''
    )
    return path


@pytest.fixture
def plain_script_file(tmp_workspace: Path) -> Path:
    """A script with only top-level statements."""
    path = tmp_workspace / "plain_script.py"
    path.write_text('print("top level line")\nprint("second line")\n')
    return path
