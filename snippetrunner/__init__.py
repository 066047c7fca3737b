"""SnippetRunner.

Small, self-contained teaching snippets on language fundamentals plus a thin
runner that executes each one in isolation and reports what it printed.
"""

__version__ = "0.1.0"
