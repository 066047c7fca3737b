"""Teaching snippets, one module per topic.

Each module registers its lessons with ``@snippet`` on import; load them all
with ``snippetrunner.registry.load_builtin_snippets()``.
"""
