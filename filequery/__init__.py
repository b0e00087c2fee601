"""Query trees, matching and highlighting for file name and path search, plus a selection set and an item pool."""

__version__ = "0.1.0"
__all__ = ["fields", "match_context", "memory_pool", "node", "query", "selection", "tokens", "tree"]