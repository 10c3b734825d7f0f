"""Route handlers for the API."""

from source_tree_viewer.api.routes import health, sources

__all__ = [
    "health",
    "sources",
]
