"""Shared dependencies for API routes."""

from __future__ import annotations

from source_tree_viewer.services.session import ViewerSession

_viewer_session: ViewerSession | None = None


def get_viewer_session() -> ViewerSession:
    """Return the process-wide viewer session, creating it on first use.

    The viewer holds a single active archive, so every request shares the
    same session.

    Returns:
        ViewerSession: The shared session.
    """
    global _viewer_session
    if _viewer_session is None:
        _viewer_session = ViewerSession()
    return _viewer_session


async def reset_viewer_session() -> None:
    """Drop the shared session, cancelling any build it still runs."""
    global _viewer_session
    if _viewer_session is not None:
        await _viewer_session.close()
    _viewer_session = None
