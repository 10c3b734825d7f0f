"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter

from source_tree_viewer.api.dependencies import get_viewer_session

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, str]:
    """Return the current status of the API and the phase of the loaded archive."""
    return {"status": "healthy", "viewer": get_viewer_session().state.phase.value}
