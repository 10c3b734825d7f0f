"""Display and file selection utilities"""

from __future__ import annotations

import base64
from pathlib import Path

from source_tree_viewer.models.tree import DecodeError


def prompt_for_zip_file() -> Path | None:
    """Display file picker dialog for zip file selection.

    Returns:
        Path to selected zip file, or None if cancelled.
    """
    import easygui as eg

    zip_path_str = eg.fileopenbox(
        msg="Select a .zip file containing source code",
        title="Open Source Archive",
        default="*.zip",
        filetypes=["*.zip"],
    )
    return Path(zip_path_str) if zip_path_str else None


def read_zip_as_base64(path: Path | str) -> str:
    """Read a local zip file into the base64 form the viewer consumes.

    Args:
        path: Path to a ``.zip`` file.

    Returns:
        The archive bytes, base64-encoded.

    Raises:
        DecodeError: If the path is not an existing ``.zip`` file.
    """
    zip_path = Path(path)
    if zip_path.suffix.lower() != ".zip" or not zip_path.is_file():
        raise DecodeError(f"Expected a .zip file. Received: {zip_path.name}")
    return base64.b64encode(zip_path.read_bytes()).decode("ascii")

