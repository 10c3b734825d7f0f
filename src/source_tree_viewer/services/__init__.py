"""Services"""

from source_tree_viewer.services.decoder import ArchiveDecoder, ZipArchiveDecoder
from source_tree_viewer.services.selection import SelectionState, ViewerPhase, reduce
from source_tree_viewer.services.session import NoArchiveLoadedError, ViewerSession
from source_tree_viewer.services.tree_builder import (
    build_tree,
    build_tree_from_entries,
    parse_entry,
)

__all__ = [
    "ArchiveDecoder",
    "NoArchiveLoadedError",
    "SelectionState",
    "ViewerPhase",
    "ViewerSession",
    "ZipArchiveDecoder",
    "build_tree",
    "build_tree_from_entries",
    "parse_entry",
    "reduce",
]
