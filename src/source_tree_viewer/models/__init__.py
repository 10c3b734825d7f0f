"""Data models and type definitions"""

from source_tree_viewer.models.tree import (
    ArchiveEntry,
    ArchiveError,
    CollisionError,
    DecodeError,
    DirectoryNode,
    FileNode,
    StructuralError,
    TreeNode,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveError",
    "CollisionError",
    "DecodeError",
    "DirectoryNode",
    "FileNode",
    "StructuralError",
    "TreeNode",
]
