"""Data models for archive entries and the reconstructed source tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

SEPARATOR = "/"


class ArchiveError(Exception):
    """Base class for every failure that aborts an archive build."""

    kind = "archive"


class DecodeError(ArchiveError):
    """Raised when the archive cannot be opened or an entry is not decodable text."""

    kind = "decode"


class StructuralError(ArchiveError):
    """Raised when an entry's parent directory is missing from the tree."""

    kind = "structure"


class CollisionError(ArchiveError):
    """Raised when two entries resolve to the same name under one directory."""

    kind = "collision"

    def __init__(self, path: str) -> None:
        super().__init__(f"Archive contains more than one entry named {path!r}")
        self.path = path


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One member of the archive after its path has been normalized.

    Attributes:
        path: Path segments from the archive root, never empty.
        is_directory: Whether the raw path carried the trailing separator.
        content: Decoded text for files, ``None`` for directories.
        raw_path: The path exactly as the archive listed it.
    """

    path: tuple[str, ...]
    is_directory: bool
    content: str | None = None
    raw_path: str = ""

    @property
    def depth(self) -> int:
        """Nesting level of the entry; members of the archive root are at 0."""
        return len(self.path) - 1

    @property
    def name(self) -> str:
        return self.path[-1]

    @property
    def parent(self) -> tuple[str, ...]:
        return self.path[:-1]

    @property
    def archive_path(self) -> str:
        return SEPARATOR.join(self.path)


@dataclass(slots=True)
class FileNode:
    """A leaf of the tree holding the decoded text of one archive file.

    Attributes:
        name: Name of the file.
        path: Segments from the archive root down to this file.
        content: Decoded text content.
    """

    name: str
    path: tuple[str, ...]
    content: str

    @property
    def label(self) -> str:
        return self.name

    @property
    def archive_path(self) -> str:
        return SEPARATOR.join(self.path)


@dataclass(slots=True)
class DirectoryNode:
    """A directory in the tree.

    Children are keyed by their label: a directory's label carries the
    trailing separator (``"src/"``), a file's label is its bare name. The
    root is a synthetic directory with an empty name and path.

    Attributes:
        name: Name of the directory, without the separator.
        path: Segments from the archive root down to this directory.
        children: Child nodes in insertion order.
    """

    name: str = ""
    path: tuple[str, ...] = ()
    children: dict[str, TreeNode] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return f"{self.name}{SEPARATOR}" if self.name else ""

    @property
    def archive_path(self) -> str:
        return SEPARATOR.join(self.path)

    @property
    def is_root(self) -> bool:
        return not self.path

    def _ensure_free(self, name: str) -> None:
        if name in self.children or f"{name}{SEPARATOR}" in self.children:
            raise CollisionError(SEPARATOR.join((*self.path, name)))

    def add_directory(self, name: str) -> DirectoryNode:
        """Create an empty child directory.

        Args:
            name: Name of the new directory.

        Returns:
            The created directory node.

        Raises:
            CollisionError: If a file or directory of that name already exists.
        """
        self._ensure_free(name)
        node = DirectoryNode(name=name, path=(*self.path, name))
        self.children[node.label] = node
        return node

    def insert_leaf(self, name: str, content: str) -> FileNode:
        """Attach a file leaf.

        Args:
            name: Name of the file.
            content: Decoded text of the file.

        Returns:
            The created file node.

        Raises:
            CollisionError: If a file or directory of that name already exists.
        """
        self._ensure_free(name)
        node = FileNode(name=name, path=(*self.path, name), content=content)
        self.children[node.label] = node
        return node

    def child_directory(self, name: str) -> DirectoryNode:
        """Return the child directory called ``name``.

        Raises:
            StructuralError: If no such directory exists, including when a
                file of the same name sits in its place.
        """
        child = self.children.get(f"{name}{SEPARATOR}")
        if not isinstance(child, DirectoryNode):
            missing = SEPARATOR.join((*self.path, name))
            raise StructuralError(f"Directory {missing + SEPARATOR!r} is not in the archive")
        return child

    def walk(self, segments: tuple[str, ...] | list[str]) -> DirectoryNode:
        """Follow ``segments`` down from this directory.

        Raises:
            StructuralError: If any directory along the way is missing.
        """
        node = self
        for segment in segments:
            node = node.child_directory(segment)
        return node

    def find(self, path: str) -> TreeNode | None:
        """Look up a node by its archive path (``"src/lib.rs"`` or ``"src/"``)."""
        segments = [part for part in path.split(SEPARATOR) if part]
        if not segments:
            return self
        wants_directory = path.endswith(SEPARATOR)
        node: TreeNode = self
        for index, segment in enumerate(segments):
            if not isinstance(node, DirectoryNode):
                return None
            last = index == len(segments) - 1
            if last and not wants_directory and segment in node.children:
                node = node.children[segment]
            else:
                child = node.children.get(f"{segment}{SEPARATOR}")
                if child is None:
                    return None
                node = child
        return node

    def iter_files(self) -> Iterator[FileNode]:
        """Yield every file below this directory, depth first in insertion order."""
        for child in self.children.values():
            if isinstance(child, FileNode):
                yield child
            else:
                yield from child.iter_files()

    def to_dict(self) -> dict[str, object]:
        """Return the nested ``{label: content | {...}}`` form of the tree."""
        return {
            label: child.content if isinstance(child, FileNode) else child.to_dict()
            for label, child in self.children.items()
        }


TreeNode = FileNode | DirectoryNode
