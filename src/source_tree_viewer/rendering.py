from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from source_tree_viewer.models.tree import DirectoryNode, FileNode, TreeNode

ROOT_ID = "zip"
ROOT_LABEL = "zip"


def node_id(node: TreeNode) -> str:
    """Return the expand/collapse identity of ``node``, derived from its path."""
    if isinstance(node, DirectoryNode):
        if node.is_root:
            return ROOT_ID
        return f"{ROOT_ID}/{node.archive_path}/"
    return f"{ROOT_ID}/{node.archive_path}"


@dataclass(frozen=True, slots=True)
class RenderNode:
    node_id: str
    label: str
    kind: str
    depth: int
    path: str
    expanded: bool = False


@dataclass(slots=True)
class ExpansionState:
    """Set of expanded directory ids. Only the root starts expanded."""

    expanded: set[str] = field(default_factory=lambda: {ROOT_ID})

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> ExpansionState:
        return cls(expanded={ROOT_ID, *ids})

    def is_expanded(self, identity: str) -> bool:
        return identity in self.expanded

    def toggle(self, identity: str) -> bool:
        if identity in self.expanded:
            self.expanded.discard(identity)
            return False
        self.expanded.add(identity)
        return True


def render_tree(
    root: DirectoryNode, expansion: ExpansionState | None = None
) -> Iterator[RenderNode]:
    """Walk the tree in encounter order, yielding one entry per visible node.

    Children of a collapsed directory are not visited.
    """
    expansion = expansion or ExpansionState()

    def _walk(node: TreeNode, depth: int) -> Iterator[RenderNode]:
        identity = node_id(node)
        if isinstance(node, FileNode):
            yield RenderNode(identity, node.label, "file", depth, node.archive_path)
            return
        expanded = expansion.is_expanded(identity)
        label = ROOT_LABEL if node.is_root else node.label
        yield RenderNode(identity, label, "directory", depth, node.archive_path, expanded)
        if expanded:
            for child in node.children.values():
                yield from _walk(child, depth + 1)

    return _walk(root, 0)


def render_text(root: DirectoryNode) -> str:
    """Render the fully expanded tree as an indented outline."""
    everything = ExpansionState(expanded={node_id(root)})
    everything.expanded.update(_directory_ids(root))
    lines = ["  " * item.depth + item.label for item in render_tree(root, everything)]
    return "\n".join(lines)


def _directory_ids(directory: DirectoryNode) -> Iterator[str]:
    for child in directory.children.values():
        if isinstance(child, DirectoryNode):
            yield node_id(child)
            yield from _directory_ids(child)
