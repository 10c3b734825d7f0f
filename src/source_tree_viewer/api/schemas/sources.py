"""Pydantic schemas for source archive API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from source_tree_viewer.models.tree import DirectoryNode, FileNode, TreeNode
from source_tree_viewer.rendering import RenderNode, node_id
from source_tree_viewer.services.selection import SelectionState, ViewerPhase


class SourceUploadRequest(BaseModel):
    """Archive handed over by the source-fetch collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    zip_data: str = Field(alias="zipData", description="Base64-encoded zip archive")


class LeafActivationRequest(BaseModel):
    """File the user clicked in the tree."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Archive path of the file, e.g. 'src/lib.rs'")


class SelectionResponse(BaseModel):
    """Current preview selection and viewer phase."""

    model_config = ConfigDict(populate_by_name=True)

    phase: ViewerPhase
    active_path: str = Field(alias="activePath")
    active_content: str = Field(alias="activeContent")
    is_loading: bool = Field(alias="isLoading")
    error: str | None = None
    error_kind: str | None = Field(default=None, alias="errorKind")

    @classmethod
    def from_state(cls, state: SelectionState) -> SelectionResponse:
        return cls(
            phase=state.phase,
            active_path=state.active_path,
            active_content=state.active_content,
            is_loading=state.is_loading,
            error=state.error,
            error_kind=state.error_kind,
        )


class TreeNodeSchema(BaseModel):
    """One node of the source tree, without file contents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str
    label: str
    kind: str
    path: str
    children: list[TreeNodeSchema] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: TreeNode) -> TreeNodeSchema:
        if isinstance(node, FileNode):
            return cls(node_id=node_id(node), label=node.label, kind="file", path=node.archive_path)
        return cls(
            node_id=node_id(node),
            label=node.label or "zip",
            kind="directory",
            path=node.archive_path,
            children=[cls.from_node(child) for child in node.children.values()],
        )


class SourceTreeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_count: int = Field(description="Number of files in the archive")
    root: TreeNodeSchema

    @classmethod
    def from_root(cls, root: DirectoryNode) -> SourceTreeResponse:
        return cls(
            file_count=sum(1 for _ in root.iter_files()),
            root=TreeNodeSchema.from_node(root),
        )


class RenderNodeSchema(BaseModel):
    """A visible row of the rendered tree."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str
    label: str
    kind: str
    depth: int
    path: str
    expanded: bool

    @classmethod
    def from_render_node(cls, item: RenderNode) -> RenderNodeSchema:
        return cls(
            node_id=item.node_id,
            label=item.label,
            kind=item.kind,
            depth=item.depth,
            path=item.path,
            expanded=item.expanded,
        )


TreeNodeSchema.model_rebuild()
