"""Selection state for the preview pane and the reducer that drives it."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from source_tree_viewer.models.tree import ArchiveError, DirectoryNode, FileNode


class ViewerPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SelectionState:
    """Which file is previewed, and whether the viewer can show anything yet.

    Attributes:
        phase: Current viewer phase.
        active_path: Archive path of the previewed file, empty when none.
        active_content: Text of the previewed file.
        error: Message of the failure that ended the last build.
        error_kind: Kind of that failure (``decode``, ``structure``, ``collision``).
    """

    phase: ViewerPhase = ViewerPhase.IDLE
    active_path: str = ""
    active_content: str = ""
    error: str | None = None
    error_kind: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is ViewerPhase.LOADING


@dataclass(frozen=True, slots=True)
class ArchiveLoadStarted:
    pass


@dataclass(frozen=True, slots=True)
class TreeBuilt:
    root: DirectoryNode
    default_file: str


@dataclass(frozen=True, slots=True)
class BuildFailed:
    error: ArchiveError


@dataclass(frozen=True, slots=True)
class LeafActivated:
    path: str
    content: str


SelectionEvent = ArchiveLoadStarted | TreeBuilt | BuildFailed | LeafActivated


def reduce(state: SelectionState, event: SelectionEvent) -> SelectionState:
    """Return the state that follows ``event``.

    A new archive resets any phase to loading. Built and failed results only
    apply while loading, and leaf activation only while a tree is ready;
    events arriving in any other phase leave the state untouched.
    """
    match event:
        case ArchiveLoadStarted():
            return SelectionState(phase=ViewerPhase.LOADING)
        case TreeBuilt(root, default_file):
            if state.phase is not ViewerPhase.LOADING:
                return state
            default = root.children.get(default_file)
            if isinstance(default, FileNode):
                return SelectionState(
                    phase=ViewerPhase.READY,
                    active_path=default.archive_path,
                    active_content=default.content,
                )
            return SelectionState(phase=ViewerPhase.READY)
        case BuildFailed(error):
            if state.phase is not ViewerPhase.LOADING:
                return state
            return SelectionState(
                phase=ViewerPhase.FAILED, error=str(error), error_kind=error.kind
            )
        case LeafActivated(path, content):
            if state.phase is not ViewerPhase.READY:
                return state
            return replace(state, active_path=path, active_content=content)
    raise TypeError(f"Unknown selection event {event!r}")
