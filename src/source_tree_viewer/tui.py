from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import (
    Button,
    Footer,
    Header,
    Label,
    LoadingIndicator,
    Static,
    TextArea,
    Tree,
)
from textual.widgets.tree import TreeNode as WidgetNode

from source_tree_viewer.models.tree import DecodeError, DirectoryNode, FileNode, TreeNode
from source_tree_viewer.rendering import ROOT_LABEL
from source_tree_viewer.services.selection import SelectionState, ViewerPhase
from source_tree_viewer.services.session import ViewerSession
from source_tree_viewer.utils import prompt_for_zip_file, read_zip_as_base64

logger = logging.getLogger(__name__)


def describe_state(state: SelectionState) -> str:
    """Status bar text for a selection state."""
    match state.phase:
        case ViewerPhase.IDLE:
            return "Open a ZIP archive to browse its sources."
        case ViewerPhase.LOADING:
            return "Decoding archive..."
        case ViewerPhase.READY:
            return f"Previewing {state.active_path}" if state.active_path else "Ready."
        case ViewerPhase.FAILED:
            return f"Could not load archive ({state.error_kind}): {state.error}"
    return ""


class SourceTreeViewerTUI(App[None]):
    """Browse the files of a source archive and preview their text."""

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("o", "open_zip", "Open ZIP"),
    ]

    CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#middle {
    height: 1fr;
    layout: horizontal;
}

/* Sidebar */
#sidebar {
    width: 26;
    padding: 2;
    border: heavy $primary;
    background: $panel;
}

#sidebar Button {
    margin-top: 1;
    width: 100%;
}

#title {
    text-align: center;
    margin-bottom: 2;
    color: $text;
}

#source-tree {
    width: 40;
    border: heavy $primary;
    background: $surface;
}

#preview-container {
    height: 1fr;
    border: heavy $primary;
    background: $surface;
    padding: 1;
}

#active-path {
    text-style: bold;
    margin-bottom: 1;
}

#preview {
    height: 1fr;
}

#error {
    color: $error;
    padding: 1;
}

/* Status bar */
#statusbar {
    height: auto;
    padding: 1;
    border: heavy $primary;
    background: $panel;
    color: $text;
}
"""

    def __init__(
        self, zip_path: Path | None = None, session: ViewerSession | None = None
    ) -> None:
        super().__init__()
        self._zip_path = zip_path
        self.session = session or ViewerSession()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Container(
                Static("Source\nTree Viewer", id="title"),
                Button("Open ZIP", id="btn-open", variant="primary"),
                Button("Exit", id="btn-exit", variant="error"),
                id="sidebar",
            ),
            Tree(ROOT_LABEL, id="source-tree"),
            VerticalScroll(
                Label("", id="active-path"),
                TextArea("", id="preview", read_only=True, language=None),
                LoadingIndicator(id="loading"),
                Static("", id="error"),
                id="preview-container",
            ),
            id="middle",
        )
        yield Container(Label(describe_state(self.session.state), id="status"), id="statusbar")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_view()
        if self._zip_path is not None:
            self.open_archive(self._zip_path)

    # ---------------------------------------------------------------------
    # LOADING
    # ---------------------------------------------------------------------

    def open_archive(self, path: Path) -> None:
        """Read ``path`` and build its tree in a worker, replacing any previous archive."""
        try:
            zip_data = read_zip_as_base64(path)
        except DecodeError as exc:
            logger.warning("Cannot open %s: %s", path, exc)
            self._show_error(str(exc))
            return
        self.sub_title = path.name
        self.run_worker(
            self._load(zip_data), name="load", exclusive=True, exit_on_error=False
        )

    async def _load(self, zip_data: str) -> None:
        task = self.session.start_load(zip_data)
        self._refresh_view()
        await asyncio.wait({task})
        self._refresh_view()

    def _refresh_view(self) -> None:
        state = self.session.state
        tree = self.query_one("#source-tree", Tree)
        loading = self.query_one("#loading", LoadingIndicator)
        error = self.query_one("#error", Static)
        preview = self.query_one("#preview", TextArea)

        self.query_one("#status", Label).update(describe_state(state))
        loading.display = state.phase is ViewerPhase.LOADING
        error.display = state.phase is ViewerPhase.FAILED
        tree.display = preview.display = state.phase is ViewerPhase.READY

        if state.phase is ViewerPhase.FAILED:
            error.update(describe_state(state))
        if state.phase is ViewerPhase.READY and self.session.tree is not None:
            self._populate_tree(tree, self.session.tree)
            self._show_selection(state)

    def _show_error(self, message: str) -> None:
        error = self.query_one("#error", Static)
        error.update(message)
        error.display = True
        self.query_one("#source-tree", Tree).display = False
        self.query_one("#preview", TextArea).display = False
        self.query_one("#active-path", Label).update("")
        self.query_one("#status", Label).update(message)

    # ---------------------------------------------------------------------
    # TREE
    # ---------------------------------------------------------------------

    def _populate_tree(self, tree: Tree[TreeNode], root: DirectoryNode) -> None:
        tree.clear()
        tree.root.data = root
        self._add_children(tree.root, root)
        tree.root.expand()

    @staticmethod
    def _add_children(parent: WidgetNode[TreeNode], directory: DirectoryNode) -> None:
        for label, child in directory.children.items():
            if isinstance(child, FileNode):
                parent.add_leaf(label, data=child)
            else:
                parent.add(label, data=child, allow_expand=True)

    @on(Tree.NodeExpanded, "#source-tree")
    def handle_expand(self, event: Tree.NodeExpanded[TreeNode]) -> None:
        node = event.node
        if isinstance(node.data, DirectoryNode) and not node.children:
            self._add_children(node, node.data)

    @on(Tree.NodeSelected, "#source-tree")
    def handle_select(self, event: Tree.NodeSelected[TreeNode]) -> None:
        if not isinstance(event.node.data, FileNode):
            return
        state = self.session.activate_leaf(event.node.data.archive_path)
        self._show_selection(state)

    def _show_selection(self, state: SelectionState) -> None:
        self.query_one("#active-path", Label).update(state.active_path)
        self.query_one("#preview", TextArea).load_text(state.active_content)
        self.query_one("#status", Label).update(describe_state(state))

    # ---------------------------------------------------------------------
    # ACTIONS
    # ---------------------------------------------------------------------

    def action_open_zip(self) -> None:
        selected = prompt_for_zip_file()
        if selected is None:
            self.query_one("#status", Label).update("No file selected.")
            return
        self.open_archive(selected)

    @on(Button.Pressed, "#btn-open")
    def handle_open(self) -> None:
        self.action_open_zip()

    @on(Button.Pressed, "#btn-exit")
    def exit_app(self) -> None:
        self.exit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Browse the sources inside a zip archive.")
    parser.add_argument("zip_path", nargs="?", type=Path, help="Archive to open on start")
    args = parser.parse_args()
    SourceTreeViewerTUI(zip_path=args.zip_path).run()


if __name__ == "__main__":
    main()
