"""A single viewer session: one active archive, its tree and its selection."""

from __future__ import annotations

import asyncio
import logging

from source_tree_viewer.config import get_default_active_file
from source_tree_viewer.models.tree import ArchiveError, DirectoryNode, FileNode
from source_tree_viewer.rendering import render_text
from source_tree_viewer.services.decoder import ArchiveDecoder, ZipArchiveDecoder
from source_tree_viewer.services.selection import (
    ArchiveLoadStarted,
    BuildFailed,
    LeafActivated,
    SelectionEvent,
    SelectionState,
    TreeBuilt,
    reduce,
)
from source_tree_viewer.services.tree_builder import build_tree

logger = logging.getLogger(__name__)


class NoArchiveLoadedError(RuntimeError):
    """Raised when a file is activated before any tree is ready."""


class ViewerSession:
    """Owns the current tree and selection.

    Only one build is active at a time. Starting a new load cancels the
    build in flight, and a build that finishes after being superseded never
    touches the session.
    """

    def __init__(
        self, decoder: ArchiveDecoder | None = None, default_file: str | None = None
    ) -> None:
        self.decoder = decoder or ZipArchiveDecoder()
        self.default_file = default_file or get_default_active_file()
        self.state = SelectionState()
        self.tree: DirectoryNode | None = None
        self._generation = 0
        self._task: asyncio.Task[None] | None = None

    def dispatch(self, event: SelectionEvent) -> SelectionState:
        self.state = reduce(self.state, event)
        return self.state

    def start_load(self, zip_data: str) -> asyncio.Task[None]:
        """Begin building a new archive, superseding any build in flight.

        Must be called from a running event loop.
        """
        if self._task is not None and not self._task.done():
            logger.info("New archive supersedes build %d", self._generation)
            self._task.cancel()
        self._generation += 1
        self.tree = None
        self.dispatch(ArchiveLoadStarted())
        self._task = asyncio.create_task(self._run(self._generation, zip_data))
        return self._task

    async def load(self, zip_data: str) -> SelectionState:
        """Load an archive and wait until its build has settled.

        Returns:
            The selection state once the build finished, failed or was
            superseded by a later load.
        """
        task = self.start_load(zip_data)
        await asyncio.wait({task})
        return self.state

    async def _run(self, generation: int, zip_data: str) -> None:
        try:
            entries = await self.decoder.decode(zip_data)
            root = await build_tree(entries)
        except ArchiveError as exc:
            if generation == self._generation:
                logger.warning("Archive build %d failed: %s", generation, exc)
                self.dispatch(BuildFailed(exc))
            return
        except Exception as exc:
            logger.exception("Unexpected failure in archive build %d", generation)
            if generation == self._generation:
                self.dispatch(BuildFailed(ArchiveError(f"Unexpected failure: {exc}")))
            return
        if generation != self._generation:
            logger.debug("Discarding stale build %d", generation)
            return
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Built source tree:\n%s", render_text(root))
        self.tree = root
        self.dispatch(TreeBuilt(root, self.default_file))

    def activate_leaf(self, path: str) -> SelectionState:
        """Preview the file at ``path`` of the current tree.

        Raises:
            NoArchiveLoadedError: If no tree is ready.
            KeyError: If ``path`` does not name a file in the tree.
        """
        if self.tree is None:
            raise NoArchiveLoadedError("No source tree is loaded")
        node = self.tree.find(path)
        if not isinstance(node, FileNode):
            raise KeyError(path)
        return self.dispatch(LeafActivated(node.archive_path, node.content))

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})
        self._task = None
