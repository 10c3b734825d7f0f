"""Reconstruct a nested source tree from a flat archive listing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping

from source_tree_viewer.config import get_decode_concurrency
from source_tree_viewer.models.tree import (
    SEPARATOR,
    ArchiveEntry,
    ArchiveError,
    DecodeError,
    DirectoryNode,
    StructuralError,
)
from source_tree_viewer.services.decoder import DecodedEntry

logger = logging.getLogger(__name__)


def parse_entry(raw_path: str, is_directory: bool, content: str | None = None) -> ArchiveEntry:
    """Normalize one raw archive path into an :class:`ArchiveEntry`.

    Empty segments (a leading separator, doubled separators) are dropped and
    the trailing separator of a directory marker is removed.

    Args:
        raw_path: Path as listed by the archive.
        is_directory: Whether the entry is a directory marker.
        content: Decoded text for file entries.

    Raises:
        StructuralError: If the path has no segments left.
    """
    segments = tuple(part for part in raw_path.split(SEPARATOR) if part)
    if not segments:
        raise StructuralError(f"Archive entry {raw_path!r} has an empty path")
    return ArchiveEntry(
        path=segments,
        is_directory=is_directory,
        content=None if is_directory else (content or ""),
        raw_path=raw_path,
    )


def _collect_entries(
    entries: Iterable[ArchiveEntry],
) -> tuple[list[ArchiveEntry], list[ArchiveEntry]]:
    files: list[ArchiveEntry] = []
    directories: list[ArchiveEntry] = []
    for entry in entries:
        if entry.is_directory:
            directories.append(entry)
        else:
            files.append(entry)
    return files, directories


def build_tree_from_entries(entries: Iterable[ArchiveEntry]) -> DirectoryNode:
    """Assemble already-decoded entries into a tree.

    Directories are created shallowest first so every parent exists before
    its children; files are attached once all directories are in place.

    Args:
        entries: Normalized archive entries, in any order.

    Returns:
        The synthetic root directory.

    Raises:
        StructuralError: If an entry's parent directory was never listed.
        CollisionError: If two entries share a name under the same parent.
    """
    files, directories = _collect_entries(entries)
    root = DirectoryNode()

    for directory in sorted(directories, key=lambda entry: entry.depth):
        root.walk(directory.parent).add_directory(directory.name)

    for file in files:
        root.walk(file.parent).insert_leaf(file.name, file.content or "")

    return root


async def _read_all(
    files: list[tuple[str, DecodedEntry]], concurrency: int
) -> list[ArchiveEntry]:
    semaphore = asyncio.Semaphore(concurrency)

    async def _read(raw_path: str, entry: DecodedEntry) -> ArchiveEntry:
        async with semaphore:
            try:
                content = await entry.read_text()
            except ArchiveError:
                raise
            except Exception as exc:
                raise DecodeError(f"Could not read {raw_path}: {exc}") from exc
        return parse_entry(raw_path, is_directory=False, content=content)

    tasks = [asyncio.ensure_future(_read(raw_path, entry)) for raw_path, entry in files]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def build_tree(
    entries: Mapping[str, DecodedEntry], concurrency: int | None = None
) -> DirectoryNode:
    """Decode every file entry and build the source tree.

    File contents are read concurrently; the build completes only once all
    reads have settled. Any failure aborts the whole build.

    Args:
        entries: Mapping of raw archive path to decoder entry.
        concurrency: Upper bound on simultaneous reads. Defaults to the
            configured value.

    Returns:
        The synthetic root directory.

    Raises:
        DecodeError: If any file's text cannot be decoded.
        StructuralError: If an entry's parent directory was never listed.
        CollisionError: If two entries share a name under the same parent.
    """
    file_items: list[tuple[str, DecodedEntry]] = []
    directory_entries: list[ArchiveEntry] = []
    for raw_path, entry in entries.items():
        if entry.is_directory:
            directory_entries.append(parse_entry(raw_path, is_directory=True))
        else:
            file_items.append((raw_path, entry))

    logger.info(
        "Building source tree from %d files and %d directories",
        len(file_items),
        len(directory_entries),
    )

    file_entries = await _read_all(file_items, concurrency or get_decode_concurrency())

    try:
        return build_tree_from_entries([*directory_entries, *file_entries])
    except ArchiveError as exc:
        logger.warning("Rejected archive: %s", exc)
        raise
