"""Archive decoding: base64 zip data to a mapping of entry path to entry handle."""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import zlib
from collections.abc import Mapping
from typing import Protocol
from zipfile import BadZipFile, ZipFile, ZipInfo

from source_tree_viewer.config import get_text_encoding
from source_tree_viewer.models.tree import CollisionError, DecodeError

logger = logging.getLogger(__name__)


class DecodedEntry(Protocol):
    """One archive member as exposed by a decoder."""

    @property
    def is_directory(self) -> bool: ...

    async def read_text(self) -> str: ...


class ArchiveDecoder(Protocol):
    """Turns base64 archive data into a mapping of raw entry path to entry."""

    async def decode(self, zip_data: str) -> Mapping[str, DecodedEntry]: ...


class ZipEntry:
    """A member of an opened zip archive whose text is read on demand."""

    def __init__(self, archive: ZipFile, info: ZipInfo, encoding: str) -> None:
        self._archive = archive
        self._info = info
        self._encoding = encoding

    @property
    def name(self) -> str:
        return self._info.filename

    @property
    def is_directory(self) -> bool:
        return self._info.is_dir()

    def _read(self) -> str:
        try:
            data = self._archive.read(self._info)
        except (BadZipFile, RuntimeError, NotImplementedError, OSError, zlib.error) as exc:
            raise DecodeError(f"Could not read {self.name} from the archive") from exc
        try:
            return data.decode(self._encoding)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"{self.name} is not {self._encoding} text") from exc

    async def read_text(self) -> str:
        if self.is_directory:
            raise DecodeError(f"{self.name} is a directory and has no text")
        return await asyncio.to_thread(self._read)

    def __repr__(self) -> str:
        kind = "dir" if self.is_directory else "file"
        return f"ZipEntry({self.name!r}, {kind})"


def _decode_base64(zip_data: str) -> bytes:
    try:
        return base64.b64decode(zip_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Source archive is not valid base64 data") from exc


def open_zip(raw: bytes) -> ZipFile:
    """Open zip bytes held in memory.

    Args:
        raw: Complete archive bytes.

    Returns:
        An open ``ZipFile`` reading from an in-memory buffer.

    Raises:
        DecodeError: If the bytes are not a valid ZIP archive.
    """
    try:
        return ZipFile(io.BytesIO(raw))
    except (BadZipFile, OSError) as exc:
        raise DecodeError("Source archive is not a valid ZIP archive") from exc


class ZipArchiveDecoder:
    """Decoder for base64-encoded zip archives backed by :mod:`zipfile`."""

    def __init__(self, encoding: str | None = None) -> None:
        self.encoding = encoding or get_text_encoding()

    async def decode(self, zip_data: str) -> dict[str, ZipEntry]:
        archive = open_zip(_decode_base64(zip_data))
        entries: dict[str, ZipEntry] = {}
        for info in archive.infolist():
            if info.filename in entries:
                archive.close()
                raise CollisionError(info.filename.rstrip("/"))
            entries[info.filename] = ZipEntry(archive, info, self.encoding)
        logger.debug("Decoded archive listing with %d entries", len(entries))
        return entries
