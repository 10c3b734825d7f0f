"""Environment-driven settings for the viewer."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_FILE = "Cargo.toml"
DEFAULT_DECODE_CONCURRENCY = 16
DEFAULT_TEXT_ENCODING = "utf-8"


def get_default_active_file() -> str:
    """Return the file pre-selected once a tree is built (looked up at the archive root)."""
    return os.getenv("SOURCE_VIEWER_DEFAULT_FILE") or DEFAULT_ACTIVE_FILE


def get_decode_concurrency() -> int:
    """Return the maximum number of entries decoded at the same time."""
    raw = os.getenv("SOURCE_VIEWER_DECODE_CONCURRENCY")
    if not raw:
        return DEFAULT_DECODE_CONCURRENCY
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric SOURCE_VIEWER_DECODE_CONCURRENCY=%r", raw)
        return DEFAULT_DECODE_CONCURRENCY
    return max(1, value)


def get_text_encoding() -> str:
    """Return the codec used to turn entry bytes into text."""
    return os.getenv("SOURCE_VIEWER_TEXT_ENCODING") or DEFAULT_TEXT_ENCODING
