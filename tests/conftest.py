from __future__ import annotations

import asyncio
import base64
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest
from fakes import RUST_PROJECT, create_zip_bytes

import source_tree_viewer.api.dependencies as api_dependencies

ZipDataFactory = Callable[[Iterable[tuple[str, str | bytes]]], str]


@pytest.fixture
def zip_data_factory() -> ZipDataFactory:
    """Return a helper turning zip entries into the base64 payload the viewer consumes."""

    def _factory(entries: Iterable[tuple[str, str | bytes]]) -> str:
        return base64.b64encode(create_zip_bytes(entries)).decode("ascii")

    return _factory


@pytest.fixture
def rust_zip_data(zip_data_factory: ZipDataFactory) -> str:
    return zip_data_factory(RUST_PROJECT)


@pytest.fixture
def rust_zip_path(tmp_path: Path) -> Path:
    zip_path = tmp_path / "contract.zip"
    zip_path.write_bytes(create_zip_bytes(RUST_PROJECT))
    return zip_path


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep viewer settings independent of the developer's environment."""
    for name in (
        "SOURCE_VIEWER_DEFAULT_FILE",
        "SOURCE_VIEWER_DECODE_CONCURRENCY",
        "SOURCE_VIEWER_TEXT_ENCODING",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def viewer_session_reset(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give each test a fresh shared viewer session and close it afterwards."""
    monkeypatch.setattr(api_dependencies, "_viewer_session", None)
    yield
    asyncio.run(api_dependencies.reset_viewer_session())
