from __future__ import annotations

import base64
from pathlib import Path
from types import ModuleType

import pytest

from source_tree_viewer.config import (
    DEFAULT_DECODE_CONCURRENCY,
    get_decode_concurrency,
    get_default_active_file,
    get_text_encoding,
)
from source_tree_viewer.models.tree import DecodeError
from source_tree_viewer.utils import prompt_for_zip_file, read_zip_as_base64


class TestConfig:
    def test_defaults(self) -> None:
        assert get_default_active_file() == "Cargo.toml"
        assert get_decode_concurrency() == DEFAULT_DECODE_CONCURRENCY
        assert get_text_encoding() == "utf-8"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCE_VIEWER_DEFAULT_FILE", "package.json")
        monkeypatch.setenv("SOURCE_VIEWER_DECODE_CONCURRENCY", "4")

        assert get_default_active_file() == "package.json"
        assert get_decode_concurrency() == 4

    def test_invalid_concurrency_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCE_VIEWER_DECODE_CONCURRENCY", "lots")
        assert get_decode_concurrency() == DEFAULT_DECODE_CONCURRENCY

    def test_concurrency_is_at_least_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCE_VIEWER_DECODE_CONCURRENCY", "0")
        assert get_decode_concurrency() == 1


class TestReadZip:
    def test_reads_zip_as_base64(self, rust_zip_path: Path) -> None:
        encoded = read_zip_as_base64(rust_zip_path)
        assert base64.b64decode(encoded) == rust_zip_path.read_bytes()

    def test_wrong_extension_raises(self, tmp_path: Path) -> None:
        bad_path = tmp_path / "not_a_zip.txt"
        bad_path.write_text("content", encoding="utf-8")

        with pytest.raises(DecodeError):
            read_zip_as_base64(bad_path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DecodeError):
            read_zip_as_base64(tmp_path / "missing.zip")


class TestPromptForZip:
    @pytest.fixture
    def easygui(self) -> ModuleType:
        return pytest.importorskip("easygui")

    def test_returns_selected_path(
        self, monkeypatch: pytest.MonkeyPatch, easygui: ModuleType
    ) -> None:
        monkeypatch.setattr(easygui, "fileopenbox", lambda **_: "/tmp/source.zip")
        assert prompt_for_zip_file() == Path("/tmp/source.zip")

    def test_cancelled_dialog(self, monkeypatch: pytest.MonkeyPatch, easygui: ModuleType) -> None:
        monkeypatch.setattr(easygui, "fileopenbox", lambda **_: None)
        assert prompt_for_zip_file() is None
