"""Tests for RulesStore."""

from pathlib import Path

import pytest

from taskgraph.core.exceptions import AppError
from taskgraph.services.rules_store import (
    InvalidRulesNameError,
    RulesFileNotFoundError,
    RulesStore,
    RulesStoreError,
)


class TestSaveAndLoad:
    """Tests for saving and loading rule files."""

    def test_save_creates_directory(self, rules_store: RulesStore) -> None:
        path = rules_store.save("build", "A -> B")
        assert path == rules_store.base_dir / "build"
        assert path.read_text(encoding="utf-8") == "A -> B"

    def test_load_returns_saved_text(self, rules_store: RulesStore) -> None:
        text = "# pipeline\r\nFetch -> Compile\n\nCompile -> Test\n"
        rules_store.save("pipeline.rules", text)
        assert rules_store.load("pipeline.rules") == text

    @pytest.mark.parametrize("text", ["A -> B\r\nB -> C\r\n", "A -> B\rB -> C", "A -> B\n"])
    def test_line_endings_preserved(self, rules_store: RulesStore, text: str) -> None:
        path = rules_store.save("endings", text)
        assert path.read_bytes() == text.encode("utf-8")
        assert rules_store.load("endings") == text

    def test_save_overwrites(self, rules_store: RulesStore) -> None:
        rules_store.save("build", "A -> B")
        rules_store.save("build", "C -> D")
        assert rules_store.load("build") == "C -> D"

    def test_unicode_round_trip(self, rules_store: RulesStore) -> None:
        rules_store.save("intl", "Größe -> Ünïcode")
        assert rules_store.load("intl") == "Größe -> Ünïcode"

    def test_load_missing_file(self, rules_store: RulesStore) -> None:
        with pytest.raises(RulesFileNotFoundError) as exc_info:
            rules_store.load("missing")
        assert exc_info.value.error_code == "RULES_FILE_NOT_FOUND"
        assert exc_info.value.details == {"name": "missing"}
        assert "File not found" in str(exc_info.value)

    def test_exists(self, rules_store: RulesStore) -> None:
        assert not rules_store.exists("build")
        rules_store.save("build", "")
        assert rules_store.exists("build")

    def test_default_base_dir_from_settings(self) -> None:
        assert RulesStore().base_dir == Path("rules")


class TestNames:
    """Tests for name validation and listing."""

    @pytest.mark.parametrize(
        "name",
        [
            "../escape",
            "nested/name",
            ".hidden",
            "",
            "with space",
            "..",
            "a\\b",
            "evil\n",
            "x\ny",
        ],
    )
    def test_unsafe_names_rejected(self, rules_store: RulesStore, name: str) -> None:
        with pytest.raises(InvalidRulesNameError):
            rules_store.save(name, "A -> B")
        with pytest.raises(InvalidRulesNameError):
            rules_store.load(name)

    def test_list_names_when_directory_missing(self, rules_store: RulesStore) -> None:
        assert rules_store.list_names() == []

    def test_list_names_sorted(self, rules_store: RulesStore) -> None:
        rules_store.save("zeta", "")
        rules_store.save("alpha", "")
        (rules_store.base_dir / "subdir").mkdir()
        assert rules_store.list_names() == ["alpha", "zeta"]

    def test_list_names_skips_unsafe_files(self, rules_store: RulesStore) -> None:
        rules_store.save("good", "")
        (rules_store.base_dir / "evil\n").write_text("A -> B", encoding="utf-8")
        (rules_store.base_dir / ".hidden").write_text("", encoding="utf-8")
        assert rules_store.list_names() == ["good"]

    def test_error_hierarchy(self) -> None:
        assert issubclass(RulesFileNotFoundError, RulesStoreError)
        assert issubclass(InvalidRulesNameError, RulesStoreError)
        assert issubclass(RulesStoreError, AppError)
