"""Tests for locale directory discovery."""

from __future__ import annotations

from pathlib import Path

from i18n_server.locales.scanner import scan_locales_directory


def test_scan_discovers_languages_and_union_of_files(locales_root: Path):
    inventory = scan_locales_directory(locales_root)

    assert inventory.languages == ["en", "zh"]
    assert inventory.resource_files == ["common", "home"]


def test_scan_missing_root_returns_empty(tmp_path: Path):
    inventory = scan_locales_directory(tmp_path / "nope")

    assert inventory.languages == []
    assert inventory.resource_files == []


def test_scan_skips_directories_without_dictionaries(tmp_path: Path, make_dictionary):
    root = tmp_path / "locales"
    make_dictionary(root, "fr", "menu", {"open": "Ouvrir"})
    (root / "empty").mkdir()
    (root / "notes").mkdir()
    (root / "notes" / "readme.txt").write_text("not a dictionary", encoding="utf-8")
    (root / "stray.json").write_text("{}", encoding="utf-8")

    inventory = scan_locales_directory(root)

    assert inventory.languages == ["fr"]
    assert inventory.resource_files == ["menu"]


def test_scan_root_that_is_a_file_is_not_fatal(tmp_path: Path):
    root = tmp_path / "locales"
    root.write_text("oops", encoding="utf-8")

    inventory = scan_locales_directory(root)

    assert inventory.languages == []
