"""Discover languages and resource files from a locale directory tree."""

from __future__ import annotations

from pathlib import Path

from i18n_server.domain.models import LocaleInventory
from i18n_server.logging import logger

DICTIONARY_SUFFIX = ".json"


def scan_locales_directory(locales_path: str | Path) -> LocaleInventory:
    """Return the languages (one per subdirectory) and the union of file stems.

    A subdirectory counts as a language only when it holds at least one
    dictionary file. Languages keep directory listing order (sorted by name);
    resource files are sorted lexicographically.
    """

    root = Path(locales_path)
    if not root.exists():
        logger.warning("locales_path_missing", path=str(root))
        return LocaleInventory()

    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.error("locales_scan_failed", path=str(root), error=str(exc))
        return LocaleInventory()

    languages: list[str] = []
    resource_files: set[str] = set()
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            stems = [
                candidate.stem
                for candidate in entry.iterdir()
                if candidate.suffix == DICTIONARY_SUFFIX and candidate.is_file()
            ]
        except OSError as exc:
            logger.warning("language_directory_unreadable", path=str(entry), error=str(exc))
            continue
        if not stems:
            continue
        languages.append(entry.name)
        resource_files.update(stems)

    inventory = LocaleInventory(languages=languages, resource_files=sorted(resource_files))
    logger.info(
        "locales_discovered",
        path=str(root),
        languages=inventory.languages,
        files=inventory.resource_files,
    )
    return inventory


__all__ = ["DICTIONARY_SUFFIX", "scan_locales_directory"]
