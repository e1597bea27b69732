"""Pydantic models and result types shared across the cache, services and web layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel


class TranslationRecord(BaseModel):
    """One key of one resource file, viewed across every known language."""

    id: int
    key: str
    file: str
    translations: dict[str, str]


class RecordFilter(BaseModel):
    search: str | None = None
    file: str | None = None
    key: str | None = None

    def matches(self, record: TranslationRecord) -> bool:
        if self.file and record.file != self.file:
            return False
        if self.key and record.key != self.key:
            return False
        if self.search:
            term = self.search.lower()
            if term in record.key.lower():
                return True
            return any(term in value.lower() for value in record.translations.values())
        return True


@dataclass(slots=True)
class LocaleInventory:
    languages: list[str] = field(default_factory=list)
    resource_files: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ResourceFileCreation:
    name: str
    created_count: int = 0
    errors: list[str] = field(default_factory=list)
    already_exists: bool = False


@dataclass(slots=True)
class CacheStatus:
    cache_size: int
    last_updated: datetime | None


@dataclass(slots=True)
class TranslationOutcome:
    results: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True)
class BatchItemResult:
    id: int
    key: str
    results: dict[str, str]


@dataclass(slots=True)
class BatchTranslationOutcome:
    successes: list[BatchItemResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


__all__ = [
    "BatchItemResult",
    "BatchTranslationOutcome",
    "CacheStatus",
    "LocaleInventory",
    "RecordFilter",
    "ResourceFileCreation",
    "TranslationOutcome",
    "TranslationRecord",
]
