"""Time utilities with timezone-aware defaults."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time with tzinfo."""

    return datetime.now(timezone.utc)


def export_timestamp(moment: datetime | None = None) -> str:
    """Filesystem-safe ISO timestamp, e.g. ``2026-10-17T09-30-00-123Z``."""

    moment = moment or utc_now()
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z").replace(":", "-").replace(".", "-")


__all__ = ["export_timestamp", "utc_now"]
