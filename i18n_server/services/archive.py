"""Zip export of the whole locale tree."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Iterator

from i18n_server.logging import logger
from i18n_server.services.exceptions import LocalesNotFound
from i18n_server.utils.datetime import export_timestamp

ARCHIVE_PREFIX = "locales"


class _ChunkSink(io.RawIOBase):
    """Unseekable write target; zipfile emits data descriptors and never seeks back."""

    def __init__(self) -> None:
        self._pending: list[bytes] = []

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._pending.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        chunk = b"".join(self._pending)
        self._pending.clear()
        return chunk


def export_filename() -> str:
    return f"locales-export-{export_timestamp()}.zip"


def stream_locales_archive(locales_path: str | Path) -> Iterator[bytes]:
    """Yield the zip one member at a time.

    The locale root is checked eagerly, before any bytes are produced.
    """

    root = Path(locales_path)
    if not root.is_dir():
        raise LocalesNotFound("Locales folder not found")
    return _iter_archive(root)


def _iter_archive(root: Path) -> Iterator[bytes]:
    sink = _ChunkSink()
    size = 0
    with zipfile.ZipFile(sink, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            archive.write(path, arcname=f"{ARCHIVE_PREFIX}/{path.relative_to(root).as_posix()}")
            chunk = sink.drain()
            if chunk:
                size += len(chunk)
                yield chunk
    tail = sink.drain()
    if tail:
        size += len(tail)
        yield tail
    logger.info("locales_exported", path=str(root), size_bytes=size)


def build_locales_archive(locales_path: str | Path) -> bytes:
    return b"".join(stream_locales_archive(locales_path))


__all__ = ["ARCHIVE_PREFIX", "build_locales_archive", "export_filename", "stream_locales_archive"]
