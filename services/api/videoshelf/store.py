"""Flat-file metadata store with a single writer."""

import asyncio
import csv
import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from .config import get_settings
from .models import ContentType, MetadataRecord, positive_int_or_none
from .parser import derive_title

logger = logging.getLogger(__name__)

# Column order of the backing file
FIELDNAMES = ["type", "series", "filename", "title", "season", "episode", "customTitle"]
HEADER = ",".join(FIELDNAMES)


class MetadataStoreError(Exception):
    """Raised when the backing file cannot be read or written."""


def record_from_row(row: dict[str, Any]) -> MetadataRecord:
    """
    Build a record from a CSV row.

    Blank or invalid seasons become 1 and unknown types become movie; a
    blank episode stays None so listings can infer it.
    """
    type_value = (row.get("type") or "").strip()
    if type_value not in (ContentType.MOVIE.value, ContentType.EPISODE.value):
        type_value = ContentType.MOVIE.value

    filename = row.get("filename") or ""
    title = row.get("title") or ""
    return MetadataRecord(
        type=ContentType(type_value),
        series=row.get("series") or "",
        filename=filename,
        title=title,
        season=positive_int_or_none(row.get("season")) or 1,
        episode=positive_int_or_none(row.get("episode")),
        custom_title=row.get("customTitle") or "",
    )


def record_to_row(record: MetadataRecord) -> dict[str, Any]:
    """Flatten a record into CSV column order."""
    return {
        "type": record.type.value,
        "series": record.series,
        "filename": record.filename,
        "title": record.title,
        "season": record.season,
        "episode": record.episode if record.episode is not None else "",
        "customTitle": record.custom_title,
    }


class MetadataStore:
    """
    Metadata overrides keyed by filename, persisted as one CSV file.

    Every mutation is a full read-modify-write of the file. Mutations are
    serialized through one lock so two concurrent updates cannot drop each
    other's changes within a process.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    # Blocking file access

    def _read_sync(self) -> list[MetadataRecord]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                return [record_from_row(row) for row in reader]
        except (OSError, csv.Error, UnicodeDecodeError, ValidationError) as e:
            raise MetadataStoreError(f"Cannot read {self.path}: {e}") from e

    def _write_sync(self, records: list[MetadataRecord]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    writer = csv.DictWriter(f, fieldnames=FIELDNAMES, lineterminator="\n")
                    writer.writeheader()
                    for record in records:
                        writer.writerow(record_to_row(record))
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, csv.Error) as e:
            raise MetadataStoreError(f"Cannot write {self.path}: {e}") from e

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    # Public API

    def ensure_exists(self) -> None:
        """Create a header-only file if none exists yet."""
        if not self.path.exists():
            self._write_sync([])
            logger.info("Created metadata file %s", self.path)

    async def read_all(self) -> list[MetadataRecord]:
        """Load every record in file order; empty if the file is absent."""
        return await self._run(self._read_sync)

    async def write_all(self, records: Iterable[MetadataRecord]) -> None:
        """Overwrite the file with the given records, in order."""
        records = list(records)
        async with self._lock:
            await self._run(self._write_sync, records)

    async def lookup(self) -> dict[str, MetadataRecord]:
        """Map filename -> record. Later rows win on duplicate filenames."""
        return {record.filename: record for record in await self.read_all()}

    async def upsert(
        self,
        filename: str,
        fields: dict[str, Any],
        defaults: Optional[dict[str, Any]] = None,
    ) -> MetadataRecord:
        """
        Replace or insert the record for `filename`.

        `fields` is merged over the existing record field by field; the
        record keeps its position in the file. New records start from
        `defaults` and are appended.
        """
        async with self._lock:
            records = await self._run(self._read_sync)

            index: Optional[int] = None
            for i, record in enumerate(records):
                if record.filename == filename:
                    index = i

            if index is None:
                base: dict[str, Any] = {"title": derive_title(filename), **(defaults or {})}
            else:
                base = records[index].model_dump()

            merged = MetadataRecord(**{**base, **fields, "filename": filename})
            if index is None:
                records.append(merged)
            else:
                records[index] = merged

            await self._run(self._write_sync, records)

        logger.info("Stored metadata for %s", filename)
        return merged

    async def rename_series(self, old_name: str, new_name: str) -> int:
        """Point every record of series `old_name` at `new_name`."""
        async with self._lock:
            records = await self._run(self._read_sync)

            renamed = 0
            updated = []
            for record in records:
                if record.series == old_name:
                    record = record.model_copy(update={"series": new_name})
                    renamed += 1
                updated.append(record)

            await self._run(self._write_sync, updated)

        logger.info("Renamed series %r to %r (%d records)", old_name, new_name, renamed)
        return renamed

    async def replace_all(self, records: Iterable[MetadataRecord]) -> int:
        """Swap the whole store for `records`."""
        records = list(records)
        await self.write_all(records)
        logger.info("Replaced metadata store with %d records", len(records))
        return len(records)


@lru_cache
def get_store() -> MetadataStore:
    """Get the process-wide store for the configured metadata file."""
    return MetadataStore(get_settings().metadata_file)
