"""API router for metadata CSV export and import."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from ..models import ImportResult, MetadataRecord
from ..store import HEADER, MetadataStore, MetadataStoreError, get_store, record_from_row

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/metadata", tags=["metadata"])


def format_row(record: MetadataRecord) -> str:
    """Join a record's columns with bare commas (no quoting)."""
    return ",".join([
        record.type.value,
        record.series,
        record.filename,
        record.title,
        str(record.season),
        str(record.episode or ""),
        record.custom_title,
    ])


def parse_rows(content: str) -> list[MetadataRecord]:
    """
    Parse exported CSV text by splitting each line on commas.

    Blank lines are ignored, a leading header line is skipped, and rows
    without a filename or title are dropped. A blank episode imports as 1.
    Values containing commas shift the columns that follow them.
    """
    lines = [line.rstrip("\r") for line in content.split("\n") if line.strip()]
    if lines and lines[0].startswith(HEADER):
        lines = lines[1:]

    records = []
    for line in lines:
        values = line.split(",")
        values += [""] * (7 - len(values))
        type_, series, filename, title, season, episode, custom_title = values[:7]
        if not filename or not title:
            continue

        records.append(record_from_row({
            "type": type_,
            "series": series,
            "filename": filename,
            "title": title,
            "season": season,
            "episode": episode.strip() or "1",
            "customTitle": custom_title or title,
        }))
    return records


@router.get("/export")
async def export_metadata_csv(store: MetadataStore = Depends(get_store)):
    """Export every stored record as CSV."""
    try:
        records = await store.read_all()
    except MetadataStoreError:
        logger.exception("Error exporting metadata")
        raise HTTPException(status_code=500, detail="Failed to export metadata")

    lines = [HEADER] + [format_row(record) for record in records]

    return StreamingResponse(
        iter(["\n".join(lines)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=video_metadata.csv"}
    )


@router.post("/import", response_model=ImportResult)
async def import_metadata_csv(
    request: Request,
    store: MetadataStore = Depends(get_store),
) -> ImportResult:
    """Replace the whole store with the records of an uploaded CSV body."""
    body = await request.body()
    try:
        content = body.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV content must be UTF-8")

    if not content.strip():
        raise HTTPException(status_code=400, detail="CSV content is required")

    records = parse_rows(content)
    try:
        imported = await store.replace_all(records)
    except MetadataStoreError:
        logger.exception("Error importing metadata")
        raise HTTPException(status_code=500, detail="Failed to import metadata")

    return ImportResult(imported=imported)
