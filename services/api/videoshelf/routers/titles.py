"""Title editing API router."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ..models import (
    ContentTitleResult,
    ContentTitleUpdate,
    SeriesTitleResult,
    SeriesTitleUpdate,
)
from ..parser import derive_title, parse_episode_number
from ..store import MetadataStore, MetadataStoreError, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["titles"])


@router.put("/content/{filename}/title", response_model=ContentTitleResult)
async def update_content_title(
    filename: str,
    data: Optional[ContentTitleUpdate] = Body(None),
    store: MetadataStore = Depends(get_store),
) -> ContentTitleResult:
    """
    Set the custom title of a movie or episode.

    Optional fields given in the body are stored along with the title;
    fields left out keep their stored values.
    """
    if data is None or not data.custom_title:
        raise HTTPException(status_code=400, detail="Title is required")

    fields: dict[str, Any] = {
        "title": derive_title(filename),
        "custom_title": data.custom_title,
    }
    for name in ("type", "series", "season", "episode"):
        value = getattr(data, name)
        if value is not None:
            fields[name] = value

    defaults = {"episode": max(parse_episode_number(filename), 1)}

    try:
        await store.upsert(filename, fields, defaults)
    except MetadataStoreError:
        logger.exception("Error updating title for %s", filename)
        raise HTTPException(status_code=500, detail="Failed to update title")

    return ContentTitleResult(filename=filename, custom_title=data.custom_title)


@router.put("/series/{series_name}/title", response_model=SeriesTitleResult)
async def update_series_title(
    series_name: str,
    data: Optional[SeriesTitleUpdate] = Body(None),
    store: MetadataStore = Depends(get_store),
) -> SeriesTitleResult:
    """Rename a series in every stored record that belongs to it."""
    if data is None or not data.new_title:
        raise HTTPException(status_code=400, detail="New title is required")

    try:
        await store.rename_series(series_name, data.new_title)
    except MetadataStoreError:
        logger.exception("Error updating series title for %s", series_name)
        raise HTTPException(status_code=500, detail="Failed to update series title")

    return SeriesTitleResult(old_title=series_name, new_title=data.new_title)
