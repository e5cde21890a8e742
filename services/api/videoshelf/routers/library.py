"""Library listing API router."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..config import Settings, get_settings
from ..models import MovieList, SeriesList
from ..scanner import scan_movies, scan_series
from ..store import MetadataStore, MetadataStoreError, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["library"])


@router.get("/movies", response_model=MovieList)
async def list_movies(
    search: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    store: MetadataStore = Depends(get_store),
) -> MovieList:
    """List movies, optionally narrowed by a search term."""
    try:
        metadata = await store.lookup()
    except MetadataStoreError:
        logger.exception("Error reading movies")
        raise HTTPException(status_code=500, detail="Failed to read movies")

    movies = scan_movies(settings.movies_path, settings.extensions, metadata, search)
    return MovieList(movies=movies, total=len(movies))


@router.get("/series", response_model=SeriesList)
async def list_series(
    search: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    store: MetadataStore = Depends(get_store),
) -> SeriesList:
    """List series grouped by season, optionally narrowed by a search term."""
    try:
        metadata = await store.lookup()
    except MetadataStoreError:
        logger.exception("Error reading series")
        raise HTTPException(status_code=500, detail="Failed to read series")

    series = scan_series(settings.series_path, settings.extensions, metadata, search)
    return SeriesList(series=series, total_series=len(series))
