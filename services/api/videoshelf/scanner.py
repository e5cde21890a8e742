"""Library scanner: lists movies and series from the videos tree."""

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Mapping, Optional
from urllib.parse import quote

from .models import Episode, MetadataRecord, Movie, SeriesEntry
from .parser import (
    derive_title,
    get_extension,
    is_video_file,
    parse_episode_number,
    parse_season_number,
)
from .search import episode_search_text, matches, movie_search_text

logger = logging.getLogger(__name__)

MOVIES_URL = "/videos/movies"
SERIES_URL = "/videos/series"


def list_video_files(directory: Path, extensions: Iterable[str]) -> list[str]:
    """Playable files directly inside `directory`, sorted by name."""
    extensions = frozenset(extensions)
    with os.scandir(directory) as entries:
        return sorted(
            entry.name for entry in entries
            if entry.is_file() and is_video_file(entry.name, extensions)
        )


def list_subdirectories(directory: Path) -> list[str]:
    """Immediate subdirectories of `directory`, sorted by name."""
    with os.scandir(directory) as entries:
        return sorted(entry.name for entry in entries if entry.is_dir())


def url_path(base: str, *parts: str) -> str:
    """Join URL-encoded path segments onto `base`, keeping !'()*~ literal."""
    return "/".join([base, *(quote(part, safe="!'()*~") for part in parts)])


def build_movie(filename: str, meta: Optional[MetadataRecord]) -> Movie:
    """Movie for `filename`, with stored titles over the derived one."""
    derived = derive_title(filename)
    stored_title = meta.title if meta else ""
    stored_custom = meta.custom_title if meta else ""
    return Movie(
        filename=filename,
        path=url_path(MOVIES_URL, filename),
        title=stored_title or derived,
        custom_title=stored_custom or stored_title or derived,
        original_format=get_extension(filename),
    )


def build_episode(
    series_name: str,
    season: int,
    filename: str,
    path: str,
    meta: Optional[MetadataRecord],
) -> Episode:
    """Episode for `filename`; stored titles and episode number win when set."""
    derived = derive_title(filename)
    stored_title = meta.title if meta else ""
    stored_custom = meta.custom_title if meta else ""
    return Episode(
        series=series_name,
        filename=filename,
        path=path,
        title=stored_title or derived,
        custom_title=stored_custom or stored_title or derived,
        season=season,
        episode=(meta.episode if meta else None) or parse_episode_number(filename),
        original_format=get_extension(filename),
    )


def scan_movies(
    movies_dir: Path,
    extensions: Iterable[str],
    metadata: Mapping[str, MetadataRecord],
    search: Optional[str] = None,
) -> list[Movie]:
    """List movies under `movies_dir`, merged with stored metadata."""
    movies_dir = Path(movies_dir)
    if not movies_dir.is_dir():
        return []

    try:
        filenames = list_video_files(movies_dir, extensions)
    except OSError as e:
        logger.error("Error reading movies directory %s: %s", movies_dir, e)
        return []

    movies = []
    for filename in filenames:
        movie = build_movie(filename, metadata.get(filename))
        if matches(search, movie_search_text(movie)):
            movies.append(movie)
    return movies


def scan_series_folder(
    series_dir: Path,
    series_name: str,
    extensions: frozenset[str],
    metadata: Mapping[str, MetadataRecord],
    search: Optional[str] = None,
) -> dict[int, list[Episode]]:
    """
    Collect the episodes of one series, keyed by season number.

    Season folders are parsed for their number; a series without any
    subdirectory is a single season 1. Empty seasons are left out.
    """
    # Series are not pre-filtered by name: one matching episode keeps its
    # series listed, and the series name is in every episode's search text.
    seasons: dict[int, list[Episode]] = defaultdict(list)
    season_folders = list_subdirectories(series_dir)

    if not season_folders:
        for filename in list_video_files(series_dir, extensions):
            path = url_path(SERIES_URL, series_name, filename)
            episode = build_episode(series_name, 1, filename, path, metadata.get(filename))
            if matches(search, episode_search_text(episode)):
                seasons[1].append(episode)
    else:
        for folder in season_folders:
            season = parse_season_number(folder)
            for filename in list_video_files(series_dir / folder, extensions):
                path = url_path(SERIES_URL, series_name, folder, filename)
                episode = build_episode(series_name, season, filename, path, metadata.get(filename))
                if matches(search, episode_search_text(episode, season_scoped=True)):
                    seasons[season].append(episode)

    for episodes in seasons.values():
        episodes.sort(key=lambda e: (e.episode, e.filename))

    return {season: seasons[season] for season in sorted(seasons) if seasons[season]}


def scan_series(
    series_root: Path,
    extensions: Iterable[str],
    metadata: Mapping[str, MetadataRecord],
    search: Optional[str] = None,
) -> dict[str, SeriesEntry]:
    """List every series with at least one episode under `series_root`."""
    series_root = Path(series_root)
    extensions = frozenset(extensions)
    if not series_root.is_dir():
        return {}

    try:
        series_names = list_subdirectories(series_root)
    except OSError as e:
        logger.error("Error reading series directory %s: %s", series_root, e)
        return {}

    series: dict[str, SeriesEntry] = {}
    for name in series_names:
        try:
            seasons = scan_series_folder(series_root / name, name, extensions, metadata, search)
        except OSError as e:
            logger.error("Error reading series folder %r: %s", name, e)
            continue

        total = sum(len(episodes) for episodes in seasons.values())
        if total > 0:
            series[name] = SeriesEntry(name=name, seasons=seasons, total_episodes=total)

    return series

