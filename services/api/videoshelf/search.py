"""Case-insensitive substring search over library items."""

from typing import Optional

from .models import Episode, Movie


def movie_search_text(movie: Movie) -> str:
    return " ".join([movie.custom_title, movie.title, movie.filename])


def episode_search_text(episode: Episode, season_scoped: bool = False) -> str:
    parts = [episode.custom_title, episode.title, episode.filename, episode.series]
    if season_scoped:
        parts.append(f"temporada {episode.season}")
    return " ".join(parts)


def matches(query: Optional[str], text: str) -> bool:
    """True when `query` is blank or occurs anywhere in `text`, ignoring case."""
    if not query:
        return True
    return query.lower() in text.lower()
