"""Pydantic models for API request/response and stored metadata."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)


def positive_int_or_none(value: Any) -> Optional[int]:
    """Integer >= 1 parsed from `value`, or None when blank or invalid."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


# Enums
class ContentType(str, Enum):
    MOVIE = "movie"
    EPISODE = "episode"


# Metadata store
class MetadataRecord(CamelModel):
    type: ContentType = ContentType.MOVIE
    series: str = ""
    filename: str
    title: str
    season: int = Field(1, ge=1)
    # None when the column is blank; listings then infer it from the filename
    episode: Optional[int] = Field(None, ge=1)
    custom_title: str = Field("", alias="customTitle")


# Library models
class Movie(CamelModel):
    type: ContentType = ContentType.MOVIE
    filename: str
    path: str
    title: str
    custom_title: str = Field(..., alias="customTitle")
    original_format: str = Field(..., alias="originalFormat")


class Episode(CamelModel):
    type: ContentType = ContentType.EPISODE
    series: str
    filename: str
    path: str
    title: str
    custom_title: str = Field(..., alias="customTitle")
    season: int
    episode: int
    original_format: str = Field(..., alias="originalFormat")


class SeriesEntry(CamelModel):
    name: str
    seasons: dict[int, list[Episode]]
    total_episodes: int = Field(..., alias="totalEpisodes")


class MovieList(BaseModel):
    movies: list[Movie]
    total: int


class SeriesList(CamelModel):
    series: dict[str, SeriesEntry]
    total_series: int = Field(..., alias="totalSeries")


# Title updates
def _text_or_none(value: Any) -> Optional[str]:
    if not value or isinstance(value, (dict, list)):
        return None
    return str(value)


class ContentTitleUpdate(CamelModel):
    """
    Body of a content title update.

    Values are coerced rather than rejected: an unusable season, episode or
    type counts as not given, so only a missing title fails the request.
    """

    custom_title: Optional[str] = Field(None, alias="customTitle")
    type: Optional[ContentType] = None
    series: Optional[str] = None
    season: Optional[int] = None
    episode: Optional[int] = None

    @field_validator("custom_title", mode="before")
    @classmethod
    def clean_title(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)

    @field_validator("series", mode="before")
    @classmethod
    def clean_series(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, (dict, list)):
            return None
        return str(value)

    @field_validator("type", mode="before")
    @classmethod
    def clean_type(cls, value: Any) -> Optional[str]:
        return value if value in (ContentType.MOVIE.value, ContentType.EPISODE.value) else None

    @field_validator("season", "episode", mode="before")
    @classmethod
    def clean_number(cls, value: Any) -> Optional[int]:
        return positive_int_or_none(value)


class ContentTitleResult(CamelModel):
    success: bool = True
    filename: str
    custom_title: str = Field(..., alias="customTitle")


class SeriesTitleUpdate(CamelModel):
    new_title: Optional[str] = Field(None, alias="newTitle")

    @field_validator("new_title", mode="before")
    @classmethod
    def clean_title(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)


class SeriesTitleResult(CamelModel):
    success: bool = True
    old_title: str = Field(..., alias="oldTitle")
    new_title: str = Field(..., alias="newTitle")


# Import
class ImportResult(BaseModel):
    success: bool = True
    imported: int
