"""Configuration management with safe defaults."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


DEFAULT_VIDEO_EXTENSIONS = [".mp4", ".webm", ".ogg", ".mov", ".avi", ".mkv"]


class Settings(BaseSettings):
    """Application settings, overridable from the environment or `.env`."""

    # Library layout
    videos_dir: Path = Path("videos")
    movies_dir: Optional[Path] = None
    series_dir: Optional[Path] = None

    # Metadata store
    metadata_file: Path = Path("data") / "metadata.csv"

    # Playable extensions (compared lower-cased, with the leading dot)
    video_extensions: list[str] = DEFAULT_VIDEO_EXTENSIONS

    # API settings
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Logging
    log_level: str = "info"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def movies_path(self) -> Path:
        return self.movies_dir or self.videos_dir / "movies"

    @property
    def series_path(self) -> Path:
        return self.series_dir or self.videos_dir / "series"

    @property
    def extensions(self) -> frozenset[str]:
        """Normalized extension whitelist."""
        return frozenset(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.video_extensions
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
