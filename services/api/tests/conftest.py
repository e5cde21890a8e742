"""Shared fixtures: a throwaway library on disk and a client bound to it."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from videoshelf.config import Settings, get_settings
from videoshelf.main import app
from videoshelf.store import MetadataStore, get_store


def touch(path: Path) -> Path:
    """Create an empty file, with its parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at an empty library under tmp_path."""
    videos = tmp_path / "videos"
    (videos / "movies").mkdir(parents=True)
    (videos / "series").mkdir(parents=True)
    return Settings(videos_dir=videos, metadata_file=tmp_path / "data" / "metadata.csv")


@pytest.fixture
def store(settings: Settings) -> MetadataStore:
    return MetadataStore(settings.metadata_file)


@pytest.fixture
def client(settings: Settings, store: MetadataStore):
    """Create test client wired to the temporary library."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
