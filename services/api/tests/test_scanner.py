"""Tests for library scanning and search."""

from pathlib import Path

from conftest import touch
from videoshelf.models import ContentType, MetadataRecord
from videoshelf.scanner import scan_movies, scan_series

VIDEO_EXTENSIONS = {".mp4", ".webm", ".ogg", ".mov", ".avi", ".mkv"}


def episode_record(filename: str, **fields) -> MetadataRecord:
    return MetadataRecord(
        type=ContentType.EPISODE,
        filename=filename,
        title=fields.pop("title", filename.rsplit(".", 1)[0]),
        **fields,
    )


def test_scan_movies_filters_extensions(tmp_path: Path) -> None:
    """Only whitelisted files directly under the root are movies."""
    touch(tmp_path / "Inception.2010.mkv")
    touch(tmp_path / "Notes.txt")
    touch(tmp_path / "UPPER.MP4")
    touch(tmp_path / "nested" / "Hidden.mkv")

    movies = scan_movies(tmp_path, VIDEO_EXTENSIONS, {})
    assert [m.filename for m in movies] == ["Inception.2010.mkv", "UPPER.MP4"]
    assert movies[1].original_format == ".mp4"


def test_scan_movies_missing_root(tmp_path: Path) -> None:
    """A missing movies folder is an empty listing."""
    assert scan_movies(tmp_path / "nope", VIDEO_EXTENSIONS, {}) == []


def test_scan_movies_title_fallbacks(tmp_path: Path) -> None:
    """customTitle falls back to the stored title, then the filename."""
    touch(tmp_path / "a.mkv")
    touch(tmp_path / "b.mkv")
    touch(tmp_path / "c d.mkv")
    metadata = {
        "a.mkv": MetadataRecord(filename="a.mkv", title="Stored A", custom_title="Custom A"),
        "b.mkv": MetadataRecord(filename="b.mkv", title="Stored B"),
    }

    movies = {m.filename: m for m in scan_movies(tmp_path, VIDEO_EXTENSIONS, metadata)}
    assert movies["a.mkv"].title == "Stored A"
    assert movies["a.mkv"].custom_title == "Custom A"
    assert movies["b.mkv"].custom_title == "Stored B"
    assert movies["c d.mkv"].title == "c d"
    assert movies["c d.mkv"].path == "/videos/movies/c%20d.mkv"


def test_scan_movies_search(tmp_path: Path) -> None:
    """Search matches custom titles case-insensitively."""
    touch(tmp_path / "first.mkv")
    touch(tmp_path / "second.mkv")
    metadata = {
        "second.mkv": MetadataRecord(filename="second.mkv", title="second", custom_title="El Padrino"),
    }

    movies = scan_movies(tmp_path, VIDEO_EXTENSIONS, metadata, search="PADRINO")
    assert [m.filename for m in movies] == ["second.mkv"]


def test_scan_series_season_folders(tmp_path: Path) -> None:
    """Season folders are parsed and episodes sorted by number."""
    touch(tmp_path / "Show" / "Temporada 2" / "Show.S02E01.Something.mkv")
    touch(tmp_path / "Show" / "Season 1" / "Episode 10.mkv")
    touch(tmp_path / "Show" / "Season 1" / "Episode 9.mkv")
    touch(tmp_path / "Show" / "Season 1" / "cover.jpg")

    series = scan_series(tmp_path, VIDEO_EXTENSIONS, {})
    show = series["Show"]
    assert show.total_episodes == 3
    assert sorted(show.seasons) == [1, 2]
    assert [e.episode for e in show.seasons[1]] == [9, 10]

    episode = show.seasons[2][0]
    assert episode.season == 2
    assert episode.episode == 2
    assert episode.path == "/videos/series/Show/Temporada%202/Show.S02E01.Something.mkv"


def test_scan_series_flat_folder_is_season_one(tmp_path: Path) -> None:
    """A series without subfolders is a single season 1."""
    touch(tmp_path / "Mini" / "Part 2.mp4")
    touch(tmp_path / "Mini" / "Part 1.mp4")

    mini = scan_series(tmp_path, VIDEO_EXTENSIONS, {})["Mini"]
    assert list(mini.seasons) == [1]
    assert [e.filename for e in mini.seasons[1]] == ["Part 1.mp4", "Part 2.mp4"]
    assert mini.seasons[1][0].path == "/videos/series/Mini/Part%201.mp4"


def test_scan_series_skips_empty(tmp_path: Path) -> None:
    """Series and seasons without episodes are not listed."""
    (tmp_path / "Empty" / "Season 1").mkdir(parents=True)
    touch(tmp_path / "Docs" / "readme.txt")
    touch(tmp_path / "Half" / "Season 1" / "e1.mkv")
    (tmp_path / "Half" / "Season 2").mkdir()

    series = scan_series(tmp_path, VIDEO_EXTENSIONS, {})
    assert list(series) == ["Half"]
    assert list(series["Half"].seasons) == [1]


def test_scan_series_stored_episode_wins(tmp_path: Path) -> None:
    """Stored episode numbers and titles override inference."""
    touch(tmp_path / "Show" / "Season 1" / "Show 1080p.mkv")
    metadata = {"Show 1080p.mkv": episode_record("Show 1080p.mkv", episode=4, custom_title="Cuatro")}

    episode = scan_series(tmp_path, VIDEO_EXTENSIONS, metadata)["Show"].seasons[1][0]
    assert episode.episode == 4
    assert episode.custom_title == "Cuatro"


def test_scan_series_unreadable_folder(tmp_path: Path, monkeypatch) -> None:
    """A series folder that fails to list contributes nothing."""
    import videoshelf.scanner as scanner

    touch(tmp_path / "Good" / "e1.mkv")
    touch(tmp_path / "Bad" / "e1.mkv")
    original = scanner.list_subdirectories

    def failing(directory: Path) -> list[str]:
        if Path(directory).name == "Bad":
            raise PermissionError("denied")
        return original(directory)

    monkeypatch.setattr(scanner, "list_subdirectories", failing)
    assert list(scan_series(tmp_path, VIDEO_EXTENSIONS, {})) == ["Good"]


def test_scan_series_search(tmp_path: Path) -> None:
    """Search covers series names and the season label."""
    touch(tmp_path / "Dark" / "Temporada 1" / "e1.mkv")
    touch(tmp_path / "Dark" / "Temporada 2" / "e1b.mkv")
    touch(tmp_path / "Lost" / "Season 1" / "pilot.mkv")

    by_name = scan_series(tmp_path, VIDEO_EXTENSIONS, {}, search="dark")
    assert list(by_name) == ["Dark"]
    assert by_name["Dark"].total_episodes == 2

    by_season = scan_series(tmp_path, VIDEO_EXTENSIONS, {}, search="temporada 2")
    assert list(by_season) == ["Dark"]
    assert list(by_season["Dark"].seasons) == [2]


def test_scan_series_blank_stored_episode_is_inferred(tmp_path: Path) -> None:
    """A stored record without an episode number falls back to the filename."""
    touch(tmp_path / "Show" / "Season 1" / "Show.E07.mkv")
    metadata = {"Show.E07.mkv": episode_record("Show.E07.mkv", series="Show", custom_title="Custom")}

    episode = scan_series(tmp_path, VIDEO_EXTENSIONS, metadata)["Show"].seasons[1][0]
    assert episode.episode == 7
    assert episode.custom_title == "Custom"


def test_scan_series_ties_sort_by_filename(tmp_path: Path) -> None:
    """Episodes sharing a number are ordered by filename."""
    touch(tmp_path / "Show" / "Season 1" / "b 3.mkv")
    touch(tmp_path / "Show" / "Season 1" / "a 3.mkv")
    touch(tmp_path / "Show" / "Season 1" / "c 1.mkv")

    episodes = scan_series(tmp_path, VIDEO_EXTENSIONS, {})["Show"].seasons[1]
    assert [e.filename for e in episodes] == ["c 1.mkv", "a 3.mkv", "b 3.mkv"]


def test_scan_series_merges_folders_with_same_season(tmp_path: Path) -> None:
    """Folders resolving to one season number share a single season."""
    touch(tmp_path / "Show" / "Season 1" / "e2.mkv")
    touch(tmp_path / "Show" / "S1" / "e1.mkv")

    show = scan_series(tmp_path, VIDEO_EXTENSIONS, {})["Show"]
    assert list(show.seasons) == [1]
    assert [e.filename for e in show.seasons[1]] == ["e1.mkv", "e2.mkv"]
    assert show.total_episodes == 2


def test_scan_series_search_by_episode_title_only(tmp_path: Path) -> None:
    """An episode title match lists its series even if the name does not match."""
    touch(tmp_path / "Lost" / "Season 1" / "pilot.mkv")
    touch(tmp_path / "Lost" / "Season 1" / "e2.mkv")

    series = scan_series(tmp_path, VIDEO_EXTENSIONS, {}, search="pilot")
    assert list(series) == ["Lost"]
    assert [e.filename for e in series["Lost"].seasons[1]] == ["pilot.mkv"]


def test_paths_keep_uri_component_characters(tmp_path: Path) -> None:
    """Parentheses and similar marks are not percent-encoded."""
    touch(tmp_path / "Movie (2010)!.mkv")

    movie = scan_movies(tmp_path, VIDEO_EXTENSIONS, {})[0]
    assert movie.path == "/videos/movies/Movie%20(2010)!.mkv"
