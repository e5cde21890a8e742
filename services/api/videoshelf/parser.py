"""Season/episode inference from folder names and filenames."""

import re
from typing import Iterable


# Season folder patterns (order matters - first match wins)
SEASON_PATTERNS = [
    # Temporada 2, Temporada.2
    re.compile(r'Temporada[\s.]*(\d+)', re.IGNORECASE),
    # Temp 2, Temp.2
    re.compile(r'Temp[\s.]*(\d+)', re.IGNORECASE),
    # Season 2
    re.compile(r'Season[\s.]*(\d+)', re.IGNORECASE),
    # S2, S 02
    re.compile(r'S[\s.]*(\d+)', re.IGNORECASE),
    # T2
    re.compile(r'T[\s.]*(\d+)', re.IGNORECASE),
    # Any digits at all
    re.compile(r'(\d+)'),
]

DIGIT_RUN = re.compile(r'\d+')

DEFAULT_SEASON = 1
DEFAULT_EPISODE = 1


def parse_season_number(folder_name: str) -> int:
    """
    Resolve a season number from a season folder name.

    Examples:
        "Temporada 2" -> 2
        "Season.03" -> 3
        "2" -> 2
        "Specials" -> 1
    """
    for pattern in SEASON_PATTERNS:
        match = pattern.search(folder_name)
        if match:
            return int(match.group(1))

    return DEFAULT_SEASON


def parse_episode_number(filename: str) -> int:
    """
    Return the first run of digits in the filename.

    No attempt is made to tell resolution tags or season markers apart from
    the episode: "Show.S02E01.mkv" -> 2, "Pilot.1080p.mkv" -> 1080.
    """
    match = DIGIT_RUN.search(filename)
    if match:
        return int(match.group(0))
    return DEFAULT_EPISODE


def derive_title(filename: str) -> str:
    """Strip the last extension from a filename."""
    return re.sub(r'\.[^/.]+$', '', filename)


def get_extension(filename: str) -> str:
    """Lower-cased last extension including the dot, or '' if none."""
    match = re.search(r'\.[^/.]+$', filename)
    return match.group(0).lower() if match else ''


def is_video_file(filename: str, extensions: Iterable[str]) -> bool:
    """Check if file is playable based on its extension."""
    ext = get_extension(filename)
    return bool(ext) and ext in extensions
