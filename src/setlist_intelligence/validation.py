"""Field checks for song and setlist-entry records before they are stored."""
from __future__ import annotations

import re

from setlist_intelligence.models import SetlistEntry, Song

MIN_BPM = 40
MAX_BPM = 250
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5
MAX_DURATION_SECONDS = 3600
MAX_TEXT_LENGTH = 200

_KEY_PATTERN = re.compile(r"^[A-G][#b]?m?$", re.IGNORECASE)


def is_valid_musical_key(key: str | None) -> bool:
    """Blank keys are valid (the key is optional); others must look like C, F#, Bb, Am or F#m."""
    if key is None or not key.strip():
        return True
    return bool(_KEY_PATTERN.match(key.strip()))


def _check_bpm(label: str, bpm: int | None, problems: list[str]) -> None:
    if bpm is not None and not MIN_BPM <= bpm <= MAX_BPM:
        problems.append(f"{label} must be between {MIN_BPM} and {MAX_BPM}, got {bpm}")


def song_problems(song: Song) -> list[str]:
    problems: list[str] = []
    for label, value in (("Title", song.title), ("Artist", song.artist)):
        if not value or not value.strip():
            problems.append(f"{label} is required")
        elif len(value) > MAX_TEXT_LENGTH:
            problems.append(f"{label} must be at most {MAX_TEXT_LENGTH} characters")

    _check_bpm("BPM", song.bpm, problems)

    if song.difficulty_rating is not None and not MIN_DIFFICULTY <= song.difficulty_rating <= MAX_DIFFICULTY:
        problems.append(
            f"Difficulty rating must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {song.difficulty_rating}"
        )
    if song.duration_seconds is not None and not 1 <= song.duration_seconds <= MAX_DURATION_SECONDS:
        problems.append(f"Duration must be between 1 and {MAX_DURATION_SECONDS} seconds")
    if not is_valid_musical_key(song.musical_key):
        problems.append(f"Musical key must be a valid key signature (e.g., C, F#, Bb, Am, F#m), got {song.musical_key!r}")
    return problems


def entry_problems(entry: SetlistEntry) -> list[str]:
    problems: list[str] = []
    if entry.song is None:
        problems.append("Setlist entry must reference a song")
    if entry.position < 1:
        problems.append(f"Position must be at least 1, got {entry.position}")
    _check_bpm("Custom BPM", entry.custom_bpm, problems)
    if not is_valid_musical_key(entry.custom_key):
        problems.append(f"Custom key must be a valid key signature, got {entry.custom_key!r}")
    if entry.custom_duration_seconds is not None and entry.custom_duration_seconds <= 0:
        problems.append("Custom duration must be positive")
    return problems


def ensure_valid_song(song: Song) -> Song:
    problems = song_problems(song)
    if problems:
        raise ValueError("; ".join(problems))
    return song
