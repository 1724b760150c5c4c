"""Duplicate detection for songs in a user's library.

A candidate is checked in two passes:
  1. Exact match on normalized (title, artist)
  2. Fuzzy match on the summed Levenshtein similarity of both fields
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from setlist_intelligence.models import DuplicateMatch, Song
from setlist_intelligence.similarity import similarity

logger = logging.getLogger(__name__)

# Summed title + artist similarity needed for a hard fuzzy match.
FUZZY_COMBINED_THRESHOLD = 1.6
DEFAULT_POTENTIAL_THRESHOLD = 0.8

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Lowercase, trim, collapse whitespace, spell out '&' and drop hyphens."""
    if text is None or not text.strip():
        return ""
    normalized = _WHITESPACE.sub(" ", text.lower().strip())
    normalized = normalized.replace(" & ", " and ")
    return normalized.replace("-", " ")


def _require_candidate(candidate: Song | None) -> Song:
    if candidate is None:
        raise ValueError("A candidate song is required for duplicate detection")
    return candidate


def find_duplicate(
    candidate: Song,
    library: Iterable[Song],
    exclude_id: int | None = None,
) -> Song | None:
    """Return the existing song that duplicates candidate, or None.

    Args:
        candidate: Song being created or updated.
        library: The user's existing songs.
        exclude_id: Song id to ignore, typically the song being updated.
    """
    candidate = _require_candidate(candidate)
    title = normalize(candidate.title)
    artist = normalize(candidate.artist)

    pool = [
        song for song in library
        if exclude_id is None or song.song_id != exclude_id
    ]

    for song in pool:
        if normalize(song.title) == title and normalize(song.artist) == artist:
            logger.debug(f"[Duplicates] Exact match on song {song.song_id}")
            return song

    best: Song | None = None
    best_score = 0.0
    for song in pool:
        score = similarity(title, normalize(song.title)) + similarity(artist, normalize(song.artist))
        if score >= FUZZY_COMBINED_THRESHOLD and (best is None or score > best_score):
            best = song
            best_score = score

    if best is not None:
        logger.debug(f"[Duplicates] Fuzzy match on song {best.song_id} (score={best_score:.3f})")
    return best


def find_potential_duplicates(
    candidate: Song,
    library: Iterable[Song],
    threshold: float = DEFAULT_POTENTIAL_THRESHOLD,
) -> list[tuple[Song, float]]:
    """List songs whose title AND artist similarity each reach threshold.

    Each match carries the mean of the two similarities; most similar first.
    The candidate itself is skipped when it already has an id.
    """
    candidate = _require_candidate(candidate)
    title = normalize(candidate.title)
    artist = normalize(candidate.artist)

    matches: list[tuple[Song, float]] = []
    for song in library:
        if candidate.song_id is not None and song.song_id == candidate.song_id:
            continue
        title_similarity = similarity(title, normalize(song.title))
        artist_similarity = similarity(artist, normalize(song.artist))
        if title_similarity >= threshold and artist_similarity >= threshold:
            matches.append((song, (title_similarity + artist_similarity) / 2))

    matches.sort(key=lambda match: match[1], reverse=True)
    return matches


def check_duplicate(
    candidate: Song,
    library: Iterable[Song],
    exclude_id: int | None = None,
    threshold: float = DEFAULT_POTENTIAL_THRESHOLD,
) -> DuplicateMatch:
    """Combine the hard duplicate check with the ranked suggestion list."""
    songs = list(library)
    match = find_duplicate(candidate, songs, exclude_id=exclude_id)
    suggestions = [
        (song, score)
        for song, score in find_potential_duplicates(candidate, songs, threshold=threshold)
        if exclude_id is None or song.song_id != exclude_id
    ]
    return DuplicateMatch(song=match, potential_duplicates=suggestions)
