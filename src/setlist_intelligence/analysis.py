from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Mapping, Sequence

from setlist_intelligence.models import PersonalizationResult, Profile, Setlist, Song

logger = logging.getLogger(__name__)

_TOP_GENRES = 3
_TOP_KEYS = 3
_TOP_USED_SONGS = 5
_BASE_SCORE = 50.0
_DEFAULT_LIMIT = 10
_REASON_SEPARATOR = " • "


def count_setlist_usage(setlists: Iterable[Setlist]) -> dict[int, int]:
    """Times each song id appears across setlists, in first-seen order."""
    usage: dict[int, int] = {}
    for setlist in setlists:
        for entry in setlist.entries:
            song_id = entry.song.song_id if entry.song is not None else None
            if song_id is None:
                continue
            usage[song_id] = usage.get(song_id, 0) + 1
    return usage


def _most_used(usage: Mapping[int, int]) -> list[int]:
    return [song_id for song_id, _ in Counter(usage).most_common(_TOP_USED_SONGS)]


def build_profile(library: Sequence[Song], setlists: Sequence[Setlist] = ()) -> Profile:
    library = [song for song in library if song is not None]
    genres = Counter(song.genre for song in library if song.genre and song.genre.strip())
    keys = Counter(song.musical_key for song in library if song.musical_key and song.musical_key.strip())

    bpms = [song.bpm for song in library if song.bpm is not None and song.bpm > 0]
    average_bpm = int(sum(bpms) / len(bpms)) if bpms else None
    bpm_range = (min(bpms), max(bpms)) if bpms else None

    ratings = [
        song.difficulty_rating
        for song in library
        if song.difficulty_rating is not None and song.difficulty_rating > 0
    ]
    average_difficulty = sum(ratings) / len(ratings) if ratings else None

    usage = count_setlist_usage(setlists)
    most_used = _most_used(usage)
    average_length = 0
    if usage and setlists:
        average_length = int(sum(len(setlist.entries) for setlist in setlists) / len(setlists))

    profile = Profile(
        favorite_genres=[genre for genre, _ in genres.most_common(_TOP_GENRES)],
        average_bpm=average_bpm,
        bpm_range=bpm_range,
        favorite_keys=[key for key, _ in keys.most_common(_TOP_KEYS)],
        average_difficulty=average_difficulty,
        most_used_song_ids=most_used,
        average_setlist_length=average_length,
    )
    logger.debug(
        f"[Profile] {len(library)} songs, {len(setlists)} setlists, "
        f"genres={profile.favorite_genres}, keys={profile.favorite_keys}"
    )
    return profile


def _contains_folded(values: Iterable[str], value: str) -> bool:
    folded = value.strip().lower()
    return any(item.strip().lower() == folded for item in values)


def _bpm_bonus(song: Song, profile: Profile) -> tuple[float, str | None]:
    if song.bpm is None or profile.bpm_range is None or profile.average_bpm is None:
        return 0.0, None
    low, high = profile.bpm_range
    diff = abs(song.bpm - profile.average_bpm)
    if diff <= 20:
        return 25.0, f"Similar tempo to your preferences ({song.bpm} BPM)"
    if diff <= 40:
        return 15.0, f"Close to your usual tempo ({song.bpm} BPM)"
    if low <= song.bpm <= high:
        return 10.0, f"Within your tempo range ({low}-{high} BPM)"
    return 0.0, None


def _difficulty_bonus(song: Song, profile: Profile) -> tuple[float, str | None]:
    if song.difficulty_rating is None or not profile.average_difficulty:
        return 0.0, None
    diff = abs(song.difficulty_rating - int(profile.average_difficulty))
    if diff == 0:
        return 15.0, "Matches your skill level"
    if diff == 1:
        return 10.0, "Close to your skill level"
    if diff == 2:
        return 5.0, "A stretch from your usual difficulty"
    return 0.0, None


def personalization_score(
    song: Song,
    profile: Profile,
    most_used_song_ids: Sequence[int] = (),
) -> tuple[float, list[str]]:
    """Score one song against a profile and list the bonuses that applied.

    Starts at 50 and adds: favorite genre +35 (any other genre +10 when the
    profile has favorites), tempo up to +25, favorite key +15, difficulty up
    to +15, and 10 - rank for the most used songs. Clamped to [0, 100].
    """
    score = _BASE_SCORE
    reasons: list[str] = []

    if song.genre and song.genre.strip() and profile.favorite_genres:
        if _contains_folded(profile.favorite_genres, song.genre):
            score += 35.0
            reasons.append(f"Matches your favorite genre: {song.genre}")
        else:
            score += 10.0

    bonus, reason = _bpm_bonus(song, profile)
    score += bonus
    if reason:
        reasons.append(reason)

    if song.musical_key and song.musical_key.strip() and profile.favorite_keys:
        if _contains_folded(profile.favorite_keys, song.musical_key):
            score += 15.0
            reasons.append(f"In one of your favorite keys: {song.musical_key}")

    bonus, reason = _difficulty_bonus(song, profile)
    score += bonus
    if reason:
        reasons.append(reason)

    if song.song_id is not None and song.song_id in most_used_song_ids:
        position = list(most_used_song_ids).index(song.song_id)
        score += 10.0 - position
        reasons.append("Frequently used in your setlists")

    return max(0.0, min(100.0, score)), reasons


def recommend(
    library: Sequence[Song],
    profile: Profile,
    setlist_usage: Mapping[int, int] | None = None,
    limit: int = _DEFAULT_LIMIT,
) -> list[PersonalizationResult]:
    """Rank a user's own songs against their preference profile, best first."""
    if not library:
        return []
    if profile is None:
        raise ValueError("A profile is required for personalized recommendations")
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    if setlist_usage is not None:
        most_used = _most_used(setlist_usage)
    else:
        most_used = profile.most_used_song_ids

    results: list[PersonalizationResult] = []
    for song in library:
        if song is None:
            continue
        score, reasons = personalization_score(song, profile, most_used)
        reason = _REASON_SEPARATOR.join(reasons) if reasons else "Recommended for you"
        results.append(PersonalizationResult(song=song, score=score, reason=reason))

    results.sort(key=lambda result: result.score, reverse=True)
    return results[:limit]
