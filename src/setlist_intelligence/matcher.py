from __future__ import annotations

import logging
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable

from setlist_intelligence.harmony import genres_related, harmonic_neighbours, is_enharmonic
from setlist_intelligence.models import CompatibilityResult, Song

logger = logging.getLogger(__name__)

TEMPO_WEIGHT = Decimal("0.30")
GENRE_WEIGHT = Decimal("0.25")
KEY_WEIGHT = Decimal("0.25")
DIFFICULTY_WEIGHT = Decimal("0.20")

_ONE_DECIMAL = Decimal("0.1")

# Score used when either side lacks the attribute being compared.
NEUTRAL_SCORE = 50.0

DEFAULT_RANK_LIMIT = 5


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def _exact(score: float) -> Decimal:
    # Sub-scores carry at most two decimals; repr recovers them exactly.
    return Decimal(repr(score))


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def tempo_score(current_bpm: int | None, next_bpm: int | None) -> float:
    if not current_bpm or not next_bpm:
        return NEUTRAL_SCORE

    diff = abs(current_bpm - next_bpm)
    if diff <= 15:
        return 100.0
    if diff <= 30:
        return float(Decimal(80) - (diff - 15) * Decimal("1.33"))
    if diff <= 50:
        return 50.0 - (diff - 30) * 1.0
    return max(0.0, 20.0 - (diff - 50) * 0.5)


def genre_score(current_genre: str | None, next_genre: str | None) -> float:
    if _blank(current_genre) or _blank(next_genre):
        return NEUTRAL_SCORE
    if current_genre.strip().lower() == next_genre.strip().lower():
        return 100.0
    return 70.0 if genres_related(current_genre, next_genre) else 40.0


def key_score(current_key: str | None, next_key: str | None) -> float:
    if _blank(current_key) or _blank(next_key):
        return NEUTRAL_SCORE
    if current_key.strip().lower() == next_key.strip().lower():
        return 100.0
    if next_key.strip().lower() in harmonic_neighbours(current_key):
        return 90.0
    if is_enharmonic(current_key, next_key):
        return 85.0
    return 40.0


def difficulty_score(current_difficulty: int | None, next_difficulty: int | None) -> float:
    jump = abs((current_difficulty or 0) - (next_difficulty or 0))
    if jump == 0:
        return 90.0
    if jump == 1:
        return 85.0
    if jump == 2:
        return 70.0
    if jump == 3:
        return 50.0
    return max(20.0, 50.0 - jump * 5.0)


def _tempo_detail(current: Song, candidate: Song) -> str:
    if not current.bpm or not candidate.bpm:
        return "Tempo data unavailable"
    diff = abs(current.bpm - candidate.bpm)
    flow = f"{current.bpm} → {candidate.bpm} BPM"
    if diff <= 15:
        return f"Smooth tempo flow: {flow}"
    if diff <= 30:
        return f"Moderate tempo change: {flow}"
    return f"Noticeable tempo jump: {flow}"


def _genre_detail(current: Song, candidate: Song, score: float) -> str:
    if _blank(current.genre) or _blank(candidate.genre):
        return "Genre data unavailable"
    if score == 100.0:
        return f"Same genre: {candidate.genre}"
    if score == 70.0:
        return f"Related genres: {current.genre} → {candidate.genre}"
    return f"Genre shift: {current.genre} → {candidate.genre}"


def _key_detail(current: Song, candidate: Song, score: float) -> str:
    if _blank(current.musical_key) or _blank(candidate.musical_key):
        return "Key data unavailable"
    move = f"{current.musical_key} → {candidate.musical_key}"
    if score == 100.0:
        return f"Same key: {candidate.musical_key}"
    if score == 90.0:
        return f"Harmonic key move: {move}"
    if score == 85.0:
        return f"Enharmonic key change: {move}"
    return f"Key transition: {move}"


def _difficulty_detail(current: Song, candidate: Song) -> str:
    before = current.difficulty_rating or 0
    after = candidate.difficulty_rating or 0
    if after == before:
        return f"Consistent difficulty: {after}/5"
    if after > before:
        return f"Difficulty increase: {before} → {after}/5"
    return f"Difficulty decrease: {before} → {after}/5"


def score_next(reference: Song, candidate: Song) -> CompatibilityResult:
    """Score how well candidate follows reference in a setlist (0-100).

    Weighted sum of tempo (30%), genre (25%), key (25%) and difficulty (20%)
    sub-scores, rounded half-to-even to one decimal. Details are ordered the same way.
    """
    if reference is None:
        raise ValueError("A reference song is required to score the next song")
    if candidate is None:
        raise ValueError("Candidate songs must not be None")

    tempo = tempo_score(reference.bpm, candidate.bpm)
    genre = genre_score(reference.genre, candidate.genre)
    key = key_score(reference.musical_key, candidate.musical_key)
    difficulty = difficulty_score(reference.difficulty_rating, candidate.difficulty_rating)

    total = (
        _exact(tempo) * TEMPO_WEIGHT
        + _exact(genre) * GENRE_WEIGHT
        + _exact(key) * KEY_WEIGHT
        + _exact(difficulty) * DIFFICULTY_WEIGHT
    )
    score = float(total.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_EVEN))
    details = [
        _tempo_detail(reference, candidate),
        _genre_detail(reference, candidate, genre),
        _key_detail(reference, candidate, key),
        _difficulty_detail(reference, candidate),
    ]
    return CompatibilityResult(song=candidate, score=_clamp(score), details=details)


def rank(
    reference: Song,
    candidates: Iterable[Song],
    exclude_ids: Iterable[int] | None = None,
    limit: int = DEFAULT_RANK_LIMIT,
) -> list[CompatibilityResult]:
    """Rank candidates as the next song after reference, best first.

    The reference song and any id in exclude_ids are skipped; ties keep the
    order of the candidate pool.
    """
    if reference is None:
        raise ValueError("A reference song is required to rank candidates")
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    excluded = set(exclude_ids or ())
    if reference.song_id is not None:
        excluded.add(reference.song_id)

    results = [
        score_next(reference, candidate)
        for candidate in candidates
        if candidate is None or candidate.song_id is None or candidate.song_id not in excluded
    ]
    results.sort(key=lambda result: result.score, reverse=True)
    logger.debug(f"[Matcher] Ranked {len(results)} candidates after song {reference.song_id}")
    return results[:limit]
