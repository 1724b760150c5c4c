from __future__ import annotations

import logging

from setlist_intelligence.config import EngineSettings
from setlist_intelligence.harmony import is_relative_pair
from setlist_intelligence.models import Song, TransitionEstimate

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = EngineSettings()


def normalize_key(key: str | None) -> str:
    if key is None or not key.strip():
        return ""
    return key.strip().replace("♯", "#").replace("♭", "b").upper()


def keys_compatible(first: str, second: str) -> bool:
    """Compatibility of two normalized keys.

    Same key, same root letter (C ~ Cm) or a relative major/minor pair.
    """
    if first == second:
        return True
    if first and second and first[0] == second[0]:
        return True
    return is_relative_pair(first, second)


def _estimate(a: Song, b: Song, settings: EngineSettings) -> TransitionEstimate:
    seconds = float(settings.base_transition_seconds)

    bpm_penalty = 0.0
    if a.bpm is not None and b.bpm is not None:
        bpm_penalty = abs(a.bpm - b.bpm) * settings.bpm_difference_penalty_multiplier
        seconds += bpm_penalty
    else:
        logger.debug(f"[Transitions] Missing BPM for songs {a.song_id}/{b.song_id}")

    key_penalty_applied = False
    key_a = normalize_key(a.musical_key)
    key_b = normalize_key(b.musical_key)
    if key_a and key_b:
        if not keys_compatible(key_a, key_b):
            seconds += settings.key_mismatch_penalty_seconds
            key_penalty_applied = True
    else:
        logger.debug(f"[Transitions] Missing key for songs {a.song_id}/{b.song_id}")

    capped = seconds > settings.max_transition_seconds
    final = min(seconds, settings.max_transition_seconds)
    logger.debug(f"[Transitions] {a.song_id}->{b.song_id}: {final:.1f}s")
    return TransitionEstimate(
        seconds=final,
        bpm_penalty_seconds=bpm_penalty,
        key_penalty_applied=key_penalty_applied,
        capped=capped,
    )


def estimate_transition(
    a: Song | None,
    b: Song | None,
    settings: EngineSettings | None = None,
) -> TransitionEstimate:
    """Estimate the changeover between two songs.

    Starts from the base transition time, adds a per-BPM penalty and a fixed
    penalty for incompatible keys, then caps at the configured maximum. Any
    failure falls back to the base time so duration display is never blocked.
    """
    settings = settings or _DEFAULT_SETTINGS
    base = min(float(settings.base_transition_seconds), settings.max_transition_seconds)

    if a is None or b is None:
        logger.debug("[Transitions] One or both songs missing; using base time")
        return TransitionEstimate(seconds=base)

    try:
        return _estimate(a, b, settings)
    except Exception:
        logger.warning("[Transitions] Failed to compute transition, falling back to base time", exc_info=True)
        return TransitionEstimate(seconds=base, fallback=True)


def predict_transition(
    a: Song | None,
    b: Song | None,
    settings: EngineSettings | None = None,
) -> float:
    return estimate_transition(a, b, settings).seconds
