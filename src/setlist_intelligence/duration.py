from __future__ import annotations

import logging
from typing import Sequence

from setlist_intelligence.config import EngineSettings
from setlist_intelligence.models import DurationSummary, EntryDuration, SetlistEntry, Song
from setlist_intelligence.transitions import predict_transition

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = EngineSettings()


def resolve_duration(entry: SetlistEntry, settings: EngineSettings | None = None) -> float:
    """Seconds an entry is expected to last.

    Priority: custom override, precomputed estimate, song duration, default.
    Values that are not positive count as missing.
    """
    settings = settings or _DEFAULT_SETTINGS
    for seconds in (
        entry.custom_duration_seconds,
        entry.song.estimated_duration_seconds,
        entry.song.duration_seconds,
    ):
        if seconds is not None and seconds > 0:
            return float(seconds)
    return float(settings.default_song_duration_seconds)


def _effective_song(entry: SetlistEntry) -> Song:
    return Song(
        title=entry.song.title,
        artist=entry.song.artist,
        song_id=entry.song.song_id,
        bpm=entry.effective_bpm,
        musical_key=entry.effective_key,
    )


def _ordered(entries: Sequence[SetlistEntry]) -> list[SetlistEntry]:
    seen: set[int] = set()
    for entry in entries:
        if entry is None or entry.song is None:
            raise ValueError("Every setlist entry must reference a song")
        if entry.position < 1:
            raise ValueError(f"Setlist positions start at 1, got {entry.position}")
        if entry.position in seen:
            raise ValueError(f"Duplicate setlist position {entry.position}")
        seen.add(entry.position)
    return sorted(entries, key=lambda entry: entry.position)


def _large_bpm_change(current: Song, following: Song, threshold: int) -> bool:
    if not isinstance(current.bpm, (int, float)) or not isinstance(following.bpm, (int, float)):
        return False
    return abs(current.bpm - following.bpm) > threshold


def aggregate(
    entries: Sequence[SetlistEntry],
    settings: EngineSettings | None = None,
) -> DurationSummary:
    """Total a setlist's song time plus predicted transitions between songs."""
    settings = settings or _DEFAULT_SETTINGS
    ordered = _ordered(entries)
    if not ordered:
        return DurationSummary()

    effective = [_effective_song(entry) for entry in ordered]
    items: list[EntryDuration] = []
    total_song_seconds = 0.0
    total_transition_seconds = 0.0

    for index, entry in enumerate(ordered):
        resolved = resolve_duration(entry, settings)
        total_song_seconds += resolved

        transition = 0.0
        large_change = False
        if index < len(ordered) - 1:
            transition = predict_transition(effective[index], effective[index + 1], settings)
            total_transition_seconds += transition
            large_change = _large_bpm_change(effective[index], effective[index + 1], settings.large_bpm_threshold)

        items.append(
            EntryDuration(
                position=entry.position,
                song_id=entry.song.song_id,
                song_title=entry.song.title,
                resolved_duration_seconds=resolved,
                transition_seconds_to_next=transition,
                entry_id=entry.entry_id,
                estimated_duration_seconds=entry.song.estimated_duration_seconds,
                custom_duration_override_seconds=entry.custom_duration_seconds,
                large_bpm_change=large_change,
            )
        )

    combined = total_song_seconds + total_transition_seconds
    logger.debug(
        f"[Duration] items={len(items)}, songs={total_song_seconds:.1f}s, "
        f"transitions={total_transition_seconds:.1f}s, combined={combined:.1f}s"
    )
    return DurationSummary(
        total_song_seconds=total_song_seconds,
        total_transition_seconds=total_transition_seconds,
        combined_total_seconds=combined,
        items=items,
    )


def format_duration(seconds: float) -> str:
    """Render seconds as m:ss, or h:mm:ss from one hour up."""
    total = max(0, int(round(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def fitting_slots(summary: DurationSummary, settings: EngineSettings | None = None) -> list[int]:
    """Slot lengths in minutes, ascending, that can hold the whole setlist."""
    settings = settings or _DEFAULT_SETTINGS
    return [
        minutes
        for minutes in sorted(settings.slot_durations_minutes)
        if summary.combined_total_seconds <= minutes * 60
    ]
