from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Song:
    title: str
    artist: str
    song_id: int | None = None
    album: str | None = None
    genre: str | None = None
    bpm: int | None = None
    musical_key: str | None = None
    duration_seconds: int | None = None
    difficulty_rating: int | None = None
    estimated_duration_seconds: float | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.artist and self.bpm is not None and self.musical_key)

    @property
    def formatted_duration(self) -> str:
        if self.duration_seconds is None:
            return ""
        minutes, seconds = divmod(int(self.duration_seconds), 60)
        return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True, slots=True)
class SetlistEntry:
    song: Song
    position: int
    entry_id: int | None = None
    custom_bpm: int | None = None
    custom_key: str | None = None
    custom_duration_seconds: float | None = None

    @property
    def effective_bpm(self) -> int | None:
        if self.custom_bpm is not None:
            return self.custom_bpm
        return self.song.bpm if self.song is not None else None

    @property
    def effective_key(self) -> str | None:
        if self.custom_key:
            return self.custom_key
        return self.song.musical_key if self.song is not None else None


@dataclass(frozen=True, slots=True)
class Setlist:
    entries: tuple[SetlistEntry, ...] = ()
    setlist_id: int | None = None
    name: str = ""

    def ordered_entries(self) -> list[SetlistEntry]:
        return sorted(self.entries, key=lambda entry: entry.position)


@dataclass(frozen=True, slots=True)
class CompatibilityResult:
    song: Song
    score: float
    details: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Profile:
    """Preference profile derived from a user's library and setlist history."""

    favorite_genres: list[str] = field(default_factory=list)
    average_bpm: int | None = None
    bpm_range: tuple[int, int] | None = None
    favorite_keys: list[str] = field(default_factory=list)
    average_difficulty: float | None = None
    most_used_song_ids: list[int] = field(default_factory=list)
    average_setlist_length: int = 0


@dataclass(frozen=True, slots=True)
class PersonalizationResult:
    song: Song
    score: float
    reason: str


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    song: Song | None
    potential_duplicates: list[tuple[Song, float]] = field(default_factory=list)

    @property
    def is_duplicate(self) -> bool:
        return self.song is not None

    @property
    def existing_song_id(self) -> int | None:
        return self.song.song_id if self.song is not None else None


@dataclass(frozen=True, slots=True)
class TransitionEstimate:
    seconds: float
    bpm_penalty_seconds: float = 0.0
    key_penalty_applied: bool = False
    capped: bool = False
    fallback: bool = False


@dataclass(frozen=True, slots=True)
class EntryDuration:
    position: int
    song_id: int | None
    song_title: str
    resolved_duration_seconds: float
    transition_seconds_to_next: float = 0.0
    entry_id: int | None = None
    estimated_duration_seconds: float | None = None
    custom_duration_override_seconds: float | None = None
    large_bpm_change: bool = False


@dataclass(frozen=True, slots=True)
class DurationSummary:
    total_song_seconds: float = 0.0
    total_transition_seconds: float = 0.0
    combined_total_seconds: float = 0.0
    items: list[EntryDuration] = field(default_factory=list)

    @property
    def formatted_total(self) -> str:
        from setlist_intelligence.duration import format_duration

        return format_duration(self.combined_total_seconds)
