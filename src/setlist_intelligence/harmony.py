"""Static lookup tables for genre relations and harmonic key movement."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

RELATED_GENRE_PAIRS: tuple[tuple[str, str], ...] = (
    ("rock", "alternative"),
    ("jazz", "blues"),
    ("pop", "funk"),
    ("electronic", "dance"),
    ("soul", "r&b"),
    ("country", "americana"),
    ("classical", "chamber"),
    ("reggae", "ska"),
)

# Major key -> dominant, subdominant and relative-minor neighbours (lower-cased).
KEY_ADJACENCY: Mapping[str, frozenset[str]] = MappingProxyType({
    "c": frozenset({"g", "f", "am", "em"}),
    "g": frozenset({"d", "c", "em", "bm"}),
    "d": frozenset({"a", "g", "bm", "f#m"}),
    "a": frozenset({"e", "d", "f#m", "c#m"}),
    "e": frozenset({"b", "a", "c#m", "g#m"}),
    "b": frozenset({"f#", "e", "g#m", "d#m"}),
    "f#": frozenset({"c#", "b", "d#m", "a#m"}),
    "f": frozenset({"c", "bb", "dm", "am"}),
    "bb": frozenset({"f", "eb", "gm", "dm"}),
    "eb": frozenset({"bb", "ab", "cm", "gm"}),
    "ab": frozenset({"eb", "db", "fm", "cm"}),
    "db": frozenset({"ab", "gb", "bbm", "fm"}),
    "gb": frozenset({"db", "cb", "ebm", "bbm"}),
    "cb": frozenset({"gb", "fb", "abm", "ebm"}),
})

ENHARMONIC_PAIRS: frozenset[frozenset[str]] = frozenset({
    frozenset({"b", "cb"}),
    frozenset({"e", "fb"}),
    frozenset({"f#", "gb"}),
    frozenset({"c#", "db"}),
    frozenset({"g#", "ab"}),
    frozenset({"d#", "eb"}),
    frozenset({"a#", "bb"}),
})

# Relative major/minor pairs in upper-case spelling, as produced by transitions.normalize_key.
RELATIVE_KEY_PAIRS: frozenset[frozenset[str]] = frozenset({
    frozenset({"C", "AM"}),
    frozenset({"G", "EM"}),
    frozenset({"D", "BM"}),
    frozenset({"A", "F#M"}),
    frozenset({"E", "C#M"}),
    frozenset({"B", "G#M"}),
    frozenset({"F#", "D#M"}),
    frozenset({"C#", "A#M"}),
    frozenset({"F", "DM"}),
    frozenset({"BB", "GM"}),
    frozenset({"EB", "CM"}),
    frozenset({"AB", "FM"}),
    frozenset({"DB", "BBM"}),
    frozenset({"GB", "EBM"}),
    frozenset({"CB", "ABM"}),
})


def genres_related(first: str, second: str) -> bool:
    """Return True when the genres fall on opposite sides of a related pair.

    Matching is by case-insensitive substring, so "Indie Rock" relates to
    "Alternative" and "Delta Blues" to "Jazz".
    """
    a = first.lower()
    b = second.lower()
    for left, right in RELATED_GENRE_PAIRS:
        if (left in a and right in b) or (right in a and left in b):
            return True
    return False


def harmonic_neighbours(key: str) -> frozenset[str]:
    return KEY_ADJACENCY.get(key.strip().lower(), frozenset())


def is_enharmonic(first: str, second: str) -> bool:
    pair = frozenset({first.strip().lower(), second.strip().lower()})
    return len(pair) == 2 and pair in ENHARMONIC_PAIRS


def is_relative_pair(first: str, second: str) -> bool:
    return frozenset({first, second}) in RELATIVE_KEY_PAIRS
