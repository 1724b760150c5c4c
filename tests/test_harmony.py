import unittest

from setlist_intelligence.harmony import (
    ENHARMONIC_PAIRS,
    KEY_ADJACENCY,
    genres_related,
    harmonic_neighbours,
    is_enharmonic,
    is_relative_pair,
)


class KeyAdjacencyTests(unittest.TestCase):
    def test_every_major_key_has_four_neighbours(self) -> None:
        for key, neighbours in KEY_ADJACENCY.items():
            self.assertEqual(len(neighbours), 4, key)
            self.assertNotIn(key, neighbours)

    def test_dominant_and_subdominant_are_symmetric_where_both_listed(self) -> None:
        for key, neighbours in KEY_ADJACENCY.items():
            for other in neighbours:
                if other in KEY_ADJACENCY and not other.endswith("m"):
                    self.assertIn(key, KEY_ADJACENCY[other], f"{key} <-> {other}")

    def test_lookup_is_case_insensitive(self) -> None:
        self.assertEqual(harmonic_neighbours(" C "), frozenset({"g", "f", "am", "em"}))
        self.assertEqual(harmonic_neighbours("X"), frozenset())

    def test_tables_are_immutable(self) -> None:
        with self.assertRaises(TypeError):
            KEY_ADJACENCY["x"] = frozenset()  # type: ignore[index]


class EnharmonicTests(unittest.TestCase):
    def test_pairs_are_two_distinct_names(self) -> None:
        for pair in ENHARMONIC_PAIRS:
            self.assertEqual(len(pair), 2)

    def test_equivalence_in_both_directions(self) -> None:
        self.assertTrue(is_enharmonic("B", "Cb"))
        self.assertTrue(is_enharmonic("cb", "b"))
        self.assertFalse(is_enharmonic("C", "C"))
        self.assertFalse(is_enharmonic("C", "D"))


class GenreRelationTests(unittest.TestCase):
    def test_related_both_directions(self) -> None:
        self.assertTrue(genres_related("Soul", "R&B"))
        self.assertTrue(genres_related("R&B", "Soul"))

    def test_substring_containment(self) -> None:
        self.assertTrue(genres_related("Alt Country", "Americana"))
        self.assertFalse(genres_related("Metal", "Jazz"))


class RelativePairTests(unittest.TestCase):
    def test_relative_pairs(self) -> None:
        self.assertTrue(is_relative_pair("C", "AM"))
        self.assertTrue(is_relative_pair("F#M", "A"))
        self.assertFalse(is_relative_pair("C", "EM"))


if __name__ == "__main__":
    unittest.main()
