import unittest

from setlist_intelligence.similarity import levenshtein, similarity


class LevenshteinTests(unittest.TestCase):
    def test_known_distances(self) -> None:
        self.assertEqual(levenshtein("kitten", "sitting"), 3)
        self.assertEqual(levenshtein("flaw", "lawn"), 2)
        self.assertEqual(levenshtein("abc", "abc"), 0)

    def test_empty_side_costs_other_length(self) -> None:
        self.assertEqual(levenshtein("", "abc"), 3)
        self.assertEqual(levenshtein("abcd", ""), 4)
        self.assertEqual(levenshtein("", ""), 0)

    def test_distance_is_symmetric(self) -> None:
        pairs = [("journey", "jorney"), ("bohemian", "rhapsody"), ("a", "")]
        for a, b in pairs:
            self.assertEqual(levenshtein(a, b), levenshtein(b, a))

    def test_triangle_inequality(self) -> None:
        words = ["rock", "rack", "track", "trick", ""]
        for a in words:
            for b in words:
                for c in words:
                    self.assertLessEqual(levenshtein(a, c), levenshtein(a, b) + levenshtein(b, c))


class SimilarityTests(unittest.TestCase):
    def test_identical_strings_score_one(self) -> None:
        self.assertEqual(similarity("hey jude", "hey jude"), 1.0)
        self.assertEqual(similarity("", ""), 1.0)

    def test_empty_against_non_empty_scores_zero(self) -> None:
        self.assertEqual(similarity("abc", ""), 0.0)
        self.assertEqual(similarity("", "abc"), 0.0)

    def test_normalized_by_longest_string(self) -> None:
        # one substitution over five characters
        self.assertAlmostEqual(similarity("hello", "hallo"), 0.8)

    def test_similarity_stays_in_unit_interval(self) -> None:
        score = similarity("abc", "xyz")
        self.assertEqual(score, 0.0)


if __name__ == "__main__":
    unittest.main()
