import dataclasses
import unittest

from setlist_intelligence.models import Setlist, SetlistEntry, Song


class SongTests(unittest.TestCase):
    def test_is_complete_requires_bpm_and_key(self) -> None:
        self.assertTrue(Song(title="A", artist="B", bpm=120, musical_key="C").is_complete)
        self.assertFalse(Song(title="A", artist="B", bpm=120).is_complete)
        self.assertFalse(Song(title="", artist="B", bpm=120, musical_key="C").is_complete)

    def test_formatted_duration(self) -> None:
        self.assertEqual(Song(title="A", artist="B", duration_seconds=245).formatted_duration, "04:05")
        self.assertEqual(Song(title="A", artist="B").formatted_duration, "")

    def test_songs_are_immutable(self) -> None:
        song = Song(title="A", artist="B")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            song.bpm = 100  # type: ignore[misc]


class SetlistEntryTests(unittest.TestCase):
    def test_effective_values_prefer_custom(self) -> None:
        song = Song(title="A", artist="B", bpm=100, musical_key="C")
        entry = SetlistEntry(song=song, position=1, custom_bpm=110, custom_key="D")
        self.assertEqual(entry.effective_bpm, 110)
        self.assertEqual(entry.effective_key, "D")

    def test_effective_values_fall_back_to_song(self) -> None:
        song = Song(title="A", artist="B", bpm=100, musical_key="C")
        entry = SetlistEntry(song=song, position=1, custom_key="")
        self.assertEqual(entry.effective_bpm, 100)
        self.assertEqual(entry.effective_key, "C")


class SetlistTests(unittest.TestCase):
    def test_ordered_entries(self) -> None:
        song = Song(title="A", artist="B")
        setlist = Setlist(entries=(SetlistEntry(song=song, position=3), SetlistEntry(song=song, position=1)))
        self.assertEqual([entry.position for entry in setlist.ordered_entries()], [1, 3])


if __name__ == "__main__":
    unittest.main()
