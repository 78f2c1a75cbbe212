"""
Tests for harmony_engine/theory/pitch.py and harmony_engine/theory/modes.py

Run with: pytest tests/test_pitch.py -v
"""

import pytest

from harmony_engine.exceptions import HarmonyError, UnknownModeError, UnknownNoteError
from harmony_engine.theory.modes import (
    FUNCTION_GROUPS,
    MODAL_SIGNATURES,
    MODE_IDS,
    MODES,
    Mode,
    check_mode_tables,
    get_function_for_degree,
    get_modal_signatures,
    get_mode,
    mode_family,
    modes_in_family,
)
from harmony_engine.theory.pitch import (
    NOTE_TO_PC,
    interval_between,
    note_name,
    parse_note_name,
    prefers_flats,
    prefers_flats_for_key,
    transpose,
)


class TestParseNoteName:

    @pytest.mark.parametrize("name,pc", [
        ("C", 0), ("C#", 1), ("Db", 1), ("E", 4), ("F#", 6), ("Gb", 6),
        ("Ab", 8), ("Bb", 10), ("B", 11), (" A ", 9),
    ])
    def test_known_names(self, name, pc):
        assert parse_note_name(name) == pc

    @pytest.mark.parametrize("name", ["H", "Cb", "E#", "B#", "Fb", "C##", "", "c"])
    def test_unknown_names_raise(self, name):
        with pytest.raises(UnknownNoteError):
            parse_note_name(name)

    def test_error_is_value_error(self):
        """Callers catching ValueError keep working."""
        with pytest.raises(ValueError):
            parse_note_name("H")
        with pytest.raises(HarmonyError):
            parse_note_name("H")

    def test_table_has_17_spellings(self):
        assert len(NOTE_TO_PC) == 17
        assert set(NOTE_TO_PC.values()) == set(range(12))


class TestNoteName:

    def test_sharps_and_flats(self):
        assert note_name(1, use_flats=False) == "C#"
        assert note_name(1, use_flats=True) == "Db"
        assert note_name(4, use_flats=True) == "E"

    def test_reduces_any_integer(self):
        assert note_name(13, False) == "C#"
        assert note_name(-1, True) == "B"
        assert note_name(24, True) == "C"

    def test_transpose_and_interval(self):
        assert transpose(11, 2) == 1
        assert transpose(0, -1) == 11
        assert interval_between(7, 0) == 5


class TestFlatPreference:

    @pytest.mark.parametrize("tonic,expected", [
        ("F", True), ("Bb", True), ("Eb", True), ("Db", True),
        ("C", False), ("G", False), ("F#", False), ("C#", False),
    ])
    def test_prefers_flats(self, tonic, expected):
        assert prefers_flats(tonic) is expected

    @pytest.mark.parametrize("tonic,mode,expected", [
        ("Bb", "ionian", True),
        ("F#", "ionian", False),
        ("G", "aeolian", True),
        ("G", "harmonic_minor", True),
        ("C", "dorian", True),
        ("F", "mixolydian", True),
        ("D", "dorian", False),
        ("A", "aeolian", False),
        ("E", "phrygian", False),
    ])
    def test_prefers_flats_for_key(self, tonic, mode, expected):
        assert prefers_flats_for_key(tonic, mode) is expected

    @pytest.mark.parametrize("tonic,mode,expected", [
        ("Bb", "aeolian", True),    # relative Db major
        ("A#", "aeolian", False),   # relative C# major
        ("Ab", "aeolian", True),    # relative Cb major
        ("G#", "aeolian", False),   # relative B major
        ("Eb", "aeolian", True),    # relative Gb major
        ("D#", "aeolian", False),   # relative F# major
    ])
    def test_enharmonic_relative_majors_follow_the_tonic(self, tonic, mode, expected):
        assert prefers_flats_for_key(tonic, mode) is expected

    def test_unknown_mode_raises(self):
        with pytest.raises(UnknownModeError):
            prefers_flats_for_key("C", "bogus")


class TestModes:

    def test_registry_has_eight_modes(self):
        assert len(MODES) == 8
        assert "harmonic_minor" in MODE_IDS

    def test_intervals_are_valid(self):
        for mode in MODES.values():
            assert len(mode.intervals) == 7
            assert mode.intervals[0] == 0
            assert list(mode.intervals) == sorted(set(mode.intervals))

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            MODES["custom"] = MODES["ionian"]

    def test_invalid_mode_definition_rejected(self):
        with pytest.raises(ValueError):
            Mode("broken", "Broken", (0, 2, 4), ("1", "2", "3"), "major", 0, 0)
        with pytest.raises(ValueError):
            Mode("broken", "Broken", (0, 4, 2, 5, 7, 9, 11),
                 ("1", "2", "3", "4", "5", "6", "7"), "major", 0, 0)

    def test_get_mode(self):
        assert get_mode("dorian").intervals == (0, 2, 3, 5, 7, 9, 10)
        with pytest.raises(UnknownModeError):
            get_mode("hypolydian")

    def test_families(self):
        assert mode_family("lydian") == "major"
        assert mode_family("phrygian") == "minor"
        assert set(modes_in_family("major")) == {"ionian", "lydian", "mixolydian"}

    def test_functions(self):
        assert get_function_for_degree("ionian", 1) == "tonic"
        assert get_function_for_degree("ionian", 4) == "predominant"
        assert get_function_for_degree("ionian", 7) == "dominant"
        # Dominant wins for mixolydian's iii
        assert get_function_for_degree("mixolydian", 3) == "dominant"
        assert get_function_for_degree("locrian", 3) == "variable"

    def test_modal_signatures(self):
        assert get_modal_signatures("dorian") == ("IV", "ii")
        assert "VII" in get_modal_signatures("mixolydian")

    def test_tables_cover_registry(self):
        check_mode_tables(MODES, FUNCTION_GROUPS, MODAL_SIGNATURES)

    def test_incomplete_table_raises(self):
        partial = {k: v for k, v in MODAL_SIGNATURES.items() if k != "locrian"}
        with pytest.raises(RuntimeError, match="locrian"):
            check_mode_tables(MODES, FUNCTION_GROUPS, partial)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
