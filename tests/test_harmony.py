"""
Tests for harmony_engine/rules/harmony.py

Run with: pytest tests/test_harmony.py -v
"""

import pytest

from harmony_engine.exceptions import UnknownModeError, UnknownNoteError
from harmony_engine.rules.harmony import (
    build_diatonic_chords,
    degrees_to_chords,
    get_chord_from_degree,
    get_parallel_key,
    get_relative_key,
    get_scale,
    is_chord_in_key,
    validate_progression,
)
from harmony_engine.theory.modes import MODE_IDS


def symbols(tonic, mode, sevenths=False):
    return [c.symbol for c in build_diatonic_chords(tonic, mode, sevenths)]


def romans(tonic, mode, sevenths=False):
    return [c.roman for c in build_diatonic_chords(tonic, mode, sevenths)]


class TestScales:

    def test_g_mixolydian(self):
        assert get_scale("G", "mixolydian").note_names == ("G", "A", "B", "C", "D", "E", "F")

    def test_g_aeolian_uses_flats(self):
        scale = get_scale("G", "aeolian")
        assert scale.note_names == ("G", "A", "Bb", "C", "D", "Eb", "F")
        assert scale.use_flats is True

    def test_pitch_classes(self):
        assert get_scale("D", "dorian").pcs == (2, 4, 5, 7, 9, 11, 0)

    def test_errors(self):
        with pytest.raises(UnknownModeError):
            get_scale("C", "bogus")
        with pytest.raises(UnknownNoteError):
            get_scale("H", "ionian")


class TestTriads:

    def test_c_major(self):
        assert symbols("C", "ionian") == ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]
        assert romans("C", "ionian") == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]

    def test_bb_major_flats(self):
        assert symbols("Bb", "ionian") == ["Bb", "Cm", "Dm", "Eb", "F", "Gm", "Adim"]

    def test_f_major(self):
        assert symbols("F", "ionian") == ["F", "Gm", "Am", "Bb", "C", "Dm", "Edim"]

    def test_g_aeolian(self):
        assert symbols("G", "aeolian") == ["Gm", "Adim", "Bb", "Cm", "Dm", "Eb", "F"]

    def test_d_dorian(self):
        assert symbols("D", "dorian") == ["Dm", "Em", "F", "G", "Am", "Bdim", "C"]
        assert romans("D", "dorian")[3] == "IV"

    def test_harmonic_minor_augmented_third(self):
        chords = build_diatonic_chords("A", "harmonic_minor")
        assert chords[2].symbol == "Caug"
        assert chords[2].roman == "III+"
        assert chords[4].symbol == "E"


class TestSevenths:

    def test_a_aeolian(self):
        assert symbols("A", "aeolian", True) == ["Am7", "Bm7b5", "Cmaj7", "Dm7", "Em7", "Fmaj7", "G7"]
        assert romans("A", "aeolian", True) == ["i7", "iiø7", "IIImaj7", "iv7", "v7", "VImaj7", "VII7"]

    def test_e_major(self):
        assert symbols("E", "ionian", True) == [
            "Emaj7", "F#m7", "G#m7", "Amaj7", "B7", "C#m7", "D#m7b5",
        ]

    def test_a_harmonic_minor(self):
        chords = build_diatonic_chords("A", "harmonic_minor", include_sevenths=True)
        assert [c.symbol for c in chords] == [
            "Am(maj7)", "Bm7b5", "CaugMaj7", "Dm7", "E7", "Fmaj7", "G#dim7",
        ]
        assert chords[0].roman == "imaj7"
        assert chords[2].roman == "III+maj7"
        assert chords[6].roman == "vii°7"

    def test_tones_and_intervals(self):
        g7 = build_diatonic_chords("C", "ionian", True)[4]
        assert g7.tones == (7, 11, 2, 5)
        assert g7.tone_names == ("G", "B", "D", "F")
        assert g7.interval_names == ("1", "3", "5", "b7")
        assert g7.root == 7


class TestChordProperties:

    @pytest.mark.parametrize("mode", MODE_IDS)
    @pytest.mark.parametrize("sevenths", [False, True])
    def test_every_key_has_seven_chords_from_the_scale(self, mode, sevenths):
        scale = get_scale("F#", mode)
        chords = build_diatonic_chords("F#", mode, sevenths)
        assert [c.degree for c in chords] == list(range(1, 8))
        for chord in chords:
            assert len(chord.tones) == (4 if sevenths else 3)
            assert set(chord.tones) <= set(scale.pcs)

    def test_functions(self):
        chords = build_diatonic_chords("C", "ionian")
        assert [c.function for c in chords] == [
            "tonic", "predominant", "tonic", "predominant", "dominant", "tonic", "dominant",
        ]

    def test_idempotent(self):
        assert build_diatonic_chords("Eb", "lydian", True) == build_diatonic_chords("Eb", "lydian", True)

    def test_to_dict(self):
        data = build_diatonic_chords("C", "ionian")[0].to_dict()
        assert data["symbol"] == "C"
        assert data["tones"] == [0, 4, 7]


class TestHelpers:

    def test_degrees_to_chords(self):
        assert degrees_to_chords("C", "ionian", [1, 5, 6, 4]) == ["C", "G", "Am", "F"]
        with pytest.raises(ValueError):
            degrees_to_chords("C", "ionian", [1, 8])

    def test_get_chord_from_degree(self):
        assert get_chord_from_degree("G", "ionian", 5, include_sevenths=True).symbol == "D7"
        with pytest.raises(ValueError):
            get_chord_from_degree("C", "ionian", 0)

    def test_is_chord_in_key(self):
        assert is_chord_in_key("G7", "C")
        assert is_chord_in_key("Am", "C")
        assert not is_chord_in_key("F#", "C")

    def test_validate_progression(self):
        assert validate_progression(["C", "F", "G"], "C") == (True, [])
        assert validate_progression(["C", "F#", "G"], "C") == (False, ["F#"])

    @pytest.mark.parametrize("tonic,mode,expected", [
        ("C", "ionian", ("A", "aeolian")),
        ("A", "aeolian", ("C", "ionian")),
        ("D", "dorian", ("C", "ionian")),
        ("G", "aeolian", ("Bb", "ionian")),
        ("F", "ionian", ("D", "aeolian")),
        ("G", "mixolydian", ("A", "aeolian")),
    ])
    def test_relative_key(self, tonic, mode, expected):
        assert get_relative_key(tonic, mode) == expected

    def test_parallel_key(self):
        assert get_parallel_key("C", "ionian") == ("C", "aeolian")
        assert get_parallel_key("E", "phrygian") == ("E", "ionian")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
