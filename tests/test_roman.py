"""
Tests for harmony_engine/rules/roman.py

Run with: pytest tests/test_roman.py -v
"""

import pytest

from harmony_engine.rules.roman import (
    is_diatonic,
    is_valid_roman,
    parse_roman_numeral,
    relative_ionian_label,
    resolve_roman,
    roman_to_chord,
    spell_degree_root,
    tonic_roman,
)


class TestParseRomanNumeral:

    def test_flat_seventh(self):
        rn = parse_roman_numeral("bVII7")
        assert rn.accidental == "b"
        assert rn.degree == 7
        assert rn.quality == "major"
        assert rn.extension == "7"
        assert rn.semitone_offset == -1

    def test_half_diminished(self):
        rn = parse_roman_numeral("iiø7")
        assert rn.degree == 2
        assert rn.quality == "half-diminished"
        assert not rn.is_upper

    def test_sharp_diminished(self):
        rn = parse_roman_numeral("#iv°")
        assert rn.accidental == "#"
        assert rn.quality == "diminished"
        assert rn.extension == ""

    def test_minor_sixth(self):
        rn = parse_roman_numeral("i6")
        assert rn.quality == "minor"
        assert rn.extension == "6"

    @pytest.mark.parametrize("token", ["V7/V", "VIII", "X", "", "7", "IM7"])
    def test_rejects(self, token):
        assert parse_roman_numeral(token) is None

    def test_is_valid_roman(self):
        assert is_valid_roman("V7/V")
        assert is_valid_roman("vii°7/V")
        assert is_valid_roman("bVImaj7")
        assert not is_valid_roman("V/X")
        assert not is_valid_roman("VIII")


class TestRomanToChord:

    @pytest.mark.parametrize("roman,tonic,mode,chord", [
        ("I", "C", "ionian", "C"),
        ("Imaj7", "C", "ionian", "Cmaj7"),
        ("vi", "G", "ionian", "Em"),
        ("bIII", "C", "ionian", "Eb"),
        ("bVII7", "C", "ionian", "Bb7"),
        ("bII7", "C", "ionian", "Db7"),
        ("bVII", "Bb", "ionian", "Ab"),
        ("bVI", "E", "ionian", "C"),
        ("#iv°", "C", "ionian", "F#dim"),
        ("#i°7", "C", "ionian", "C#dim7"),
        ("iiø7", "A", "aeolian", "Bm7b5"),
        ("VII", "A", "aeolian", "G"),
        ("V", "A", "aeolian", "E"),
        ("bII", "A", "aeolian", "Bb"),
        ("i6", "A", "aeolian", "Am6"),
        ("III+maj7", "A", "harmonic_minor", "CaugMaj7"),
        ("imaj7", "A", "harmonic_minor", "Am(maj7)"),
        ("II", "C", "lydian", "D"),
        ("VII", "D", "mixolydian", "C"),
    ])
    def test_resolves(self, roman, tonic, mode, chord):
        assert roman_to_chord(roman, tonic, mode) == chord

    @pytest.mark.parametrize("roman,tonic,chord", [
        ("V7/V", "C", "D7"),
        ("vii°7/V", "C", "F#dim7"),
        ("V7/vi", "Eb", "G7"),
        ("V7/ii", "C", "A7"),
    ])
    def test_secondary_numerals(self, roman, tonic, chord):
        assert roman_to_chord(roman, tonic, "ionian") == chord

    def test_unparsable_tokens_come_back_unchanged(self):
        assert roman_to_chord("xyz", "C") == "xyz"
        assert roman_to_chord("VIII", "C") == "VIII"
        assert resolve_roman("xyz", "C") is None

    def test_resolve_roman_returns_pitch_class(self):
        pc, root, parsed = resolve_roman("bVI", "C")
        assert pc == 8
        assert root == "Ab"
        assert parsed.degree == 6

    def test_spelling_falls_back_when_letter_spelling_is_not_canonical(self):
        # The third degree of C# is E#, which is not a supported spelling
        assert spell_degree_root("C#", 3, 5, use_flats=False) == "F"
        assert spell_degree_root("C", 3, 3, use_flats=False) == "Eb"


class TestModeRelations:

    def test_tonic_roman(self):
        assert tonic_roman("ionian") == "I"
        assert tonic_roman("lydian") == "I"
        assert tonic_roman("dorian") == "i"
        assert tonic_roman("harmonic_minor") == "i"
        assert tonic_roman("locrian") == "i°"

    @pytest.mark.parametrize("roman,mode,expected", [
        ("V", "ionian", True),
        ("v", "ionian", False),
        ("vii°", "ionian", True),
        ("bVII", "ionian", False),
        ("VII", "aeolian", True),
        ("V7", "aeolian", False),
        ("iiø7", "aeolian", True),
        ("ii", "aeolian", False),
        ("IV7", "dorian", True),
        ("V7/V", "ionian", False),
        ("nonsense", "ionian", False),
    ])
    def test_is_diatonic(self, roman, mode, expected):
        assert is_diatonic(roman, mode) is expected

    @pytest.mark.parametrize("roman,mode,label", [
        ("i", "dorian", "ii (Rel. Ionian)"),
        ("i7", "dorian", "ii7 (Rel. Ionian)"),
        ("IV", "dorian", "V (Rel. Ionian)"),
        ("VII", "aeolian", "V (Rel. Ionian)"),
        ("II", "phrygian", "IV (Rel. Ionian)"),
        ("I", "ionian", None),
        ("bII", "phrygian", None),
    ])
    def test_relative_ionian_label(self, roman, mode, label):
        assert relative_ionian_label(roman, mode) == label


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
