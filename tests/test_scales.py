"""
Tests for harmony_engine/theory/scales.py

Run with: pytest tests/test_scales.py -v
"""

import pytest

from harmony_engine.theory.scales import (
    SCALES,
    SCALES_BY_ID,
    get_scale_notes,
    match_scales,
)


def ids(matches):
    return [m.scale_id for m in matches]


class TestScaleLibrary:
    """Test the scale definitions."""

    def test_ids_unique(self):
        assert len(SCALES_BY_ID) == len(SCALES)

    @pytest.mark.parametrize("scale", SCALES, ids=lambda s: s.id)
    def test_labels_match_intervals(self, scale):
        assert len(scale.intervals) == len(scale.degree_labels)
        assert scale.intervals[0] == 0

    def test_get_scale_notes(self):
        assert get_scale_notes(0, "ionian") == [0, 2, 4, 5, 7, 9, 11]
        assert get_scale_notes(9, "minor_pentatonic") == [9, 0, 2, 4, 7]
        assert get_scale_notes(0, "bebop") == []


class TestMatchScales:
    """Test chord-scale ranking."""

    def test_major_seventh(self):
        matches = match_scales("Emaj7")
        assert matches[0].scale_id in ("ionian", "lydian")
        assert matches[0].score == 15
        assert "major_pentatonic" not in ids(matches)

    def test_dominant(self):
        matches = match_scales("B7")
        assert matches[0].scale_id == "mixolydian"
        assert {"diminished_hw", "lydian_dominant"} <= set(ids(matches))
        assert "altered" not in ids(matches)

    def test_key_context_ii_chord(self):
        top = match_scales("F#m7", key="E major")[0]
        assert top.scale_id == "dorian"
        assert top.score == 18
        assert "Diatonic to the key" in top.explanation

    def test_key_context_vi_chord(self):
        assert match_scales("F#m7", key="A major")[0].scale_id == "aeolian"

    def test_unparsable_key_is_ignored(self):
        assert match_scales("F#m7", key="not a key")[0].score == 15

    def test_pop_penalizes_jazz_colours(self):
        scores = {m.scale_id: m.score for m in match_scales("C7", style="pop")}
        assert scores["mixolydian"] == 15
        assert scores["diminished_hw"] == 7
        jazz_scores = {m.scale_id: m.score for m in match_scales("C7")}
        assert jazz_scores["diminished_hw"] == 10

    def test_alterations_are_chord_tones(self):
        result = ids(match_scales("G7b9"))
        assert "diminished_hw" in result
        assert "mixolydian" not in result

    def test_notes_follow_root_spelling(self):
        mixo = next(m for m in match_scales("Bb7") if m.scale_id == "mixolydian")
        assert mixo.notes == ("Bb", "C", "D", "Eb", "F", "G", "Ab")

    def test_sorted_descending(self):
        scores = [m.score for m in match_scales("Dm7", key="C major")]
        assert scores == sorted(scores, reverse=True)

    def test_unparsable_chord(self):
        assert match_scales("H7") == []

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            match_scales("C7", style="metal")

    def test_to_dict(self):
        data = match_scales("Cmaj7")[0].to_dict()
        assert set(data) == {"scale_id", "scale_name", "score", "notes", "explanation", "tags"}
        assert isinstance(data["notes"], list)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
