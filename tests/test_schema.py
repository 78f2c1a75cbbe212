"""
Tests for harmony_engine/data/schema.py and harmony_engine/data/dataset.py

Run with: pytest tests/test_schema.py -v
"""

import pytest
import yaml
from pydantic import ValidationError

from harmony_engine.data.dataset import load_progressions, save_progressions
from harmony_engine.data.schema import Progression, create_progression
from harmony_engine.exceptions import DatasetError


VALID_RECORD = {
    "id": "test_prog",
    "name": "Test Progression",
    "mode": "ionian",
    "chord_type": "triad",
    "weight": 7,
    "roman": ["I", "IV", "V7/V", "V"],
    "tags": ["Pop", " loop "],
}


class TestProgressionSchema:
    """Test the Progression model validators."""

    def test_valid_record(self):
        prog = Progression(**VALID_RECORD)
        assert prog.roman == ("I", "IV", "V7/V", "V")
        assert prog.mode_family == "major"
        assert prog.description == ""

    def test_tags_are_normalized(self):
        prog = Progression(**VALID_RECORD)
        assert prog.tags == ("pop", "loop")

    def test_mode_is_case_insensitive(self):
        prog = Progression(**{**VALID_RECORD, "mode": "Dorian"})
        assert prog.mode == "dorian"
        assert prog.mode_family == "minor"

    @pytest.mark.parametrize("field,value", [
        ("mode", "hypodorian"),
        ("chord_type", "ninth"),
        ("weight", 0),
        ("weight", 11),
        ("roman", []),
        ("roman", ["I", "VIII"]),
        ("roman", ["I", "V/X"]),
        ("id", ""),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Progression(**{**VALID_RECORD, field: value})

    def test_missing_field(self):
        record = dict(VALID_RECORD)
        del record["weight"]
        with pytest.raises(ValidationError):
            Progression(**record)

    def test_frozen(self):
        prog = Progression(**VALID_RECORD)
        with pytest.raises(ValidationError):
            prog.weight = 3

    def test_create_progression(self):
        prog = create_progression("x", "X", "aeolian", "seventh", 5, ["i7", "iv7"])
        assert prog.tags == ()
        assert prog.mode_family == "minor"


class TestDatasetLoading:
    """Test loading and saving YAML datasets."""

    def test_packaged_dataset_loads(self):
        progressions = load_progressions()
        assert len(progressions) >= 50
        assert progressions[0].id == "modal_dorian_vamp"

    def test_round_trip(self, tmp_path):
        path = tmp_path / "progressions.yaml"
        original = [Progression(**VALID_RECORD), create_progression("y", "Y", "lydian", "triad", 3, ["I", "II"])]
        save_progressions(original, path)
        assert load_progressions(path) == original

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({"progressions": [VALID_RECORD]}), encoding="utf-8")
        monkeypatch.setenv("HARMONY_ENGINE_PROGRESSIONS", str(path))
        assert [p.id for p in load_progressions()] == ["test_prog"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetError):
            load_progressions(tmp_path / "nope.yaml")

    def test_not_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("progressions: [unclosed", encoding="utf-8")
        with pytest.raises(DatasetError):
            load_progressions(path)

    def test_wrong_structure(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(DatasetError):
            load_progressions(path)

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "bad.yaml"
        bad = {**VALID_RECORD, "roman": ["I", "Q"]}
        path.write_text(yaml.safe_dump({"progressions": [bad]}), encoding="utf-8")
        with pytest.raises(DatasetError, match="test_prog"):
            load_progressions(path)

    def test_duplicate_ids(self, tmp_path):
        path = tmp_path / "dupes.yaml"
        path.write_text(yaml.safe_dump({"progressions": [VALID_RECORD, VALID_RECORD]}), encoding="utf-8")
        with pytest.raises(DatasetError, match="Duplicate"):
            load_progressions(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
