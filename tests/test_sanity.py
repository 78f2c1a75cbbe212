"""
Test Suite - Basic Sanity Tests

These tests verify that the package structure is correct
and that basic imports work.

Run with: pytest tests/test_sanity.py -v
"""

import pytest


class TestPackageStructure:
    """Test that all packages can be imported."""

    def test_import_harmony_engine(self):
        """Test that the main package can be imported."""
        import harmony_engine
        assert hasattr(harmony_engine, "__version__")
        assert harmony_engine.__version__ == "0.1.0"

    def test_import_theory_package(self):
        """Test that theory subpackage can be imported."""
        import harmony_engine.theory

    def test_import_rules_package(self):
        """Test that rules subpackage can be imported."""
        import harmony_engine.rules

    def test_import_data_package(self):
        """Test that data subpackage can be imported."""
        import harmony_engine.data

    def test_import_app_package(self):
        """Test that app subpackage can be imported."""
        import harmony_engine.app.cli

    def test_public_api(self):
        """Test that the main operations are re-exported at the top level."""
        import harmony_engine
        for name in [
            "parse_key", "build_diatonic_chords", "get_chord_degree",
            "get_next_chord_suggestions_from_sequence", "suggest_substitutions",
            "filter_progressions", "transpose_progression",
            "find_matching_progressions", "suggest_next_chords",
            "get_starting_chords", "get_all_tags", "match_scales",
        ]:
            assert callable(getattr(harmony_engine, name)), name


class TestProjectPaths:
    """Test that the packaged dataset is where the config says."""

    def test_dataset_file_exists(self):
        from harmony_engine.config import DATASET_PATH
        assert DATASET_PATH.is_file()

    def test_dataset_env_override(self, monkeypatch, tmp_path):
        from harmony_engine.config import DATASET_ENV_VAR, get_dataset_path
        target = tmp_path / "custom.yaml"
        monkeypatch.setenv(DATASET_ENV_VAR, str(target))
        assert get_dataset_path() == target


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
