"""
Harmony Engine - Source Package

A music-harmony analysis and suggestion engine: parse keys and chord
symbols, build the diatonic chords of a key, place chords on scale degrees,
suggest substitutions, and match or extend progressions against a curated
dataset of Roman-numeral progressions.

Subpackages:
    - harmony_engine.theory: Pitch spelling, the mode registry, scales
    - harmony_engine.rules: Key parsing, diatonic harmony, Roman numerals,
      chord analysis, substitutions and progression matching
    - harmony_engine.data: Progression schema and the YAML dataset
    - harmony_engine.app: Command-line interface

Example usage:
    from harmony_engine import parse_key, build_diatonic_chords

    key = parse_key("Bb major")
    chords = build_diatonic_chords(key.tonic, key.mode)
    print([c.symbol for c in chords])  # ['Bb', 'Cm', 'Dm', 'Eb', 'F', 'Gm', 'Adim']
"""

__version__ = "0.1.0"
__author__ = "Rohan Rajendra Dhanawade"

# rules must load before data: the dataset schema validates Roman numerals
from harmony_engine.exceptions import DatasetError, HarmonyError, UnknownModeError, UnknownNoteError
from harmony_engine.rules.key_parser import Key, parse_key
from harmony_engine.rules.harmony import (
    DiatonicChord,
    build_diatonic_chords,
    get_parallel_key,
    get_relative_key,
    get_scale,
)
from harmony_engine.rules.roman import parse_roman_numeral, roman_to_chord
from harmony_engine.rules.progressions import (
    filter_progressions,
    find_matching_progressions,
    get_all_tags,
    get_starting_chords,
    suggest_next_chords,
    transpose_progression,
)
from harmony_engine.rules.chords import (
    get_chord_degree,
    get_chord_suggestions,
    get_next_chord_suggestions_from_sequence,
    parse_chord_symbol,
)
from harmony_engine.rules.substitutions import SubstitutionCandidate, suggest_substitutions
from harmony_engine.theory.scales import match_scales
