"""
Rules Subpackage

This package contains the rule-based harmony system:
    - key_parser.py: Free-text key parsing ("F# minor", "Bb dur")
    - harmony.py: Scales and diatonic chords of a key
    - roman.py: Roman numeral parsing and resolution to chord symbols
    - progressions.py: Dataset queries, transposition and sequence matching
    - chords.py: Chord symbol analysis and next-chord suggestions
    - substitutions.py: Rule table of chord substitutions

Usage:
    from harmony_engine.rules import parse_key, build_diatonic_chords

    key = parse_key("A minor")
    print([c.symbol for c in build_diatonic_chords(key.tonic, key.mode, True)])
"""

# Order matters: progressions loads the dataset, whose schema uses roman
from harmony_engine.rules.key_parser import Key, parse_key
from harmony_engine.rules.harmony import build_diatonic_chords, get_scale
from harmony_engine.rules.roman import parse_roman_numeral, roman_to_chord
from harmony_engine.rules.progressions import (
    filter_progressions,
    find_matching_progressions,
    suggest_next_chords,
    transpose_progression,
)
from harmony_engine.rules.chords import get_chord_degree, get_next_chord_suggestions_from_sequence
from harmony_engine.rules.substitutions import suggest_substitutions
