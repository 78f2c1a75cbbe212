"""
Theory Subpackage

Building blocks with no knowledge of chords or progressions:
    - pitch.py: Pitch classes, note names and sharp/flat preference
    - modes.py: The mode registry, function groups and modal signatures
    - scales.py: Chord-scale matching (imported on demand, it sits on top
                 of the chord analyzer)
"""

from harmony_engine.theory.modes import MODES, Mode, get_mode
from harmony_engine.theory.pitch import note_name, parse_note_name, prefers_flats, prefers_flats_for_key
