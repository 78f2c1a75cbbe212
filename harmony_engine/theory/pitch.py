"""
Pitch Module - Pitch-Class Arithmetic and Enharmonic Spelling

Every note is reduced to a pitch class (0-11, C=0). Spelling a pitch class
back into a name needs one extra bit of context: whether the key is written
with sharps or flats.

    parse_note_name("Bb")        → 10
    note_name(10, use_flats=False) → "A#"
    prefers_flats_for_key("G", "aeolian") → True  (relative major is Bb)
"""

from typing import Dict

from harmony_engine.exceptions import UnknownNoteError
from harmony_engine.theory.modes import get_mode


# =============================================================================
# CONSTANTS
# =============================================================================

SHARP_NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLAT_NOTES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

NOTE_TO_PC: Dict[str, int] = {
    "C": 0, "C#": 1, "Db": 1, "D": 2, "D#": 3, "Eb": 3, "E": 4,
    "F": 5, "F#": 6, "Gb": 6, "G": 7, "G#": 8, "Ab": 8, "A": 9,
    "A#": 10, "Bb": 10, "B": 11,
}

# Tonics conventionally written with flats (lowercase entries are minor keys)
FLAT_PREFERRED_TONICS = frozenset([
    "F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb",
    "d", "g", "c", "f", "bb", "eb",
])

# Relative-major pitch classes: Eb, F, Ab, Bb are flat keys; C, D, E, G, A sharp
FLAT_MAJOR_PCS = frozenset([3, 5, 8, 10])
SHARP_MAJOR_PCS = frozenset([0, 2, 4, 7, 9])


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def parse_note_name(name: str) -> int:
    """Get the pitch class (0-11) of a canonical note name."""
    pc = NOTE_TO_PC.get(name.strip())
    if pc is None:
        raise UnknownNoteError(name)
    return pc


def note_name(pc: int, use_flats: bool) -> str:
    """Spell a pitch class; any integer is accepted and reduced mod 12."""
    names = FLAT_NOTES if use_flats else SHARP_NOTES
    return names[pc % 12]


def transpose(pc: int, semitones: int) -> int:
    return (pc + semitones) % 12


def interval_between(root: int, other: int) -> int:
    """Ascending interval in semitones from root to other."""
    return (other - root) % 12


def _accidental_of(tonic: str) -> str:
    return tonic.strip()[1:]


def prefers_flats(tonic: str) -> bool:
    """
    Decide the spelling of a literal tonic string.

    An explicit flat wins, then an explicit sharp; a natural tonic falls back
    to the set of conventionally flat tonics ("F" → flats, "G" → sharps).
    """
    tonic = tonic.strip()
    if "b" in _accidental_of(tonic):
        return True
    if "#" in tonic:
        return False
    return tonic in FLAT_PREFERRED_TONICS


def prefers_flats_for_key(tonic: str, mode: str) -> bool:
    """
    Decide the spelling of a (tonic, mode) pair from its relative major.

    G aeolian has the notes of Bb major, so it spells with flats even though
    "G" alone looks sharp-neutral. Db/C#, F#/Gb and B/Cb majors exist both
    ways and are settled by how the tonic itself is written.
    """
    mode_def = get_mode(mode)
    if mode_def.relative_major_offset == 0:
        return prefers_flats(tonic)

    accidental = _accidental_of(tonic)
    relative_pc = (parse_note_name(tonic) - mode_def.relative_major_offset) % 12

    if relative_pc in FLAT_MAJOR_PCS:
        return True
    if relative_pc in SHARP_MAJOR_PCS:
        return False
    if relative_pc == 1:
        return "#" not in accidental
    if relative_pc == 11:
        return "b" in accidental
    return prefers_flats(tonic)
