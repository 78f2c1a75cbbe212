"""
Roman Numeral Module - Parse Numerals and Resolve Them to Chords

Roman numerals here are mode-relative: "VII" in aeolian is the chord on the
natural seventh degree of the minor scale (G in A minor), and an accidental
such as "bII" is measured against the mode's own scale degree.

    parse_roman_numeral("iiø7")        → RomanNumeral(degree=2, quality="half-diminished", ...)
    roman_to_chord("bVII7", "C", "ionian") → "Bb7"
    roman_to_chord("V7/V", "C", "ionian")  → "D7"

Author: Rohan Rajendra Dhanawade
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from harmony_engine.rules.harmony import ROMAN_NUMERALS, build_diatonic_chords, get_scale
from harmony_engine.theory.modes import get_mode
from harmony_engine.theory.pitch import NOTE_TO_PC, note_name

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

ROMAN_PATTERN = re.compile(
    r"^([b#]{0,2})(VII|VI|V|IV|III|II|I|vii|vi|v|iv|iii|ii|i)([°ø+]?)(maj7|7|6)?$"
)

LETTERS = "CDEFGAB"
NATURAL_PCS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

ACCIDENTAL_OFFSETS = {"": 0, "#": 1, "##": 2, "b": -1, "bb": -2}

# Triad quality of each diatonic-chord quality
_TRIAD_OF = {
    "major": "major",
    "minor": "minor",
    "diminished": "diminished",
    "half-diminished": "diminished",
    "augmented": "augmented",
}


# =============================================================================
# PARSED NUMERAL
# =============================================================================

@dataclass(frozen=True)
class RomanNumeral:
    """A parsed Roman numeral token."""
    accidental: str
    degree: int
    quality: str
    extension: str
    is_upper: bool

    @property
    def semitone_offset(self) -> int:
        return ACCIDENTAL_OFFSETS[self.accidental]

    def chord_suffix(self) -> str:
        """Chord-symbol suffix implied by quality and extension."""
        ext = self.extension
        if self.quality == "half-diminished":
            return "m7b5"
        if self.quality == "diminished":
            return "dim7" if ext else "dim"
        if self.quality == "augmented":
            if ext == "maj7":
                return "augMaj7"
            return "aug7" if ext else "aug"
        if self.quality == "minor":
            if ext == "maj7":
                return "m(maj7)"
            return "m" + ext
        return ext


def parse_roman_numeral(token: str) -> Optional[RomanNumeral]:
    """Parse a single Roman numeral; secondary numerals ("V7/V") return None."""
    match = ROMAN_PATTERN.match(token.strip())
    if not match:
        return None

    accidental, numeral, mark, extension = match.groups()
    is_upper = numeral.isupper()

    if mark == "°":
        quality = "diminished"
    elif mark == "ø":
        quality = "half-diminished"
    elif mark == "+":
        quality = "augmented"
    else:
        quality = "major" if is_upper else "minor"

    return RomanNumeral(
        accidental=accidental,
        degree=ROMAN_NUMERALS.index(numeral.upper()) + 1,
        quality=quality,
        extension=extension or "",
        is_upper=is_upper,
    )


def is_valid_roman(token: str) -> bool:
    """True for plain numerals and for secondary numerals such as "vii°7/V"."""
    if "/" in token:
        head, _, target = token.partition("/")
        return parse_roman_numeral(head) is not None and parse_roman_numeral(target) is not None
    return parse_roman_numeral(token) is not None


# =============================================================================
# SPELLING
# =============================================================================

def spell_degree_root(tonic: str, degree: int, pc: int, use_flats: bool) -> str:
    """
    Spell the root of a chord on a scale degree.

    The letter follows the degree (the third degree of C is some kind of E),
    so bIII in C is "Eb" and #iv in C is "F#". When that spelling would
    need a double accidental or an E#/B#/Cb/Fb, the key's sharp or flat
    preference takes over.
    """
    letter_index = LETTERS.index(tonic.strip()[0].upper())
    letter = LETTERS[(letter_index + degree - 1) % 7]
    diff = (pc - NATURAL_PCS[letter]) % 12
    candidate = letter + {0: "", 1: "#", 11: "b"}.get(diff, "?")
    if candidate in NOTE_TO_PC:
        return candidate
    return note_name(pc, use_flats)


def _degree_root(roman: RomanNumeral, tonic: str, mode: str) -> Tuple[int, str]:
    scale = get_scale(tonic, mode)
    pc = (scale.pcs[roman.degree - 1] + roman.semitone_offset) % 12
    return pc, spell_degree_root(tonic, roman.degree, pc, scale.use_flats)


def resolve_roman(
    roman: str, tonic: str, mode: str = "ionian"
) -> Optional[Tuple[int, str, RomanNumeral]]:
    """
    Find the root of a numeral in a key.

    Secondary numerals "X/Y" resolve X in the major scale built on degree Y
    of the key.

    Returns:
        (root pitch class, spelled root, parsed head numeral), or None
    """
    if "/" in roman:
        head, _, target = roman.partition("/")
        head_rn = parse_roman_numeral(head)
        target_rn = parse_roman_numeral(target)
        if head_rn is None or target_rn is None:
            return None
        _, target_root = _degree_root(target_rn, tonic, mode)
        pc, root = _degree_root(head_rn, target_root, "ionian")
        return pc, root, head_rn

    parsed = parse_roman_numeral(roman)
    if parsed is None:
        return None
    pc, root = _degree_root(parsed, tonic, mode)
    return pc, root, parsed


def roman_to_chord(roman: str, tonic: str, mode: str = "ionian") -> str:
    """Convert a Roman numeral into a chord symbol; unparsable tokens come back unchanged."""
    resolved = resolve_roman(roman, tonic, mode)
    if resolved is None:
        logger.debug("Cannot resolve numeral %r", roman)
        return roman
    _, root, parsed = resolved
    return root + parsed.chord_suffix()


# =============================================================================
# MODE RELATIONS
# =============================================================================

def tonic_roman(mode: str) -> str:
    """Tonic triad numeral of a mode: "I", "i", or "i°" for locrian."""
    return build_diatonic_chords("C", mode)[0].roman


def is_diatonic(roman: str, mode: str) -> bool:
    """
    Check whether a numeral names a chord native to the mode.

    The root must carry no accidental and the triad quality must match the
    mode's own chord on that degree. Secondary numerals are never diatonic.
    """
    if "/" in roman:
        return False
    parsed = parse_roman_numeral(roman)
    if parsed is None or parsed.accidental:
        return False

    # Any tonic works; only the qualities are compared
    chord = build_diatonic_chords("C", mode)[parsed.degree - 1]
    return _TRIAD_OF[parsed.quality] == _TRIAD_OF[chord.quality]


def relative_ionian_label(roman: str, mode: str) -> Optional[str]:
    """
    Rename a numeral to its degree in the relative major.

    D dorian "i" is the ii chord of C major, so it becomes "ii (Rel. Ionian)".
    Ionian itself and chromatic numerals get no label.
    """
    mode_def = get_mode(mode)
    if mode_def.relative_major_offset == 0:
        return None

    parsed = parse_roman_numeral(roman)
    if parsed is None or parsed.accidental:
        return None

    degree = (parsed.degree - 1 + mode_def.ionian_rotation) % 7 + 1
    base = ROMAN_NUMERALS[degree - 1]
    if parsed.quality in ("minor", "diminished", "half-diminished"):
        base = base.lower()

    mark = {"diminished": "°", "half-diminished": "ø", "augmented": "+"}.get(parsed.quality, "")
    return f"{base}{mark}{parsed.extension} (Rel. Ionian)"
