"""
Chords Module - Chord Symbol Analysis

Reads chord symbols the way musicians write them ("F#m7b5", "Bbmaj7",
"C/E", "G7#9") and relates them to a key:
    - parse_chord_symbol: root, quality and extension of a symbol
    - get_chord_degree: Roman numeral of a chord in a key ("Am" in C → "vi")
    - get_next_chord_suggestions_from_sequence: next-chord ideas for a
      sequence of chord symbols, rendered at a chosen complexity

Parsing never raises: anything that cannot be read returns None.

Author: Rohan Rajendra Dhanawade
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from harmony_engine.rules.harmony import ROMAN_NUMERALS, build_diatonic_chords, get_scale
from harmony_engine.rules.key_parser import coerce_key, split_root
from harmony_engine.rules.progressions import get_starting_chords, suggest_next_chords
from harmony_engine.rules.roman import LETTERS, is_diatonic, resolve_roman, spell_degree_root
from harmony_engine.theory.pitch import NOTE_TO_PC

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

QUALITY_INTERVALS = {
    "major": (0, 4, 7),
    "minor": (0, 3, 7),
    "diminished": (0, 3, 6),
    "half-diminished": (0, 3, 6),
    "augmented": (0, 4, 8),
}

# Signed semitone difference (mod 12) → Roman numeral accidental
ACCIDENTAL_FOR_DIFF = {0: "", 1: "#", 2: "##", 11: "b", 10: "bb"}

MINOR_PATTERN = re.compile(r"^(min|m(?!aj))")
EXTENSION_PATTERN = re.compile(r"13|11|9|7")
MAJOR_SEVENTH_PATTERN = re.compile(r"(maj|Maj|MA|M|Δ)(7|9|11|13)|Δ")
ADD_PATTERN = re.compile(r"add\d+")

PROFILES = ("triad", "seventh", "jazz")

TRIAD_SUFFIX = {
    "major": "",
    "minor": "m",
    "diminished": "dim",
    "half-diminished": "dim",
    "augmented": "aug",
}

# Seventh family for chromatic numerals without an explicit extension
SEVENTH_SUFFIX = {
    "major": "7",
    "minor": "m7",
    "diminished": "dim7",
    "half-diminished": "m7b5",
    "augmented": "aug7",
}

JAZZ_VARIANTS = {
    "m7": ["m9", "m11", "m13"],
    "7": ["9", "11", "13"],
}

ALTERED_DOMINANTS = ["7b9", "7#9", "7#11", "7b13", "7alt"]


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ChordSymbolParse:
    """Root, quality and extension read from a chord symbol."""
    root_letter: str
    accidental: str
    root_pc: int
    quality: str
    extension: str
    bass: Optional[str] = None

    @property
    def root(self) -> str:
        return self.root_letter + self.accidental

    @property
    def tones(self) -> Tuple[int, ...]:
        intervals = list(QUALITY_INTERVALS[self.quality])
        if self.quality == "half-diminished":
            intervals.append(10)
        elif self.extension == "7":
            intervals.append(9 if self.quality == "diminished" else 10)
        elif self.extension == "maj7":
            intervals.append(11)
        elif self.extension == "6":
            intervals.append(9)
        return tuple((self.root_pc + iv) % 12 for iv in intervals)


@dataclass(frozen=True)
class SequenceSuggestion:
    """A next-chord suggestion rendered as a concrete chord symbol."""
    roman: str
    symbol: str
    variants: Tuple[str, ...] = ()
    frequency: float = 0.0
    is_diatonic: bool = True
    secondary_label: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "roman": self.roman,
            "symbol": self.symbol,
            "variants": list(self.variants),
            "frequency": self.frequency,
            "is_diatonic": self.is_diatonic,
            "secondary_label": self.secondary_label,
        }


# =============================================================================
# PARSING
# =============================================================================

def _detect_quality(rest: str) -> Tuple[str, Optional[str]]:
    """Quality of a chord suffix, plus an extension forced by the quality token."""
    if "m7b5" in rest or "ø" in rest:
        return "half-diminished", "7"
    if "dim7" in rest or "°7" in rest:
        return "diminished", "7"
    if "dim" in rest or "°" in rest:
        return "diminished", None
    if "aug" in rest or "+" in rest:
        return "augmented", None
    if MINOR_PATTERN.match(rest):
        return "minor", None
    return "major", None


def _detect_extension(rest: str) -> str:
    rest = ADD_PATTERN.sub("", rest)
    if EXTENSION_PATTERN.search(rest):
        return "maj7" if MAJOR_SEVENTH_PATTERN.search(rest) else "7"
    if "Δ" in rest:
        return "maj7"
    if "6" in rest:
        return "6"
    return ""


def parse_chord_symbol(symbol: str) -> Optional[ChordSymbolParse]:
    """
    Parse a chord symbol.

    Examples:
        parse_chord_symbol("F#m7b5") → root F#, half-diminished, "7"
        parse_chord_symbol("C/E")    → root C, major, bass "E"
        parse_chord_symbol("H7")     → None

    Returns:
        ChordSymbolParse, or None when the symbol has no readable root
    """
    if not symbol:
        return None

    head, slash, bass = symbol.strip().partition("/")
    parts = split_root(head)
    if parts is None:
        logger.debug("No root in chord symbol %r", symbol)
        return None

    letter, accidental, rest = parts
    root = letter + accidental
    if root not in NOTE_TO_PC:
        logger.debug("Root %r of chord %r is not a supported spelling", root, symbol)
        return None

    rest = rest.strip()
    quality, forced_extension = _detect_quality(rest)
    extension = forced_extension or _detect_extension(rest)

    return ChordSymbolParse(
        root_letter=letter,
        accidental=accidental,
        root_pc=NOTE_TO_PC[root],
        quality=quality,
        extension=extension,
        bass=bass.strip() if slash else None,
    )


# =============================================================================
# DEGREE ANALYSIS
# =============================================================================

def _chromatic_degree(parsed: ChordSymbolParse, tonic: str, scale) -> Optional[Tuple[int, str]]:
    """
    (degree index, accidental) of a root outside the scale.

    A numeral qualifies when spelling it in the key gives back the chord's
    root, so "D" in Gb major reads as bVI and "F#" in C as #IV. Single
    accidentals win over double ones; diminished chords lean sharp and the
    rest lean flat.
    """
    lean = "#" if parsed.quality in ("diminished", "half-diminished") else "b"
    candidates = []
    for index, expected in enumerate(scale.pcs):
        accidental = ACCIDENTAL_FOR_DIFF.get((parsed.root_pc - expected) % 12)
        if not accidental:
            continue
        if spell_degree_root(tonic, index + 1, parsed.root_pc, scale.use_flats) != parsed.root:
            continue
        candidates.append((len(accidental), accidental[0] != lean, index, accidental))
    if not candidates:
        return None
    _, _, index, accidental = min(candidates)
    return index, accidental


def get_chord_degree(symbol: str, key) -> Optional[str]:
    """
    Roman numeral of a chord relative to a key.

    A root inside the scale takes that degree with no accidental, whatever
    its letter (E# is spelled "F" in F# major and is still vii). Other roots
    take the numeral whose spelling in the key matches them, falling back to
    the letter distance between chord root and tonic. A slash bass is ignored.

    Args:
        symbol: Chord symbol ("Am", "Cmaj7", "C/E")
        key: Key string ("C Major", "Gm") or a Key

    Returns:
        Roman numeral ("vi", "Imaj7", "bII", "iiø7"), or None when the key or
        chord cannot be read, or the accidental would exceed two semitones
    """
    key_obj = coerce_key(key)
    if key_obj is None:
        return None
    parsed = parse_chord_symbol(symbol)
    if parsed is None:
        return None

    scale = get_scale(key_obj.tonic, key_obj.mode)
    if parsed.root_pc in scale.pcs:
        degree_index, accidental = scale.pcs.index(parsed.root_pc), ""
    else:
        found = _chromatic_degree(parsed, key_obj.tonic, scale)
        if found is not None:
            degree_index, accidental = found
        else:
            degree_index = (LETTERS.index(parsed.root_letter) - LETTERS.index(key_obj.tonic[0])) % 7
            accidental = ACCIDENTAL_FOR_DIFF.get((parsed.root_pc - scale.pcs[degree_index]) % 12)
            if accidental is None:
                logger.debug("%s is too far from degree %d of %s", symbol, degree_index + 1, key_obj)
                return None

    numeral = ROMAN_NUMERALS[degree_index]
    if parsed.quality in ("minor", "diminished", "half-diminished"):
        numeral = numeral.lower()

    if parsed.quality == "diminished":
        suffix = "°7" if parsed.extension == "7" else "°"
    elif parsed.quality == "half-diminished":
        suffix = "ø7"
    elif parsed.quality == "augmented":
        suffix = "+" + parsed.extension
    else:
        suffix = parsed.extension

    return accidental + numeral + suffix


def get_chord_suggestions(key) -> List[str]:
    """The key's diatonic seventh chords, a sensible default palette."""
    key_obj = coerce_key(key)
    if key_obj is None:
        return []
    return [c.symbol for c in build_diatonic_chords(key_obj.tonic, key_obj.mode, True)]


# =============================================================================
# SEQUENCE SUGGESTIONS
# =============================================================================

def _render(roman: str, tonic: str, mode: str, profile: str, use_spice: bool):
    """(symbol, variants) of a numeral at a complexity profile."""
    resolved = resolve_roman(roman, tonic, mode)
    if resolved is None:
        return roman, ()
    _, root, parsed = resolved

    if profile == "triad":
        return root + TRIAD_SUFFIX[parsed.quality], ()

    if parsed.extension or parsed.quality == "half-diminished":
        suffix = parsed.chord_suffix()
    elif is_diatonic(roman, mode):
        suffix = build_diatonic_chords(tonic, mode, True)[parsed.degree - 1].suffix
    else:
        suffix = SEVENTH_SUFFIX[parsed.quality]

    if profile == "seventh":
        return root + suffix, ()

    variants = [root + v for v in JAZZ_VARIANTS.get(suffix, [])]
    if suffix == "7" and use_spice:
        variants.extend(root + v for v in ALTERED_DOMINANTS)
    return root + suffix, tuple(variants)


def get_next_chord_suggestions_from_sequence(
    sequence: Sequence[str],
    key,
    profile: str = "seventh",
    use_spice: bool = False,
) -> List[SequenceSuggestion]:
    """
    Suggest next chords for a sequence of chord symbols.

    The symbols are analysed into Roman numerals in the key (chords that
    cannot be analysed are skipped), matched against the progression
    dataset, and the suggestions are rendered back into chord symbols.

    Args:
        sequence: Chord symbols played so far (may be empty)
        key: Key string or Key
        profile: "triad" (plain triads), "seventh" (seventh chords) or
                 "jazz" (sevenths plus 9/11/13 variants)
        use_spice: Allow chromatic suggestions and altered dominants

    Returns:
        Suggestions ranked by frequency; empty when the key cannot be read

    Raises:
        ValueError: If profile is unknown
    """
    if profile not in PROFILES:
        raise ValueError(f"Profile must be one of {list(PROFILES)}. Got: '{profile}'")

    key_obj = coerce_key(key)
    if key_obj is None:
        return []

    romans = []
    for symbol in sequence:
        roman = get_chord_degree(symbol, key_obj)
        if roman is None:
            logger.debug("Skipping %r: cannot place it in %s", symbol, key_obj)
            continue
        romans.append(roman)

    if romans:
        base = suggest_next_chords(romans, key_obj.tonic, key_obj.mode, use_spice)
    else:
        base = get_starting_chords(key_obj.mode, key_obj.tonic, use_spice)

    suggestions = []
    for s in base:
        symbol, variants = _render(s.roman, key_obj.tonic, key_obj.mode, profile, use_spice)
        suggestions.append(SequenceSuggestion(
            roman=s.roman,
            symbol=symbol,
            variants=variants,
            frequency=s.frequency,
            is_diatonic=s.is_diatonic,
            secondary_label=s.secondary_label,
        ))
    return suggestions


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing chords.py")
    print("=" * 60)

    for chord, key in [("Am", "C Major"), ("Cmaj7", "C Major"), ("C/E", "C"),
                       ("Ab", "Gm"), ("F#m7b5", "Em"), ("H7", "C")]:
        print(f"  {chord:8} in {key:8} → {get_chord_degree(chord, key)}")

    print("\n✓ Next after C, Am (jazz):")
    for s in get_next_chord_suggestions_from_sequence(["C", "Am"], "C", profile="jazz")[:4]:
        print(f"  {s.roman:6} {s.symbol:8} {', '.join(s.variants)}")
