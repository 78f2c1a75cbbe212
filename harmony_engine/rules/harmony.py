"""
Harmony Module - Diatonic Chords for Any Key

This module encodes the music theory the rest of the engine builds on.
It can:
    1. Build the scale of any tonic in any of the eight registered modes
    2. Derive the seven diatonic chords (triads or sevenths) of a key
    3. Label each chord with a Roman numeral and a harmonic function
    4. Find relative and parallel keys

Chords are built by stacking thirds inside the scale. Quality comes only
from the intervals above the root, so the same code serves every mode.

Author: Rohan Rajendra Dhanawade
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from harmony_engine.theory.modes import get_function_for_degree, get_mode
from harmony_engine.theory.pitch import (
    note_name,
    parse_note_name,
    prefers_flats_for_key,
)


# =============================================================================
# CONSTANTS
# =============================================================================

ROMAN_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]

# (third, fifth) above the root → triad quality
TRIAD_QUALITIES: Dict[Tuple[int, int], str] = {
    (4, 7): "major",
    (3, 7): "minor",
    (3, 6): "diminished",
}

TRIAD_SUFFIXES = {
    "major": "",
    "minor": "m",
    "diminished": "dim",
    "augmented": "aug",
}

# (triad quality, seventh) → (symbol suffix, chord quality, roman suffix)
SEVENTH_CHORDS: Dict[Tuple[str, int], Tuple[str, str, str]] = {
    ("major", 11): ("maj7", "major", "maj7"),
    ("major", 10): ("7", "major", "7"),
    ("minor", 10): ("m7", "minor", "7"),
    ("minor", 11): ("m(maj7)", "minor", "maj7"),
    ("diminished", 10): ("m7b5", "half-diminished", "ø7"),
    ("diminished", 9): ("dim7", "diminished", "°7"),
    ("augmented", 11): ("augMaj7", "augmented", "+maj7"),
    ("augmented", 10): ("aug7", "augmented", "+7"),
}

TRIAD_ROMAN_SUFFIXES = {
    "major": "",
    "minor": "",
    "diminished": "°",
    "augmented": "+",
}

THIRD_NAMES = {3: "b3", 4: "3"}
FIFTH_NAMES = {6: "b5", 7: "5", 8: "#5"}
SEVENTH_NAMES = {9: "bb7", 10: "b7", 11: "7"}


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ScaleInfo:
    """The seven pitch classes of a key with their spelled names."""
    tonic: str
    tonic_pc: int
    mode: str
    pcs: Tuple[int, ...]
    note_names: Tuple[str, ...]
    use_flats: bool


@dataclass(frozen=True)
class DiatonicChord:
    """One chord of a key, built on a scale degree."""
    degree: int
    roman: str
    symbol: str
    quality: str
    function: str
    tones: Tuple[int, ...]
    suffix: str = ""
    tone_names: Tuple[str, ...] = ()
    interval_names: Tuple[str, ...] = ()

    @property
    def root(self) -> int:
        return self.tones[0]

    def to_dict(self) -> Dict:
        return {
            "degree": self.degree,
            "roman": self.roman,
            "symbol": self.symbol,
            "quality": self.quality,
            "function": self.function,
            "tones": list(self.tones),
            "tone_names": list(self.tone_names),
            "interval_names": list(self.interval_names),
        }


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def get_scale(tonic: str, mode: str = "ionian") -> ScaleInfo:
    """Build the scale of a tonic in a mode."""
    mode_def = get_mode(mode)
    tonic_pc = parse_note_name(tonic)
    use_flats = prefers_flats_for_key(tonic, mode)

    pcs = tuple((tonic_pc + iv) % 12 for iv in mode_def.intervals)
    names = tuple(note_name(pc, use_flats) for pc in pcs)

    return ScaleInfo(
        tonic=tonic.strip(),
        tonic_pc=tonic_pc,
        mode=mode,
        pcs=pcs,
        note_names=names,
        use_flats=use_flats,
    )


def triad_quality(third: int, fifth: int) -> str:
    """Quality of a triad from its third and fifth above the root."""
    return TRIAD_QUALITIES.get((third, fifth), "augmented")


def roman_for(degree: int, quality: str, roman_suffix: str) -> str:
    """Render a Roman numeral; minor and diminished chords are lowercase."""
    numeral = ROMAN_NUMERALS[degree - 1]
    if quality in ("minor", "diminished", "half-diminished"):
        numeral = numeral.lower()
    return numeral + roman_suffix


def build_diatonic_chords(
    tonic: str,
    mode: str = "ionian",
    include_sevenths: bool = False,
) -> List[DiatonicChord]:
    """
    Build the seven diatonic chords of a key.

    Args:
        tonic: Canonical tonic spelling ("E", "Bb", "F#")
        mode: Mode id from the registry
        include_sevenths: Stack a fourth note on every chord

    Returns:
        Seven DiatonicChord objects, degree 1 first
    """
    scale = get_scale(tonic, mode)
    pcs = scale.pcs

    chords = []
    for i in range(7):
        root = pcs[i]
        third = pcs[(i + 2) % 7]
        fifth = pcs[(i + 4) % 7]
        third_iv = (third - root) % 12
        fifth_iv = (fifth - root) % 12
        triad = triad_quality(third_iv, fifth_iv)

        tones = [root, third, fifth]
        intervals = [
            "1",
            THIRD_NAMES.get(third_iv, str(third_iv)),
            FIFTH_NAMES.get(fifth_iv, str(fifth_iv)),
        ]

        if include_sevenths:
            seventh = pcs[(i + 6) % 7]
            seventh_iv = (seventh - root) % 12
            suffix, quality, roman_suffix = SEVENTH_CHORDS[(triad, seventh_iv)]
            tones.append(seventh)
            intervals.append(SEVENTH_NAMES.get(seventh_iv, str(seventh_iv)))
        else:
            suffix = TRIAD_SUFFIXES[triad]
            quality = triad
            roman_suffix = TRIAD_ROMAN_SUFFIXES[triad]

        degree = i + 1
        chords.append(DiatonicChord(
            degree=degree,
            roman=roman_for(degree, quality, roman_suffix),
            symbol=scale.note_names[i] + suffix,
            quality=quality,
            function=get_function_for_degree(mode, degree),
            tones=tuple(tones),
            suffix=suffix,
            tone_names=tuple(note_name(pc, scale.use_flats) for pc in tones),
            interval_names=tuple(intervals),
        ))

    return chords


def get_chord_from_degree(
    tonic: str, mode: str, degree: int, include_sevenths: bool = False
) -> DiatonicChord:
    """Get a specific chord by its scale degree."""
    if not 1 <= degree <= 7:
        raise ValueError(f"Degree must be 1-7. Got: {degree}")
    return build_diatonic_chords(tonic, mode, include_sevenths)[degree - 1]


def degrees_to_chords(
    tonic: str, mode: str, degrees: List[int], include_sevenths: bool = False
) -> List[str]:
    """Convert a list of scale degrees to chord symbols."""
    chords = build_diatonic_chords(tonic, mode, include_sevenths)
    result = []
    for d in degrees:
        if not 1 <= d <= 7:
            raise ValueError(f"Degree must be 1-7. Got: {d}")
        result.append(chords[d - 1].symbol)
    return result


def is_chord_in_key(chord: str, tonic: str, mode: str = "ionian") -> bool:
    """Check if a chord symbol is one of the key's triads or sevenths."""
    symbols = {c.symbol for c in build_diatonic_chords(tonic, mode)}
    symbols.update(c.symbol for c in build_diatonic_chords(tonic, mode, True))
    return chord.strip() in symbols


def validate_progression(
    chords: List[str], tonic: str, mode: str = "ionian"
) -> Tuple[bool, List[str]]:
    """Validate a chord progression against a key."""
    invalid = [c for c in chords if not is_chord_in_key(c, tonic, mode)]
    return (len(invalid) == 0, invalid)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def get_relative_key(tonic: str, mode: str) -> Tuple[str, str]:
    """
    Get the relative key (same notes, other tonic).

    Major-family modes map to their relative aeolian, minor-family modes to
    their relative ionian.
    """
    mode_def = get_mode(mode)
    tonic_pc = parse_note_name(tonic)
    major_pc = (tonic_pc - mode_def.relative_major_offset) % 12
    use_flats = prefers_flats_for_key(tonic, mode)

    if mode_def.family == "major":
        return (note_name(major_pc + 9, use_flats), "aeolian")
    return (note_name(major_pc, use_flats), "ionian")


def get_parallel_key(tonic: str, mode: str) -> Tuple[str, str]:
    """Get the parallel key (same tonic): major ↔ natural minor."""
    new_mode = "aeolian" if get_mode(mode).family == "major" else "ionian"
    return (tonic, new_mode)


def find_diatonic_chord(
    chords: List[DiatonicChord], degree: int
) -> Optional[DiatonicChord]:
    for chord in chords:
        if chord.degree == degree:
            return chord
    return None


def print_key_info(tonic: str, mode: str = "ionian") -> None:
    """Print detailed information about a key."""
    print(f"\n{'='*60}")
    print(f"Key: {tonic} {mode}")
    print(f"{'='*60}")

    scale = get_scale(tonic, mode)
    print(f"\nScale: {' - '.join(scale.note_names)}")

    print("\nDiatonic Chords:")
    for chord in build_diatonic_chords(tonic, mode, include_sevenths=True):
        print(f"  {chord.roman:8} = {chord.symbol:8} ({chord.function})")

    rel_tonic, rel_mode = get_relative_key(tonic, mode)
    print(f"\nRelative key: {rel_tonic} {rel_mode}")

    par_tonic, par_mode = get_parallel_key(tonic, mode)
    print(f"Parallel key: {par_tonic} {par_mode}")


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing harmony.py")
    print("=" * 60)

    print("\n✓ Test 1: Scales")
    print(f"  G mixolydian: {get_scale('G', 'mixolydian').note_names}")
    print(f"  G aeolian:    {get_scale('G', 'aeolian').note_names}")

    print("\n✓ Test 2: Diatonic triads")
    print(f"  E aeolian: {[c.symbol for c in build_diatonic_chords('E', 'aeolian')]}")
    print(f"  F ionian:  {[c.symbol for c in build_diatonic_chords('F', 'ionian')]}")

    print("\n✓ Test 3: Key info")
    print_key_info("A", "harmonic_minor")
