"""
Progressions Module - Dataset Queries, Transposition and Sequence Matching

Everything here works on Roman numerals, so a progression is stored once
and can be played in any key:
    1. Filter the dataset by mode, style tags and chord type
    2. Transpose a progression to a concrete tonic
    3. Find progressions containing a user's sequence
    4. Suggest what could come next (or what to start with)

Author: Rohan Rajendra Dhanawade
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from harmony_engine.config import SUGGESTION_CONFIG
from harmony_engine.data.dataset import load_progressions
from harmony_engine.data.schema import Progression, TransposedProgression
from harmony_engine.rules.roman import (
    is_diatonic,
    relative_ionian_label,
    roman_to_chord,
    tonic_roman,
)
from harmony_engine.theory.modes import get_modal_signatures, get_mode

logger = logging.getLogger(__name__)


# =============================================================================
# DATASET
# =============================================================================

CHORD_PROGRESSIONS: Tuple[Progression, ...] = tuple(load_progressions())

FAMILY_DEFAULT_MODES = {"major": "ionian", "minor": "aeolian"}


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class SequenceMatch:
    """Where a query sequence was found inside a progression."""
    progression_id: str
    matched_index_range: Tuple[int, int]  # inclusive
    match_length: int
    progression: Progression

    @property
    def matched_indices(self) -> List[int]:
        start, end = self.matched_index_range
        return list(range(start, end + 1))


@dataclass(frozen=True)
class NextChordSuggestion:
    """A ranked candidate for the next (or first) chord of a sequence."""
    roman: str
    chord: str
    frequency: float
    from_progressions: Tuple[str, ...] = ()
    is_diatonic: bool = True
    secondary_label: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "roman": self.roman,
            "chord": self.chord,
            "frequency": self.frequency,
            "from_progressions": list(self.from_progressions),
            "is_diatonic": self.is_diatonic,
            "secondary_label": self.secondary_label,
        }


# =============================================================================
# QUERIES
# =============================================================================

def get_all_tags(pool: Optional[Iterable[Progression]] = None) -> List[str]:
    """Sorted list of every tag used in the dataset."""
    pool = CHORD_PROGRESSIONS if pool is None else pool
    return sorted({tag for prog in pool for tag in prog.tags})


def _mode_matches(prog: Progression, mode: str) -> bool:
    if mode == "all":
        return True
    if mode in FAMILY_DEFAULT_MODES:
        return prog.mode_family == mode
    return prog.mode == mode


def filter_progressions(
    mode: str = "all",
    tags: Optional[Sequence[str]] = None,
    chord_type: Optional[str] = None,
    pool: Optional[Iterable[Progression]] = None,
) -> List[Progression]:
    """
    Filter progressions and sort them by weight (highest first).

    Args:
        mode: "all", a family ("major"/"minor") or a mode id
        tags: Keep progressions carrying at least one of these tags
        chord_type: "triad", "seventh", or None/"all" for both
        pool: Progressions to search; defaults to the packaged dataset

    Returns:
        Matching progressions; equal weights keep dataset order
    """
    if mode not in ("all", *FAMILY_DEFAULT_MODES):
        get_mode(mode)
    pool = CHORD_PROGRESSIONS if pool is None else pool
    wanted = set(tags or [])

    result = []
    for prog in pool:
        if not _mode_matches(prog, mode):
            continue
        if chord_type and chord_type != "all" and prog.chord_type != chord_type:
            continue
        if wanted and not wanted.intersection(prog.tags):
            continue
        result.append(prog)

    return sorted(result, key=lambda p: p.weight, reverse=True)


def get_progression(progression_id: str) -> Optional[Progression]:
    for prog in CHORD_PROGRESSIONS:
        if prog.id == progression_id:
            return prog
    return None


# =============================================================================
# TRANSPOSITION
# =============================================================================

def transpose_progression(progression: Progression, tonic: str) -> TransposedProgression:
    """Resolve every numeral of a progression in the given tonic (in the progression's mode)."""
    chords = [roman_to_chord(r, tonic, progression.mode) for r in progression.roman]
    return TransposedProgression(
        **progression.model_dump(exclude={"chords", "tonic"}),
        chords=chords,
        tonic=tonic,
    )


# =============================================================================
# SEQUENCE MATCHING
# =============================================================================

def _find_sublist(haystack: Sequence[str], needle: Sequence[str], start: int = 0) -> int:
    """Index of the first contiguous occurrence of needle, or -1."""
    n = len(needle)
    for i in range(start, len(haystack) - n + 1):
        if list(haystack[i:i + n]) == list(needle):
            return i
    return -1


def _all_occurrences(haystack: Sequence[str], needle: Sequence[str]) -> List[int]:
    positions = []
    i = _find_sublist(haystack, needle)
    while i >= 0:
        positions.append(i)
        i = _find_sublist(haystack, needle, i + 1)
    return positions


def find_matching_progressions(
    query: Sequence[str],
    pool: Optional[Iterable[Progression]] = None,
    min_match_length: Optional[int] = None,
) -> List[SequenceMatch]:
    """
    Find progressions that contain a Roman-numeral sequence.

    By default the whole query must appear contiguously and in order; a
    progression that only contains part of it does not match. With
    min_match_length, the longest suffix of the query that is at least that
    long is used instead.

    Returns:
        One match per progression (its first occurrence), longest match
        first, then highest weight
    """
    query = list(query)
    if not query:
        return []
    if min_match_length is not None and min_match_length < 1:
        raise ValueError(f"min_match_length must be >= 1. Got: {min_match_length}")

    pool = CHORD_PROGRESSIONS if pool is None else pool

    matches = []
    for prog in pool:
        if min_match_length is None:
            lengths = [len(query)]
        else:
            longest = min(len(query), len(prog.roman))
            lengths = range(longest, min_match_length - 1, -1)

        for length in lengths:
            index = _find_sublist(prog.roman, query[-length:])
            if index >= 0:
                matches.append(SequenceMatch(
                    progression_id=prog.id,
                    matched_index_range=(index, index + length - 1),
                    match_length=length,
                    progression=prog,
                ))
                break

    return sorted(matches, key=lambda m: (m.match_length, m.progression.weight), reverse=True)


# =============================================================================
# SUGGESTIONS
# =============================================================================

def _finish_suggestions(
    weights: Dict[str, float],
    sources: Dict[str, List[str]],
    tonic: str,
    mode: str,
    use_spice: bool,
    boost: bool,
) -> List[NextChordSuggestion]:
    signatures = get_modal_signatures(mode)
    home = tonic_roman(mode)

    suggestions = []
    for roman, weight in weights.items():
        diatonic = is_diatonic(roman, mode)
        if not use_spice and not diatonic:
            continue

        frequency = float(weight)
        if boost:
            if roman in signatures:
                frequency *= SUGGESTION_CONFIG["signature_boost"]
            if roman == home:
                frequency *= SUGGESTION_CONFIG["tonic_boost"]

        suggestions.append(NextChordSuggestion(
            roman=roman,
            chord=roman_to_chord(roman, tonic, mode),
            frequency=frequency,
            from_progressions=tuple(sources.get(roman, [])),
            is_diatonic=diatonic,
            secondary_label=relative_ionian_label(roman, mode),
        ))

    return sorted(suggestions, key=lambda s: s.frequency, reverse=True)


def suggest_next_chords(
    sequence: Sequence[str],
    tonic: str,
    mode: str = "ionian",
    use_spice: bool = False,
) -> List[NextChordSuggestion]:
    """
    Suggest the next Roman numeral after a sequence.

    Every place the sequence occurs in a progression of the same mode votes
    for the numeral that follows it, weighted by the progression's weight.
    When nothing follows the full sequence, its shorter suffixes are tried.
    The mode's signature chords and the tonic are always offered, and get
    a boost in the ranking.

    Args:
        sequence: Roman numerals chosen so far
        tonic: Tonic used to spell the suggested chords
        mode: Mode id of both the sequence and the suggestions
        use_spice: Keep chromatic (non-diatonic) suggestions

    Returns:
        Suggestions ranked by frequency; empty for an empty sequence
    """
    sequence = list(sequence)
    if not sequence:
        return []
    get_mode(mode)

    pool = [p for p in CHORD_PROGRESSIONS if p.mode == mode]
    weights: Dict[str, float] = {}
    sources: Dict[str, List[str]] = {}

    for length in range(len(sequence), 0, -1):
        suffix = sequence[-length:]
        for prog in pool:
            for start in _all_occurrences(prog.roman, suffix):
                follow = start + length
                if follow >= len(prog.roman):
                    continue
                roman = prog.roman[follow]
                weights[roman] = weights.get(roman, 0) + prog.weight
                ids = sources.setdefault(roman, [])
                if prog.id not in ids:
                    ids.append(prog.id)
        if weights:
            if length < len(sequence):
                logger.debug("Backed off to suffix %s for next-chord suggestions", suffix)
            break

    for roman in (*get_modal_signatures(mode), tonic_roman(mode)):
        weights.setdefault(roman, SUGGESTION_CONFIG["default_frequency"])

    return _finish_suggestions(weights, sources, tonic, mode, use_spice, boost=True)


def get_starting_chords(
    mode: str,
    tonic: str,
    use_spice: bool = False,
) -> List[NextChordSuggestion]:
    """
    Suggest an opening chord: first numerals of the mode's progressions.

    "major" and "minor" are accepted as shorthands for ionian and aeolian.
    """
    actual_mode = FAMILY_DEFAULT_MODES.get(mode, mode)
    get_mode(actual_mode)

    weights: Dict[str, float] = {}
    sources: Dict[str, List[str]] = {}
    for prog in CHORD_PROGRESSIONS:
        if prog.mode != actual_mode:
            continue
        first = prog.roman[0]
        weights[first] = weights.get(first, 0) + prog.weight
        sources.setdefault(first, []).append(prog.id)

    weights.setdefault(tonic_roman(actual_mode), SUGGESTION_CONFIG["start_tonic_weight"])
    for roman in get_modal_signatures(actual_mode):
        weights.setdefault(roman, SUGGESTION_CONFIG["start_signature_weight"])

    return _finish_suggestions(weights, sources, tonic, actual_mode, use_spice, boost=False)


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing progressions.py")
    print("=" * 60)

    print(f"\n✓ {len(CHORD_PROGRESSIONS)} progressions, tags: {get_all_tags()[:8]}...")

    prog = get_progression("maj_tri_01")
    print(f"\n✓ {prog.name} in G: {transpose_progression(prog, 'G').chords}")

    print("\n✓ Matches for ['ii7', 'V7']:")
    for m in find_matching_progressions(["ii7", "V7"])[:5]:
        print(f"  {m.progression_id:28} {m.matched_index_range}")

    print("\n✓ After ['I', 'V'] in C:")
    for s in suggest_next_chords(["I", "V"], "C")[:5]:
        print(f"  {s.roman:6} {s.chord:6} {s.frequency}")
