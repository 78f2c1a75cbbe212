"""
Modes Module - Static Mode Registry

The eight modes the engine understands (the seven church modes plus
harmonic minor), together with the per-mode tables the other modules need:
which degrees belong to which harmonic function, and which Roman numerals
give a mode its characteristic colour.

All tables are built once at import and exposed read-only.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from harmony_engine.exceptions import UnknownModeError


# =============================================================================
# MODE RECORD
# =============================================================================

@dataclass(frozen=True)
class Mode:
    """An interval pattern with its display metadata."""
    id: str
    name: str
    intervals: Tuple[int, ...]
    degree_labels: Tuple[str, ...]
    family: str
    relative_major_offset: int
    ionian_rotation: int

    def __post_init__(self):
        ivs = self.intervals
        if len(ivs) != 7:
            raise ValueError(f"Mode '{self.id}' needs 7 intervals, got {len(ivs)}")
        if ivs[0] != 0:
            raise ValueError(f"Mode '{self.id}' must start at 0")
        if any(not 0 <= iv <= 11 for iv in ivs):
            raise ValueError(f"Mode '{self.id}' has an interval outside 0-11")
        if any(b <= a for a, b in zip(ivs, ivs[1:])):
            raise ValueError(f"Mode '{self.id}' intervals must strictly increase")
        if len(self.degree_labels) != 7:
            raise ValueError(f"Mode '{self.id}' needs 7 degree labels")
        if self.family not in ("major", "minor"):
            raise ValueError(f"Mode '{self.id}' has unknown family '{self.family}'")


# =============================================================================
# REGISTRY
# =============================================================================

_MODE_LIST = [
    Mode("ionian", "Ionian (Major)", (0, 2, 4, 5, 7, 9, 11),
         ("1", "2", "3", "4", "5", "6", "7"), "major", 0, 0),
    Mode("dorian", "Dorian", (0, 2, 3, 5, 7, 9, 10),
         ("1", "2", "b3", "4", "5", "6", "b7"), "minor", 2, 1),
    Mode("phrygian", "Phrygian", (0, 1, 3, 5, 7, 8, 10),
         ("1", "b2", "b3", "4", "5", "b6", "b7"), "minor", 4, 2),
    Mode("lydian", "Lydian", (0, 2, 4, 6, 7, 9, 11),
         ("1", "2", "3", "#4", "5", "6", "7"), "major", 5, 3),
    Mode("mixolydian", "Mixolydian", (0, 2, 4, 5, 7, 9, 10),
         ("1", "2", "3", "4", "5", "6", "b7"), "major", 7, 4),
    Mode("aeolian", "Aeolian (Natural Minor)", (0, 2, 3, 5, 7, 8, 10),
         ("1", "2", "b3", "4", "5", "b6", "b7"), "minor", 9, 5),
    Mode("locrian", "Locrian", (0, 1, 3, 5, 6, 8, 10),
         ("1", "b2", "b3", "4", "b5", "b6", "b7"), "minor", 11, 6),
    Mode("harmonic_minor", "Harmonic Minor", (0, 2, 3, 5, 7, 8, 11),
         ("1", "2", "b3", "4", "5", "b6", "7"), "minor", 9, 5),
]

MODES: Mapping[str, Mode] = MappingProxyType({m.id: m for m in _MODE_LIST})

MODE_IDS: Tuple[str, ...] = tuple(MODES)


# Degrees (1-based) per harmonic function
_FUNCTION_GROUPS: Dict[str, Dict[str, Tuple[int, ...]]] = {
    "ionian": {"tonic": (1, 3, 6), "predominant": (2, 4), "dominant": (5, 7)},
    "dorian": {"tonic": (1, 3, 6), "predominant": (2, 4), "dominant": (5, 7)},
    "phrygian": {"tonic": (1, 3), "predominant": (2, 4, 6), "dominant": (5, 7)},
    "lydian": {"tonic": (1, 3, 6), "predominant": (2, 4), "dominant": (5, 7)},
    # The b7 pulls toward the tonic like a dominant; iii shares its leading tone
    "mixolydian": {"tonic": (1, 6), "predominant": (2, 4), "dominant": (5, 7, 3)},
    "aeolian": {"tonic": (1, 3, 6), "predominant": (2, 4), "dominant": (5, 7)},
    "locrian": {"tonic": (1,), "predominant": (2, 4), "dominant": (5, 7)},
    "harmonic_minor": {"tonic": (1, 3), "predominant": (2, 4, 6), "dominant": (5, 7)},
}

FUNCTION_GROUPS: Mapping[str, Mapping[str, Tuple[int, ...]]] = MappingProxyType(
    {mode: MappingProxyType(groups) for mode, groups in _FUNCTION_GROUPS.items()}
)

# Mode-relative Roman numerals that carry each mode's colour
MODAL_SIGNATURES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "ionian": ("IV", "V"),
    "dorian": ("IV", "ii"),
    "phrygian": ("II", "vii"),
    "lydian": ("II", "vii"),
    "mixolydian": ("VII", "v"),
    "aeolian": ("VI", "VII", "v"),
    "locrian": ("II", "i°"),
    "harmonic_minor": ("V", "VI"),
})


def check_mode_tables(modes, function_groups, signatures) -> None:
    """Every per-mode table must cover exactly the registered modes."""
    for name, table in (("function groups", function_groups), ("modal signatures", signatures)):
        if set(table) != set(modes):
            raise RuntimeError(f"{name} do not match the mode registry: {sorted(set(table) ^ set(modes))}")


check_mode_tables(MODES, FUNCTION_GROUPS, MODAL_SIGNATURES)


# =============================================================================
# LOOKUPS
# =============================================================================

def get_mode(mode_id: str) -> Mode:
    """Get a mode by id; unknown ids raise UnknownModeError."""
    try:
        return MODES[mode_id]
    except KeyError:
        raise UnknownModeError(mode_id) from None


def mode_family(mode_id: str) -> str:
    """Map a mode id to 'major' or 'minor'."""
    return get_mode(mode_id).family


def modes_in_family(family: str) -> List[str]:
    return [m.id for m in MODES.values() if m.family == family]


def get_function_for_degree(mode_id: str, degree: int) -> str:
    """
    Harmonic function of a 1-based degree in a mode.

    Dominant membership is checked first so that mixolydian's iii reads as
    dominant even though iii is tonic elsewhere.
    """
    groups = FUNCTION_GROUPS[get_mode(mode_id).id]
    if degree in groups["dominant"]:
        return "dominant"
    if degree in groups["tonic"]:
        return "tonic"
    if degree in groups["predominant"]:
        return "predominant"
    return "variable"


def get_function_bucket(mode_id: str, function: str) -> Tuple[int, ...]:
    return FUNCTION_GROUPS[get_mode(mode_id).id].get(function, ())


def get_modal_signatures(mode_id: str) -> Tuple[str, ...]:
    return MODAL_SIGNATURES[get_mode(mode_id).id]
