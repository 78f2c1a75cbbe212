"""
Key Parser Module - Extract Tonic and Mode from Free Text

Users type keys in many ways: "Am", "C Major", "Bb dorian", "F# moll",
"E flat mixo". This module turns such strings into a Key.

The mode grammar is a heuristic with a fixed precedence:
    1. a remainder of exactly "m" is minor, exactly "M" is major
    2. mode keywords, checked in the order of MODE_KEYWORDS
    3. a bare lowercase "m" (not "maj"/"mix") means minor ("Fm7")
    4. anything else is major

The order matters: "mixolydian" contains an "m" and must be caught by its
keyword before the bare-"m" fallback sees it.

Author: Rohan Rajendra Dhanawade
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from harmony_engine.theory.modes import Mode, get_mode
from harmony_engine.theory.pitch import NOTE_TO_PC, prefers_flats_for_key

logger = logging.getLogger(__name__)


# =============================================================================
# KEY DATA CLASS
# =============================================================================

@dataclass(frozen=True)
class Key:
    """A parsed key: canonical tonic spelling plus a mode id."""
    tonic: str
    tonic_pc: int
    mode: str

    @property
    def mode_definition(self) -> Mode:
        return get_mode(self.mode)

    @property
    def use_flats(self) -> bool:
        return prefers_flats_for_key(self.tonic, self.mode)

    def to_dict(self) -> dict:
        return {"tonic": self.tonic, "tonic_pc": self.tonic_pc, "mode": self.mode}

    def __str__(self) -> str:
        return f"{self.tonic} {self.mode}"


# =============================================================================
# PATTERNS
# =============================================================================

ROOT_PATTERN = re.compile(r"^([A-Ga-g])(#|b|\s*flat)?")

# (mode id, keyword pattern) in precedence order
MODE_KEYWORDS: List[Tuple[str, str]] = [
    ("aeolian", r"minor|moll|aeolian"),
    ("ionian", r"major|dur|ionian"),
    ("dorian", r"dorian"),
    ("phrygian", r"phrygian|frygisk"),
    # "mixolydian" ends in "lydian"; leave it for the next entry
    ("lydian", r"(?<!mixo)lydian"),
    ("mixolydian", r"mixolydian|mixo"),
    ("locrian", r"locrian|lokrisk"),
]

_COMPILED_MODE_KEYWORDS = [(mode, re.compile(pat, re.IGNORECASE)) for mode, pat in MODE_KEYWORDS]

BARE_MINOR_PATTERN = re.compile(r"m(?!aj|ix)")


# =============================================================================
# PARSING FUNCTIONS
# =============================================================================

def split_root(text: str) -> Optional[Tuple[str, str, str]]:
    """
    Split a leading root note off a key or chord string.

    Args:
        text: Raw text such as "Bb dorian", "f#m7" or "E flat major"

    Returns:
        (letter, accidental, rest) with the letter uppercased and the
        accidental normalized to "", "#" or "b"; None without a leading A-G.
    """
    text = text.strip()
    match = ROOT_PATTERN.match(text)
    if not match:
        return None

    letter = match.group(1).upper()
    raw_accidental = match.group(2) or ""
    if raw_accidental == "#":
        accidental = "#"
    elif raw_accidental:
        accidental = "b"
    else:
        accidental = ""

    return letter, accidental, text[match.end():]


def detect_mode(remainder: str) -> str:
    """Get the mode id implied by the text after the tonic."""
    stripped = remainder.strip()
    if stripped == "m":
        return "aeolian"
    if stripped == "M":
        return "ionian"

    for mode, pattern in _COMPILED_MODE_KEYWORDS:
        if pattern.search(stripped):
            return mode

    if BARE_MINOR_PATTERN.search(stripped):
        return "aeolian"

    return "ionian"


def parse_key(text: str) -> Optional[Key]:
    """Parse free text into a Key, or None when no tonic can be read."""
    if not text:
        return None

    parts = split_root(text)
    if parts is None:
        logger.debug("No tonic in key text %r", text)
        return None

    letter, accidental, remainder = parts
    tonic = letter + accidental
    if tonic not in NOTE_TO_PC:
        logger.debug("Tonic %r is not a supported spelling", tonic)
        return None

    return Key(tonic=tonic, tonic_pc=NOTE_TO_PC[tonic], mode=detect_mode(remainder))


def coerce_key(key) -> Optional[Key]:
    """Accept a Key or a key string and return a Key (or None)."""
    if isinstance(key, Key):
        return key
    if isinstance(key, str):
        return parse_key(key)
    return None


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing key_parser.py")
    print("=" * 60)

    for text in ["Am", "C Major", "Bb dorian", "F# moll", "E flat mixo", "FM", "H major"]:
        print(f"  {text!r:16} → {parse_key(text)}")
