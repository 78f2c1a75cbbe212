"""
Scales Module - Chord-Scale Matching

Which scales can be played over a chord? Every scale in the library is
rooted on the chord's root; scales missing any chord tone are dropped and
the rest are scored:

    +10  contains every chord tone
    +5   a preferred scale for the chord quality
    +3   every scale note lies inside the surrounding key (when given)
    -3   carries a tag the "pop" style discourages

Author: Rohan Rajendra Dhanawade
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from harmony_engine.config import SCALE_SCORING_WEIGHTS
from harmony_engine.rules.chords import ChordSymbolParse, parse_chord_symbol
from harmony_engine.rules.key_parser import coerce_key
from harmony_engine.theory.modes import get_mode
from harmony_engine.theory.pitch import note_name, parse_note_name, prefers_flats

logger = logging.getLogger(__name__)


# =============================================================================
# SCALE LIBRARY
# =============================================================================

@dataclass(frozen=True)
class ScaleDefinition:
    id: str
    name: str
    family: str
    intervals: Tuple[int, ...]
    degree_labels: Tuple[str, ...]
    tags: Tuple[str, ...]
    use_over: Tuple[str, ...]
    notes_about_use: str = ""


SCALES: Tuple[ScaleDefinition, ...] = (
    ScaleDefinition("ionian", "Ionian (Major)", "diatonic",
                    (0, 2, 4, 5, 7, 9, 11), ("1", "2", "3", "4", "5", "6", "7"),
                    ("major", "diatonic"), ("maj", "maj7", "6", "maj9", "maj13"),
                    "The plain major scale."),
    ScaleDefinition("dorian", "Dorian", "diatonic",
                    (0, 2, 3, 5, 7, 9, 10), ("1", "2", "b3", "4", "5", "6", "b7"),
                    ("minor", "diatonic"), ("m", "m7", "m9", "m11", "m13"),
                    "Common over the ii chord of a major key."),
    ScaleDefinition("phrygian", "Phrygian", "diatonic",
                    (0, 1, 3, 5, 7, 8, 10), ("1", "b2", "b3", "4", "5", "b6", "b7"),
                    ("minor", "diatonic"), ("m", "m7"),
                    "Characteristic b2."),
    ScaleDefinition("lydian", "Lydian", "diatonic",
                    (0, 2, 4, 6, 7, 9, 11), ("1", "2", "3", "#4", "5", "6", "7"),
                    ("major", "diatonic"), ("maj7", "maj9", "maj13"),
                    "Fits maj7 chords, especially with #11."),
    ScaleDefinition("mixolydian", "Mixolydian", "diatonic",
                    (0, 2, 4, 5, 7, 9, 10), ("1", "2", "3", "4", "5", "6", "b7"),
                    ("dominant", "diatonic"), ("7", "9", "13", "7sus"),
                    "The standard dominant scale."),
    ScaleDefinition("aeolian", "Aeolian (Natural Minor)", "diatonic",
                    (0, 2, 3, 5, 7, 8, 10), ("1", "2", "b3", "4", "5", "b6", "b7"),
                    ("minor", "diatonic"), ("m", "m7"),
                    "The plain minor scale."),
    ScaleDefinition("locrian", "Locrian", "diatonic",
                    (0, 1, 3, 5, 6, 8, 10), ("1", "b2", "b3", "4", "b5", "b6", "b7"),
                    ("half-diminished", "diatonic"), ("m7b5",),
                    "Fits m7b5 (viiø / iiø)."),
    ScaleDefinition("harmonic_minor", "Harmonic Minor", "minor",
                    (0, 2, 3, 5, 7, 8, 11), ("1", "2", "b3", "4", "5", "b6", "7"),
                    ("minor", "functional"), ("m(maj7)", "7(b9)", "dim7"),
                    "Gives V7 and vii°7 in minor (leading tone)."),
    ScaleDefinition("melodic_minor", "Melodic Minor (jazz)", "minor",
                    (0, 2, 3, 5, 7, 9, 11), ("1", "2", "b3", "4", "5", "6", "7"),
                    ("minor", "jazz"), ("m(maj7)", "m6", "m9"),
                    "Jazz minor; parent of lydian dominant and altered."),
    ScaleDefinition("major_pentatonic", "Major Pentatonic", "pentatonic",
                    (0, 2, 4, 7, 9), ("1", "2", "3", "5", "6"),
                    ("major",), ("maj", "maj7", "6"),
                    "Safe choice in pop and rock."),
    ScaleDefinition("minor_pentatonic", "Minor Pentatonic", "pentatonic",
                    (0, 3, 5, 7, 10), ("1", "b3", "4", "5", "b7"),
                    ("minor",), ("m", "m7", "7 (blues)"),
                    "Safe choice in rock and blues."),
    ScaleDefinition("blues", "Blues", "pentatonic",
                    (0, 3, 5, 6, 7, 10), ("1", "b3", "4", "b5", "5", "b7"),
                    ("blues",), ("7", "m7", "maj (blues)"),
                    "Minor pentatonic plus the blue note (b5)."),
    ScaleDefinition("whole_tone", "Whole Tone", "symmetric",
                    (0, 2, 4, 6, 8, 10), ("1", "2", "3", "#4/#11", "#5/b13", "b7"),
                    ("dominant", "aug"), ("7#5", "9#5"),
                    "Over dominants with #5."),
    ScaleDefinition("diminished_hw", "Diminished (half-whole)", "symmetric",
                    (0, 1, 3, 4, 6, 7, 9, 10), ("1", "b9", "#9", "3", "#11", "5", "13", "b7"),
                    ("dominant", "jazz"), ("7b9", "13b9"),
                    "Typical over V7b9."),
    ScaleDefinition("diminished_wh", "Diminished (whole-half)", "symmetric",
                    (0, 2, 3, 5, 6, 8, 9, 11), ("1", "2", "b3", "4", "b5", "b6", "6", "7"),
                    ("dim", "jazz"), ("dim7",),
                    "Typical over dim7."),
    ScaleDefinition("altered", "Altered (Super Locrian)", "melodic_minor_mode",
                    (0, 1, 3, 4, 6, 8, 10), ("1", "b9", "#9", "3", "b5/#11", "#5/b13", "b7"),
                    ("dominant", "altered", "jazz"), ("7alt",),
                    "Over V7alt; 7th mode of melodic minor."),
    ScaleDefinition("lydian_dominant", "Lydian Dominant", "melodic_minor_mode",
                    (0, 2, 4, 6, 7, 9, 10), ("1", "2", "3", "#11", "5", "13", "b7"),
                    ("dominant", "jazz"), ("7#11", "9#11", "13#11"),
                    "Over dominants with #11; 4th mode of melodic minor."),
)

SCALES_BY_ID: Dict[str, ScaleDefinition] = {s.id: s for s in SCALES}

# Preferred and allowed scales per chord quality
QUALITY_HINTS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "maj7": {"preferred": ("ionian", "lydian"), "allowed": ("major_pentatonic",)},
    "m7": {"preferred": ("dorian", "aeolian"), "allowed": ("minor_pentatonic", "blues")},
    "7": {"preferred": ("mixolydian",),
          "allowed": ("blues", "diminished_hw", "lydian_dominant", "altered", "whole_tone")},
    "m7b5": {"preferred": ("locrian",), "allowed": ("locrian",)},
    "dim7": {"preferred": ("diminished_wh",), "allowed": ("diminished_wh",)},
}

STYLE_PROFILES = {
    "pop": {
        "allow_families": ("diatonic", "pentatonic"),
        "discourage_tags": ("jazz", "altered", "symmetric"),
    },
    "jazz": {
        "allow_families": ("diatonic", "pentatonic", "symmetric", "minor", "melodic_minor_mode"),
        "discourage_tags": (),
    },
}

# Alteration token → interval above the root
ALTERATIONS = (("b9", 1), ("#9", 3), ("#11", 6), ("b13", 8))


@dataclass(frozen=True)
class ScaleMatch:
    scale_id: str
    scale_name: str
    score: float
    notes: Tuple[str, ...]
    explanation: Tuple[str, ...]
    tags: Tuple[str, ...]

    def to_dict(self) -> Dict:
        return {
            "scale_id": self.scale_id,
            "scale_name": self.scale_name,
            "score": self.score,
            "notes": list(self.notes),
            "explanation": list(self.explanation),
            "tags": list(self.tags),
        }


# =============================================================================
# HELPERS
# =============================================================================

def get_scale_notes(tonic_pc: int, scale_id: str) -> List[int]:
    """Pitch classes of a library scale on a tonic ([] for an unknown id)."""
    scale = SCALES_BY_ID.get(scale_id)
    if scale is None:
        return []
    return [(tonic_pc + iv) % 12 for iv in scale.intervals]


def chord_quality_key(parsed: ChordSymbolParse) -> str:
    """Short quality name used to look up scale hints ("maj7", "m7", "7", ...)."""
    if parsed.quality == "half-diminished":
        return "m7b5"
    if parsed.quality == "diminished":
        return "dim7" if parsed.extension == "7" else "dim"
    if parsed.quality == "augmented":
        return "aug"
    if parsed.quality == "minor":
        return {"7": "m7", "maj7": "m(maj7)", "6": "m6"}.get(parsed.extension, "m")
    return {"7": "7", "maj7": "maj7", "6": "6"}.get(parsed.extension, "maj")


def chord_tones_with_alterations(symbol: str, parsed: ChordSymbolParse) -> List[int]:
    tones = list(parsed.tones)
    for token, interval in ALTERATIONS:
        pc = (parsed.root_pc + interval) % 12
        if token in symbol and pc not in tones:
            tones.append(pc)
    return tones


# =============================================================================
# MATCHING
# =============================================================================

def match_scales(chord_symbol: str, key=None, style: str = "jazz") -> List[ScaleMatch]:
    """
    Rank the scales that fit over a chord.

    Args:
        chord_symbol: Chord to play over ("Emaj7", "G7b9")
        key: Optional surrounding key (string or Key); scales lying fully
             inside it get a bonus
        style: "jazz" or "pop"; pop penalizes jazz/altered/symmetric colours

    Returns:
        Matches sorted by score (highest first); empty when the chord
        cannot be parsed

    Raises:
        ValueError: If style is unknown
    """
    if style not in STYLE_PROFILES:
        raise ValueError(f"Style must be one of {list(STYLE_PROFILES)}. Got: '{style}'")

    parsed = parse_chord_symbol(chord_symbol)
    if parsed is None:
        logger.debug("Cannot match scales for unparsable chord %r", chord_symbol)
        return []

    chord_tones = chord_tones_with_alterations(chord_symbol, parsed)
    hints = QUALITY_HINTS.get(chord_quality_key(parsed), {})
    discouraged = STYLE_PROFILES[style]["discourage_tags"]
    use_flats = prefers_flats(parsed.root)

    context_pcs = None
    key_obj = coerce_key(key) if key is not None else None
    if key_obj is not None:
        tonic_pc = parse_note_name(key_obj.tonic)
        context_pcs = {(tonic_pc + iv) % 12 for iv in get_mode(key_obj.mode).intervals}
    elif key is not None:
        logger.debug("Ignoring unparsable key context %r", key)

    results = []
    for scale in SCALES:
        scale_pcs = get_scale_notes(parsed.root_pc, scale.id)
        if any(tone not in scale_pcs for tone in chord_tones):
            continue

        score = SCALE_SCORING_WEIGHTS["contains_all_chord_tones"]
        explanation = ["Contains every chord tone"]

        if scale.id in hints.get("preferred", ()):
            score += SCALE_SCORING_WEIGHTS["preferred_scale_bonus"]
            explanation.append("Recommended for this chord type")

        if context_pcs is not None and all(pc in context_pcs for pc in scale_pcs):
            score += SCALE_SCORING_WEIGHTS["context_same_key_bonus"]
            explanation.append("Diatonic to the key")

        if style == "pop" and any(tag in discouraged for tag in scale.tags):
            score += SCALE_SCORING_WEIGHTS["advanced_style_penalty_in_pop_mode"]
            explanation.append("Less common in pop")

        results.append(ScaleMatch(
            scale_id=scale.id,
            scale_name=scale.name,
            score=score,
            notes=tuple(note_name(pc, use_flats) for pc in scale_pcs),
            explanation=tuple(explanation),
            tags=scale.tags,
        ))

    return sorted(results, key=lambda m: m.score, reverse=True)


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing scales.py")
    print("=" * 60)

    for chord, key in [("Emaj7", None), ("F#m7", "A Major"), ("G7b9", None)]:
        print(f"\n✓ {chord} (key: {key})")
        for m in match_scales(chord, key)[:4]:
            print(f"  {m.scale_id:18} {m.score:5.1f}  {' '.join(m.notes)}")
