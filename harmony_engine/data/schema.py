"""
Schema definitions for the progression dataset.

This module defines the Pydantic models that validate and structure the
curated chord progressions. Every record in progressions.yaml must conform
to the Progression schema; transposition produces TransposedProgression.

Author: Rohan Rajendra Dhanawade
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from harmony_engine.rules.roman import is_valid_roman
from harmony_engine.theory.modes import MODE_IDS, mode_family


# =============================================================================
# VALID OPTIONS
# =============================================================================

VALID_MODES = list(MODE_IDS)

VALID_CHORD_TYPES = ["triad", "seventh"]


# =============================================================================
# MAIN SCHEMA
# =============================================================================

class Progression(BaseModel):
    """
    A curated chord progression written in mode-relative Roman numerals.

    Attributes:
        id: Unique identifier for this progression
        name: Display name
        mode: Mode id the numerals are relative to
        chord_type: "triad" or "seventh"
        weight: Popularity weight 1-10, used when ranking suggestions
        tags: Style tags ("pop", "jazz", "modal_interchange", ...)
        roman: Ordered Roman-numeral sequence
        description: Free-text note on where the progression comes from

    Example:
        >>> prog = Progression(
        ...     id="maj_tri_01",
        ...     name="Four Chord Song",
        ...     mode="ionian",
        ...     chord_type="triad",
        ...     weight=10,
        ...     tags=["common", "pop"],
        ...     roman=["I", "V", "vi", "IV"],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    # ---------------------------
    # Required Fields
    # ---------------------------

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier for this progression",
        examples=["maj_tri_01", "modal_dorian_vamp"]
    )

    name: str = Field(
        ...,
        min_length=1,
        description="Display name",
        examples=["Four Chord Song", "Dorian Vamp"]
    )

    mode: str = Field(
        ...,
        description="Mode id the Roman numerals are relative to",
        examples=["ionian", "dorian", "aeolian"]
    )

    chord_type: str = Field(
        ...,
        description="Triad or seventh-chord progression",
        examples=["triad", "seventh"]
    )

    weight: int = Field(
        ...,
        ge=1,
        le=10,
        description="Empirical popularity weight",
        examples=[10, 7]
    )

    roman: Tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Ordered Roman-numeral sequence",
        examples=[["I", "V", "vi", "IV"], ["ii7", "V7", "Imaj7"]]
    )

    # ---------------------------
    # Metadata Fields
    # ---------------------------

    tags: Tuple[str, ...] = Field(
        default=(),
        description="Style tags",
        examples=[["common", "pop", "loop"]]
    )

    description: str = Field(
        default="",
        description="Free-text note on the progression"
    )

    # ---------------------------
    # Custom Validators
    # ---------------------------

    @field_validator('mode')
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Ensure mode is a registered mode id (case-insensitive)"""
        v_lower = v.lower()
        if v_lower not in VALID_MODES:
            raise ValueError(f"Mode must be one of {VALID_MODES}. Got: '{v}'")
        return v_lower

    @field_validator('chord_type')
    @classmethod
    def validate_chord_type(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in VALID_CHORD_TYPES:
            raise ValueError(f"Chord type must be one of {VALID_CHORD_TYPES}. Got: '{v}'")
        return v_lower

    @field_validator('roman')
    @classmethod
    def validate_roman(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Ensure every token is a Roman numeral the resolver understands"""
        invalid = [token for token in v if not is_valid_roman(token)]
        if invalid:
            raise ValueError(f"Invalid Roman numerals found: {invalid}")
        return v

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(tag.strip().lower() for tag in v if tag.strip())

    # ---------------------------
    # Derived Properties
    # ---------------------------

    @property
    def mode_family(self) -> str:
        """'major' or 'minor'"""
        return mode_family(self.mode)


class TransposedProgression(Progression):
    """A Progression with its numerals resolved to chords in a concrete key."""

    chords: Tuple[str, ...] = Field(
        ...,
        description="Chord symbols, one per Roman numeral",
        examples=[["C", "G", "Am", "F"]]
    )

    tonic: str = Field(
        ...,
        description="Tonic the progression was transposed to",
        examples=["C", "Bb"]
    )


# =============================================================================
# CONVENIENCE METHODS
# =============================================================================

def create_progression(
    id: str,
    name: str,
    mode: str,
    chord_type: str,
    weight: int,
    roman: List[str],
    tags: List[str] = None,
    description: str = "",
) -> Progression:
    """
    Convenience function to create a validated Progression.

    Raises:
        ValidationError: If any field fails validation
    """
    return Progression(
        id=id,
        name=name,
        mode=mode,
        chord_type=chord_type,
        weight=weight,
        roman=roman,
        tags=tags or [],
        description=description,
    )
