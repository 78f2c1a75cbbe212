"""
Configuration - Scoring Constants and Dataset Location
======================================================

All tunable numbers of the engine live here as plain dictionaries, the same
way the rest of the project keeps its configuration. The values are
empirical; changing them changes the ranking of every suggestion list.

Usage:
    from harmony_engine.config import SCORING_WEIGHTS

    score = base + shared * SCORING_WEIGHTS["shared_tones"]
"""

import os
from pathlib import Path


# =============================================================================
# SUBSTITUTION SCORING
# =============================================================================

SCORING_WEIGHTS = {
    "shared_tones": 2.0,       # Added per tone shared with the original chord
    "diatonic_bonus": 1.0,     # Base score of a same-function diatonic swap
    "borrowed_penalty": -0.5,  # Base score of a modal-interchange borrowing
}

# Base score per generator before shared tones are added
RULE_BASE_SCORES = {
    "secondary_dominant": 2.0,
    "secondary_leading_tone": 1.0,
    "tritone_sub": 2.0,
    "backdoor_to_tonic": 2.0,
    "backdoor_fallback": 1.5,
    "harmonic_minor_dominant": 1.0,
    "chromatic_approach": 0.0,
}


# =============================================================================
# NEXT-CHORD SUGGESTIONS
# =============================================================================

SUGGESTION_CONFIG = {
    "signature_boost": 2.0,        # Multiplier for a mode's signature chords
    "tonic_boost": 1.5,            # Multiplier for returning to the tonic
    "default_frequency": 1,        # Weight of a chord injected without data
    "start_tonic_weight": 10,      # Weight of the tonic as a starting chord
    "start_signature_weight": 5,   # Weight of a signature as a starting chord
}


# =============================================================================
# CHORD-SCALE MATCHING
# =============================================================================

SCALE_SCORING_WEIGHTS = {
    "contains_all_chord_tones": 10,
    "preferred_scale_bonus": 5,
    "context_same_key_bonus": 3,
    "advanced_style_penalty_in_pop_mode": -3,
}


# =============================================================================
# DATASET
# =============================================================================

DATASET_ENV_VAR = "HARMONY_ENGINE_PROGRESSIONS"

DATASET_PATH = Path(__file__).parent / "data" / "progressions.yaml"


def get_dataset_path() -> Path:
    """Location of the progression dataset, overridable via environment."""
    override = os.environ.get(DATASET_ENV_VAR)
    if override:
        return Path(override)
    return DATASET_PATH
