"""
Substitutions Module - Rule-Based Chord Substitution Suggestions

Given a chord in a key (and optionally the chord that follows it), the
engine walks a fixed table of substitution rules. Each rule has a condition
and a generator; every generated candidate is scored as

    score = rule base score + 2.0 × (tones shared with the original chord)

Candidates are deduplicated by symbol (the best score wins) and returned
best first.

Rule table (in evaluation order):
    diatonic_same_function_common_tone   swap within the function group
    secondary_dominant_to_degree         V7 of the next chord
    secondary_leadingtone_dim_to_degree  vii°7 of the next chord
    tritone_sub_for_dominant7            dominant a tritone away
    backdoor_bVII7_to_I                  bVII7 resolving to the tonic
    borrowed_iv_in_major                 iv7 from the parallel minor
    borrowed_bVI_in_major                bVImaj7 from the parallel minor
    borrowed_V7_in_minor                 V7 from harmonic minor
    diminished_approach_up_semitone      °7 a semitone below the next root

Author: Rohan Rajendra Dhanawade
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from harmony_engine.config import RULE_BASE_SCORES, SCORING_WEIGHTS
from harmony_engine.rules.harmony import (
    DiatonicChord,
    build_diatonic_chords,
    find_diatonic_chord,
    roman_for,
)
from harmony_engine.theory.modes import get_function_bucket, get_mode
from harmony_engine.theory.pitch import note_name, parse_note_name, prefers_flats_for_key

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Interval sets of the qualities a rule can generate
CANDIDATE_QUALITIES: Dict[str, Tuple[int, ...]] = {
    "maj7": (0, 4, 7, 11),
    "m7": (0, 3, 7, 10),
    "7": (0, 4, 7, 10),
    "m7b5": (0, 3, 6, 10),
    "dim7": (0, 3, 6, 9),
    "6": (0, 4, 7, 9),
    "m6": (0, 3, 7, 9),
    "": (0, 4, 7),
    "m": (0, 3, 7),
    "dim": (0, 3, 6),
    "aug": (0, 4, 8),
}


class SubstitutionCategory(str, Enum):
    BASIC = "basic"
    FUNCTIONAL = "functional"
    JAZZ = "jazz"
    MODAL_INTERCHANGE = "modal_interchange"
    CHROMATIC = "chromatic"


class GeneratorOp(Enum):
    SAME_FUNCTION_SWAP = "swap_degree_within_same_function_group"
    SECONDARY_DOMINANT = "make_V7_of_target_degree"
    SECONDARY_LEADING_TONE = "make_vii_dim7_of_target_degree"
    TRITONE_SUB = "tritone_substitute_dominant7"
    BACKDOOR_DOMINANT = "make_bVII7_to_I"
    BORROW_PARALLEL_AEOLIAN = "borrow_from_parallel_aeolian"
    HARMONIC_MINOR_DOMINANT = "replace_with_V7_harmonic_minor"
    CHROMATIC_APPROACH = "dim7_approach_to_next_root"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class RuleCondition:
    """When a rule applies. Unset fields do not constrain."""
    mode_is: Optional[str] = None
    degree_is: Optional[int] = None
    degree_not_in: FrozenSet[int] = frozenset()
    function_is: Optional[str] = None
    requires_dominant_seventh: bool = False
    requires_next_chord: bool = False
    min_shared_tones: int = 0


@dataclass(frozen=True)
class SubstitutionRule:
    id: str
    category: SubstitutionCategory
    name: str
    when: RuleCondition
    op: GeneratorOp
    explanation_template: str
    borrow_degree: Optional[int] = None
    borrow_quality: Optional[str] = None


@dataclass(frozen=True)
class SubstitutionCandidate:
    """A scored alternative for a chord."""
    target_symbol: str
    substitute_symbol: str
    category: str
    shared_tone_count: int
    score: float
    explanation: str
    rule_id: str = ""

    def to_dict(self) -> Dict:
        return {
            "target_symbol": self.target_symbol,
            "substitute_symbol": self.substitute_symbol,
            "category": self.category,
            "shared_tone_count": self.shared_tone_count,
            "score": self.score,
            "explanation": self.explanation,
            "rule_id": self.rule_id,
        }


@dataclass
class _Context:
    """Everything a generator needs about the chord being replaced."""
    tonic: str
    tonic_pc: int
    mode: str
    chord: DiatonicChord
    all_chords: Sequence[DiatonicChord]
    next_chord: Optional[DiatonicChord]
    use_flats: bool
    candidates: List[SubstitutionCandidate] = field(default_factory=list)


# =============================================================================
# RULE TABLE
# =============================================================================

SUBSTITUTION_RULES: Tuple[SubstitutionRule, ...] = (
    SubstitutionRule(
        id="diatonic_same_function_common_tone",
        category=SubstitutionCategory.BASIC,
        name="Diatonic: same function",
        when=RuleCondition(min_shared_tones=2),
        op=GeneratorOp.SAME_FUNCTION_SWAP,
        explanation_template="Same function; shares {shared} tones.",
    ),
    SubstitutionRule(
        id="secondary_dominant_to_degree",
        category=SubstitutionCategory.FUNCTIONAL,
        name="Secondary dominant",
        when=RuleCondition(degree_not_in=frozenset({1}), requires_next_chord=True),
        op=GeneratorOp.SECONDARY_DOMINANT,
        explanation_template="V7/{target_roman} leading to {target_chord}.",
    ),
    SubstitutionRule(
        id="secondary_leadingtone_dim_to_degree",
        category=SubstitutionCategory.FUNCTIONAL,
        name="Secondary leading tone (vii°/x)",
        when=RuleCondition(degree_not_in=frozenset({1}), requires_next_chord=True),
        op=GeneratorOp.SECONDARY_LEADING_TONE,
        explanation_template="vii°7/{target_roman} leading to {target_chord}.",
    ),
    SubstitutionRule(
        id="tritone_sub_for_dominant7",
        category=SubstitutionCategory.JAZZ,
        name="Tritone substitute for a dominant",
        when=RuleCondition(function_is="dominant", requires_dominant_seventh=True),
        op=GeneratorOp.TRITONE_SUB,
        explanation_template="Tritone sub: shares the tritone, chromatic bass line.",
    ),
    SubstitutionRule(
        id="backdoor_bVII7_to_I",
        category=SubstitutionCategory.JAZZ,
        name="Backdoor dominant",
        when=RuleCondition(function_is="dominant"),
        op=GeneratorOp.BACKDOOR_DOMINANT,
        explanation_template="bVII7 → {target_roman} (backdoor resolution).",
    ),
    SubstitutionRule(
        id="borrowed_iv_in_major",
        category=SubstitutionCategory.MODAL_INTERCHANGE,
        name="Borrowed iv in major",
        when=RuleCondition(mode_is="ionian", degree_is=4),
        op=GeneratorOp.BORROW_PARALLEL_AEOLIAN,
        explanation_template="Borrowed from the parallel minor (iv).",
        borrow_degree=4,
        borrow_quality="m7",
    ),
    SubstitutionRule(
        id="borrowed_bVI_in_major",
        category=SubstitutionCategory.MODAL_INTERCHANGE,
        name="Borrowed bVI in major",
        when=RuleCondition(mode_is="ionian"),
        op=GeneratorOp.BORROW_PARALLEL_AEOLIAN,
        explanation_template="Borrowed from the parallel minor (bVI).",
        borrow_degree=6,
        borrow_quality="maj7",
    ),
    SubstitutionRule(
        id="borrowed_V7_in_minor",
        category=SubstitutionCategory.FUNCTIONAL,
        name="V7 in minor",
        when=RuleCondition(mode_is="aeolian", degree_is=5),
        op=GeneratorOp.HARMONIC_MINOR_DOMINANT,
        explanation_template="V7 from harmonic minor (stronger resolution).",
    ),
    SubstitutionRule(
        id="diminished_approach_up_semitone",
        category=SubstitutionCategory.CHROMATIC,
        name="Diminished approach chord",
        when=RuleCondition(requires_next_chord=True),
        op=GeneratorOp.CHROMATIC_APPROACH,
        explanation_template="°7 leading into {target_chord} (chromatic approach).",
    ),
)


# =============================================================================
# HELPERS
# =============================================================================

def quality_tones(root_pc: int, quality: str) -> Tuple[int, ...]:
    """Pitch classes of a chord quality on a root."""
    return tuple((root_pc + iv) % 12 for iv in CANDIDATE_QUALITIES[quality])


def count_shared_tones(original: Sequence[int], candidate: Sequence[int]) -> int:
    """How many of the original chord's tones the candidate also contains."""
    candidate_set = {t % 12 for t in candidate}
    return sum(1 for t in original if t % 12 in candidate_set)


def is_dominant_seventh(chord: DiatonicChord) -> bool:
    if len(chord.tones) != 4:
        return False
    root = chord.root
    return tuple((t - root) % 12 for t in chord.tones) == (0, 4, 7, 10)


def rule_applies(rule: SubstitutionRule, ctx: _Context) -> bool:
    """Evaluate a rule's condition against the chord in context."""
    when = rule.when
    chord = ctx.chord
    if when.mode_is is not None and when.mode_is != ctx.mode:
        return False
    if when.degree_is is not None and when.degree_is != chord.degree:
        return False
    if chord.degree in when.degree_not_in:
        return False
    if when.function_is is not None and when.function_is != chord.function:
        return False
    if when.requires_dominant_seventh and not is_dominant_seventh(chord):
        return False
    if when.requires_next_chord and ctx.next_chord is None:
        return False
    return True


def _bare_roman(chord: DiatonicChord) -> str:
    """Numeral of a chord without seventh marks ("V7" -> "V", "viiø7" -> "vii")."""
    return roman_for(chord.degree, chord.quality, "")


def _explain(rule: SubstitutionRule, shared: int, target_roman: str = "", target_chord: str = "") -> str:
    return rule.explanation_template.format(
        shared=shared,
        target_roman=target_roman,
        target_chord=target_chord,
    )


def _emit(
    ctx: _Context,
    rule: SubstitutionRule,
    root_pc: int,
    quality: str,
    base_score: float,
    target_roman: str = "",
    target_chord: str = "",
) -> None:
    """Build a candidate from a root and a quality and add it to the context."""
    tones = quality_tones(root_pc, quality)
    shared = count_shared_tones(ctx.chord.tones, tones)
    ctx.candidates.append(SubstitutionCandidate(
        target_symbol=ctx.chord.symbol,
        substitute_symbol=note_name(root_pc, ctx.use_flats) + quality,
        category=rule.category.value,
        shared_tone_count=shared,
        score=base_score + shared * SCORING_WEIGHTS["shared_tones"],
        explanation=_explain(rule, shared, target_roman, target_chord),
        rule_id=rule.id,
    ))


# =============================================================================
# GENERATORS
# =============================================================================

def _same_function_swap(rule: SubstitutionRule, ctx: _Context) -> None:
    chord = ctx.chord
    for degree in get_function_bucket(ctx.mode, chord.function):
        if degree == chord.degree:
            continue
        other = find_diatonic_chord(list(ctx.all_chords), degree)
        if other is None:
            continue
        shared = count_shared_tones(chord.tones, other.tones)
        if shared < rule.when.min_shared_tones:
            continue
        ctx.candidates.append(SubstitutionCandidate(
            target_symbol=chord.symbol,
            substitute_symbol=other.symbol,
            category=rule.category.value,
            shared_tone_count=shared,
            score=SCORING_WEIGHTS["diatonic_bonus"] + shared * SCORING_WEIGHTS["shared_tones"],
            explanation=_explain(rule, shared),
            rule_id=rule.id,
        ))


def _secondary_dominant(rule: SubstitutionRule, ctx: _Context) -> None:
    nxt = ctx.next_chord
    # Only when the chord already sits a fifth above the next root
    if (ctx.chord.root - nxt.root) % 12 != 7:
        return
    _emit(ctx, rule, ctx.chord.root, "7", RULE_BASE_SCORES["secondary_dominant"],
          _bare_roman(nxt), nxt.symbol)


def _secondary_leading_tone(rule: SubstitutionRule, ctx: _Context) -> None:
    nxt = ctx.next_chord
    _emit(ctx, rule, (nxt.root - 1) % 12, "dim7", RULE_BASE_SCORES["secondary_leading_tone"],
          _bare_roman(nxt), nxt.symbol)


def _tritone_sub(rule: SubstitutionRule, ctx: _Context) -> None:
    _emit(ctx, rule, (ctx.chord.root + 6) % 12, "7", RULE_BASE_SCORES["tritone_sub"])


def _backdoor_dominant(rule: SubstitutionRule, ctx: _Context) -> None:
    nxt = ctx.next_chord
    if nxt is None:
        _emit(ctx, rule, (ctx.tonic_pc + 10) % 12, "7", RULE_BASE_SCORES["backdoor_fallback"],
              "I")
    elif nxt.degree == 1:
        _emit(ctx, rule, (nxt.root + 10) % 12, "7", RULE_BASE_SCORES["backdoor_to_tonic"],
              _bare_roman(nxt), nxt.symbol)


def _borrow_parallel_aeolian(rule: SubstitutionRule, ctx: _Context) -> None:
    interval = get_mode("aeolian").intervals[rule.borrow_degree - 1]
    _emit(ctx, rule, (ctx.tonic_pc + interval) % 12, rule.borrow_quality or "m7",
          SCORING_WEIGHTS["borrowed_penalty"])


def _harmonic_minor_dominant(rule: SubstitutionRule, ctx: _Context) -> None:
    _emit(ctx, rule, ctx.chord.root, "7", RULE_BASE_SCORES["harmonic_minor_dominant"])


def _chromatic_approach(rule: SubstitutionRule, ctx: _Context) -> None:
    nxt = ctx.next_chord
    _emit(ctx, rule, (nxt.root - 1) % 12, "dim7", RULE_BASE_SCORES["chromatic_approach"],
          _bare_roman(nxt), nxt.symbol)


_HANDLERS: Dict[GeneratorOp, Callable[[SubstitutionRule, _Context], None]] = {
    GeneratorOp.SAME_FUNCTION_SWAP: _same_function_swap,
    GeneratorOp.SECONDARY_DOMINANT: _secondary_dominant,
    GeneratorOp.SECONDARY_LEADING_TONE: _secondary_leading_tone,
    GeneratorOp.TRITONE_SUB: _tritone_sub,
    GeneratorOp.BACKDOOR_DOMINANT: _backdoor_dominant,
    GeneratorOp.BORROW_PARALLEL_AEOLIAN: _borrow_parallel_aeolian,
    GeneratorOp.HARMONIC_MINOR_DOMINANT: _harmonic_minor_dominant,
    GeneratorOp.CHROMATIC_APPROACH: _chromatic_approach,
}

_unhandled = set(GeneratorOp) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for generator ops: {sorted(op.name for op in _unhandled)}")


# =============================================================================
# MAIN FUNCTION
# =============================================================================

def dedupe_candidates(candidates: List[SubstitutionCandidate]) -> List[SubstitutionCandidate]:
    """Keep the best-scoring candidate per symbol, then sort best first."""
    best: Dict[str, SubstitutionCandidate] = {}
    for cand in candidates:
        current = best.get(cand.substitute_symbol)
        if current is None or cand.score > current.score:
            best[cand.substitute_symbol] = cand
    return sorted(best.values(), key=lambda c: c.score, reverse=True)


def suggest_substitutions(
    tonic: str,
    mode: str,
    chord: DiatonicChord,
    all_chords: Sequence[DiatonicChord],
    next_chord: Optional[DiatonicChord] = None,
) -> List[SubstitutionCandidate]:
    """
    Suggest substitutes for a diatonic chord.

    Args:
        tonic: Tonic of the key
        mode: Mode id of the key
        chord: The chord to replace (from build_diatonic_chords)
        all_chords: All seven chords of the key, same chord type as chord
        next_chord: The chord that follows, if known; rules that need it
                    are skipped without it

    Returns:
        Candidates sorted by score (highest first), unique by symbol
    """
    ctx = _Context(
        tonic=tonic,
        tonic_pc=parse_note_name(tonic),
        mode=mode,
        chord=chord,
        all_chords=all_chords,
        next_chord=next_chord,
        use_flats=prefers_flats_for_key(tonic, mode),
    )

    for rule in SUBSTITUTION_RULES:
        if not rule_applies(rule, ctx):
            logger.debug("Rule %s skipped for %s", rule.id, chord.symbol)
            continue
        _HANDLERS[rule.op](rule, ctx)

    return dedupe_candidates(ctx.candidates)


def suggest_substitutions_for_degree(
    tonic: str,
    mode: str,
    degree: int,
    next_degree: Optional[int] = None,
    include_sevenths: bool = True,
) -> List[SubstitutionCandidate]:
    """Convenience wrapper: build the key's chords and look up degrees."""
    for d in (degree, next_degree):
        if d is not None and not 1 <= d <= 7:
            raise ValueError(f"Degree must be 1-7. Got: {d}")
    chords = build_diatonic_chords(tonic, mode, include_sevenths)
    next_chord = chords[next_degree - 1] if next_degree else None
    return suggest_substitutions(tonic, mode, chords[degree - 1], chords, next_chord)


# =============================================================================
# TESTING
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("Testing substitutions.py")
    print("=" * 60)

    for degree, nxt in [(1, None), (5, None), (5, 1), (4, None)]:
        print(f"\n✓ E ionian degree {degree} (next: {nxt})")
        for cand in suggest_substitutions_for_degree("E", "ionian", degree, nxt):
            print(f"  {cand.substitute_symbol:8} {cand.score:5.1f}  {cand.explanation}")
