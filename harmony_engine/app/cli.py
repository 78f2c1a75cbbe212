"""
Command Line Interface for the Harmony Engine
=============================================

A terminal front end for the engine's main operations: reading keys,
listing diatonic chords, placing chords on scale degrees, suggesting
substitutions, browsing the progression dataset, suggesting the next chord
and matching scales to chords.

Usage Examples:
    # What does a key string mean?
    harmony-engine key "F# minor"

    # Diatonic seventh chords of Bb major
    harmony-engine chords Bb ionian --sevenths

    # Roman numeral of a chord in a key
    harmony-engine degree F#m7b5 "E minor"

    # Substitutions for V in E major, resolving to I
    harmony-engine subs E ionian 5 --next 1

    # Jazz progressions transposed to F
    harmony-engine progressions --mode major --tag jazz --tonic F

    # What comes after C, Am in C major?
    harmony-engine next "C major" C Am --profile jazz

    # Scales over G7b9, JSON output
    harmony-engine --json scales G7b9

Author: Rohan Rajendra Dhanawade
"""

import argparse
import json
import logging
import sys
from typing import Callable, Dict, List, Optional

from harmony_engine import __version__
from harmony_engine.exceptions import HarmonyError
from harmony_engine.rules.chords import PROFILES, get_chord_degree, get_next_chord_suggestions_from_sequence
from harmony_engine.rules.harmony import build_diatonic_chords, get_scale
from harmony_engine.rules.key_parser import parse_key
from harmony_engine.rules.progressions import filter_progressions, transpose_progression
from harmony_engine.rules.substitutions import suggest_substitutions_for_degree
from harmony_engine.theory.modes import MODE_IDS
from harmony_engine.theory.scales import STYLE_PROFILES, match_scales

logger = logging.getLogger(__name__)


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser object with one subcommand per operation
    """
    parser = argparse.ArgumentParser(
        prog="harmony-engine",
        description="""
🎼 Harmony Engine - keys, diatonic chords, substitutions and progressions.

Examples:
  harmony-engine key "Bb dorian"
  harmony-engine degree Ab "G minor"
  harmony-engine next "A minor" Am F --spice
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output result as JSON (useful for scripting)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # ─────────────────────────────────────────────────────────────────────────
    # key
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("key", help="Parse a free-text key")
    p.add_argument("text", help='Key text, e.g. "C# minor", "Bb", "D dorian"')

    # ─────────────────────────────────────────────────────────────────────────
    # chords
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("chords", help="List the diatonic chords of a key")
    p.add_argument("tonic", help="Tonic note, e.g. C, F#, Bb")
    p.add_argument("mode", choices=MODE_IDS, help="Mode id")
    p.add_argument("--sevenths", action="store_true", help="Build seventh chords")

    # ─────────────────────────────────────────────────────────────────────────
    # degree
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("degree", help="Roman numeral of a chord in a key")
    p.add_argument("chord", help="Chord symbol, e.g. Am7, F#m7b5, C/E")
    p.add_argument("key", help='Key text, e.g. "C major"')

    # ─────────────────────────────────────────────────────────────────────────
    # subs
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("subs", help="Suggest substitutions for a scale degree")
    p.add_argument("tonic", help="Tonic note")
    p.add_argument("mode", choices=MODE_IDS, help="Mode id")
    p.add_argument("degree", type=int, help="Scale degree (1-7) of the chord to replace")
    p.add_argument("--next", type=int, dest="next_degree", help="Degree (1-7) of the following chord")
    p.add_argument("--triads", action="store_true", help="Work on triads instead of seventh chords")

    # ─────────────────────────────────────────────────────────────────────────
    # progressions
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("progressions", help="Browse the progression dataset")
    p.add_argument("--mode", default="all", help='"all", "major", "minor" or a mode id')
    p.add_argument("--tag", action="append", dest="tags", help="Style tag (repeatable)")
    p.add_argument("--type", dest="chord_type", choices=["triad", "seventh", "all"],
                   help="Chord type")
    p.add_argument("--tonic", help="Transpose the results to this tonic")

    # ─────────────────────────────────────────────────────────────────────────
    # next
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("next", help="Suggest the next chord of a sequence")
    p.add_argument("key", help='Key text, e.g. "C major"')
    p.add_argument("chords", nargs="*", help="Chords played so far (none = starting chords)")
    p.add_argument("--profile", choices=PROFILES, default="seventh", help="Chord complexity")
    p.add_argument("--spice", action="store_true", help="Allow chromatic suggestions")

    # ─────────────────────────────────────────────────────────────────────────
    # scales
    # ─────────────────────────────────────────────────────────────────────────
    p = sub.add_parser("scales", help="Scales that fit over a chord")
    p.add_argument("chord", help="Chord symbol")
    p.add_argument("--key", help="Surrounding key, for the in-key bonus")
    p.add_argument("--style", choices=list(STYLE_PROFILES), default="jazz", help="Style profile")

    return parser


# =============================================================================
# PART 2: COMMANDS
# =============================================================================
#
# Each command returns a JSON-serializable dictionary. Bad input raises
# ValueError (or a HarmonyError), which main() turns into exit status 1.
# =============================================================================

def cmd_key(args) -> Dict:
    key = parse_key(args.text)
    if key is None:
        raise ValueError(f"Cannot parse key: {args.text!r}")
    scale = get_scale(key.tonic, key.mode)
    return {**key.to_dict(), "notes": list(scale.note_names), "use_flats": key.use_flats}


def cmd_chords(args) -> Dict:
    chords = build_diatonic_chords(args.tonic, args.mode, args.sevenths)
    return {
        "tonic": args.tonic,
        "mode": args.mode,
        "chords": [c.to_dict() for c in chords],
    }


def cmd_degree(args) -> Dict:
    if parse_key(args.key) is None:
        raise ValueError(f"Cannot parse key: {args.key!r}")
    roman = get_chord_degree(args.chord, args.key)
    if roman is None:
        raise ValueError(f"Cannot place chord {args.chord!r} in key {args.key!r}")
    return {"chord": args.chord, "key": args.key, "roman": roman}


def cmd_subs(args) -> Dict:
    candidates = suggest_substitutions_for_degree(
        args.tonic,
        args.mode,
        args.degree,
        next_degree=args.next_degree,
        include_sevenths=not args.triads,
    )
    return {
        "tonic": args.tonic,
        "mode": args.mode,
        "degree": args.degree,
        "next_degree": args.next_degree,
        "candidates": [c.to_dict() for c in candidates],
    }


def cmd_progressions(args) -> Dict:
    progressions = filter_progressions(mode=args.mode, tags=args.tags, chord_type=args.chord_type)
    if args.tonic:
        progressions = [transpose_progression(p, args.tonic) for p in progressions]
    return {"count": len(progressions), "progressions": [p.model_dump() for p in progressions]}


def cmd_next(args) -> Dict:
    key = parse_key(args.key)
    if key is None:
        raise ValueError(f"Cannot parse key: {args.key!r}")
    suggestions = get_next_chord_suggestions_from_sequence(
        args.chords, key, profile=args.profile, use_spice=args.spice
    )
    return {
        "key": str(key),
        "sequence": list(args.chords),
        "suggestions": [s.to_dict() for s in suggestions],
    }


def cmd_scales(args) -> Dict:
    matches = match_scales(args.chord, key=args.key, style=args.style)
    if not matches:
        raise ValueError(f"Cannot parse chord: {args.chord!r}")
    return {"chord": args.chord, "key": args.key, "matches": [m.to_dict() for m in matches]}


COMMANDS: Dict[str, Callable] = {
    "key": cmd_key,
    "chords": cmd_chords,
    "degree": cmd_degree,
    "subs": cmd_subs,
    "progressions": cmd_progressions,
    "next": cmd_next,
    "scales": cmd_scales,
}


# =============================================================================
# PART 3: OUTPUT FORMATTING
# =============================================================================

def _format_key(result: Dict) -> List[str]:
    return [
        f"🎹 Key:   {result['tonic']} {result['mode']}",
        f"   Notes: {' '.join(result['notes'])}",
    ]


def _format_chords(result: Dict) -> List[str]:
    lines = [f"🎹 {result['tonic']} {result['mode']}", "─" * 50]
    for c in result["chords"]:
        lines.append(f"  {c['roman']:8} {c['symbol']:10} {c['function']:12} {' '.join(c['tone_names'])}")
    return lines


def _format_degree(result: Dict) -> List[str]:
    return [f"{result['chord']} in {result['key']} → {result['roman']}"]


def _format_subs(result: Dict) -> List[str]:
    if not result["candidates"]:
        return ["(no substitutions)"]
    lines = []
    for c in result["candidates"]:
        lines.append(
            f"  {c['target_symbol']:8} → {c['substitute_symbol']:8} "
            f"{c['score']:5.1f}  [{c['category']}] {c['explanation']}"
        )
    return lines


def _format_progressions(result: Dict) -> List[str]:
    lines = [f"{result['count']} progressions", "─" * 60]
    for p in result["progressions"]:
        shown = p.get("chords") or p["roman"]
        lines.append(f"  {p['id']:28} {p['weight']:2}  {' → '.join(shown)}")
    return lines


def _format_next(result: Dict) -> List[str]:
    played = " → ".join(result["sequence"]) or "(start)"
    lines = [f"🎹 {result['key']}: {played}", "─" * 50]
    for s in result["suggestions"]:
        extra = f"  ({', '.join(s['variants'])})" if s["variants"] else ""
        label = f"  [{s['secondary_label']}]" if s["secondary_label"] else ""
        lines.append(f"  {s['roman']:8} {s['symbol']:8} {s['frequency']:6.1f}{label}{extra}")
    return lines


def _format_scales(result: Dict) -> List[str]:
    lines = []
    for m in result["matches"]:
        lines.append(f"  {m['scale_name']:26} {m['score']:4}  {' '.join(m['notes'])}")
    return lines


FORMATTERS: Dict[str, Callable[[Dict], List[str]]] = {
    "key": _format_key,
    "chords": _format_chords,
    "degree": _format_degree,
    "subs": _format_subs,
    "progressions": _format_progressions,
    "next": _format_next,
    "scales": _format_scales,
}


def format_result(command: str, result: Dict, as_json: bool = False) -> str:
    if as_json:
        return json.dumps(result, indent=2, ensure_ascii=False)
    return "\n".join(FORMATTERS[command](result))


# =============================================================================
# PART 4: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the CLI.

    Parses arguments, runs the chosen command and prints its result.
    Exits with status 1 (message on stderr) when the input cannot be read.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = COMMANDS[args.command](args)
    except (HarmonyError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(format_result(args.command, result, as_json=args.json))


if __name__ == "__main__":
    main()
