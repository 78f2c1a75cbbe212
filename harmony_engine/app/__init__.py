"""
App Subpackage

The user-facing command-line interface:
    - cli.py: argparse front end over the harmony engine

Usage:
    harmony-engine key "F# minor"
    python -m harmony_engine.app.cli next "C major" C Am
"""
