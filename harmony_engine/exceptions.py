"""
Exception hierarchy for the harmony engine.

Parsing of user text (keys, chord symbols, Roman numerals) never raises:
those functions return None. The exceptions below signal contract
violations only, e.g. an unvalidated note name handed to parse_note_name
or a corrupt progression dataset.
"""


class HarmonyError(Exception):
    """Base class for all harmony engine errors."""


class UnknownNoteError(HarmonyError, ValueError):
    """A note name outside the fixed table of canonical spellings."""

    def __init__(self, note: str):
        self.note = note
        super().__init__(f"Unknown note: '{note}'")


class UnknownModeError(HarmonyError, ValueError):
    """A mode id that is not in the mode registry."""

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"Unknown mode: '{mode}'")


class DatasetError(HarmonyError):
    """The progression dataset file is missing or malformed."""
