"""Base exceptions for the fretwork package.

Every failure raised by the core derives from `FretworkError`. Each concrete
kind also derives from the closest builtin so callers can catch either.
"""

from __future__ import annotations

from typing import Any


class FretworkError(Exception):
    """Root of the fretwork error taxonomy."""


class InvalidNoteNameError(FretworkError, ValueError):
    """A pitch-class token could not be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid note name: {text!r}")
        self.text = text


class InvalidNoteFormatError(FretworkError, ValueError):
    """A note token is missing its octave or the octave is malformed."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Invalid note format ({reason}): {text!r}")
        self.text = text
        self.reason = reason


class InvalidNoteCharacterError(FretworkError, ValueError):
    """Bare-letter tuning text contains a character that is not a note."""

    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"Invalid note character {char!r} at position {position}")
        self.char = char
        self.position = position


class EmptyTuningError(FretworkError, ValueError):
    """Tuning text contains no notes."""

    def __init__(self, text: str) -> None:
        super().__init__(f"No notes found in tuning: {text!r}")
        self.text = text


class OutOfRangeError(FretworkError, IndexError):
    """A string, fret, or pitch lies outside the addressable range."""


class InvalidCapoPositionError(FretworkError, ValueError):
    """A capo was placed at a negative fret."""

    def __init__(self, capo: int) -> None:
        super().__init__(f"Invalid capo position: {capo}")
        self.capo = capo


class InvalidFretCountError(FretworkError, ValueError):
    """A fret count (or list of fret counts) is unusable."""


class InvalidInstrumentError(FretworkError, ValueError):
    """An instrument definition violates its invariants."""


class TuningMismatchError(FretworkError, ValueError):
    """A tuning does not have one note per instrument string."""

    def __init__(self, tuning_name: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Tuning {tuning_name!r} has {actual} notes but the instrument has {expected} strings"
        )
        self.expected = expected
        self.actual = actual


class UnknownInstrumentError(FretworkError, LookupError):
    """No preset instrument has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown instrument: {name!r}")
        self.name = name


class UnknownTuningError(FretworkError, LookupError):
    """No preset tuning with the requested name exists for an instrument."""

    def __init__(self, instrument: str, name: str) -> None:
        super().__init__(f"Unknown tuning {name!r} for instrument {instrument!r}")
        self.instrument = instrument
        self.name = name


class InvalidChordError(FretworkError, ValueError):
    """A chord symbol or progression could not be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Invalid chord ({reason}): {text!r}")
        self.text = text
        self.reason = reason


class InvalidKeyError(FretworkError, ValueError):
    """A key name could not be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid key: {text!r}")
        self.text = text


class InvalidVoicingError(FretworkError, ValueError):
    """A voicing is malformed or does not fit the instrument."""


class MatchException(Exception):
    """Exception raised when pattern matching fails."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any pattern.
        """
        super().__init__(f"Failed to match value: {value}")
