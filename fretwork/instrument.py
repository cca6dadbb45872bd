"""Stringed instruments, strings and fret addressing.

An `Instrument` is an immutable, ordered collection of `StringConfig` values
plus a capo position. String order is significant (low to high by convention)
and no operation reorders it. Re-stringing and re-capoing return new values.

Frets are addressed physically: fret 0 is the open string and fret ``n`` is
``n`` semitones above it regardless of the capo. With a capo at fret ``c``
only frets ``c..fret_count`` are playable, and the sounding open note of each
string is its open note raised by ``c`` semitones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Tuple

from fretwork import constants
from fretwork.base import (
    InvalidCapoPositionError,
    InvalidFretCountError,
    InvalidInstrumentError,
    OutOfRangeError,
    TuningMismatchError,
)
from fretwork.interval import Interval
from fretwork.pitch import Note


@dataclass(frozen=True)
class StringConfig:
    """One physical string: its open note and how many frets it has."""

    open_note: Note
    """The note of the unfretted string."""
    fret_count: int = constants.DEFAULT_FRET_COUNT
    """Number of frets; fret 0 (open) is always present."""

    def __post_init__(self) -> None:
        if self.fret_count < 0:
            raise InvalidFretCountError(f"Fret count must be >= 0, got {self.fret_count}")

    @staticmethod
    def parse(token: str, fret_count: int = constants.DEFAULT_FRET_COUNT) -> StringConfig:
        """Build a string from a note token such as ``E2`` or ``G#3``."""
        return StringConfig(Note.parse(token), fret_count)

    def note_at_fret(self, fret: int) -> Note:
        """The note sounded when this string is stopped at a fret.

        Raises:
            OutOfRangeError: If the fret is outside ``[0, fret_count]``.
        """
        if fret < 0 or fret > self.fret_count:
            raise OutOfRangeError(f"Fret {fret} is outside [0, {self.fret_count}]")
        return self.open_note.transpose(Interval(fret))

    def __str__(self) -> str:
        return str(self.open_note)


@dataclass(frozen=True)
class Instrument:
    """A named stringed instrument with an optional capo."""

    name: str
    """Display name of the instrument."""
    strings: Tuple[StringConfig, ...]
    """Strings in physical order, lowest-pitched first by convention."""
    capo: int = 0
    """Fret the capo is clamped at; 0 means no capo."""

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "strings", tuple(self.strings))
        if len(self.strings) == 0:
            raise InvalidInstrumentError(f"Instrument {self.name!r} has no strings")
        if self.capo < 0:
            raise InvalidCapoPositionError(self.capo)

    @property
    def string_count(self) -> int:
        """Number of strings."""
        return len(self.strings)

    @property
    def max_fret_count(self) -> int:
        """Fret count of the longest string."""
        return max(s.fret_count for s in self.strings)

    def _string(self, string_index: int) -> StringConfig:
        if string_index < 0 or string_index >= len(self.strings):
            raise OutOfRangeError(
                f"String {string_index} is outside [0, {len(self.strings)})"
            )
        return self.strings[string_index]

    def playable_frets(self, string_index: int) -> range:
        """The physical frets that can be played on a string given the capo.

        Empty when the capo sits beyond the string's last fret.
        """
        string = self._string(string_index)
        return range(self.capo, string.fret_count + 1)

    def open_note(self, string_index: int) -> Note:
        """The sounding open note of a string, including the capo."""
        return self._string(string_index).open_note.transpose(Interval(self.capo))

    def note_at_fret(self, string_index: int, fret: int) -> Note:
        """The note sounded at a physical fret on a string.

        Raises:
            OutOfRangeError: If the string index is out of range, or the fret is
                outside ``[capo, fret_count]`` for that string.
        """
        string = self._string(string_index)
        if fret < self.capo and 0 <= fret <= string.fret_count:
            raise OutOfRangeError(
                f"Fret {fret} on string {string_index} is behind the capo at {self.capo}"
            )
        return string.note_at_fret(fret)

    def with_capo(self, capo: int) -> Instrument:
        """Return this instrument with a capo at the given fret.

        The position replaces any existing capo. A capo beyond a string's
        fret count is accepted; that string simply has no playable frets.

        Raises:
            InvalidCapoPositionError: If the position is negative.
        """
        if capo < 0:
            raise InvalidCapoPositionError(capo)
        return replace(self, capo=capo)

    def with_tuning(self, notes: Sequence[Note]) -> Instrument:
        """Return this instrument re-strung with new open notes, positionally.

        Fret counts, name and capo are kept.

        Raises:
            TuningMismatchError: If there is not exactly one note per string.
        """
        if len(notes) != len(self.strings):
            raise TuningMismatchError(self.name, len(self.strings), len(notes))
        return replace(
            self,
            strings=tuple(
                replace(string, open_note=note)
                for string, note in zip(self.strings, notes)
            ),
        )

    def with_fret_counts(self, counts: Sequence[int]) -> Instrument:
        """Return this instrument with new fret counts.

        Args:
            counts: Either a single count for every string, or one per string.

        Raises:
            InvalidFretCountError: If the number of counts is neither 1 nor
                the string count, or a count is negative.
        """
        if len(counts) == 1:
            counts = [counts[0]] * len(self.strings)
        elif len(counts) != len(self.strings):
            raise InvalidFretCountError(
                f"Fret counts ({len(counts)}) must be 1 or match string count ({len(self.strings)})"
            )
        return replace(
            self,
            strings=tuple(
                replace(string, fret_count=count)
                for string, count in zip(self.strings, counts)
            ),
        )

    def tuning_text(self) -> str:
        """The open notes (without capo) as canonical tuning text."""
        return " ".join(str(s) for s in self.strings)

    def __str__(self) -> str:
        text = f"{self.name} ({self.tuning_text()})"
        if self.capo > 0:
            text += f" capo {self.capo}"
        return text
