"""Named tunings that re-string an instrument."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from fretwork.base import TuningMismatchError
from fretwork.instrument import Instrument
from fretwork.pitch import Note
from fretwork.tuning_parser import parse_notes


@dataclass(frozen=True)
class Tuning:
    """An ordered assignment of open notes to an instrument's strings."""

    name: str
    """Display name, e.g. ``Drop D``."""
    notes: Tuple[Note, ...]
    """Open notes in string order."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(self.notes))

    @staticmethod
    def parse(name: str, text: str) -> Tuning:
        """Build a tuning from any text `normalize` accepts.

        Example: ``Tuning.parse("Drop D", "DADGBE")``.
        """
        return Tuning(name, parse_notes(text))

    @property
    def string_count(self) -> int:
        """Number of notes (and so of strings) in this tuning."""
        return len(self.notes)

    def apply_to(self, instrument: Instrument) -> Instrument:
        """Return the instrument re-strung with this tuning.

        String count, fret counts and capo are unchanged; open notes are
        replaced positionally.

        Raises:
            TuningMismatchError: If the note count differs from the string count.
        """
        if len(self.notes) != instrument.string_count:
            raise TuningMismatchError(self.name, instrument.string_count, len(self.notes))
        return instrument.with_tuning(self.notes)

    def text(self) -> str:
        """Canonical space-separated form of the notes."""
        return " ".join(str(n) for n in self.notes)

    def __str__(self) -> str:
        return f"{self.name} ({self.text()})"
