"""Pitch classes and notes.

A `PitchClass` is one of the twelve chromatic slots, optionally carrying the
spelling it was parsed from (``Db`` rather than ``C#``). Identity, equality and
hashing depend only on the slot, so enharmonic spellings compare equal.

A `Note` binds a pitch class to an octave. Its absolute semitone value is
``octave * 12 + index`` (C0 = 0), and notes are totally ordered by it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum, auto, unique
from functools import total_ordering
from typing import TYPE_CHECKING, Dict, Optional, Union

from fretwork import constants
from fretwork.base import (
    InvalidNoteFormatError,
    InvalidNoteNameError,
    MatchException,
    OutOfRangeError,
)

if TYPE_CHECKING:
    from fretwork.interval import Interval


@unique
class NoteName(Enum):
    """Enumeration of the twelve chromatic slots.

    Values correspond to semitone offsets from C within an octave.
    Member names use ``s`` for sharp since ``#`` is not a valid identifier.
    """

    C = 0
    Cs = 1
    D = 2
    Ds = 3
    E = 4
    F = 5
    Fs = 6
    G = 7
    Gs = 8
    A = 9
    As = 10
    B = 11

    @property
    def spelling(self) -> str:
        """The canonical (sharp) spelling of this slot, e.g. ``C#``."""
        return self.name.replace("s", "#")

    def add_steps(self, steps: int) -> NoteName:
        """Add semitone steps to this note name.

        Args:
            steps: Number of semitones to add (can be negative).

        Returns:
            The resulting note name after adding the steps.
        """
        return NOTE_LOOKUP[(self.value + steps) % constants.SEMITONES_PER_OCTAVE]


def _build_note_lookup() -> Dict[int, NoteName]:
    d: Dict[int, NoteName] = {}
    for n in NoteName:
        d[n.value] = n
    assert len(d) == constants.SEMITONES_PER_OCTAVE
    return d


NOTE_LOOKUP = _build_note_lookup()
"""Lookup table from semitone offset (0-11) to NoteName."""

LETTER_TO_SEMITONE: Dict[str, int] = {
    "c": 0,
    "d": 2,
    "e": 4,
    "f": 5,
    "g": 7,
    "a": 9,
    "b": 11,
}
"""Semitone offset of each natural letter."""

ACCIDENTAL_TO_STEPS: Dict[str, int] = {"#": 1, "b": -1}
"""Semitone adjustment of each accepted accidental."""

_OCTAVE_PATTERN = re.compile(r"-?[0-9]+")

_FLAT_SPELLINGS: Dict[NoteName, str] = {
    NoteName.Cs: "Db",
    NoteName.Ds: "Eb",
    NoteName.Fs: "Gb",
    NoteName.Gs: "Ab",
    NoteName.As: "Bb",
}
"""Flat spelling of each black-key slot."""


@unique
class SpellingPreference(Enum):
    """How accidentals are written when a pitch class is displayed."""

    Sharps = auto()  # C, C#, D, D#, ...
    Flats = auto()  # C, Db, D, Eb, ...
    Auto = auto()  # Whatever the value already carries


@dataclass(frozen=True)
class PitchClass:
    """One of the twelve pitch classes, with an optional display spelling."""

    note_name: NoteName
    """The chromatic slot; the only field used for equality and hashing."""
    spelling: Optional[str] = field(default=None, compare=False)
    """Spelling chosen at construction (e.g. ``Db``), or None for canonical."""

    @property
    def index(self) -> int:
        """Semitone offset from C (0-11)."""
        return self.note_name.value

    @staticmethod
    def of(index: int) -> PitchClass:
        """Get the canonically spelled pitch class for a semitone index.

        The index is reduced modulo 12, so any integer is accepted.
        """
        return PitchClass(NOTE_LOOKUP[index % constants.SEMITONES_PER_OCTAVE])

    @staticmethod
    def parse(text: str) -> PitchClass:
        """Parse a pitch class such as ``C``, ``f#`` or ``Bb``.

        Accepts one letter A-G (case-insensitive) optionally followed by
        a single ``#`` or ``b``. Surrounding whitespace is ignored.

        Args:
            text: The token to parse.

        Returns:
            The parsed pitch class, keeping the given spelling for display.

        Raises:
            InvalidNoteNameError: If the token is not a valid pitch class.
        """
        token = text.strip().lower()
        if len(token) == 0 or len(token) > 2 or token[0] not in LETTER_TO_SEMITONE:
            raise InvalidNoteNameError(text)
        semitone = LETTER_TO_SEMITONE[token[0]]
        accidental = token[1:]
        if accidental:
            if accidental not in ACCIDENTAL_TO_STEPS:
                raise InvalidNoteNameError(text)
            semitone += ACCIDENTAL_TO_STEPS[accidental]
        spelling = token[0].upper() + accidental
        return PitchClass(
            NOTE_LOOKUP[semitone % constants.SEMITONES_PER_OCTAVE], spelling
        )

    def transpose(self, semitones: int) -> PitchClass:
        """Return the pitch class the given number of semitones away.

        Wraps with true modulo, so negative steps work. The result uses the
        canonical spelling.
        """
        return PitchClass(self.note_name.add_steps(semitones))

    def semitones_to(self, other: PitchClass) -> int:
        """Ascending distance from this pitch class to another (0-11)."""
        return (other.index - self.index) % constants.SEMITONES_PER_OCTAVE

    @property
    def prefers_flats(self) -> bool:
        """Whether this pitch class was spelled with a flat, as in ``Bb``."""
        return self.spelling is not None and self.spelling[1:] == "b"

    def spelled(self, preference: SpellingPreference) -> str:
        """Spell this pitch class with sharps, flats, or as it already is.

        Naturals are spelled the same under every preference.
        """
        if preference == SpellingPreference.Sharps:
            return self.note_name.spelling
        elif preference == SpellingPreference.Flats:
            return _FLAT_SPELLINGS.get(self.note_name, self.note_name.spelling)
        elif preference == SpellingPreference.Auto:
            return str(self)
        else:
            raise MatchException(preference)

    def __str__(self) -> str:
        return self.spelling if self.spelling is not None else self.note_name.spelling


@total_ordering
@dataclass(frozen=True)
class Note:
    """A pitch class anchored to an octave.

    Equality compares pitch class and octave, so ``C#4 == Db4`` holds
    (enharmonic equivalence). Ordering follows the absolute semitone value.
    """

    pitch_class: PitchClass
    """The pitch class of this note."""
    octave: int
    """The octave number; middle C is C4."""

    @property
    def absolute_semitone(self) -> int:
        """Semitones above C0."""
        return self.octave * constants.SEMITONES_PER_OCTAVE + self.pitch_class.index

    @property
    def midi(self) -> int:
        """The MIDI note number (C4 = 60)."""
        return (
            self.absolute_semitone
            + constants.MIDI_OCTAVE_OFFSET * constants.SEMITONES_PER_OCTAVE
        )

    @property
    def frequency(self) -> float:
        """Frequency in Hz under equal temperament with A4 = 440 Hz."""
        return constants.REFERENCE_FREQUENCY * math.pow(
            2.0, (self.midi - constants.REFERENCE_MIDI) / constants.SEMITONES_PER_OCTAVE
        )

    @staticmethod
    def from_absolute(semitone: int) -> Note:
        """Build the canonically spelled note at an absolute semitone value."""
        octave, index = divmod(semitone, constants.SEMITONES_PER_OCTAVE)
        return Note(PitchClass.of(index), octave)

    @staticmethod
    def from_midi(midi: int) -> Note:
        """Build a note from a MIDI note number (0-127).

        Raises:
            OutOfRangeError: If the number is outside the MIDI range.
        """
        if midi < 0 or midi > 127:
            raise OutOfRangeError(f"MIDI note {midi} is outside [0, 127]")
        return Note.from_absolute(
            midi - constants.MIDI_OCTAVE_OFFSET * constants.SEMITONES_PER_OCTAVE
        )

    @staticmethod
    def parse(text: str) -> Note:
        """Parse a note such as ``C4``, ``c#3``, ``Db2`` or ``C-1``.

        Args:
            text: A pitch-class token followed by an integer octave.

        Returns:
            The parsed note.

        Raises:
            InvalidNoteFormatError: If the octave is missing, malformed, or
                below `constants.MIN_OCTAVE`.
            InvalidNoteNameError: If the pitch-class token is invalid.
        """
        token = text.strip()
        if not token:
            raise InvalidNoteFormatError(text, "empty")
        # The octave starts at the first digit or minus sign after the letter
        octave_start = None
        for pos in range(1, len(token)):
            if token[pos] == "-" or token[pos].isdigit():
                octave_start = pos
                break
        if octave_start is None:
            raise InvalidNoteFormatError(text, "missing octave")
        pitch_class = PitchClass.parse(token[:octave_start])
        octave_str = token[octave_start:]
        if _OCTAVE_PATTERN.fullmatch(octave_str) is None:
            raise InvalidNoteFormatError(text, "bad octave")
        octave = int(octave_str)
        if octave < constants.MIN_OCTAVE:
            raise InvalidNoteFormatError(text, "octave below floor")
        return Note(pitch_class, octave)

    def transpose(self, interval: Union[Interval, int]) -> Note:
        """Return the note shifted by an interval (or a semitone count).

        The result is canonically spelled.

        Raises:
            OutOfRangeError: If the result would fall below `constants.MIN_OCTAVE`.
        """
        steps = interval if isinstance(interval, int) else interval.semitones
        result = Note.from_absolute(self.absolute_semitone + steps)
        if result.octave < constants.MIN_OCTAVE:
            raise OutOfRangeError(
                f"Transposing {self} by {steps} semitones falls below octave {constants.MIN_OCTAVE}"
            )
        return result

    def semitones_to(self, other: Note) -> int:
        """Signed distance in semitones from this note to another."""
        return other.absolute_semitone - self.absolute_semitone

    def __add__(self, interval: Union[Interval, int]) -> Note:
        return self.transpose(interval)

    def __sub__(self, interval: Union[Interval, int]) -> Note:
        steps = interval if isinstance(interval, int) else interval.semitones
        return self.transpose(-steps)

    def __lt__(self, other: Note) -> bool:
        if not isinstance(other, Note):
            return NotImplemented
        return self.absolute_semitone < other.absolute_semitone

    def __str__(self) -> str:
        return f"{self.pitch_class}{self.octave}"
