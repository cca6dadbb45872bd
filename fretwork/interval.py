"""Musical intervals.

An `Interval` is a signed semitone count, optionally tagged with a quality and
an interval number for display ("major third", "M3"). Equality and ordering
use the semitone count alone, so an augmented fourth equals a diminished fifth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from functools import total_ordering
from typing import ClassVar, Dict, Optional, Tuple

from fretwork import constants
from fretwork.pitch import Note, PitchClass


@unique
class IntervalQuality(Enum):
    """Interval qualities, valued by their short symbol."""

    Diminished = "d"
    Minor = "m"
    Perfect = "P"
    Major = "M"
    Augmented = "A"

    @property
    def symbol(self) -> str:
        """Short symbol used in names like ``M3``."""
        return self.value

    @property
    def label(self) -> str:
        """Lowercase word used in names like ``major third``."""
        return self.name.lower()


# Most common quality and number for each simple semitone count
_SIMPLE_INTERVALS: Dict[int, Tuple[IntervalQuality, int]] = {
    0: (IntervalQuality.Perfect, 1),
    1: (IntervalQuality.Minor, 2),
    2: (IntervalQuality.Major, 2),
    3: (IntervalQuality.Minor, 3),
    4: (IntervalQuality.Major, 3),
    5: (IntervalQuality.Perfect, 4),
    6: (IntervalQuality.Augmented, 4),
    7: (IntervalQuality.Perfect, 5),
    8: (IntervalQuality.Minor, 6),
    9: (IntervalQuality.Major, 6),
    10: (IntervalQuality.Minor, 7),
    11: (IntervalQuality.Major, 7),
}

_FRIENDLY_NAMES: Dict[int, str] = {
    0: "unison",
    1: "half step",
    2: "whole step",
    3: "minor third",
    4: "major third",
    5: "perfect fourth",
    6: "tritone",
    7: "perfect fifth",
    8: "minor sixth",
    9: "major sixth",
    10: "minor seventh",
    11: "major seventh",
}

_ORDINAL_WORDS: Dict[int, str] = {
    1: "unison",
    2: "second",
    3: "third",
    4: "fourth",
    5: "fifth",
    6: "sixth",
    7: "seventh",
    8: "octave",
}


def _ordinal(number: int) -> str:
    """Name an interval number: ``third``, ``octave``, ``10th``."""
    if number in _ORDINAL_WORDS:
        return _ORDINAL_WORDS[number]
    if number % 100 in (11, 12, 13):
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


@total_ordering
@dataclass(frozen=True)
class Interval:
    """A signed distance between two pitches, in semitones."""

    semitones: int
    """Signed size of the interval; negative means downward."""
    quality: Optional[IntervalQuality] = field(default=None, compare=False)
    """Display quality, if the interval is named."""
    number: Optional[int] = field(default=None, compare=False)
    """Display interval number (1 = unison, 3 = third, ...), if named."""

    PERFECT_UNISON: ClassVar[Interval]
    MINOR_SECOND: ClassVar[Interval]
    MAJOR_SECOND: ClassVar[Interval]
    MINOR_THIRD: ClassVar[Interval]
    MAJOR_THIRD: ClassVar[Interval]
    PERFECT_FOURTH: ClassVar[Interval]
    AUGMENTED_FOURTH: ClassVar[Interval]
    DIMINISHED_FIFTH: ClassVar[Interval]
    PERFECT_FIFTH: ClassVar[Interval]
    MINOR_SIXTH: ClassVar[Interval]
    MAJOR_SIXTH: ClassVar[Interval]
    MINOR_SEVENTH: ClassVar[Interval]
    MAJOR_SEVENTH: ClassVar[Interval]
    PERFECT_OCTAVE: ClassVar[Interval]

    @staticmethod
    def from_semitones(semitones: int) -> Interval:
        """Name a semitone count with its most common interval.

        Compound intervals keep the quality of their simple part and add
        seven to the number per octave. Negative counts are named by their
        size and keep their sign.
        """
        octaves, simple = divmod(abs(semitones), constants.SEMITONES_PER_OCTAVE)
        quality, number = _SIMPLE_INTERVALS[simple]
        if octaves > 0 and simple == 0:
            # Whole octaves are perfect octaves rather than compound unisons
            number = 8 + 7 * (octaves - 1)
        else:
            number += 7 * octaves
        return Interval(semitones, quality, number)

    @staticmethod
    def between(a: Note, b: Note) -> Interval:
        """Unsigned interval between two notes, named."""
        return Interval.from_semitones(abs(a.semitones_to(b)))

    @staticmethod
    def directed(a: Note, b: Note) -> Interval:
        """Signed interval from one note to another, named."""
        return Interval.from_semitones(a.semitones_to(b))

    @staticmethod
    def between_pitch_classes(a: PitchClass, b: PitchClass) -> Interval:
        """Ascending interval (within one octave) from one pitch class to another."""
        return Interval.from_semitones(a.semitones_to(b))

    @property
    def is_compound(self) -> bool:
        """Whether the interval spans more than an octave."""
        return abs(self.semitones) > constants.SEMITONES_PER_OCTAVE

    @property
    def simple(self) -> Interval:
        """The interval reduced to within one octave, keeping direction."""
        if not self.is_compound:
            return self
        reduced = abs(self.semitones) % constants.SEMITONES_PER_OCTAVE
        return Interval.from_semitones(reduced if self.semitones > 0 else -reduced)

    @property
    def inversion(self) -> Interval:
        """The interval that completes this one to an octave."""
        remainder = abs(self.semitones) % constants.SEMITONES_PER_OCTAVE
        return Interval.from_semitones(constants.SEMITONES_PER_OCTAVE - remainder)

    @property
    def name(self) -> str:
        """Full name such as ``major third``; falls back to a semitone count."""
        if self.quality is None or self.number is None:
            return f"{self.semitones} semitones"
        return f"{self.quality.label} {_ordinal(self.number)}"

    @property
    def short_name(self) -> str:
        """Short notation such as ``M3`` or ``P5``."""
        if self.quality is None or self.number is None:
            return str(self.semitones)
        return f"{self.quality.symbol}{self.number}"

    @property
    def friendly_name(self) -> str:
        """A beginner-friendly name (``whole step``, ``tritone``)."""
        size = abs(self.semitones)
        if size > 0 and size % constants.SEMITONES_PER_OCTAVE == 0:
            return "octave"
        return _FRIENDLY_NAMES[size % constants.SEMITONES_PER_OCTAVE]

    def add_to(self, note: Note) -> Note:
        """Transpose a note up by this interval."""
        return note.transpose(self.semitones)

    def subtract_from(self, note: Note) -> Note:
        """Transpose a note down by this interval."""
        return note.transpose(-self.semitones)

    def __neg__(self) -> Interval:
        return Interval(-self.semitones, self.quality, self.number)

    def __add__(self, other: Interval) -> Interval:
        if not isinstance(other, Interval):
            return NotImplemented
        return Interval.from_semitones(self.semitones + other.semitones)

    def __lt__(self, other: Interval) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.semitones < other.semitones

    def __int__(self) -> int:
        return self.semitones

    def __str__(self) -> str:
        return self.name


Interval.PERFECT_UNISON = Interval(0, IntervalQuality.Perfect, 1)
Interval.MINOR_SECOND = Interval(1, IntervalQuality.Minor, 2)
Interval.MAJOR_SECOND = Interval(2, IntervalQuality.Major, 2)
Interval.MINOR_THIRD = Interval(3, IntervalQuality.Minor, 3)
Interval.MAJOR_THIRD = Interval(4, IntervalQuality.Major, 3)
Interval.PERFECT_FOURTH = Interval(5, IntervalQuality.Perfect, 4)
Interval.AUGMENTED_FOURTH = Interval(6, IntervalQuality.Augmented, 4)
Interval.DIMINISHED_FIFTH = Interval(6, IntervalQuality.Diminished, 5)
Interval.PERFECT_FIFTH = Interval(7, IntervalQuality.Perfect, 5)
Interval.MINOR_SIXTH = Interval(8, IntervalQuality.Minor, 6)
Interval.MAJOR_SIXTH = Interval(9, IntervalQuality.Major, 6)
Interval.MINOR_SEVENTH = Interval(10, IntervalQuality.Minor, 7)
Interval.MAJOR_SEVENTH = Interval(11, IntervalQuality.Major, 7)
Interval.PERFECT_OCTAVE = Interval(12, IntervalQuality.Perfect, 8)

STANDARD_INTERVALS: Tuple[Interval, ...] = (
    Interval.PERFECT_UNISON,
    Interval.MINOR_SECOND,
    Interval.MAJOR_SECOND,
    Interval.MINOR_THIRD,
    Interval.MAJOR_THIRD,
    Interval.PERFECT_FOURTH,
    Interval.AUGMENTED_FOURTH,
    Interval.PERFECT_FIFTH,
    Interval.MINOR_SIXTH,
    Interval.MAJOR_SIXTH,
    Interval.MINOR_SEVENTH,
    Interval.MAJOR_SEVENTH,
    Interval.PERFECT_OCTAVE,
)
"""The named intervals within one octave, ascending."""

