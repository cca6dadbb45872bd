"""Chord types and chords.

A `ChordType` is a named stack of intervals above a root ("minor 7th":
R m3 P5 m7). A `Chord` binds a type to a root pitch class and, for slash
chords, a bass pitch class.

Chord symbols are parsed in three parts: the root (a letter and an optional
``#`` or ``b``), a type suffix, and an optional ``/`` followed by a bass
note::

    "Am7"     A, "m7"
    "Bbmaj7"  Bb, "maj7"
    "C6/9"    C, "6/9"
    "D/F#"    D, "", bass F#

Suffixes accept the common spellings of each type (``m``, ``min``, ``-``),
degree and delta signs (``°7``, ``ø``, ``Δ``), parenthesized alterations
(``m7(b5)``) and Brazilian notation (``7M``, ``(5-)``, ``(9+)``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from fretwork.base import InvalidChordError
from fretwork.interval import Interval, IntervalQuality
from fretwork.pitch import Note, PitchClass, SpellingPreference

# Intervals beyond the simple named ones
_AUGMENTED_FIFTH = Interval(8, IntervalQuality.Augmented, 5)
_DIMINISHED_SEVENTH = Interval(9, IntervalQuality.Diminished, 7)
_MINOR_NINTH = Interval(13, IntervalQuality.Minor, 9)
_MAJOR_NINTH = Interval(14, IntervalQuality.Major, 9)
_AUGMENTED_NINTH = Interval(15, IntervalQuality.Augmented, 9)
_PERFECT_ELEVENTH = Interval(17, IntervalQuality.Perfect, 11)
_AUGMENTED_ELEVENTH = Interval(18, IntervalQuality.Augmented, 11)
_MINOR_THIRTEENTH = Interval(20, IntervalQuality.Minor, 13)
_MAJOR_THIRTEENTH = Interval(21, IntervalQuality.Major, 13)


@dataclass(frozen=True)
class ChordType:
    """A chord quality, defined by its intervals above the root.

    Equality compares name and symbol only.
    """

    name: str
    """Full name, e.g. ``minor 7th``."""
    symbol: str
    """Canonical suffix in chord symbols, e.g. ``m7``; empty for major."""
    intervals: Tuple[Interval, ...] = field(compare=False)
    """Intervals from the root, ascending, starting with the unison."""
    aliases: Tuple[str, ...] = field(default=(), compare=False)
    """Other suffixes accepted when parsing."""

    @property
    def note_count(self) -> int:
        """Number of notes in the chord."""
        return len(self.intervals)

    @property
    def is_triad(self) -> bool:
        """Whether the chord has exactly three notes."""
        return self.note_count == 3

    @property
    def is_seventh(self) -> bool:
        """Whether the chord contains a seventh."""
        return any(i.number == 7 for i in self.intervals)

    @property
    def is_extended(self) -> bool:
        """Whether the chord contains a ninth, eleventh or thirteenth."""
        return any(i.number is not None and i.number >= 9 for i in self.intervals)

    @property
    def is_minor(self) -> bool:
        """Whether the chord has a minor third and no major third."""
        intervals = self.intervals
        return Interval.MINOR_THIRD in intervals and Interval.MAJOR_THIRD not in intervals

    def __str__(self) -> str:
        return self.name


_R = Interval.PERFECT_UNISON
_M3 = Interval.MAJOR_THIRD
_m3 = Interval.MINOR_THIRD
_P5 = Interval.PERFECT_FIFTH

# Triads
MAJOR = ChordType("major", "", (_R, _M3, _P5), ("M", "maj", "Maj", "MAJ"))
MINOR = ChordType("minor", "m", (_R, _m3, _P5), ("min", "Min", "MIN", "-"))
DIMINISHED = ChordType(
    "diminished",
    "dim",
    (_R, _m3, Interval.DIMINISHED_FIFTH),
    ("Dim", "DIM", "°", "˚", "º"),
)
AUGMENTED = ChordType(
    "augmented", "aug", (_R, _M3, _AUGMENTED_FIFTH), ("Aug", "AUG", "+")
)
SUS2 = ChordType(
    "suspended 2nd", "sus2", (_R, Interval.MAJOR_SECOND, _P5), ("Sus2", "SUS2")
)
SUS4 = ChordType(
    "suspended 4th",
    "sus4",
    (_R, Interval.PERFECT_FOURTH, _P5),
    ("Sus4", "SUS4", "sus", "Sus", "SUS"),
)

# Sevenths
DOMINANT_7 = ChordType("dominant 7th", "7", (_R, _M3, _P5, Interval.MINOR_SEVENTH))
MAJOR_7 = ChordType(
    "major 7th",
    "maj7",
    (_R, _M3, _P5, Interval.MAJOR_SEVENTH),
    ("M7", "Maj7", "MAJ7", "Δ", "Δ7"),
)
MINOR_7 = ChordType(
    "minor 7th",
    "m7",
    (_R, _m3, _P5, Interval.MINOR_SEVENTH),
    ("min7", "Min7", "MIN7"),
)
MINOR_MAJOR_7 = ChordType(
    "minor major 7th",
    "mMaj7",
    (_R, _m3, _P5, Interval.MAJOR_SEVENTH),
    ("mM7", "mmaj7", "minMaj7", "minM7"),
)
DIMINISHED_7 = ChordType(
    "diminished 7th",
    "dim7",
    (_R, _m3, Interval.DIMINISHED_FIFTH, _DIMINISHED_SEVENTH),
    ("Dim7", "DIM7", "°7", "˚7", "º7"),
)
HALF_DIMINISHED_7 = ChordType(
    "half-diminished 7th",
    "m7b5",
    (_R, _m3, Interval.DIMINISHED_FIFTH, Interval.MINOR_SEVENTH),
    ("min7b5", "ø", "ø7"),
)
AUGMENTED_7 = ChordType(
    "augmented 7th",
    "aug7",
    (_R, _M3, _AUGMENTED_FIFTH, Interval.MINOR_SEVENTH),
    ("Aug7", "AUG7", "+7"),
)

# Extended
ADD_9 = ChordType("add 9", "add9", (_R, _M3, _P5, _MAJOR_NINTH), ("Add9", "ADD9"))
MINOR_ADD_9 = ChordType(
    "minor add 9",
    "madd9",
    (_R, _m3, _P5, _MAJOR_NINTH),
    ("mAdd9", "minadd9", "minAdd9"),
)
DOMINANT_9 = ChordType(
    "dominant 9th", "9", (_R, _M3, _P5, Interval.MINOR_SEVENTH, _MAJOR_NINTH)
)
MAJOR_9 = ChordType(
    "major 9th",
    "maj9",
    (_R, _M3, _P5, Interval.MAJOR_SEVENTH, _MAJOR_NINTH),
    ("M9", "Maj9", "MAJ9"),
)
MINOR_9 = ChordType(
    "minor 9th",
    "m9",
    (_R, _m3, _P5, Interval.MINOR_SEVENTH, _MAJOR_NINTH),
    ("min9", "Min9", "MIN9"),
)

# Altered dominants
DOMINANT_7_FLAT_9 = ChordType(
    "dominant 7 flat 9", "7b9", (_R, _M3, _P5, Interval.MINOR_SEVENTH, _MINOR_NINTH)
)
DOMINANT_7_SHARP_9 = ChordType(
    "dominant 7 sharp 9", "7#9", (_R, _M3, _P5, Interval.MINOR_SEVENTH, _AUGMENTED_NINTH)
)
DOMINANT_7_FLAT_13 = ChordType(
    "dominant 7 flat 13",
    "7b13",
    (_R, _M3, _P5, Interval.MINOR_SEVENTH, _MINOR_THIRTEENTH),
)
DOMINANT_7_SHARP_11 = ChordType(
    "dominant 7 sharp 11",
    "7#11",
    (_R, _M3, _P5, Interval.MINOR_SEVENTH, _AUGMENTED_ELEVENTH),
)
DOMINANT_11 = ChordType(
    "dominant 11th",
    "11",
    (_R, _M3, _P5, Interval.MINOR_SEVENTH, _MAJOR_NINTH, _PERFECT_ELEVENTH),
)
DOMINANT_13 = ChordType(
    "dominant 13th",
    "13",
    (_R, _M3, _P5, Interval.MINOR_SEVENTH, _MAJOR_NINTH, _MAJOR_THIRTEENTH),
)

# Sixths
MAJOR_6 = ChordType("major 6th", "6", (_R, _M3, _P5, Interval.MAJOR_SIXTH))
MINOR_6 = ChordType(
    "minor 6th",
    "m6",
    (_R, _m3, _P5, Interval.MAJOR_SIXTH),
    ("min6", "Min6", "MIN6"),
)
SIX_NINE = ChordType(
    "major 6/9", "6/9", (_R, _M3, _P5, Interval.MAJOR_SIXTH, _MAJOR_NINTH), ("69",)
)

POWER = ChordType("power chord", "5", (_R, _P5))

CHORD_TYPES: Tuple[ChordType, ...] = (
    MAJOR,
    MINOR,
    DIMINISHED,
    AUGMENTED,
    SUS2,
    SUS4,
    DOMINANT_7,
    MAJOR_7,
    MINOR_7,
    MINOR_MAJOR_7,
    DIMINISHED_7,
    HALF_DIMINISHED_7,
    AUGMENTED_7,
    ADD_9,
    MINOR_ADD_9,
    DOMINANT_9,
    MAJOR_9,
    MINOR_9,
    DOMINANT_7_FLAT_9,
    DOMINANT_7_SHARP_9,
    DOMINANT_7_FLAT_13,
    DOMINANT_7_SHARP_11,
    DOMINANT_11,
    DOMINANT_13,
    MAJOR_6,
    MINOR_6,
    SIX_NINE,
    POWER,
)
"""Every chord type that symbols can name."""


def _build_suffix_lookup() -> Dict[str, ChordType]:
    d: Dict[str, ChordType] = {}
    for chord_type in CHORD_TYPES:
        for suffix in (chord_type.symbol,) + chord_type.aliases:
            assert suffix not in d, suffix
            d[suffix] = chord_type
    return d


SUFFIX_LOOKUP = _build_suffix_lookup()
"""Lookup table from every accepted suffix to its chord type."""

# Root, then an optional suffix (which may itself be "6/9"), then "/bass".
CHORD_GRAMMAR = r"""
start: ROOT SUFFIX? bass?

bass: "/" ROOT

ROOT: /[A-Ga-g][#b]?/
SUFFIX: /[^\/\s]+(\/9)?/
"""

_ALTERED_DOWN = re.compile(r"\((\d+)-\)")
_ALTERED_UP = re.compile(r"\((\d+)\+\)")


class ChordSymbolTransformer(Transformer):
    """Transform a parsed chord symbol into (root, suffix, bass)."""

    def start(self, items: List[object]) -> Tuple[PitchClass, str, Optional[PitchClass]]:
        """Sort the optional parts into place."""
        root = items[0]
        suffix = ""
        bass = None
        for item in items[1:]:
            if isinstance(item, PitchClass):
                bass = item
            else:
                suffix = str(item)
        assert isinstance(root, PitchClass)
        return root, suffix, bass

    def bass(self, items: List[PitchClass]) -> PitchClass:
        """Unwrap the bass note."""
        return items[0]

    def ROOT(self, token: Token) -> PitchClass:
        """Parse a root or bass note, keeping its spelling."""
        return PitchClass.parse(str(token))

    def SUFFIX(self, token: Token) -> str:
        """Keep the suffix text for lookup."""
        return str(token)


_CHORD_PARSER = Lark(CHORD_GRAMMAR, parser="lalr")


def normalize_suffix(suffix: str) -> str:
    """Rewrite alternate suffix notations into the spellings the lookup knows.

    ``(5-)`` becomes ``b5``, ``(9+)`` becomes ``#9``, ``7M`` becomes ``M7``
    and remaining parentheses are dropped, so ``m7(b5)`` reads as ``m7b5``.
    """
    suffix = _ALTERED_DOWN.sub(r"(b\1)", suffix)
    suffix = _ALTERED_UP.sub(r"(#\1)", suffix)
    if "7M" in suffix and "maj" not in suffix:
        suffix = suffix.replace("7M", "M7", 1)
    return suffix.replace("(", "").replace(")", "")


@dataclass(frozen=True)
class Chord:
    """A chord: a root, a chord type, and an optional slash bass."""

    root: PitchClass
    """The root, keeping the spelling it was written with."""
    chord_type: ChordType
    """The chord quality."""
    bass: Optional[PitchClass] = None
    """The bass of a slash chord (G in ``C/G``), or None."""

    @staticmethod
    def parse(text: str) -> Chord:
        """Parse a chord symbol such as ``C``, ``F#m``, ``Bbmaj7`` or ``G/B``.

        Raises:
            InvalidChordError: If the symbol is empty, malformed, or names an
                unknown chord type.
        """
        trimmed = text.strip()
        if not trimmed:
            raise InvalidChordError(text, "empty")
        try:
            tree = _CHORD_PARSER.parse(trimmed)
        except UnexpectedInput as e:
            raise InvalidChordError(text, "malformed symbol") from e
        root, suffix, bass = ChordSymbolTransformer().transform(tree)
        chord_type = SUFFIX_LOOKUP.get(normalize_suffix(suffix))
        if chord_type is None:
            raise InvalidChordError(text, f"unknown chord type {suffix!r}")
        return Chord(root, chord_type, bass)

    @property
    def intervals(self) -> Tuple[Interval, ...]:
        """Intervals above the root."""
        return self.chord_type.intervals

    @property
    def note_count(self) -> int:
        """Number of notes in the chord."""
        return self.chord_type.note_count

    @property
    def pitch_classes(self) -> Tuple[PitchClass, ...]:
        """The chord tones in interval order, root first.

        The slash bass is not included unless it is also a chord tone.
        """
        return tuple(
            self.root if i.semitones == 0 else self.root.transpose(i.semitones)
            for i in self.intervals
        )

    @property
    def spelling(self) -> SpellingPreference:
        """Flats when the root is written with a flat, otherwise sharps."""
        if self.root.prefers_flats:
            return SpellingPreference.Flats
        return SpellingPreference.Sharps

    def note_names(
        self, preference: SpellingPreference = SpellingPreference.Auto
    ) -> List[str]:
        """Spell the chord tones; `SpellingPreference.Auto` follows the root."""
        if preference == SpellingPreference.Auto:
            preference = self.spelling
        return [pc.spelled(preference) for pc in self.pitch_classes]

    def notes_from_octave(self, octave: int) -> Tuple[Note, ...]:
        """The chord tones stacked upward from the root in the given octave."""
        root_note = Note(self.root, octave)
        return tuple(
            root_note if i.semitones == 0 else root_note.transpose(i)
            for i in self.intervals
        )

    @property
    def symbol(self) -> str:
        """The chord symbol, e.g. ``Am7`` or ``C/G``."""
        base = f"{self.root}{self.chord_type.symbol}"
        return base if self.bass is None else f"{base}/{self.bass}"

    @property
    def name(self) -> str:
        """The full name, e.g. ``A minor 7th`` or ``C major over G``."""
        base = f"{self.root} {self.chord_type.name}"
        return base if self.bass is None else f"{base} over {self.bass}"

    def spelled(self, preference: SpellingPreference) -> str:
        """The chord symbol with the root (and bass) spelled by preference."""
        base = f"{self.root.spelled(preference)}{self.chord_type.symbol}"
        if self.bass is None:
            return base
        return f"{base}/{self.bass.spelled(preference)}"

    def transpose(self, semitones: int) -> Chord:
        """The same chord moved by a number of semitones, canonically spelled."""
        return Chord(
            self.root.transpose(semitones),
            self.chord_type,
            None if self.bass is None else self.bass.transpose(semitones),
        )

    def __str__(self) -> str:
        return self.symbol
