"""Keys, chord progressions and transposition.

Transposing moves every root (and slash bass) by the same number of
semitones. Results are canonically spelled with sharps; spell them with
`SpellingPreference.Flats`, or let a `Key` choose with `key_spelling`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from fretwork import constants
from fretwork.base import InvalidChordError, InvalidKeyError
from fretwork.chord import DIMINISHED, MAJOR, MINOR, Chord
from fretwork.pitch import NoteName, PitchClass, SpellingPreference

_MAJOR_SCALE = (0, 2, 4, 5, 7, 9, 11)
_MINOR_SCALE = (0, 2, 3, 5, 7, 8, 10)

# Triad qualities on each scale degree
_MAJOR_DEGREES = (MAJOR, MINOR, MINOR, MAJOR, MAJOR, MINOR, DIMINISHED)
_MINOR_DEGREES = (MINOR, DIMINISHED, MAJOR, MINOR, MINOR, MAJOR, MAJOR)

# Tonics whose key signatures carry flats
_FLAT_MAJOR_TONICS = frozenset(
    {NoteName.F, NoteName.As, NoteName.Ds, NoteName.Gs, NoteName.Cs, NoteName.Fs}
)
_FLAT_MINOR_TONICS = frozenset(
    {NoteName.D, NoteName.G, NoteName.C, NoteName.F, NoteName.As, NoteName.Ds, NoteName.Gs}
)

COMMON_TRANSPOSITIONS: Mapping[str, int] = MappingProxyType(
    {
        "half step up": 1,
        "half step down": -1,
        "whole step up": 2,
        "whole step down": -2,
        "minor third up": 3,
        "minor third down": -3,
        "major third up": 4,
        "major third down": -4,
        "perfect fourth up": 5,
        "perfect fourth down": -5,
        "tritone": 6,
        "perfect fifth up": 7,
        "perfect fifth down": -7,
        "octave up": 12,
        "octave down": -12,
    }
)
"""Named shifts, in semitones."""


@dataclass(frozen=True)
class Key:
    """A major or minor key."""

    tonic: PitchClass
    """The key's first degree."""
    is_major: bool = True
    """True for major, False for (natural) minor."""

    @staticmethod
    def parse(text: str) -> Key:
        """Parse a key such as ``C``, ``Bb``, ``F#m`` or ``Amin``.

        Raises:
            InvalidKeyError: If the text is empty.
            InvalidNoteNameError: If the tonic is not a pitch class.
        """
        trimmed = text.strip()
        if not trimmed:
            raise InvalidKeyError(text)
        if trimmed.endswith("min"):
            return Key(PitchClass.parse(trimmed[:-3]), is_major=False)
        elif trimmed.endswith("m"):
            return Key(PitchClass.parse(trimmed[:-1]), is_major=False)
        else:
            return Key(PitchClass.parse(trimmed))

    @staticmethod
    def of_chord(chord: Chord) -> Key:
        """The key a chord is the tonic triad of: minor for minor chords."""
        return Key(chord.root, is_major=not chord.chord_type.is_minor)

    @property
    def relative(self) -> Key:
        """The relative minor of a major key, or relative major of a minor key."""
        if self.is_major:
            return Key(self.tonic.transpose(-3), is_major=False)
        return Key(self.tonic.transpose(3))

    @property
    def parallel(self) -> Key:
        """The key with the same tonic and the other mode."""
        return Key(self.tonic, is_major=not self.is_major)

    @property
    def prefers_flats(self) -> bool:
        """Whether the key signature has flats (F, Bb, Dm, Gm, ...)."""
        if self.is_major:
            return self.tonic.note_name in _FLAT_MAJOR_TONICS
        return self.tonic.note_name in _FLAT_MINOR_TONICS

    @property
    def spelling(self) -> SpellingPreference:
        """The accidental spelling the key signature implies."""
        if self.prefers_flats:
            return SpellingPreference.Flats
        return SpellingPreference.Sharps

    @property
    def scale(self) -> Tuple[PitchClass, ...]:
        """The seven scale degrees, starting from the tonic."""
        steps = _MAJOR_SCALE if self.is_major else _MINOR_SCALE
        return tuple(self.tonic.transpose(step) for step in steps)

    @property
    def diatonic_chords(self) -> Tuple[Chord, ...]:
        """The triad on each scale degree (I ii iii IV V vi vii° in major)."""
        degrees = _MAJOR_DEGREES if self.is_major else _MINOR_DEGREES
        return tuple(Chord(pc, t) for pc, t in zip(self.scale, degrees))

    def transpose(self, semitones: int) -> Key:
        """The key with its tonic moved, same mode."""
        return Key(self.tonic.transpose(semitones), self.is_major)

    @property
    def name(self) -> str:
        """E.g. ``Bb major`` or ``F# minor``."""
        mode = "major" if self.is_major else "minor"
        return f"{self.tonic.spelled(self.spelling)} {mode}"

    @property
    def symbol(self) -> str:
        """E.g. ``Bb`` or ``F#m``."""
        suffix = "" if self.is_major else "m"
        return f"{self.tonic.spelled(self.spelling)}{suffix}"

    def __str__(self) -> str:
        return self.symbol


def semitones_between_keys(start: Key, end: Key) -> int:
    """Upward distance (0-11) from one key's tonic to another's."""
    return start.tonic.semitones_to(end.tonic)


@dataclass(frozen=True)
class ChordProgression:
    """A sequence of chords."""

    chords: Tuple[Chord, ...]
    """The chords in playing order."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "chords", tuple(self.chords))

    @staticmethod
    def parse(text: str) -> ChordProgression:
        """Parse whitespace-separated chord symbols, e.g. ``C Am F G``.

        Raises:
            InvalidChordError: If there are no chords or any symbol is invalid.
        """
        symbols = text.split()
        if not symbols:
            raise InvalidChordError(text, "no chords")
        return ChordProgression(tuple(Chord.parse(s) for s in symbols))

    def transpose(self, semitones: int) -> ChordProgression:
        """Every chord moved by the same number of semitones."""
        return ChordProgression(tuple(c.transpose(semitones) for c in self.chords))

    def to_key(self, start: Key, end: Key) -> ChordProgression:
        """Move the progression from one key to another, upward."""
        return self.transpose(semitones_between_keys(start, end))

    def spell(self, preference: SpellingPreference) -> List[str]:
        """The chord symbols spelled by preference."""
        return [c.spelled(preference) for c in self.chords]

    def symbols(self, preference: SpellingPreference = SpellingPreference.Sharps) -> str:
        """The chord symbols joined by spaces."""
        return " ".join(self.spell(preference))

    def __len__(self) -> int:
        return len(self.chords)

    def __str__(self) -> str:
        return self.symbols()


def key_spelling(chords: Sequence[Chord]) -> SpellingPreference:
    """The spelling implied by the key of the first chord; sharps if none."""
    if not chords:
        return SpellingPreference.Sharps
    return Key.of_chord(chords[0]).spelling


def normalize_shift(semitones: int) -> int:
    """Reduce a shift to the smallest equivalent in ``-5..6``."""
    shift = semitones % constants.SEMITONES_PER_OCTAVE
    return shift - constants.SEMITONES_PER_OCTAVE if shift > 6 else shift
