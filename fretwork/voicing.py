"""Chord voicings and the search that finds them.

A `Voicing` gives one position per string, lowest string first. Frets are
counted from the capo the way chord charts are: 0 is the open string as it
sounds behind the capo, so the shape ``X02210`` reads the same with or
without one. Physical fret ``capo + fret`` is what gets played.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum, unique
from typing import ClassVar, Dict, List, Optional, Sequence, Set, Tuple

from fretwork.base import InvalidVoicingError, MatchException
from fretwork.chord import Chord
from fretwork.instrument import Instrument
from fretwork.pitch import Note, PitchClass

_DELIMITERS = re.compile(r"[-\s]+")
_COMPACT_TOKEN = re.compile(r"\((\d+)\)|(.)")


@dataclass(frozen=True)
class StringPosition:
    """What one string does in a voicing."""

    fret: Optional[int] = None
    """Fret relative to the capo; None when muted, 0 when open."""
    finger: Optional[int] = None
    """Fretting finger (1 index to 4 pinky), if known."""

    MUTED: ClassVar[StringPosition]
    OPEN: ClassVar[StringPosition]

    @property
    def is_muted(self) -> bool:
        return self.fret is None

    @property
    def is_open(self) -> bool:
        return self.fret == 0

    @property
    def is_fretted(self) -> bool:
        return self.fret is not None and self.fret > 0

    @property
    def is_played(self) -> bool:
        return self.fret is not None

    def __str__(self) -> str:
        if self.fret is None:
            return "X"
        elif self.fret == 0:
            return "O"
        else:
            return str(self.fret)


StringPosition.MUTED = StringPosition()
StringPosition.OPEN = StringPosition(0)


@dataclass(frozen=True)
class Barre:
    """One finger laid across several strings at a fret."""

    fret: int
    from_string: int
    """Index of the lowest covered string."""
    to_string: int
    """Index of the highest covered string, inclusive."""
    finger: int = 1

    @property
    def string_count(self) -> int:
        return self.to_string - self.from_string + 1


@unique
class VoicingDifficulty(Enum):
    """Difficulty bands, ordered by value."""

    Beginner = 1
    Intermediate = 2
    Advanced = 3

    @property
    def label(self) -> str:
        """Short label for listings."""
        if self == VoicingDifficulty.Beginner:
            return "easy"
        elif self == VoicingDifficulty.Intermediate:
            return "medium"
        elif self == VoicingDifficulty.Advanced:
            return "hard"
        else:
            raise MatchException(self)

    @staticmethod
    def of_score(score: int) -> VoicingDifficulty:
        """Band a difficulty score: up to 25 is beginner, up to 50 intermediate."""
        if score <= 25:
            return VoicingDifficulty.Beginner
        elif score <= 50:
            return VoicingDifficulty.Intermediate
        else:
            return VoicingDifficulty.Advanced


def _parse_fret(token: str, text: str) -> Optional[int]:
    lower = token.lower()
    if lower == "x":
        return None
    elif lower == "o":
        return 0
    elif token.isdigit():
        return int(token)
    else:
        raise InvalidVoicingError(f"Invalid fret {token!r} in voicing {text!r}")


@dataclass(frozen=True)
class Voicing:
    """A way to play a chord: one position per string, lowest string first."""

    positions: Tuple[StringPosition, ...]
    """Per-string positions in physical string order."""
    barre: Optional[Barre] = None
    """The barre, if the shape uses one."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(self.positions))

    @staticmethod
    def from_frets(
        frets: Sequence[Optional[int]], barre: Optional[Barre] = None
    ) -> Voicing:
        """Build a voicing from fret numbers; None or a negative fret mutes the string."""
        return Voicing(
            tuple(
                StringPosition.MUTED if f is None or f < 0 else StringPosition(f)
                for f in frets
            ),
            barre,
        )

    @staticmethod
    def parse(text: str) -> Voicing:
        """Parse a shape such as ``X02210``, ``x-0-2-2-1-0`` or ``8 10 10 9 8 8``.

        Without delimiters every character is one string, and frets from 10
        up are written in parentheses: ``X(10)(12)(12)(12)X``.

        Raises:
            InvalidVoicingError: If the text is empty or holds something that
                is not a fret, ``x`` or ``o``.
        """
        trimmed = text.strip()
        if not trimmed:
            raise InvalidVoicingError("Empty voicing")
        if _DELIMITERS.search(trimmed) is not None:
            tokens = [t for t in _DELIMITERS.split(trimmed) if t]
        else:
            tokens = [m.group(1) or m.group(2) for m in _COMPACT_TOKEN.finditer(trimmed)]
        return Voicing.from_frets([_parse_fret(t, text) for t in tokens])

    @property
    def string_count(self) -> int:
        return len(self.positions)

    @property
    def played_string_count(self) -> int:
        return sum(1 for p in self.positions if p.is_played)

    @property
    def muted_string_count(self) -> int:
        return sum(1 for p in self.positions if p.is_muted)

    @property
    def fretted_string_count(self) -> int:
        return sum(1 for p in self.positions if p.is_fretted)

    @property
    def open_string_count(self) -> int:
        return sum(1 for p in self.positions if p.is_open)

    def _fretted(self) -> List[int]:
        return [p.fret for p in self.positions if p.fret is not None and p.fret > 0]

    @property
    def lowest_fret(self) -> Optional[int]:
        """Lowest fretted position, ignoring open strings."""
        fretted = self._fretted()
        return min(fretted) if fretted else None

    @property
    def highest_fret(self) -> Optional[int]:
        fretted = self._fretted()
        return max(fretted) if fretted else None

    @property
    def fret_span(self) -> int:
        """Distance between the highest and lowest fretted positions."""
        low = self.lowest_fret
        high = self.highest_fret
        if low is None or high is None:
            return 0
        return high - low

    @property
    def requires_barre(self) -> bool:
        return self.barre is not None

    @property
    def is_all_open(self) -> bool:
        """True when nothing is fretted."""
        return self.fretted_string_count == 0

    @property
    def interior_mute_count(self) -> int:
        """Muted strings with a played string on both sides."""
        played = [i for i, p in enumerate(self.positions) if p.is_played]
        if not played:
            return 0
        return sum(
            1 for p in self.positions[played[0] : played[-1] + 1] if p.is_muted
        )

    @property
    def difficulty_score(self) -> int:
        """Rough effort to play the shape; lower is easier.

        Counts the stretch, the fingers down, any barre, how far up the neck
        the hand sits and muted strings in the middle, with a small bonus for
        open strings in first position. Never negative.
        """
        score = self.fret_span * 10 + self.fretted_string_count * 5
        if self.barre is not None:
            score += 20
            if self.barre.string_count > 4:
                score += 10
        low = self.lowest_fret
        if low is not None and low > 5:
            score += (low - 5) * 3
        score += self.interior_mute_count * 15
        if low is None or low == 1:
            score -= self.open_string_count * 3
        return max(score, 0)

    @property
    def difficulty(self) -> VoicingDifficulty:
        return VoicingDifficulty.of_score(self.difficulty_score)

    @property
    def fingers_required(self) -> int:
        """Estimate how many fingers the shape needs.

        Strings at the lowest fret count as one finger when they can be
        barred, that is when no string between them is fretted higher.
        """
        by_fret: Dict[int, List[int]] = {}
        for i, p in enumerate(self.positions):
            if p.fret is not None and p.fret > 0:
                by_fret.setdefault(p.fret, []).append(i)
        if not by_fret:
            return 0
        frets = sorted(by_fret)
        lowest = by_fret[frets[0]]
        can_barre = len(lowest) >= 2 and not any(
            p.fret is not None and p.fret > frets[0]
            for p in self.positions[lowest[0] : lowest[-1] + 1]
        )
        fingers = 1 if can_barre else len(lowest)
        return fingers + sum(len(by_fret[f]) for f in frets[1:])

    def notes_on(self, instrument: Instrument) -> List[Note]:
        """The notes sounded on an instrument, lowest string first.

        Raises:
            InvalidVoicingError: If the string counts differ.
            OutOfRangeError: If a fret lies past the end of its string.
        """
        if self.string_count != instrument.string_count:
            raise InvalidVoicingError(
                f"Voicing {self} has {self.string_count} positions but "
                f"{instrument.name} has {instrument.string_count} strings"
            )
        return [
            instrument.note_at_fret(i, instrument.capo + p.fret)
            for i, p in enumerate(self.positions)
            if p.fret is not None
        ]

    def pitch_classes_on(self, instrument: Instrument) -> List[PitchClass]:
        return [n.pitch_class for n in self.notes_on(instrument)]

    def plays_chord(self, chord: Chord, instrument: Instrument) -> bool:
        """Whether the voicing sounds every chord tone and nothing else."""
        played = set(self.pitch_classes_on(instrument))
        tones = set(chord.pitch_classes)
        if chord.bass is not None:
            tones.add(chord.bass)
        return played <= tones and set(chord.pitch_classes) <= played

    def to_compact_string(self) -> str:
        """The shape as text, e.g. ``X02210`` or ``X(10)(12)(12)(12)X``."""
        parts = []
        for p in self.positions:
            if p.fret is None:
                parts.append("X")
            elif p.fret >= 10:
                parts.append(f"({p.fret})")
            else:
                parts.append(str(p.fret))
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_compact_string()


@dataclass(frozen=True)
class VoicingOptions:
    """Limits on the voicings a `VoicingCalculator` returns."""

    max_fret_span: int = 4
    """Largest distance between fretted positions."""
    max_fret: int = 12
    """Highest fret searched, relative to the capo."""
    min_fret: int = 0
    """Lowest fret searched, relative to the capo."""
    root_in_bass: bool = True
    """Require the lowest played string to sound the bass (root or slash bass)."""
    allow_interior_mutes: bool = True
    """Allow muted strings between played strings."""
    min_strings_played: int = 3
    max_muted_strings: int = 2
    max_difficulty: Optional[VoicingDifficulty] = None
    """Hardest band accepted, or None for any."""

    BEGINNER: ClassVar[VoicingOptions]
    INTERMEDIATE: ClassVar[VoicingOptions]
    ADVANCED: ClassVar[VoicingOptions]

    @staticmethod
    def for_level(level: VoicingDifficulty) -> VoicingOptions:
        """The preset options for a difficulty band."""
        if level == VoicingDifficulty.Beginner:
            return VoicingOptions.BEGINNER
        elif level == VoicingDifficulty.Intermediate:
            return VoicingOptions.INTERMEDIATE
        elif level == VoicingDifficulty.Advanced:
            return VoicingOptions.ADVANCED
        else:
            raise MatchException(level)


VoicingOptions.BEGINNER = VoicingOptions(
    max_fret_span=3,
    max_fret=5,
    allow_interior_mutes=False,
    min_strings_played=4,
    max_muted_strings=1,
    max_difficulty=VoicingDifficulty.Beginner,
)
VoicingOptions.INTERMEDIATE = VoicingOptions(
    max_fret=9,
    min_strings_played=4,
    max_difficulty=VoicingDifficulty.Intermediate,
)
VoicingOptions.ADVANCED = VoicingOptions(
    max_fret_span=5,
    root_in_bass=False,
    max_muted_strings=3,
)


class VoicingCalculator:
    """Finds the ways to play chords on one instrument."""

    def __init__(
        self, instrument: Instrument, options: VoicingOptions = VoicingOptions()
    ) -> None:
        self.instrument = instrument
        self.options = options

    def _fret_options(
        self, string_index: int, targets: Set[PitchClass]
    ) -> List[Optional[int]]:
        """Muted, then every searched fret on the string that sounds a target."""
        string = self.instrument.strings[string_index]
        top = min(self.options.max_fret, string.fret_count - self.instrument.capo)
        frets: List[Optional[int]] = [None]
        for fret in range(self.options.min_fret, top + 1):
            note = self.instrument.note_at_fret(string_index, self.instrument.capo + fret)
            if note.pitch_class in targets:
                frets.append(fret)
        return frets

    def _accepts(self, voicing: Voicing, chord: Chord) -> bool:
        options = self.options
        if voicing.played_string_count < options.min_strings_played:
            return False
        if not options.allow_interior_mutes and voicing.interior_mute_count > 0:
            return False
        if (
            options.max_difficulty is not None
            and voicing.difficulty.value > options.max_difficulty.value
        ):
            return False
        played = voicing.pitch_classes_on(self.instrument)
        if chord.root not in played or len(set(played)) < 2:
            return False
        if options.root_in_bass:
            bass = chord.bass if chord.bass is not None else chord.root
            if played[0] != bass:
                return False
        return True

    def find_voicings(self, chord: Chord) -> List[Voicing]:
        """Every acceptable voicing of a chord, easiest first.

        Played strings only sound chord tones (and the slash bass). The root
        must be among them along with at least one other pitch class. Equal
        scores keep the search order: lower strings muted first, then lower
        frets.
        """
        targets = set(chord.pitch_classes)
        if chord.bass is not None:
            targets.add(chord.bass)
        per_string = [
            self._fret_options(i, targets) for i in range(self.instrument.string_count)
        ]
        found: List[Voicing] = []
        self._search(per_string, [], chord, found)
        found.sort(key=lambda v: v.difficulty_score)
        logging.debug(
            "Found %d voicings for %s on %s", len(found), chord, self.instrument.name
        )
        return found

    def _search(
        self,
        per_string: List[List[Optional[int]]],
        current: List[Optional[int]],
        chord: Chord,
        found: List[Voicing],
    ) -> None:
        if len(current) == len(per_string):
            voicing = Voicing.from_frets(current)
            if self._accepts(voicing, chord):
                found.append(voicing)
            return
        for fret in per_string[len(current)]:
            current.append(fret)
            if self._within_limits(current):
                self._search(per_string, current, chord, found)
            current.pop()

    def _within_limits(self, frets: List[Optional[int]]) -> bool:
        """Prune partial shapes that already break the mute or span limits."""
        if sum(1 for f in frets if f is None) > self.options.max_muted_strings:
            return False
        fretted = [f for f in frets if f is not None and f > 0]
        return not fretted or max(fretted) - min(fretted) <= self.options.max_fret_span

    def find_voicings_by_position(self, chord: Chord) -> Dict[int, List[Voicing]]:
        """Voicings grouped by lowest fretted position (0 when nothing is fretted)."""
        grouped: Dict[int, List[Voicing]] = {}
        for voicing in self.find_voicings(chord):
            low = voicing.lowest_fret
            grouped.setdefault(0 if low is None else low, []).append(voicing)
        return grouped

    def find_easiest_voicings(self, chord: Chord, limit: int = 5) -> List[Voicing]:
        return self.find_voicings(chord)[:limit]
