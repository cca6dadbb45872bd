"""Capo suggestions.

With a capo at fret ``c`` a shape sounds ``c`` semitones higher, so the
shape for a chord is the chord transposed down by ``c``. A position is
scored by how hard its shapes are to play as open chords.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Sequence, Tuple

from fretwork import constants
from fretwork.chord import DOMINANT_7, MAJOR, MAJOR_7, MINOR, MINOR_7, Chord, ChordType
from fretwork.instrument import Instrument
from fretwork.pitch import NoteName

_EASY_SHAPES: Mapping[ChordType, FrozenSet[NoteName]] = MappingProxyType(
    {
        MAJOR: frozenset({NoteName.C, NoteName.G, NoteName.D, NoteName.E, NoteName.A}),
        MINOR: frozenset({NoteName.A, NoteName.E, NoteName.D}),
        DOMINANT_7: frozenset({NoteName.G, NoteName.C, NoteName.D, NoteName.E, NoteName.A}),
        MINOR_7: frozenset({NoteName.A, NoteName.E, NoteName.D}),
    }
)

_MODERATE_SHAPES: Mapping[ChordType, FrozenSet[NoteName]] = MappingProxyType(
    {
        MAJOR: frozenset({NoteName.F}),
        DOMINANT_7: frozenset({NoteName.B}),
        MAJOR_7: frozenset({NoteName.F, NoteName.C, NoteName.D, NoteName.A}),
    }
)

# Major chord root -> {shape root: capo fret}
MAJOR_TRANSFORMATIONS: Mapping[NoteName, Mapping[NoteName, int]] = MappingProxyType(
    {
        NoteName.F: {NoteName.E: 1, NoteName.D: 3, NoteName.C: 5},
        NoteName.As: {NoteName.A: 1, NoteName.G: 3},
        NoteName.Ds: {NoteName.D: 1, NoteName.C: 3},
        NoteName.Gs: {NoteName.G: 1},
        NoteName.Cs: {NoteName.C: 1},
        NoteName.Fs: {NoteName.E: 2},
        NoteName.B: {NoteName.A: 2},
    }
)


def shape_difficulty(chord: Chord) -> float:
    """Score one shape: 1 for a first-position open chord, up to 4 for anything odd."""
    root = chord.root.note_name
    if root in _EASY_SHAPES.get(chord.chord_type, frozenset()):
        return 1.0
    elif root in _MODERATE_SHAPES.get(chord.chord_type, frozenset()):
        return 2.0
    elif chord.chord_type in (MAJOR, MINOR):
        # Playable as an E or A shape barre
        return 3.0
    else:
        return 4.0


def capo_positions_for(chord: Chord) -> List[int]:
    """Capo frets that turn a chord into an easy open shape, ascending.

    ``[0]`` means a major chord is already easy.
    """
    if chord.chord_type == MAJOR:
        transformations = MAJOR_TRANSFORMATIONS.get(chord.root.note_name)
        if transformations is None:
            return [0]
        return sorted(transformations.values())
    easy_roots = _EASY_SHAPES[MINOR] if chord.chord_type == MINOR else _EASY_SHAPES[MAJOR]
    distances = (
        (chord.root.index - easy.value) % constants.SEMITONES_PER_OCTAVE
        for easy in easy_roots
    )
    return sorted(d for d in distances if d > 0)


@dataclass(frozen=True)
class CapoSuggestion:
    """Where to put the capo and which shapes to play there."""

    capo_fret: int
    """0 for no capo."""
    shapes: Tuple[Chord, ...]
    """The chords to finger, in the order of the originals."""
    original_chords: Tuple[Chord, ...]
    difficulty_score: float
    """Sum of the shape scores; lower is easier."""

    @property
    def shape_symbols(self) -> List[str]:
        return [shape.symbol for shape in self.shapes]

    @property
    def description(self) -> str:
        if self.capo_fret == 0:
            return "No capo needed"
        return f"Capo fret {self.capo_fret}: play {', '.join(self.shape_symbols)}"

    def __str__(self) -> str:
        return self.description


class CapoSuggester:
    """Suggests capo positions that make a set of chords easier."""

    def __init__(self, instrument: Instrument, max_capo_fret: int = 12) -> None:
        self.instrument = instrument
        self.max_capo_fret = min(max_capo_fret, instrument.max_fret_count)

    def suggest(self, chords: Sequence[Chord]) -> List[CapoSuggestion]:
        """Every capo position from 0 up, easiest first; ties keep lower frets first."""
        if not chords:
            return []
        originals = tuple(chords)
        suggestions = []
        for capo in range(self.max_capo_fret + 1):
            shapes = tuple(chord.transpose(-capo) for chord in originals)
            score = sum(shape_difficulty(shape) for shape in shapes)
            suggestions.append(CapoSuggestion(capo, shapes, originals, score))
        suggestions.sort(key=lambda s: s.difficulty_score)
        logging.debug(
            "Best capo for %s on %s: %s",
            " ".join(str(c) for c in originals),
            self.instrument.name,
            suggestions[0],
        )
        return suggestions

    def suggest_best(self, chords: Sequence[Chord]) -> Optional[CapoSuggestion]:
        suggestions = self.suggest(chords)
        return suggestions[0] if suggestions else None

