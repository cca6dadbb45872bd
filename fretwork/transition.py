"""Ranking voicings by how easily the hand moves between them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import List, Optional, Sequence

from fretwork.base import MatchException
from fretwork.voicing import Voicing


@unique
class VoicingPreference(Enum):
    """Bias applied when ranking candidate voicings."""

    PreferOpen = auto()
    PreferBarre = auto()
    Balanced = auto()


@unique
class TransitionDifficulty(Enum):
    """Bands of transition cost."""

    Easy = auto()  # cost < 20
    Medium = auto()  # cost 20-50
    Hard = auto()  # cost > 50

    @staticmethod
    def of_cost(cost: int) -> TransitionDifficulty:
        if cost < 20:
            return TransitionDifficulty.Easy
        elif cost <= 50:
            return TransitionDifficulty.Medium
        else:
            return TransitionDifficulty.Hard


@dataclass(frozen=True)
class RankedVoicing:
    """A candidate voicing with its ranking score."""

    voicing: Voicing
    original_index: int
    """Position in the candidate list."""
    score: int
    """Weighted transition cost plus adjustments; lower is better."""
    is_suggested: bool


def _similar_shape(a: Voicing, b: Voicing) -> bool:
    return (
        abs(a.fret_span - b.fret_span) <= 1
        and abs(a.fingers_required - b.fingers_required) <= 1
    )


def transition_cost(start: Optional[Voicing], end: Optional[Voicing]) -> int:
    """How hard it is to move from one voicing to another; 0 if either is missing.

    Hand movement along the neck costs 10 per fret, each string that changes
    fret costs 2 per fret, each string that starts or stops being fretted
    costs 3 and a change of barre costs 15. Similar shapes get 5 off.
    """
    if start is None or end is None:
        return 0
    cost = abs((start.lowest_fret or 0) - (end.lowest_fret or 0)) * 10
    for a, b in zip(start.positions, end.positions):
        if a.is_fretted and b.is_fretted:
            assert a.fret is not None and b.fret is not None
            cost += abs(a.fret - b.fret) * 2
        elif a.is_fretted != b.is_fretted:
            cost += 3
    if start.requires_barre != end.requires_barre:
        cost += 15
    if _similar_shape(start, end):
        cost -= 5
    return max(cost, 0)


def _preference_adjustment(voicing: Voicing, preference: VoicingPreference) -> int:
    if preference == VoicingPreference.PreferOpen:
        return 30 if voicing.requires_barre else -15
    elif preference == VoicingPreference.PreferBarre:
        return -15 if voicing.requires_barre else 25
    elif preference == VoicingPreference.Balanced:
        return 0
    else:
        raise MatchException(preference)


def rank_voicings(
    previous: Optional[Voicing],
    following: Optional[Voicing],
    candidates: Sequence[Voicing],
    preference: VoicingPreference = VoicingPreference.Balanced,
) -> List[RankedVoicing]:
    """Rank candidates for a chord between two neighbouring voicings.

    The cost from the previous voicing weighs 60% and the cost to the
    following one 40%, rounded half up. The preference adjustment and a
    tenth of the difficulty score are added. Ties keep candidate order and
    the best candidate is marked suggested.
    """
    scored = []
    for i, voicing in enumerate(candidates):
        weighted = (
            6 * transition_cost(previous, voicing)
            + 4 * transition_cost(voicing, following)
            + 5
        ) // 10
        score = (
            weighted
            + _preference_adjustment(voicing, preference)
            + voicing.difficulty_score // 10
        )
        scored.append((score, i, voicing))
    scored.sort(key=lambda entry: entry[0])
    return [
        RankedVoicing(voicing, i, score, rank == 0)
        for rank, (score, i, voicing) in enumerate(scored)
    ]


def suggested_index(
    previous: Optional[Voicing],
    following: Optional[Voicing],
    candidates: Sequence[Voicing],
    preference: VoicingPreference = VoicingPreference.Balanced,
) -> int:
    """Index of the best candidate; 0 when there are none."""
    ranked = rank_voicings(previous, following, candidates, preference)
    return ranked[0].original_index if ranked else 0
