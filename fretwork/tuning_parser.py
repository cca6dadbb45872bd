"""Normalization of free-form tuning text.

Users write tunings in several shorthands::

    "D2 A2 D3 G3 B3 E4"   already normalized, passed through untouched
    "B1E2A2D3G3B3E4"      concatenated notes with single-digit octaves
    "DADGBE"              bare letters, octaves inferred

`normalize` tries each interpretation in that order and returns the canonical
space-separated ``<PitchClass><Octave>`` form. A stage is only skipped when it
structurally rejects the input; later stages never see input an earlier stage
accepted.

The octave inference for bare letters assumes strings ascend from low to
high, wrapping at each octave. Reentrant tunings (the short fifth string of a
banjo, a high-G ukulele) are not inferred correctly and should be written with
explicit octaves.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, UnexpectedCharacters

from fretwork.base import EmptyTuningError, InvalidFretCountError, InvalidNoteCharacterError
from fretwork.pitch import Note, PitchClass

# Whole input must be a run of letter, optional accidental, single-digit octave.
OCTAVE_TOKENS_GRAMMAR = r"""
start: NOTE_OCTAVE+

NOTE_OCTAVE: /[A-Ga-g][#b]?[0-9]/
"""

# Whole input must be a run of letter and optional accidental.
BARE_TOKENS_GRAMMAR = r"""
start: BARE_NOTE+

BARE_NOTE: /[A-Ga-g][#b]?/
"""


class NoteTokenTransformer(Transformer):
    """Transform a token run into normalized note strings."""

    def start(self, items: List[str]) -> List[str]:
        """Collect the normalized tokens in input order."""
        return items

    def NOTE_OCTAVE(self, token: Token) -> str:
        """Upper-case the letter, keep the accidental and octave verbatim."""
        text = str(token)
        return text[0].upper() + text[1:]

    def BARE_NOTE(self, token: Token) -> str:
        """Upper-case the letter, keep the accidental verbatim."""
        text = str(token)
        return text[0].upper() + text[1:]


_OCTAVE_TOKENS_PARSER = Lark(OCTAVE_TOKENS_GRAMMAR, parser="lalr")
_BARE_TOKENS_PARSER = Lark(BARE_TOKENS_GRAMMAR, parser="lalr")


def parse_concatenated(text: str) -> Optional[List[str]]:
    """Split concatenated notes with octaves, e.g. ``B1E2A2D3G3B3E4``.

    Args:
        text: Trimmed tuning text without spaces.

    Returns:
        The normalized tokens (``["B1", "E2", ...]``), or None if the text is
        not entirely made of such tokens.
    """
    if not text:
        return None
    try:
        tree = _OCTAVE_TOKENS_PARSER.parse(text)
    except LarkError:
        return None
    return NoteTokenTransformer().transform(tree)


def parse_bare(text: str) -> List[str]:
    """Split bare note letters without octaves, e.g. ``DADGBE``.

    Args:
        text: Trimmed tuning text without spaces.

    Returns:
        The normalized letter(+accidental) tokens in input order.

    Raises:
        EmptyTuningError: If the text contains no notes.
        InvalidNoteCharacterError: If a character is not a note letter
            (or an accidental directly following one).
    """
    if not text:
        raise EmptyTuningError(text)
    try:
        tree = _BARE_TOKENS_PARSER.parse(text)
    except UnexpectedCharacters as e:
        raise InvalidNoteCharacterError(e.char, e.pos_in_stream) from e
    return NoteTokenTransformer().transform(tree)


def starting_octave(count: int) -> int:
    """Pick the octave of the lowest string from the number of strings.

    More strings suggests a lower, bass-oriented instrument.
    """
    if count >= 7:
        return 1
    elif count >= 5:
        return 2
    else:
        return 3


def infer_octaves(tokens: Sequence[str]) -> List[str]:
    """Assign octaves to bare note tokens.

    The first token gets `starting_octave`; the octave then increments whenever
    a token's pitch-class index is not above the previous one.

    Args:
        tokens: Pitch-class tokens such as ``["D", "A", "D", "G", "B", "E"]``.

    Returns:
        The tokens with octaves appended, e.g. ``["D2", "A2", "D3", ...]``.
    """
    octave = starting_octave(len(tokens))
    last_index: Optional[int] = None
    result: List[str] = []
    for token in tokens:
        index = PitchClass.parse(token).index
        if last_index is not None and index <= last_index:
            octave += 1
        result.append(f"{token}{octave}")
        last_index = index
    return result


def normalize(text: str) -> str:
    """Convert tuning shorthand into canonical space-separated notes.

    Args:
        text: Tuning text in any supported form.

    Returns:
        Space-separated ``<PitchClass><Octave>`` tokens in input order.
        Text that already contains a space is returned trimmed but otherwise
        unchanged; its tokens are validated when parsed as notes.

    Raises:
        EmptyTuningError: If the text contains no notes.
        InvalidNoteCharacterError: If bare-letter text contains a non-note.
    """
    trimmed = text.strip()
    if " " in trimmed:
        return trimmed
    with_octaves = parse_concatenated(trimmed)
    if with_octaves is not None:
        return " ".join(with_octaves)
    return " ".join(infer_octaves(parse_bare(trimmed)))


def parse_notes(text: str) -> Tuple[Note, ...]:
    """Normalize tuning text and parse every token as a `Note`."""
    return tuple(Note.parse(token) for token in normalize(text).split())


def parse_frets(text: str) -> Tuple[int, ...]:
    """Parse a fret-count override.

    ``"22"`` yields ``(22,)`` (one count for every string);
    ``"22,22,22,22,5"`` yields one count per string.

    Raises:
        InvalidFretCountError: If a count is not a non-negative integer.
    """
    counts: List[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part.isdigit():
            raise InvalidFretCountError(f"Invalid fret count {part!r} in {text!r}")
        counts.append(int(part))
    return tuple(counts)
