"""Text fretboard diagrams.

Rendering happens in two steps. `FretboardDiagramRenderer.build_grid` asks the
instrument for the note at every playable (string, fret) position, producing
a `FretboardGrid`. The grid is then laid out either vertically (strings are
columns drawn as ``|``, frets are rows separated by rungs) or horizontally
(strings are rows drawn as ``-``, frets are columns separated by wires).
Both layouts draw the same grid, so orientation never changes which notes
appear.

Vertical, guitar with a capo at fret 2 (first frets only)::

    Guitar (capo 2)
       F#2 B2  E3  A3  C#4 F#4
     0  |   |   |   |   |   |
       =======================
     1  |   |   |   |   |   |
       ####################### capo
     2 F#2 B2  E3  A3  C#4 F#4

String order is never changed: vertical columns run left to right and
horizontal rows run top to bottom, both in the instrument's string order.

`FretboardDiagramRenderer.render_voicing` draws a chord shape with the same
layouts, filling only the fretted (or open) cell of each string::

    Am X02210
      E2  A2  D3  G3  B3  E4
    0  x  A2   |   |   |  E4
      =======================
    1  |   |   |   |  C4   |
      -----------------------
    2  |   |  E3  A3   |   |
      -----------------------
    3  |   |   |   |   |   |
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import List, Optional, Tuple

from fretwork import constants
from fretwork.base import InvalidFretCountError, MatchException
from fretwork.instrument import Instrument
from fretwork.voicing import Voicing


@unique
class Orientation(Enum):
    """Diagram orientation."""

    Vertical = auto()  # Strings as columns, frets as rows
    Horizontal = auto()  # Strings as rows, frets as columns

    @staticmethod
    def parse(text: str) -> Orientation:
        """Parse an orientation name, case-insensitively.

        Raises:
            ValueError: If the name is not ``vertical`` or ``horizontal``.
        """
        for orientation in Orientation:
            if orientation.name.lower() == text.strip().lower():
                return orientation
        raise ValueError(f"Unknown orientation: {text!r}")


@unique
class Boundary(Enum):
    """The kind of line drawn between two adjacent frets."""

    Fret = auto()  # An ordinary fret wire
    Nut = auto()  # The nut, between the open string and fret 1
    Capo = auto()  # The capo bar, just behind the capo fret


@dataclass(frozen=True)
class FretboardGrid:
    """The logical content of a diagram, independent of orientation."""

    title: str
    """Heading line, the instrument name (and voicing) plus any capo."""
    open_labels: Tuple[str, ...]
    """Sounding open note of each string, in string order."""
    frets: Tuple[int, ...]
    """Fret numbers drawn, ascending and contiguous."""
    cells: Tuple[Tuple[Optional[str], ...], ...]
    """Label per string per drawn fret, aligned with `frets`; None for an empty cell."""
    capo: int
    """Capo fret, 0 for none."""

    @property
    def label_width(self) -> int:
        """Width of the widest note label in the grid."""
        widths = [len(label) for label in self.open_labels]
        for row in self.cells:
            widths.extend(len(cell) for cell in row if cell is not None)
        return max(widths)

    def boundary(self, fret: int) -> Boundary:
        """The kind of line drawn just before a fret (fret >= 1)."""
        if self.capo > 0 and fret == self.capo:
            return Boundary.Capo
        elif fret == 1:
            return Boundary.Nut
        else:
            return Boundary.Fret


# Rungs between rows in the vertical layout
_RUNG_CHARS = {
    Boundary.Fret: "-",
    Boundary.Nut: "=",
    Boundary.Capo: "#",
}

# Wires between columns in the horizontal layout
_WIRE_CHARS = {
    Boundary.Fret: "|",
    Boundary.Nut: "||",
    Boundary.Capo: "#",
}


def _center(text: str, width: int, fill: str = " ") -> str:
    # Extra padding goes on the right
    left = (width - len(text)) // 2
    right = width - len(text) - left
    return fill * left + text + fill * right


class FretboardDiagramRenderer:
    """Renders instruments as text fretboard diagrams.

    Output is deterministic: the same instrument and orientation always give
    the same string.
    """

    def __init__(self, frets: Optional[int] = None) -> None:
        """Initialize the renderer.

        Args:
            frets: Highest fret to draw. Defaults to
                `constants.DEFAULT_DIAGRAM_FRETS`. Always capped at the
                instrument's longest string, and extended to include the capo.

        Raises:
            InvalidFretCountError: If frets is negative.
        """
        if frets is not None and frets < 0:
            raise InvalidFretCountError(f"Cannot draw {frets} frets")
        self._frets = frets

    def _last_fret(self, instrument: Instrument) -> int:
        wanted = self._frets if self._frets is not None else constants.DEFAULT_DIAGRAM_FRETS
        longest = instrument.max_fret_count
        return min(max(wanted, instrument.capo), longest)

    def build_grid(self, instrument: Instrument) -> FretboardGrid:
        """Compute the notes of every drawn position on the instrument."""
        frets = tuple(range(self._last_fret(instrument) + 1))
        cells: List[Tuple[Optional[str], ...]] = []
        for string_index in range(instrument.string_count):
            playable = instrument.playable_frets(string_index)
            cells.append(
                tuple(
                    str(instrument.note_at_fret(string_index, fret))
                    if fret in playable
                    else None
                    for fret in frets
                )
            )
        title = instrument.name
        if instrument.capo > 0:
            title += f" (capo {instrument.capo})"
        return FretboardGrid(
            title=title,
            open_labels=tuple(
                str(instrument.open_note(i)) for i in range(instrument.string_count)
            ),
            frets=frets,
            cells=tuple(cells),
            capo=instrument.capo,
        )

    def render(
        self, instrument: Instrument, orientation: Orientation = Orientation.Vertical
    ) -> str:
        """Render an instrument as a diagram.

        Args:
            instrument: The instrument, with any tuning and capo applied.
            orientation: Layout of the diagram.

        Returns:
            The diagram lines joined by newlines, without a trailing newline.
        """
        return _draw(self.build_grid(instrument), orientation)

    def build_voicing_grid(
        self, instrument: Instrument, voicing: Voicing, title: Optional[str] = None
    ) -> FretboardGrid:
        """Compute the cells of a chord diagram for one voicing.

        Shapes near the nut (or with open strings) are drawn from fret 0, others
        from just below their lowest fret; at least
        `constants.VOICING_DIAGRAM_FRETS` rows are shown. Played strings
        show their sounding note, muted strings an ``x`` in the first row.

        Raises:
            InvalidVoicingError: If the voicing does not fit the instrument.
        """
        notes = iter(voicing.notes_on(instrument))
        capo = instrument.capo
        low = voicing.lowest_fret
        high = voicing.highest_fret
        near_nut = low is None or low <= constants.VOICING_DIAGRAM_FRETS
        start = 0 if near_nut or voicing.open_string_count > 0 else low - 1
        end = max(start + constants.VOICING_DIAGRAM_FRETS - 1, high or 0)
        frets = tuple(range(0 if start == 0 else capo + start, capo + end + 1))
        first_row = capo + start
        cells: List[Tuple[Optional[str], ...]] = []
        for position in voicing.positions:
            if position.fret is None:
                label, at = "x", first_row
            else:
                label, at = str(next(notes)), capo + position.fret
            cells.append(tuple(label if fret == at else None for fret in frets))
        heading = f"{title or instrument.name} {voicing}"
        if capo > 0:
            heading += f" (capo {capo})"
        return FretboardGrid(
            title=heading,
            open_labels=tuple(
                str(instrument.open_note(i)) for i in range(instrument.string_count)
            ),
            frets=frets,
            cells=tuple(cells),
            capo=capo,
        )

    def render_voicing(
        self,
        instrument: Instrument,
        voicing: Voicing,
        orientation: Orientation = Orientation.Vertical,
        title: Optional[str] = None,
    ) -> str:
        """Render one voicing as a chord diagram.

        Args:
            instrument: The instrument, with any tuning and capo applied.
            voicing: Frets relative to the capo, one per string.
            orientation: Layout of the diagram.
            title: Heading before the shape, usually the chord symbol.
                Defaults to the instrument name.
        """
        return _draw(self.build_voicing_grid(instrument, voicing, title), orientation)


def _draw(grid: FretboardGrid, orientation: Orientation) -> str:
    if orientation == Orientation.Vertical:
        lines = _layout_vertical(grid)
    elif orientation == Orientation.Horizontal:
        lines = _layout_horizontal(grid)
    else:
        raise MatchException(orientation)
    return "\n".join(line.rstrip() for line in lines)


def _layout_vertical(grid: FretboardGrid) -> List[str]:
    width = max(constants.MIN_CELL_WIDTH, grid.label_width)
    num_width = len(str(grid.frets[-1]))
    margin = " " * (num_width + 1)
    span = len(grid.open_labels) * (width + 1) - 1
    header = " ".join(_center(label, width) for label in grid.open_labels)
    lines = [grid.title, margin + header]
    for pos, fret in enumerate(grid.frets):
        if pos > 0:
            boundary = grid.boundary(fret)
            rung = margin + _RUNG_CHARS[boundary] * span
            if boundary == Boundary.Capo:
                rung += " capo"
            lines.append(rung)
        row = [grid.cells[s][pos] for s in range(len(grid.open_labels))]
        lines.append(
            f"{fret:>{num_width}} "
            + " ".join(_center(cell if cell is not None else "|", width) for cell in row)
        )
    return lines


def _layout_horizontal(grid: FretboardGrid) -> List[str]:
    width = max(constants.MIN_CELL_WIDTH, grid.label_width) + 2
    label_width = max(len(label) for label in grid.open_labels)
    wires = [
        _WIRE_CHARS[grid.boundary(fret)] if pos > 0 else ""
        for pos, fret in enumerate(grid.frets)
    ]
    header = " " * (label_width + 1) + "".join(
        " " * len(wire) + _center(str(fret), width)
        for fret, wire in zip(grid.frets, wires)
    )
    lines = [grid.title, header]
    for label, row in zip(grid.open_labels, grid.cells):
        lines.append(
            label.rjust(label_width)
            + " "
            + "".join(
                wire + _center(cell if cell is not None else "", width, "-")
                for cell, wire in zip(row, wires)
            )
        )
    return lines
