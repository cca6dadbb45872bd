"""Numeric constants shared across fretwork."""

SEMITONES_PER_OCTAVE = 12
"""Number of distinct pitch classes in the chromatic scale."""

DEFAULT_FRET_COUNT = 22
"""Fret count used when a string does not specify one."""

MIN_OCTAVE = -1
"""Lowest octave a transposition may reach (C-1 is MIDI note 0)."""

MIDI_OCTAVE_OFFSET = 1
"""Octave shift between absolute semitones (C0 = 0) and MIDI numbers (C4 = 60)."""

REFERENCE_MIDI = 69
"""MIDI number of the tuning reference pitch (A4)."""

REFERENCE_FREQUENCY = 440.0
"""Frequency of the tuning reference pitch in Hz."""

DEFAULT_DIAGRAM_FRETS = 12
"""Highest fret drawn by default in fretboard diagrams."""

MIN_CELL_WIDTH = 3
"""Minimum width of a note cell in fretboard diagrams."""

VOICING_DIAGRAM_FRETS = 4
"""Minimum number of fret rows drawn in a voicing diagram."""
