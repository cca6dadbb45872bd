from fretwork.base import FretworkError
from fretwork.capo import CapoSuggester, CapoSuggestion
from fretwork.chord import Chord, ChordType
from fretwork.diagram import FretboardDiagramRenderer, FretboardGrid, Orientation
from fretwork.instrument import Instrument, StringConfig
from fretwork.interval import Interval, IntervalQuality
from fretwork.pitch import Note, NoteName, PitchClass, SpellingPreference
from fretwork.transposition import ChordProgression, Key
from fretwork.tuning import Tuning
from fretwork.tuning_parser import normalize, parse_notes
from fretwork.voicing import Voicing, VoicingCalculator, VoicingDifficulty, VoicingOptions

__all__ = [
    "CapoSuggester",
    "CapoSuggestion",
    "Chord",
    "ChordProgression",
    "ChordType",
    "FretboardDiagramRenderer",
    "FretboardGrid",
    "FretworkError",
    "Instrument",
    "Interval",
    "IntervalQuality",
    "Key",
    "Note",
    "NoteName",
    "Orientation",
    "PitchClass",
    "SpellingPreference",
    "StringConfig",
    "Tuning",
    "Voicing",
    "VoicingCalculator",
    "VoicingDifficulty",
    "VoicingOptions",
    "normalize",
    "parse_notes",
]
