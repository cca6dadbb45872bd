"""Preset instruments and tunings.

Both catalogs are read-only mappings keyed by lowercase name, built once at
import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from fretwork.instrument import Instrument, StringConfig
from fretwork.tuning import Tuning
from fretwork.tuning_parser import parse_notes


def _instrument(name: str, tuning: str, fret_count: int = 22) -> Instrument:
    return Instrument(
        name, tuple(StringConfig(note, fret_count) for note in parse_notes(tuning))
    )


def _catalog(tunings: List[Tuple[str, str]]) -> Mapping[str, Tuning]:
    return MappingProxyType(
        {name.lower(): Tuning.parse(name, notes) for name, notes in tunings}
    )


GUITAR = _instrument("Guitar", "E2 A2 D3 G3 B3 E4")
BASS = _instrument("Bass", "E1 A1 D2 G2", fret_count=20)
UKULELE = _instrument("Ukulele", "G4 C4 E4 A4", fret_count=15)
CAVAQUINHO = _instrument("Cavaquinho", "D4 G4 B4 D5", fret_count=17)
BANJO = _instrument("Banjo", "G2 D3 G3 B3 D4")
GUITAR_7_STRING = _instrument("7-String Guitar", "B1 E2 A2 D3 G3 B3 E4")

INSTRUMENTS: Mapping[str, Instrument] = MappingProxyType(
    {
        inst.name.lower(): inst
        for inst in [GUITAR, BASS, UKULELE, CAVAQUINHO, BANJO, GUITAR_7_STRING]
    }
)
"""Preset instruments by lowercase name, in standard tuning."""

_TUNINGS: Dict[str, Mapping[str, Tuning]] = {
    "guitar": _catalog(
        [
            ("Standard", "E2 A2 D3 G3 B3 E4"),
            ("Drop D", "D2 A2 D3 G3 B3 E4"),
            ("Drop C", "C2 G2 C3 F3 A3 D4"),
            ("Open G", "D2 G2 D3 G3 B3 D4"),
            ("Open D", "D2 A2 D3 F#3 A3 D4"),
            ("Open E", "E2 B2 E3 G#3 B3 E4"),
            ("Open A", "E2 A2 E3 A3 C#4 E4"),
            ("DADGAD", "D2 A2 D3 G3 A3 D4"),
            ("Half Step Down", "Eb2 Ab2 Db3 Gb3 Bb3 Eb4"),
            ("Whole Step Down", "D2 G2 C3 F3 A3 D4"),
            ("Double Drop D", "D2 A2 D3 G3 B3 D4"),
            ("All Fourths", "E2 A2 D3 G3 C4 F4"),
            ("New Standard", "C2 G2 D3 A3 E4 G4"),
        ]
    ),
    "bass": _catalog(
        [
            ("Standard", "E1 A1 D2 G2"),
            ("Drop D", "D1 A1 D2 G2"),
            ("Half Step Down", "Eb1 Ab1 Db2 Gb2"),
        ]
    ),
    "ukulele": _catalog(
        [
            ("Standard", "G4 C4 E4 A4"),
            ("Low G", "G3 C4 E4 A4"),
            ("D Tuning", "A4 D4 F#4 B4"),
            ("Baritone", "D3 G3 B3 E4"),
        ]
    ),
    "cavaquinho": _catalog(
        [
            ("Standard", "D4 G4 B4 D5"),
            ("Natural", "D4 G4 B4 E5"),
        ]
    ),
    "banjo": _catalog(
        [
            ("Open G", "G2 D3 G3 B3 D4"),
            ("Double C", "G2 C3 G3 C4 D4"),
            ("Open D", "F#2 D3 F#3 A3 D4"),
        ]
    ),
    "7-string guitar": _catalog(
        [
            ("Standard", "B1 E2 A2 D3 G3 B3 E4"),
            ("Drop A", "A1 E2 A2 D3 G3 B3 E4"),
        ]
    ),
}

TUNINGS: Mapping[str, Mapping[str, Tuning]] = MappingProxyType(_TUNINGS)
"""Preset tunings by lowercase instrument name, then lowercase tuning name."""
