"""User settings and their resolution into an instrument.

`Settings` is the key-value record persisted as JSON (by default at
``~/.config/fretwork/config.json``). `resolve_instrument` turns it into calls
against the core: preset lookup, tuning, fret override, capo.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from fretwork import constants
from fretwork.base import (
    InvalidFretCountError,
    InvalidInstrumentError,
    UnknownInstrumentError,
    UnknownTuningError,
)
from fretwork.diagram import Orientation
from fretwork.instrument import Instrument, StringConfig
from fretwork.presets import INSTRUMENTS, TUNINGS
from fretwork.tuning import Tuning
from fretwork.tuning_parser import parse_notes

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "fretwork" / "config.json"
"""Where settings are read from and written to unless told otherwise."""

# Alternate instrument names, keyed by compacted name
_INSTRUMENT_ALIASES: Dict[str, str] = {
    "guitar7": "7-string guitar",
    "7string": "7-string guitar",
    "guitar7string": "7-string guitar",
}


def _compact(name: str) -> str:
    """Lowercase a name and drop spaces, dashes and underscores."""
    return re.sub(r"[\s_-]+", "", name.lower())


def find_instrument(name: str) -> Instrument:
    """Look up a preset instrument, case-insensitively and alias-tolerantly.

    Raises:
        UnknownInstrumentError: If no preset matches.
    """
    lower = name.strip().lower()
    if lower in INSTRUMENTS:
        return INSTRUMENTS[lower]
    compact = _compact(name)
    for key, inst in INSTRUMENTS.items():
        if _compact(key) == compact:
            return inst
    if compact in _INSTRUMENT_ALIASES:
        return INSTRUMENTS[_INSTRUMENT_ALIASES[compact]]
    raise UnknownInstrumentError(name)


def find_tuning(instrument_name: str, tuning_name: str) -> Tuning:
    """Look up a preset tuning for a preset instrument.

    ``Drop D``, ``drop-d``, ``drop_d`` and ``dropd`` all match the same tuning.

    Raises:
        UnknownInstrumentError: If the instrument is not a preset.
        UnknownTuningError: If the instrument has no such tuning.
    """
    instrument = find_instrument(instrument_name)
    tunings = TUNINGS[instrument.name.lower()]
    lower = tuning_name.strip().lower()
    if lower in tunings:
        return tunings[lower]
    compact = _compact(tuning_name)
    for key, tuning in tunings.items():
        if _compact(key) == compact:
            return tuning
    raise UnknownTuningError(instrument_name, tuning_name)


def preset_tuning_names(instrument_name: str) -> Tuple[str, ...]:
    """Display names of the preset tunings for an instrument."""
    instrument = find_instrument(instrument_name)
    return tuple(t.name for t in TUNINGS[instrument.name.lower()].values())


@dataclass(frozen=True)
class Settings:
    """The persisted settings record."""

    instrument: str = "guitar"
    """Preset instrument name, or the display name of a custom instrument."""
    tuning_name: Optional[str] = "standard"
    """Preset tuning name; ignored when `tuning_notes` is set. None keeps
    the preset instrument's own stringing."""
    tuning_notes: Optional[str] = None
    """Free-form tuning text, in any form `normalize` accepts."""
    capo: int = 0
    """Capo fret, 0 for none."""
    custom: bool = False
    """Build the instrument from `tuning_notes` instead of a preset."""
    frets: Optional[Tuple[int, ...]] = None
    """Fret-count override: one count for all strings, or one per string."""
    orientation: Orientation = field(default=Orientation.Vertical)
    """Preferred diagram orientation."""

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> Settings:
        """Build settings from a decoded JSON object; missing keys take defaults.

        Raises:
            ValueError: If a value has the wrong type or is not recognized.
        """
        defaults = Settings()
        frets = data.get("frets")
        if frets is not None:
            if not isinstance(frets, list) or not all(isinstance(f, int) for f in frets):
                raise ValueError(f"Invalid frets: {frets!r}")
            frets = tuple(frets)
        capo = data.get("capo", defaults.capo)
        if not isinstance(capo, int):
            raise ValueError(f"Invalid capo: {capo!r}")
        tuning_name = data.get("tuning_name", defaults.tuning_name)
        if tuning_name is not None and not isinstance(tuning_name, str):
            raise ValueError(f"Invalid tuning_name: {tuning_name!r}")
        tuning_notes = data.get("tuning_notes")
        if tuning_notes is not None and not isinstance(tuning_notes, str):
            raise ValueError(f"Invalid tuning_notes: {tuning_notes!r}")
        orientation = data.get("orientation")
        return Settings(
            instrument=str(data.get("instrument", defaults.instrument)),
            tuning_name=tuning_name,
            tuning_notes=tuning_notes,
            capo=capo,
            custom=bool(data.get("custom", False)),
            frets=frets,
            orientation=(
                Orientation.parse(str(orientation))
                if orientation is not None
                else defaults.orientation
            ),
        )

    def to_json(self) -> Dict[str, Any]:
        """Encode as a JSON object, leaving out optional values left at their defaults.

        `tuning_name` is always written, as null when unset.
        """
        defaults = Settings()
        data: Dict[str, Any] = {
            "instrument": self.instrument,
            "tuning_name": self.tuning_name,
        }
        if self.tuning_notes is not None:
            data["tuning_notes"] = self.tuning_notes
        data["capo"] = self.capo
        if self.custom:
            data["custom"] = True
        if self.frets is not None:
            data["frets"] = list(self.frets)
        if self.orientation != defaults.orientation:
            data["orientation"] = self.orientation.name.lower()
        return data

    def describe(self) -> str:
        """One-line human-readable summary."""
        parts = [self.instrument]
        if self.custom:
            parts.append("(custom)")
        if self.tuning_notes is not None:
            parts.append(f"tuning: {self.tuning_notes}")
        elif self.tuning_name is not None:
            parts.append(self.tuning_name)
        if self.frets:
            if len(set(self.frets)) == 1:
                parts.append(f"{self.frets[0]} frets")
            else:
                parts.append("frets: " + ",".join(str(f) for f in self.frets))
        if self.capo > 0:
            parts.append(f"capo {self.capo}")
        if self.orientation != Orientation.Vertical:
            parts.append(f"{self.orientation.name.lower()} diagrams")
        return " ".join(parts)


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Read settings, falling back to defaults.

    A missing file yields the defaults silently; an unreadable or malformed
    file logs a warning and yields the defaults.
    """
    if not path.exists():
        logging.debug("no settings at %s, using defaults", path)
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings must be a JSON object")
        settings = Settings.from_json(data)
    except (OSError, ValueError) as e:
        logging.warning("ignoring unreadable settings at %s: %s", path, e)
        return Settings()
    logging.debug("loaded settings from %s: %s", path, settings.describe())
    return settings


def save_settings(settings: Settings, path: Path = DEFAULT_SETTINGS_PATH) -> None:
    """Write settings as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_json(), indent=2) + "\n", encoding="utf-8")
    logging.info("saved settings to %s", path)


def _custom_instrument(settings: Settings) -> Instrument:
    if settings.tuning_notes is None:
        raise InvalidInstrumentError(
            f"Custom instrument {settings.instrument!r} requires tuning notes"
        )
    notes = parse_notes(settings.tuning_notes)
    counts = settings.frets or (constants.DEFAULT_FRET_COUNT,)
    if len(counts) == 1:
        counts = counts * len(notes)
    elif len(counts) != len(notes):
        raise InvalidFretCountError(
            f"Fret counts ({len(counts)}) must be 1 or match string count ({len(notes)})"
        )
    return Instrument(
        settings.instrument,
        tuple(StringConfig(note, count) for note, count in zip(notes, counts)),
    )


def resolve_instrument(settings: Settings) -> Instrument:
    """Build the instrument described by the settings.

    Raises:
        UnknownInstrumentError: If the preset instrument does not exist.
        UnknownTuningError: If the preset tuning does not exist.
        InvalidInstrumentError: If a custom instrument has no tuning notes.
        FretworkError: For any invalid tuning text, fret counts or capo.
    """
    if settings.custom:
        instrument = _custom_instrument(settings)
    else:
        instrument = find_instrument(settings.instrument)
        if settings.tuning_notes is not None:
            tuning = Tuning.parse("Custom", settings.tuning_notes)
            instrument = tuning.apply_to(instrument)
        elif settings.tuning_name is not None:
            instrument = find_tuning(settings.instrument, settings.tuning_name).apply_to(
                instrument
            )
        if settings.frets:
            instrument = instrument.with_fret_counts(settings.frets)
    if settings.capo != 0:
        instrument = instrument.with_capo(settings.capo)
    logging.debug("resolved %s", instrument)
    return instrument
