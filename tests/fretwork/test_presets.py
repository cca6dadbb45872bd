"""Tests for preset instruments and tunings."""

from __future__ import annotations

import pytest

from fretwork.presets import INSTRUMENTS, TUNINGS


@pytest.mark.parametrize(
    "key,strings,frets,tuning",
    [
        ("guitar", 6, 22, "E2 A2 D3 G3 B3 E4"),
        ("bass", 4, 20, "E1 A1 D2 G2"),
        ("ukulele", 4, 15, "G4 C4 E4 A4"),
        ("cavaquinho", 4, 17, "D4 G4 B4 D5"),
        ("banjo", 5, 22, "G2 D3 G3 B3 D4"),
        ("7-string guitar", 7, 22, "B1 E2 A2 D3 G3 B3 E4"),
    ],
)
def test_instruments(key: str, strings: int, frets: int, tuning: str) -> None:
    """Each preset has its standard stringing and fret count."""
    instrument = INSTRUMENTS[key]
    assert instrument.string_count == strings
    assert instrument.max_fret_count == frets
    assert instrument.tuning_text() == tuning
    assert instrument.capo == 0


def test_every_instrument_has_tunings() -> None:
    """Tunings are catalogued for every instrument, with matching string counts."""
    assert set(TUNINGS) == set(INSTRUMENTS)
    for key, tunings in TUNINGS.items():
        assert len(tunings) > 0
        for tuning in tunings.values():
            assert tuning.string_count == INSTRUMENTS[key].string_count
            tuning.apply_to(INSTRUMENTS[key])


def test_standard_tuning_matches_instrument() -> None:
    """Where a standard tuning exists it is the instrument's own stringing."""
    for key, tunings in TUNINGS.items():
        if "standard" in tunings:
            assert tunings["standard"].notes == tuple(
                s.open_note for s in INSTRUMENTS[key].strings
            )


def test_guitar_tunings() -> None:
    """A few well-known guitar tunings."""
    guitar = TUNINGS["guitar"]
    assert guitar["drop d"].text() == "D2 A2 D3 G3 B3 E4"
    assert guitar["dadgad"].text() == "D2 A2 D3 G3 A3 D4"
    assert guitar["half step down"].text() == "Eb2 Ab2 Db3 Gb3 Bb3 Eb4"
    assert len(guitar) == 13


def test_catalogs_are_read_only() -> None:
    """The catalogs cannot be modified."""
    with pytest.raises(TypeError):
        INSTRUMENTS["lute"] = INSTRUMENTS["guitar"]  # type: ignore[index]
    with pytest.raises(TypeError):
        TUNINGS["guitar"]["mine"] = TUNINGS["guitar"]["standard"]  # type: ignore[index]
