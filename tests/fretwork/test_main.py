"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from fretwork.config import Settings, load_settings, save_settings
from fretwork.diagram import Orientation
from fretwork.main import make_parser, run


def _run(config: Path, argv: List[str]) -> int:
    parser = make_parser()
    return run(parser.parse_args(["--config", str(config)] + argv), parser)


@pytest.fixture
def config(tmp_path: Path) -> Path:
    return tmp_path / "config.json"


class TestNormalize:
    """Tests for the normalize command."""

    def test_prints_canonical(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The canonical tuning is printed."""
        assert _run(config, ["normalize", "DADGBE"]) == 0
        assert capsys.readouterr().out == "D2 A2 D3 G3 B3 E4\n"

    def test_error(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors go to stderr with exit status 1."""
        assert _run(config, ["normalize", "DAXGBE"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Invalid note character 'X' at position 2" in captured.err


class TestNote:
    """Tests for the note command."""

    def test_default_guitar(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Without settings the instrument is a standard guitar."""
        assert _run(config, ["note", "0", "3"]) == 0
        assert capsys.readouterr().out == "G2\n"

    def test_overrides(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Flags override the saved settings."""
        assert _run(config, ["note", "--tuning", "drop d", "0", "2"]) == 0
        assert capsys.readouterr().out == "E2\n"

    def test_behind_capo(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Frets behind the capo are reported as errors."""
        assert _run(config, ["note", "--capo", "2", "0", "1"]) == 1
        assert "behind the capo" in capsys.readouterr().err


class TestDiagram:
    """Tests for the diagram command."""

    def test_instrument_flag(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A preset instrument is drawn up to the requested fret."""
        assert _run(config, ["diagram", "--instrument", "bass", "--show", "2"]) == 0
        lines = capsys.readouterr().out.rstrip("\n").split("\n")
        assert lines[0] == "Bass"
        assert lines[1].split() == ["E1", "A1", "D2", "G2"]
        assert lines[-1].split() == ["2", "F#1", "B1", "E2", "A2"]

    def test_saved_orientation(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The saved orientation is used unless overridden."""
        save_settings(Settings(orientation=Orientation.Horizontal), config)
        assert _run(config, ["diagram", "--show", "1"]) == 0
        horizontal = capsys.readouterr().out.split("\n")
        assert horizontal[2].startswith("E2 ")
        assert _run(config, ["diagram", "--show", "1", "--orientation", "vertical"]) == 0
        vertical = capsys.readouterr().out.split("\n")
        assert vertical[1].split() == ["E2", "A2", "D3", "G3", "B3", "E4"]

    def test_unknown_instrument(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Unknown instruments are reported."""
        assert _run(config, ["diagram", "--instrument", "lute"]) == 1
        assert "Unknown instrument" in capsys.readouterr().err


class TestSetup:
    """Tests for the setup command."""

    def test_preset(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Preset instrument, tuning and capo are saved."""
        argv = ["setup", "--instrument", "Bass", "--tuning", "drop d", "--capo", "1"]
        assert _run(config, argv) == 0
        assert "Settings saved." in capsys.readouterr().out
        assert load_settings(config) == Settings(
            instrument="bass", tuning_name="drop d", capo=1
        )

    def test_tuning_notes(self, config: Path) -> None:
        """A tuning that is not a preset name is saved as notes."""
        assert _run(config, ["setup", "--tuning", "CGDGCD"]) == 0
        settings = load_settings(config)
        assert settings.tuning_name is None
        assert settings.tuning_notes == "C2 G2 D3 G3 C4 D4"

    def test_updates_saved(self, config: Path) -> None:
        """Later setup calls change only what they name."""
        assert _run(config, ["setup", "--instrument", "ukulele"]) == 0
        assert _run(config, ["setup", "--capo", "3"]) == 0
        settings = load_settings(config)
        assert settings.instrument == "ukulele"
        assert settings.capo == 3

    def test_custom(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Custom instruments are saved from notes and frets."""
        argv = ["setup", "--custom", "--name", "7-string", "--tuning", "BEADGBE", "--frets", "24"]
        assert _run(config, argv) == 0
        assert "Instrument: 7-string (B1 E2 A2 D3 G3 B3 E4)" in capsys.readouterr().out
        settings = load_settings(config)
        assert settings.custom
        assert settings.frets == (24,)

    def test_custom_orientation(self, config: Path) -> None:
        """A custom instrument keeps the requested diagram orientation."""
        argv = ["setup", "--custom", "--tuning", "DADGBE", "--orientation", "horizontal"]
        assert _run(config, argv) == 0
        settings = load_settings(config)
        assert settings.custom
        assert settings.orientation == Orientation.Horizontal

    def test_custom_requires_tuning(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A custom instrument without notes is refused."""
        assert _run(config, ["setup", "--custom"]) == 1
        assert "--custom requires --tuning" in capsys.readouterr().err
        assert not config.exists()

    def test_invalid_not_saved(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Invalid settings are reported and not written."""
        assert _run(config, ["setup", "--tuning", "EADG"]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not config.exists()

    def test_nothing_to_change(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Setup without options leaves the file alone."""
        assert _run(config, ["setup"]) == 0
        assert "Nothing to change" in capsys.readouterr().out
        assert not config.exists()

    def test_reset(self, config: Path) -> None:
        """Reset writes the defaults."""
        save_settings(Settings(instrument="bass", capo=2), config)
        assert _run(config, ["setup", "--reset"]) == 0
        assert load_settings(config) == Settings()


def test_show(config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Show prints the settings and the resolved instrument."""
    save_settings(Settings(capo=2), config)
    assert _run(config, ["show"]) == 0
    out = capsys.readouterr().out
    assert "Settings:   guitar standard capo 2" in out
    assert "Instrument: Guitar (E2 A2 D3 G3 B3 E4) capo 2" in out


def test_show_malformed_settings(config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Settings with a value of the wrong type fall back to the defaults."""
    config.write_text('{"instrument": "guitar", "tuning_notes": 5}')
    assert _run(config, ["show"]) == 0
    assert "Instrument: Guitar (E2 A2 D3 G3 B3 E4)" in capsys.readouterr().out


def test_presets(config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Presets lists instruments and their tunings."""
    assert _run(config, ["presets"]) == 0
    out = capsys.readouterr().out
    assert "Guitar: E2 A2 D3 G3 B3 E4" in out
    assert "  Drop D (D2 A2 D3 G3 B3 E4)" in out
    assert "Banjo: G2 D3 G3 B3 D4" in out


def test_no_command(config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Without a command the help is printed."""
    assert _run(config, []) == 0
    assert "usage:" in capsys.readouterr().out


class TestChord:
    """Tests for the chord command."""

    def test_info(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """One chord prints its notes and formula."""
        assert _run(config, ["chord", "Am7"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("A minor 7th (Am7)\n")
        assert "Notes:     A - C - E - G\n" in out
        assert "Formula:   R - m3 - P5 - m7\n" in out
        assert "  A   = Root\n" in out
        assert "(m3)" in out

    def test_compare(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Two chords print their common and distinct notes."""
        assert _run(config, ["chord", "C", "Am"]) == 0
        out = capsys.readouterr().out
        assert "Comparing C and Am" in out
        assert "Common notes: C, E" in out
        assert "Only in C: G" in out
        assert "Only in Am: A" in out

    def test_nothing_shared(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Chords without shared tones say so."""
        assert _run(config, ["chord", "C", "F#"]) == 0
        assert "No common notes" in capsys.readouterr().out

    def test_too_many(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """At most two chords are accepted."""
        assert _run(config, ["chord", "C", "G", "Am"]) == 2
        assert "expected one or two chords" in capsys.readouterr().err

    def test_invalid(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Bad symbols are reported as errors."""
        assert _run(config, ["chord", "Cxyz"]) == 1
        assert "unknown chord type" in capsys.readouterr().err


class TestVoicings:
    """Tests for the voicings command."""

    def test_compact(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Compact output lists one shape per line."""
        assert _run(config, ["voicings", "Am", "--level", "beginner", "--compact"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("A minor (Am) on Guitar\n")
        assert "1. X02210     A-E-A-C-E (easy)" in out

    def test_limit(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The limit caps how many shapes are shown."""
        assert _run(config, ["voicings", "C", "--compact", "-n", "2"]) == 0
        lines = capsys.readouterr().out.split("\n")
        assert lines[1].endswith("showing 2:")
        assert lines[2].startswith("1. ")
        assert lines[3].startswith("2. ")
        assert lines[4] == ""

    def test_diagrams(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Without --compact each shape is drawn."""
        assert _run(config, ["voicings", "Am", "--level", "beginner", "-n", "1"]) == 0
        out = capsys.readouterr().out
        assert "Voicing 1 (easy):\nAm X02210\n" in out
        assert "0  x  A2   |   |   |  E4" in out

    def test_capo(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Shapes are relative to the capo."""
        assert _run(config, ["voicings", "Bm", "-c", "2", "-l", "beginner", "--compact"]) == 0
        assert "X02210" in capsys.readouterr().out

    def test_invalid_chord(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Bad symbols are reported as errors."""
        assert _run(config, ["voicings", "Q"]) == 1
        assert "Invalid chord" in capsys.readouterr().err


class TestTranspose:
    """Tests for the transpose command."""

    def test_up(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Each chord is listed with its new notes."""
        assert _run(config, ["transpose", "--up", "2", "C", "Am", "F", "G"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Transposed up 2 semitones\n")
        assert "D - F# - A" in out
        assert out.endswith("Result: D Bm G A\n")

    def test_down(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Shifting down wraps below C."""
        assert _run(config, ["transpose", "--down", "1", "C"]) == 0
        out = capsys.readouterr().out
        assert "Transposed down 1 semitone\n" in out
        assert "Result: B\n" in out

    def test_flats(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Results can be spelled with flats."""
        argv = ["transpose", "--up", "1", "--spelling", "flats", "C", "F", "G"]
        assert _run(config, argv) == 0
        out = capsys.readouterr().out
        assert "Db - F - Ab" in out
        assert "Result: Db Gb Ab" in out

    def test_to_key(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The first chord's key is moved to the target key."""
        assert _run(config, ["transpose", "--to", "A", "G", "C", "D"]) == 0
        assert "Result: A D E" in capsys.readouterr().out

    def test_auto_spelling(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Automatic spelling follows the target key."""
        argv = ["transpose", "--to", "F", "--spelling", "auto", "C", "F", "G"]
        assert _run(config, argv) == 0
        assert "Result: F Bb C" in capsys.readouterr().out

    def test_exclusive_shifts(self, config: Path) -> None:
        """Only one kind of shift may be given."""
        with pytest.raises(SystemExit):
            _run(config, ["transpose", "--up", "1", "--to", "G", "C"])

    def test_suggest_capo(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Capo positions are suggested for the result."""
        assert _run(config, ["transpose", "-s", "--up", "3", "C", "G", "Am", "F"]) == 0
        out = capsys.readouterr().out
        assert "Result: D# A# Cm G#" in out
        assert "Capo suggestions:\n  1. Capo fret 8: play G, D, Em, C (difficulty 4.0)" in out


class TestCapo:
    """Tests for the capo command."""

    def test_easy(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Open chords need no capo."""
        assert _run(config, ["capo", "-n", "1", "G", "C", "D", "Em"]) == 0
        out = capsys.readouterr().out
        assert out == "Capo suggestions:\n  1. No capo needed (difficulty 4.0)\n"

    def test_limit(self, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The default shows three positions."""
        assert _run(config, ["capo", "F#"]) == 0
        lines = capsys.readouterr().out.strip().split("\n")
        assert len(lines) == 4
        assert lines[1] == "  1. Capo fret 2: play E (difficulty 1.0)"
