"""Tests for pitch classes and notes."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fretwork.base import (
    FretworkError,
    InvalidNoteFormatError,
    InvalidNoteNameError,
    OutOfRangeError,
)
from fretwork.interval import Interval
from fretwork.pitch import Note, NoteName, PitchClass, SpellingPreference
from tests.fretwork.hypo import configure_hypo, notes, pitch_classes

configure_hypo()


class TestPitchClass:
    """Tests for PitchClass parsing, arithmetic and display."""

    @pytest.mark.parametrize(
        "text,index",
        [
            ("C", 0),
            ("c", 0),
            ("C#", 1),
            ("Db", 1),
            ("db", 1),
            ("E", 4),
            ("Fb", 4),
            ("E#", 5),
            ("G#", 8),
            ("Ab", 8),
            ("Bb", 10),
            ("B", 11),
            ("Cb", 11),
            (" A ", 9),
        ],
    )
    def test_parse_index(self, text: str, index: int) -> None:
        """Letters and accidentals map to semitone offsets from C."""
        assert PitchClass.parse(text).index == index

    @pytest.mark.parametrize("text", ["H", "X#", "C##", "Cbb", "C#b", "", "1", "Cx"])
    def test_parse_invalid(self, text: str) -> None:
        """Anything but one letter and at most one accidental is rejected."""
        with pytest.raises(InvalidNoteNameError):
            PitchClass.parse(text)

    def test_invalid_name_is_value_error(self) -> None:
        """Parse failures can be caught as ValueError or FretworkError."""
        with pytest.raises(ValueError):
            PitchClass.parse("H")
        with pytest.raises(FretworkError):
            PitchClass.parse("H")

    def test_spelling_preserved(self) -> None:
        """The parsed spelling is used for display."""
        assert str(PitchClass.parse("db")) == "Db"
        assert str(PitchClass.parse("c#")) == "C#"
        assert str(PitchClass.of(1)) == "C#"

    def test_enharmonic_equality(self) -> None:
        """Different spellings of the same slot are equal and hash alike."""
        sharp = PitchClass.parse("C#")
        flat = PitchClass.parse("Db")
        assert sharp == flat
        assert hash(sharp) == hash(flat)
        assert len({sharp, flat}) == 1

    @pytest.mark.parametrize(
        "start,steps,expected",
        [
            ("C", 1, "C#"),
            ("B", 1, "C"),
            ("C", -1, "B"),
            ("D", -14, "C"),
            ("A", 12, "A"),
            ("E", 27, "G"),
        ],
    )
    def test_transpose_wraps(self, start: str, steps: int, expected: str) -> None:
        """Transposition wraps with true modulo in both directions."""
        assert str(PitchClass.parse(start).transpose(steps)) == expected

    def test_semitones_to(self) -> None:
        """Ascending distance is always within one octave."""
        assert PitchClass.parse("C").semitones_to(PitchClass.parse("G")) == 7
        assert PitchClass.parse("G").semitones_to(PitchClass.parse("C")) == 5
        assert PitchClass.parse("E").semitones_to(PitchClass.parse("E")) == 0

    def test_note_name_steps(self) -> None:
        """NoteName arithmetic and canonical spellings."""
        assert NoteName.B.add_steps(1) == NoteName.C
        assert NoteName.C.add_steps(-1) == NoteName.B
        assert NoteName.Fs.spelling == "F#"


class TestNote:
    """Tests for Note parsing, ordering and transposition."""

    @pytest.mark.parametrize(
        "text,octave,index",
        [
            ("C4", 4, 0),
            ("c#3", 3, 1),
            ("Db2", 2, 1),
            ("E2", 2, 4),
            ("B10", 10, 11),
            ("C-1", -1, 0),
            ("  A4 ", 4, 9),
        ],
    )
    def test_parse(self, text: str, octave: int, index: int) -> None:
        """Pitch class followed by an integer octave."""
        note = Note.parse(text)
        assert note.octave == octave
        assert note.pitch_class.index == index

    @pytest.mark.parametrize("text", ["C", "C#", "", "   ", "C4x", "C-", "C4.5"])
    def test_parse_bad_format(self, text: str) -> None:
        """A missing or malformed octave is a format error."""
        with pytest.raises(InvalidNoteFormatError):
            Note.parse(text)

    @pytest.mark.parametrize("text", ["C-2", "B-3", "Db-10"])
    def test_parse_below_floor(self, text: str) -> None:
        """Octaves below -1 are rejected when parsed, like when transposed."""
        with pytest.raises(InvalidNoteFormatError, match="octave below floor"):
            Note.parse(text)

    @pytest.mark.parametrize("text", ["H4", "X#2", "C##4"])
    def test_parse_bad_name(self, text: str) -> None:
        """A bad pitch-class token is a name error."""
        with pytest.raises(InvalidNoteNameError):
            Note.parse(text)

    def test_str(self) -> None:
        """Display uses the parsed spelling, or sharps after arithmetic."""
        assert str(Note.parse("db4")) == "Db4"
        assert str(Note.parse("Db4").transpose(0)) == "C#4"
        assert str(Note.parse("C-1")) == "C-1"

    def test_enharmonic_equality(self) -> None:
        """C#4 and Db4 are the same note: equality ignores spelling."""
        assert Note.parse("C#4") == Note.parse("Db4")
        assert hash(Note.parse("C#4")) == hash(Note.parse("Db4"))

    def test_spelling_across_octave_boundary(self) -> None:
        """B#3 sounds as C4 but is stored as C in octave 3.

        Octave numbers are taken as written, so the absolute value follows
        the pitch-class slot and the written octave.
        """
        assert Note.parse("B#3") == Note.parse("C3")
        assert Note.parse("Cb4") == Note.parse("B4")

    def test_ordering(self) -> None:
        """Notes order by absolute semitone value."""
        parsed = [Note.parse(t) for t in ["E4", "C4", "B3", "C#4", "E2"]]
        assert [str(n) for n in sorted(parsed)] == ["E2", "B3", "C4", "C#4", "E4"]
        assert Note.parse("B3") < Note.parse("C4")
        assert Note.parse("C4") <= Note.parse("Db4")
        assert Note.parse("E4") > Note.parse("D#4")

    def test_absolute_and_midi(self) -> None:
        """C0 is absolute zero; C4 is MIDI 60; A4 is MIDI 69."""
        assert Note.parse("C0").absolute_semitone == 0
        assert Note.parse("C4").absolute_semitone == 48
        assert Note.parse("C4").midi == 60
        assert Note.parse("A4").midi == 69
        assert Note.from_midi(60) == Note.parse("C4")
        assert Note.from_midi(0) == Note.parse("C-1")

    def test_from_midi_out_of_range(self) -> None:
        """MIDI numbers are limited to 0-127."""
        with pytest.raises(OutOfRangeError):
            Note.from_midi(128)
        with pytest.raises(OutOfRangeError):
            Note.from_midi(-1)

    def test_frequency(self) -> None:
        """Equal temperament tuned to A4 = 440 Hz."""
        assert Note.parse("A4").frequency == pytest.approx(440.0)
        assert Note.parse("A3").frequency == pytest.approx(220.0)
        assert Note.parse("C4").frequency == pytest.approx(261.6256, rel=1e-6)

    @pytest.mark.parametrize(
        "start,steps,expected",
        [
            ("E2", 5, "A2"),
            ("B3", 1, "C4"),
            ("C4", -1, "B3"),
            ("E4", 12, "E5"),
            ("A2", -24, "A0"),
            ("C0", -12, "C-1"),
        ],
    )
    def test_transpose(self, start: str, steps: int, expected: str) -> None:
        """Transposition crosses octave boundaries in both directions."""
        assert str(Note.parse(start).transpose(steps)) == expected
        assert str(Note.parse(start).transpose(Interval(steps))) == expected

    def test_transpose_below_floor(self) -> None:
        """Transposing below octave -1 is out of range."""
        with pytest.raises(OutOfRangeError):
            Note.parse("C-1").transpose(-1)

    def test_operators(self) -> None:
        """Adding and subtracting intervals or semitone counts."""
        e2 = Note.parse("E2")
        assert e2 + 5 == Note.parse("A2")
        assert e2 + Interval.PERFECT_FIFTH == Note.parse("B2")
        assert e2 - Interval.MAJOR_SECOND == Note.parse("D2")
        assert e2.semitones_to(Note.parse("E3")) == 12
        assert Note.parse("E3").semitones_to(e2) == -12


class TestSpelling:
    """Tests for spelling pitch classes with sharps or flats."""

    @pytest.mark.parametrize(
        "text,sharps,flats,auto",
        [
            ("C", "C", "C", "C"),
            ("C#", "C#", "Db", "C#"),
            ("Db", "C#", "Db", "Db"),
            ("bb", "A#", "Bb", "Bb"),
            ("E", "E", "E", "E"),
        ],
    )
    def test_spelled(self, text: str, sharps: str, flats: str, auto: str) -> None:
        """Naturals never change; black keys follow the preference."""
        pitch_class = PitchClass.parse(text)
        assert pitch_class.spelled(SpellingPreference.Sharps) == sharps
        assert pitch_class.spelled(SpellingPreference.Flats) == flats
        assert pitch_class.spelled(SpellingPreference.Auto) == auto

    def test_prefers_flats(self) -> None:
        """Only a parsed flat spelling prefers flats."""
        assert PitchClass.parse("Eb").prefers_flats
        assert not PitchClass.parse("D#").prefers_flats
        assert not PitchClass.parse("B").prefers_flats
        assert not PitchClass.of(3).prefers_flats


@given(pitch_classes())
def test_canonical_spelling_parses_back(pitch_class: PitchClass) -> None:
    """Displaying then parsing a canonical pitch class gives it back."""
    assert PitchClass.parse(str(pitch_class)) == pitch_class


@given(pitch_classes(), st.integers(min_value=-100, max_value=100))
def test_pitch_class_transpose_inverse(pitch_class: PitchClass, steps: int) -> None:
    """Transposing up and back down returns the same pitch class."""
    assert pitch_class.transpose(steps).transpose(-steps) == pitch_class


@given(notes(min_absolute=0), st.integers(min_value=-12, max_value=100))
def test_note_transpose_adds_semitones(note: Note, steps: int) -> None:
    """Transposition adds the interval to the absolute semitone value."""
    result = note.transpose(Interval(steps))
    assert result.absolute_semitone == note.absolute_semitone + steps
    assert result.transpose(-steps) == note


@given(notes(max_absolute=200))
def test_note_display_parses_back(note: Note) -> None:
    """Displaying then parsing a note gives it back."""
    assert Note.parse(str(note)) == note
