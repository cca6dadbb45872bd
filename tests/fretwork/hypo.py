import os

from hypothesis import settings
from hypothesis import strategies as st

from fretwork.pitch import Note, PitchClass


def configure_hypo() -> None:
    settings.register_profile("fast", max_examples=25)
    if os.environ.get("HYPO_SLOW") != "1":
        settings.load_profile("fast")


def pitch_classes() -> st.SearchStrategy[PitchClass]:
    """Canonically spelled pitch classes."""
    return st.integers(min_value=0, max_value=11).map(PitchClass.of)


def notes(min_absolute: int = -12, max_absolute: int = 120) -> st.SearchStrategy[Note]:
    """Canonically spelled notes within a range of absolute semitones."""
    return st.integers(min_value=min_absolute, max_value=max_absolute).map(
        Note.from_absolute
    )
