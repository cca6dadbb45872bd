"""Command-line entry point for fretwork.

Subcommands work against the saved settings file: ``setup`` writes it,
``show`` prints it, and ``diagram``, ``note``, ``voicings``, ``transpose``
and ``capo`` resolve it (with any flags layered on top) into an instrument.
``chord`` and ``normalize`` need no instrument.
"""

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from fretwork import constants
from fretwork.base import FretworkError, UnknownInstrumentError, UnknownTuningError
from fretwork.capo import CapoSuggester
from fretwork.chord import Chord
from fretwork.config import (
    DEFAULT_SETTINGS_PATH,
    Settings,
    find_tuning,
    load_settings,
    resolve_instrument,
    save_settings,
)
from fretwork.diagram import FretboardDiagramRenderer, Orientation
from fretwork.instrument import Instrument
from fretwork.pitch import SpellingPreference
from fretwork.presets import INSTRUMENTS, TUNINGS
from fretwork.transposition import (
    ChordProgression,
    Key,
    key_spelling,
    semitones_between_keys,
)
from fretwork.tuning_parser import normalize, parse_frets
from fretwork.voicing import VoicingCalculator, VoicingDifficulty, VoicingOptions


def _add_instrument_options(parser: ArgumentParser) -> None:
    parser.add_argument("-i", "--instrument", help="Preset instrument name")
    parser.add_argument(
        "-t",
        "--tuning",
        help='Preset tuning name, or notes: "DADGBE", "D2A2D3G3B3E4", "D2 A2 D3 G3 B3 E4"',
    )
    parser.add_argument("-c", "--capo", type=int, help="Capo fret (0 for none)")
    parser.add_argument(
        "-f", "--frets", help='Fret count: "22", or per string "22,22,22,22,5"'
    )
    parser.add_argument(
        "-o",
        "--orientation",
        choices=[o.name.lower() for o in Orientation],
        help="Diagram orientation",
    )


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser with the global options and one subparser per command.
    """
    parser = ArgumentParser(
        prog="fretwork",
        description="Tunings, notes and fretboard diagrams for stringed instruments",
    )
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        help=f"Settings file (default: {DEFAULT_SETTINGS_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    normalize_parser = subparsers.add_parser(
        "normalize", help="Print a tuning in canonical form"
    )
    normalize_parser.add_argument("text", help="Tuning text")

    diagram_parser = subparsers.add_parser(
        "diagram", help="Draw the fretboard of the configured instrument"
    )
    _add_instrument_options(diagram_parser)
    diagram_parser.add_argument(
        "--show",
        type=int,
        default=constants.DEFAULT_DIAGRAM_FRETS,
        help=f"Highest fret to draw (default: {constants.DEFAULT_DIAGRAM_FRETS})",
    )

    note_parser = subparsers.add_parser(
        "note", help="Print the note at a string and fret"
    )
    _add_instrument_options(note_parser)
    note_parser.add_argument("string", type=int, help="String index, 0 is the first")
    note_parser.add_argument("fret", type=int, help="Physical fret number")

    setup_parser = subparsers.add_parser("setup", help="Configure your instrument")
    _add_instrument_options(setup_parser)
    setup_parser.add_argument(
        "--custom",
        action="store_true",
        help="Create a custom instrument from --tuning (and --frets)",
    )
    setup_parser.add_argument(
        "-n", "--name", default="Custom", help="Name of a custom instrument"
    )
    setup_parser.add_argument(
        "--reset",
        action="store_true",
        help="Reset to the defaults (guitar, standard, no capo)",
    )

    subparsers.add_parser("show", help="Show the current settings")
    subparsers.add_parser("presets", help="List preset instruments and tunings")

    chord_parser = subparsers.add_parser(
        "chord", help="Show a chord's notes and formula, or compare two chords"
    )
    chord_parser.add_argument(
        "chords", nargs="+", metavar="CHORD", help="Chord symbol such as Am, G7, Fmaj7"
    )

    voicings_parser = subparsers.add_parser(
        "voicings", help="Show how to play a chord on the configured instrument"
    )
    _add_instrument_options(voicings_parser)
    voicings_parser.add_argument("chord", help="Chord symbol")
    voicings_parser.add_argument(
        "-l",
        "--level",
        choices=[d.name.lower() for d in VoicingDifficulty],
        help="Difficulty level to search for",
    )
    voicings_parser.add_argument(
        "-n", "--limit", type=int, default=5, help="Maximum voicings to show (default: 5)"
    )
    voicings_parser.add_argument(
        "--compact",
        action="store_true",
        help="One line per voicing instead of diagrams",
    )

    transpose_parser = subparsers.add_parser(
        "transpose", help="Transpose chords by semitones or to a key"
    )
    _add_instrument_options(transpose_parser)
    transpose_parser.add_argument("chords", nargs="+", metavar="CHORD", help="Chord symbols")
    shift_group = transpose_parser.add_mutually_exclusive_group()
    shift_group.add_argument("--up", type=int, help="Semitones up")
    shift_group.add_argument("--down", type=int, help="Semitones down")
    shift_group.add_argument("--to", metavar="KEY", help="Target key, e.g. G or Em")
    transpose_parser.add_argument(
        "--spelling",
        choices=[p.name.lower() for p in SpellingPreference],
        default="sharps",
        help="Accidentals in the result; auto follows the key (default: sharps)",
    )
    transpose_parser.add_argument(
        "-s",
        "--suggest-capo",
        action="store_true",
        help="Also suggest capo positions for the result",
    )
    transpose_parser.add_argument(
        "-n", "--limit", type=int, default=3, help="Capo suggestions to show (default: 3)"
    )

    capo_parser = subparsers.add_parser(
        "capo", help="Suggest capo positions that make chords easier"
    )
    _add_instrument_options(capo_parser)
    capo_parser.add_argument("chords", nargs="+", metavar="CHORD", help="Chord symbols")
    capo_parser.add_argument(
        "-n", "--limit", type=int, default=3, help="Suggestions to show (default: 3)"
    )
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def _is_preset_tuning(instrument: str, name: str) -> bool:
    try:
        find_tuning(instrument, name)
    except (UnknownInstrumentError, UnknownTuningError):
        return False
    return True


def apply_overrides(settings: Settings, args: Namespace) -> Settings:
    """Layer instrument flags from the command line over saved settings.

    Choosing an instrument starts over from that preset in its own stringing.
    A tuning that names a preset for the instrument selects it; anything else
    is parsed as notes.
    """
    if args.instrument is not None:
        settings = Settings(
            instrument=args.instrument.strip().lower(),
            tuning_name=None,
            orientation=settings.orientation,
        )
    if args.tuning is not None:
        if not settings.custom and _is_preset_tuning(settings.instrument, args.tuning):
            settings = replace(settings, tuning_name=args.tuning, tuning_notes=None)
        else:
            settings = replace(
                settings, tuning_name=None, tuning_notes=normalize(args.tuning)
            )
    if args.frets is not None:
        settings = replace(settings, frets=parse_frets(args.frets))
    if args.capo is not None:
        settings = replace(settings, capo=args.capo)
    if args.orientation is not None:
        settings = replace(settings, orientation=Orientation.parse(args.orientation))
    return settings


def _print_settings(settings: Settings) -> None:
    print(f"Settings:   {settings.describe()}")
    print(f"Instrument: {resolve_instrument(settings)}")


def _run_setup(args: Namespace) -> int:
    if args.reset:
        save_settings(Settings(), args.config)
        print("Settings reset to defaults.")
        _print_settings(Settings())
        return 0
    if args.custom:
        if args.tuning is None:
            print("Error: --custom requires --tuning", file=sys.stderr)
            return 1
        settings = Settings(
            instrument=args.name,
            tuning_name=None,
            tuning_notes=normalize(args.tuning),
            capo=args.capo if args.capo is not None else 0,
            custom=True,
            frets=parse_frets(args.frets) if args.frets is not None else None,
            orientation=(
                Orientation.parse(args.orientation)
                if args.orientation is not None
                else Settings().orientation
            ),
        )
    else:
        changed = any(
            getattr(args, key) is not None
            for key in ("instrument", "tuning", "frets", "capo", "orientation")
        )
        if not changed:
            print("Nothing to change; see 'fretwork setup --help'.")
            return 0
        settings = apply_overrides(load_settings(args.config), args)
    # Validate before saving
    resolve_instrument(settings)
    save_settings(settings, args.config)
    print("Settings saved.")
    _print_settings(settings)
    return 0


def _run_presets() -> None:
    for key, instrument in INSTRUMENTS.items():
        print(f"{instrument.name}: {instrument.tuning_text()}")
        for tuning in TUNINGS[key].values():
            print(f"  {tuning}")


def _print_chord(chord: Chord) -> None:
    names = chord.note_names()
    print(f"{chord.name} ({chord.symbol})")
    print(f"Notes:     {' - '.join(names)}")
    formula = [
        "R" if interval.semitones == 0 else interval.short_name
        for interval in chord.intervals
    ]
    print(f"Formula:   {' - '.join(formula)}")
    print("Intervals:")
    for name, interval in zip(names, chord.intervals):
        if interval.semitones == 0:
            print(f"  {name:<3} = Root")
        else:
            print(f"  {name:<3} = {interval.name} ({interval.short_name})")


def _compare_chords(first: Chord, second: Chord) -> None:
    print(f"Comparing {first} and {second}")
    print(f"{first.symbol}: {' - '.join(first.note_names())}")
    print(f"{second.symbol}: {' - '.join(second.note_names())}")

    def only_in(chord: Chord, other: Chord) -> List[str]:
        others = set(other.pitch_classes)
        return [
            name
            for name, pc in zip(chord.note_names(), chord.pitch_classes)
            if pc not in others
        ]

    common = [
        name
        for name, pc in zip(first.note_names(), first.pitch_classes)
        if pc in set(second.pitch_classes)
    ]
    if common:
        print(f"Common notes: {', '.join(common)}")
    else:
        print("No common notes")
    for chord, other in ((first, second), (second, first)):
        unique_names = only_in(chord, other)
        if unique_names:
            print(f"Only in {chord.symbol}: {', '.join(unique_names)}")


def _run_chord(args: Namespace) -> int:
    if len(args.chords) > 2:
        print("Error: expected one or two chords", file=sys.stderr)
        return 2
    chords = [Chord.parse(text) for text in args.chords]
    if len(chords) == 1:
        _print_chord(chords[0])
    else:
        _compare_chords(chords[0], chords[1])
    return 0


def _run_voicings(args: Namespace) -> None:
    settings = apply_overrides(load_settings(args.config), args)
    instrument = resolve_instrument(settings)
    chord = Chord.parse(args.chord)
    if args.level is not None:
        options = VoicingOptions.for_level(VoicingDifficulty[args.level.capitalize()])
    else:
        options = VoicingOptions()
    voicings = VoicingCalculator(instrument, options).find_voicings(chord)
    if not voicings:
        print(f"No voicings found for {chord.symbol} on {instrument.name}")
        return
    shown = voicings[: args.limit]
    plural = "" if len(voicings) == 1 else "s"
    print(f"{chord.name} ({chord.symbol}) on {instrument.name}")
    print(f"Found {len(voicings)} voicing{plural}, showing {len(shown)}:")
    renderer = FretboardDiagramRenderer()
    for number, voicing in enumerate(shown, start=1):
        label = voicing.difficulty.label
        if args.compact:
            notes = "-".join(str(pc) for pc in voicing.pitch_classes_on(instrument))
            print(f"{number}. {voicing.to_compact_string():<10} {notes} ({label})")
        else:
            print(f"Voicing {number} ({label}):")
            print(
                renderer.render_voicing(
                    instrument, voicing, settings.orientation, title=chord.symbol
                )
            )


def _print_capo_suggestions(
    instrument: Instrument, chords: Sequence[Chord], limit: int
) -> None:
    suggestions = CapoSuggester(instrument).suggest(chords)[:limit]
    print("Capo suggestions:")
    for number, suggestion in enumerate(suggestions, start=1):
        print(f"  {number}. {suggestion} (difficulty {suggestion.difficulty_score:.1f})")


def _run_transpose(args: Namespace) -> None:
    progression = ChordProgression(tuple(Chord.parse(text) for text in args.chords))
    target: Optional[Key] = None
    if args.to is not None:
        target = Key.parse(args.to)
        shift = semitones_between_keys(Key.of_chord(progression.chords[0]), target)
    elif args.down is not None:
        shift = -args.down
    else:
        shift = args.up if args.up is not None else 0
    result = progression.transpose(shift)

    preference = SpellingPreference[args.spelling.capitalize()]
    if preference == SpellingPreference.Auto:
        preference = target.spelling if target is not None else key_spelling(result.chords)

    if shift > 0:
        print(f"Transposed up {shift} semitone{'' if shift == 1 else 's'}")
    elif shift < 0:
        print(f"Transposed down {-shift} semitone{'' if shift == -1 else 's'}")
    else:
        print("Transposed by 0 semitones")
    for original, chord in zip(progression.chords, result.chords):
        symbol = chord.spelled(preference)
        notes = " - ".join(chord.note_names(preference))
        print(f"  {original.symbol:<8} -> {symbol:<8} {notes}")
    print(f"Result: {result.symbols(preference)}")
    if args.suggest_capo:
        settings = apply_overrides(load_settings(args.config), args)
        _print_capo_suggestions(resolve_instrument(settings), result.chords, args.limit)


def run(args: Namespace, parser: Optional[ArgumentParser] = None) -> int:
    """Run a parsed command.

    Returns:
        The process exit status: 0 on success, 1 when a `FretworkError` was
        reported on stderr.
    """
    try:
        if args.command == "normalize":
            print(normalize(args.text))
        elif args.command == "diagram":
            settings = apply_overrides(load_settings(args.config), args)
            renderer = FretboardDiagramRenderer(frets=args.show)
            print(renderer.render(resolve_instrument(settings), settings.orientation))
        elif args.command == "note":
            settings = apply_overrides(load_settings(args.config), args)
            instrument = resolve_instrument(settings)
            print(instrument.note_at_fret(args.string, args.fret))
        elif args.command == "setup":
            return _run_setup(args)
        elif args.command == "show":
            _print_settings(load_settings(args.config))
        elif args.command == "presets":
            _run_presets()
        elif args.command == "chord":
            return _run_chord(args)
        elif args.command == "voicings":
            _run_voicings(args)
        elif args.command == "transpose":
            _run_transpose(args)
        elif args.command == "capo":
            settings = apply_overrides(load_settings(args.config), args)
            chords = [Chord.parse(text) for text in args.chords]
            _print_capo_suggestions(resolve_instrument(settings), chords, args.limit)
        elif parser is not None:
            parser.print_help()
        else:
            print("No command given; see 'fretwork --help'.", file=sys.stderr)
            return 2
    except FretworkError as e:
        logging.debug("command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    """Main entry point for the fretwork command.

    Parses command-line arguments, configures logging, and runs the command.
    """
    parser = make_parser()
    args = parser.parse_args()
    configure_logging(args.log_level)
    sys.exit(run(args, parser))


if __name__ == "__main__":
    main()
