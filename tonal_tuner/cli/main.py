"""Main entry point for the Tonal Tuner CLI."""

import argparse
import sys
import time
from collections import Counter
from typing import Any, Dict, List, Optional

from ..core.config import DEFAULT_AUDIO_INPUT, ConfigManager, DetectorConfig
from ..core.errors import ConfigurationError
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import DetectionResult, Detected, NoPitch
from ..note_utils import (
    is_in_tune,
    map_frequency,
    needle_position,
    to_ascii_accidentals,
)
from ..reference import ReferenceMatcher, parse_reference_table

logger = get_logger(__name__)

EXIT_CONFIG_ERROR = 2
EXIT_AUDIO_ERROR = 3


def format_result(result: DetectionResult, config: DetectorConfig, ascii_only: bool = False) -> str:
    """One-line readout of a detection result."""
    if not isinstance(result, Detected):
        return "--- (no pitch)" if isinstance(result, NoPitch) else "--- (silence)"

    name = to_ascii_accidentals(result.note_name) if ascii_only else result.note_name
    marker = "IN TUNE" if is_in_tune(result.cents_offset, config.in_tune_cents) else ""
    needle = _needle(result.cents_offset)
    line = f"{name:<4} {result.frequency:8.2f}Hz {result.cents_offset:+4d}c {needle} {marker}"
    if result.reference is not None:
        line += f"  nearest: {result.reference.name} ({result.reference.cents_offset:+.0f}c)"
    return line.rstrip()


def _needle(cents: int, width: int = 21) -> str:
    # Map [-50, +50] cents onto a text gauge
    position = needle_position(cents)
    slot = int(round((position + 50) / 100 * (width - 1)))
    gauge = ["-"] * width
    gauge[width // 2] = "|"
    gauge[slot] = "*"
    return "[" + "".join(gauge) + "]"


def build_config(args) -> DetectorConfig:
    """Detector settings from saved configuration plus command line overrides."""
    if args.config_dir:
        config = ConfigManager(args.config_dir).get_detector_config()
    else:
        config = DetectorConfig()

    overrides = {
        "window_size": args.window_size,
        "silence_rms_threshold": args.threshold,
        "search_min_freq": args.min_freq,
        "search_max_freq": args.max_freq,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.fft:
        overrides["use_fft"] = True
    if args.reference:
        overrides["reference_tuning"] = parse_reference_table(args.reference)
    return config.replace(**overrides)


def audio_settings(args) -> Dict[str, Any]:
    """Capture settings from the saved 'audio_input' configuration plus command line overrides.

    Raises:
        ConfigurationError: If a size or rate is not a positive integer
    """
    if args.config_dir:
        settings = ConfigManager(args.config_dir).get_config("audio_input")
    else:
        settings = dict(DEFAULT_AUDIO_INPUT)

    overrides = {
        "device_id": getattr(args, "device", None),
        "sample_rate": getattr(args, "sample_rate", None),
        "hop_size": args.hop_size,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    for key in ("sample_rate", "chunk_size", "channels", "hop_size"):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")
    return settings


def run_note(args) -> int:
    """Print the note mapping for a single frequency."""
    if not (0 < args.frequency < float("inf")):
        raise ConfigurationError(f"Frequency must be positive, got {args.frequency}")

    config = build_config(args)
    mapping = map_frequency(args.frequency)
    nearest = ReferenceMatcher(config.reference_tuning).nearest(args.frequency)
    name = to_ascii_accidentals(mapping.note_name) if args.ascii else mapping.note_name
    print(f"frequency: {args.frequency:.2f}Hz")
    print(f"midi:      {mapping.midi}")
    print(f"note:      {name}")
    print(f"cents:     {mapping.cents_offset:+d}")
    print(f"nearest:   {nearest.name} ({nearest.hz_offset:+.2f}Hz, {nearest.cents_offset:+.1f}c)")
    return 0


def run_file(args) -> int:
    """Analyse a WAV file window by window."""
    from ..services.audio_providers import WavFileAudioProvider
    from ..services.tuner_session import TunerSession

    config = build_config(args)
    settings = audio_settings(args)
    hop_size = settings["hop_size"]

    note_counts: Counter = Counter()
    tick = 0
    try:
        provider = WavFileAudioProvider(
            args.path, chunk_size=settings["chunk_size"], realtime=False
        )
        session = TunerSession(
            sample_rate=provider.sample_rate,
            config=config,
            hop_size=hop_size,
            match_reference=True,
        )

        # Hops needed before the first full window
        first_hop = -(-session.detector.window_size // hop_size)
        for chunk in provider.chunks():
            for result in session.feed(chunk):
                if isinstance(result, Detected):
                    note_counts[result.note_name] += 1
                    window_end = (first_hop + tick) * hop_size / provider.sample_rate
                    print(f"{window_end:7.2f}s  {format_result(result, config, args.ascii)}")
                tick += 1
    except (RuntimeError, OSError) as e:
        logger.error(f"Could not read audio file {args.path}: {e}", exc_info=True)
        return EXIT_AUDIO_ERROR

    logger.info(f"Analysed {tick} windows of {args.path}")
    if note_counts:
        print("Note statistics:")
        for note_name, count in note_counts.most_common():
            name = to_ascii_accidentals(note_name) if args.ascii else note_name
            print(f"  {name}: {count} windows")
    else:
        print("No pitch detected.")
    return 0


def run_live(args) -> int:
    """Listen on an input device and print each reading."""
    from ..services.live_audio import LiveAudioProvider
    from ..services.tuner_session import TunerSession

    config = build_config(args)
    settings = audio_settings(args)
    provider = LiveAudioProvider(
        device_id=settings["device_id"],
        sample_rate=settings["sample_rate"],
        channels=settings["channels"],
        chunk_size=settings["chunk_size"],
    )
    session = TunerSession(provider, config=config, hop_size=settings["hop_size"])

    def on_result(result: DetectionResult, elapsed: float) -> None:
        print(f"[{elapsed:6.2f}s] {format_result(result, config, args.ascii)}", flush=True)

    logger.info(f"Listening for {args.duration} seconds...")
    session.start(on_result)
    try:
        time.sleep(args.duration)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    finally:
        session.stop()
    return 0


def _add_detector_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--window-size", type=int, default=None, help="Samples per analysis window (default: 8192)"
    )
    parser.add_argument(
        "--hop-size", type=int, default=None, help="New samples between detections (default: 1024)"
    )
    parser.add_argument(
        "--threshold", type=float, default=None, help="Silence RMS threshold (default: 0.008)"
    )
    parser.add_argument(
        "--min-freq", type=float, default=None, help="Lowest searched frequency in Hz (default: 70)"
    )
    parser.add_argument(
        "--max-freq", type=float, default=None, help="Highest searched frequency in Hz (default: 1000)"
    )
    parser.add_argument(
        "--fft", action="store_true", help="Compute the autocorrelation with an FFT"
    )
    parser.add_argument(
        "--reference",
        nargs="+",
        default=None,
        metavar="NOTE",
        help="Reference notes to match against (default: guitar standard tuning)",
    )
    parser.add_argument(
        "--config-dir", default=None, help="Load saved detector and audio input settings from this directory"
    )
    parser.add_argument(
        "--ascii", action="store_true", help="Print '#' instead of the sharp sign"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(description="Tonal Tuner - Pitch Detection and Tuning")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    note_parser = subparsers.add_parser("note", help="Show the note for a frequency")
    note_parser.add_argument("frequency", type=float, help="Frequency in Hz")
    _add_detector_options(note_parser)

    file_parser = subparsers.add_parser("file", help="Detect pitches in a WAV file")
    file_parser.add_argument("path", help="Path to the audio file")
    _add_detector_options(file_parser)

    live_parser = subparsers.add_parser("live", help="Tune from an audio input device")
    live_parser.add_argument(
        "--device", type=int, default=None, help="Audio input device ID (default: system default)"
    )
    live_parser.add_argument(
        "--sample-rate", type=int, default=None, help="Audio sample rate in Hz (default: 44100)"
    )
    live_parser.add_argument(
        "--duration", type=float, default=30.0, help="Listening time in seconds (default: 30)"
    )
    _add_detector_options(live_parser)

    # Parse arguments
    parsed_args = parser.parse_args(args)
    if parsed_args.command is None:
        parser.print_help()
        return 1

    setup_logging(level="DEBUG" if parsed_args.debug else None)

    commands = {"note": run_note, "file": run_file, "live": run_live}
    try:
        return commands[parsed_args.command](parsed_args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
