"""Main entry point for the Pitch Trace CLI."""

import argparse
import queue
import sys
import time
from typing import List, Optional

import numpy as np

from ..audio.file_input import iter_wav_frames, read_sample_rate
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import ScaleTarget, SingleNoteTarget, TargetSpec, TuningResult
from ..session import DisplayState
from ..targets import INTERVAL_TEMPLATES, SCALE_PRESETS
from ..view_range import frequency_to_position

logger = get_logger(__name__)

DISPLAY_INTERVAL_MS = 1000.0 / 30
METER_WIDTH = 40


def target_from_args(args: argparse.Namespace) -> TargetSpec:
    """Build the target specification selected on the command line."""
    if args.preset:
        return SCALE_PRESETS[args.preset]
    if args.tonic:
        return ScaleTarget(args.tonic, args.template, args.octaves)
    return SingleNoteTarget(args.note)


def format_result(result: Optional[TuningResult]) -> str:
    """One status line: detected note, frequency and tuning verdict."""
    if result is None:
        return "--"
    note = result.note.label if result.note else "--"
    freq = f"{result.frequency:7.1f} Hz" if result.frequency else "     -- Hz"
    return f"{note:<14} {freq}  {result.describe()}"


def format_meter(state: DisplayState) -> str:
    """Position of the detected (*) and reference (o) pitch in the view range."""
    cells = [" "] * METER_WIDTH
    if state.reference is not None:
        cells[_meter_index(state.reference, state)] = "o"
    if state.detected is not None:
        cells[_meter_index(state.detected, state)] = "*"
    return "[" + "".join(cells) + "]"


def _meter_index(freq: float, state: DisplayState) -> int:
    position = frequency_to_position(freq, state.view)
    return min(METER_WIDTH - 1, int(position * METER_WIDTH))


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--note", default="A4", help="Single target note (default: A4)")
    parser.add_argument("--tonic", help="Scale tonic, e.g. C3 (selects scale mode)")
    parser.add_argument(
        "--template",
        choices=sorted(INTERVAL_TEMPLATES),
        default="major",
        help="Scale interval template (default: major)",
    )
    parser.add_argument("--octaves", type=int, default=1, help="Octaves the scale spans")
    parser.add_argument("--preset", choices=sorted(SCALE_PRESETS), help="Named practice scale")
    parser.add_argument(
        "--tolerance", type=int, default=None, help="In-tune tolerance in cents (5-80)"
    )
    parser.add_argument(
        "--frame-size", type=int, default=None, help="Samples per analysis frame"
    )


def run_monitor(args: argparse.Namespace, factory: ComponentFactory) -> int:
    """Listen to the microphone and print the tuning status live."""
    audio_input = factory.create_audio_input(
        device_id=args.device,
        sample_rate=args.sample_rate,
        frames_per_buffer=args.frame_size,
    )
    tone_output = factory.create_tone_output(device_id=args.output_device)
    session = factory.create_session(
        target=target_from_args(args),
        tone_output=tone_output,
        tolerance_cents=args.tolerance,
    )

    # Frames arrive on the audio thread; the session is only touched here
    frames: "queue.Queue[np.ndarray]" = queue.Queue(maxsize=32)

    def on_frame(frame: np.ndarray, _timestamp: float) -> None:
        try:
            frames.put_nowait(frame)
        except queue.Full:
            logger.debug("Dropping audio frame: analysis is behind")

    if not audio_input.start(on_frame):
        print("Could not open the audio input device", file=sys.stderr)
        return 1

    session.start()
    if args.reference:
        session.play_reference()

    print(f"Listening for {args.duration:.0f}s, press Ctrl+C to stop")
    start = time.monotonic()
    last_display = -DISPLAY_INTERVAL_MS
    try:
        while True:
            now_ms = (time.monotonic() - start) * 1000.0
            if now_ms >= args.duration * 1000.0:
                break

            try:
                frame = frames.get(timeout=DISPLAY_INTERVAL_MS / 1000.0)
            except queue.Empty:
                frame = None
            if frame is not None:
                session.process_frame(frame, audio_input.sample_rate)

            now_ms = (time.monotonic() - start) * 1000.0
            session.scheduler.run_until(now_ms)
            if now_ms - last_display >= DISPLAY_INTERVAL_MS:
                last_display = now_ms
                state = session.display_tick(now_ms)
                print(f"\r{format_meter(state)} {format_result(state.result):<48}", end="", flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        print()
        session.stop()
        audio_input.stop()

    return 0


def run_analyze(args: argparse.Namespace, factory: ComponentFactory) -> int:
    """Analyze an audio file frame by frame."""
    frame_size = args.frame_size or factory.config_manager.get_config("audio_input")[
        "frames_per_buffer"
    ]
    session = factory.create_session(
        target=target_from_args(args), tolerance_cents=args.tolerance
    )

    try:
        sample_rate = read_sample_rate(args.file)
        session.start()
        for index, frame in iter_wav_frames(args.file, frame_size):
            result = session.process_frame(frame, sample_rate)
            now_ms = index * frame_size * 1000.0 / sample_rate
            session.display_tick(now_ms)
            print(f"{now_ms / 1000.0:8.3f}s  {format_result(result)}")
    except (RuntimeError, OSError) as e:
        logger.error(f"Could not analyze {args.file}: {e}")
        print(f"Could not read {args.file}: {e}", file=sys.stderr)
        return 1
    finally:
        session.stop()

    return 0


def run_scales(_args: argparse.Namespace, _factory: ComponentFactory) -> int:
    """Print interval templates and named presets."""
    print("Interval templates:")
    for name, offsets in INTERVAL_TEMPLATES.items():
        print(f"  {name:<18} {' '.join(str(o) for o in offsets)}")
    print("Presets:")
    for name, spec in SCALE_PRESETS.items():
        print(f"  {name:<18} {spec.tonic} {spec.template} x{spec.octaves}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(description="Pitch Trace - live pitch tracing tuner")
    parser.add_argument("--log-level", default=None, help="Log level, e.g. DEBUG")
    parser.add_argument("--config-dir", default=None, help="Configuration directory")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    monitor_parser = subparsers.add_parser("monitor", help="Tune against live microphone input")
    _add_target_arguments(monitor_parser)
    monitor_parser.add_argument("--device", type=int, default=None, help="Audio input device ID")
    monitor_parser.add_argument(
        "--output-device", type=int, default=None, help="Audio output device ID"
    )
    monitor_parser.add_argument(
        "--sample-rate", type=int, default=None, help="Audio sample rate in Hz"
    )
    monitor_parser.add_argument(
        "--duration", type=float, default=60.0, help="Monitoring duration in seconds"
    )
    monitor_parser.add_argument(
        "--reference", action="store_true", help="Play the targets as reference tones"
    )

    analyze_parser = subparsers.add_parser("analyze", help="Analyze an audio file")
    analyze_parser.add_argument("file", help="Path to a WAV/FLAC/OGG file")
    _add_target_arguments(analyze_parser)

    subparsers.add_parser("scales", help="List interval templates and presets")

    parsed_args = parser.parse_args(args)

    commands = {
        "monitor": run_monitor,
        "analyze": run_analyze,
        "scales": run_scales,
    }
    if parsed_args.command not in commands:
        parser.print_help()
        return 1

    setup_logging(parsed_args.log_level)
    factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
    return commands[parsed_args.command](parsed_args, factory)


if __name__ == "__main__":
    sys.exit(main())
