"""
Crowd Safety Analyzer CLI
Replays a recorded detection stream through a SafetyAnalyzer.

Input is a JSON array of frames or JSON Lines (one frame per line).
Each analysis is written to stdout as one JSON line.
"""

import argparse
import json
import logging
import sys
from collections.abc import Iterator
from typing import Any, TextIO

from .config import Config, ConfigValidationError, load_config
from .core import AnalyzerRegistry
from .processor import InvalidFrameError, build_incidents, parse_frame

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False, level: str = "INFO") -> None:
    """
    Setup logging configuration.

    Logs go to stderr so stdout stays machine-readable.

    Args:
        quiet: If True, only show warnings and errors
        level: Level name from config when not quiet
    """
    log_level = logging.WARNING if quiet else getattr(logging, level, logging.INFO)

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("crowd_safety.", "cs.")
            return super().format(record)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(log_level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Crowd Safety Analyzer - density surges, falls and lying persons",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m crowd_safety frames.jsonl              # Analyze a recorded stream
  python -m crowd_safety frames.json --stats       # Also print final statistics
  python -m crowd_safety - --incidents < f.jsonl   # Emit incident records from stdin
  python -m crowd_safety --validate -c cfg.yaml    # Check configuration

Environment Variables:
  CROWD_SAFETY_DENSITY_THRESHOLD  - Override analyzer.density_threshold
  CROWD_SAFETY_SURGE_THRESHOLD    - Override analyzer.surge_threshold
  CROWD_SAFETY_FALLING_VELOCITY   - Override analyzer.falling_velocity_threshold
  CROWD_SAFETY_LOG_LEVEL          - Override logging.level
        """,
    )

    parser.add_argument(
        "frames",
        nargs="?",
        help="JSON or JSON Lines file of frames ('-' for stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: ./crowd_safety.yaml if present)",
    )

    parser.add_argument(
        "-s",
        "--stream",
        default="default-stream",
        help="Stream id the frames belong to (default: default-stream)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print analyzer statistics after the last frame",
    )

    parser.add_argument(
        "--incidents",
        action="store_true",
        help="Print incident records instead of full analyses",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration, print resolved values and exit",
    )

    return parser.parse_args(argv)


def read_frames(source: TextIO) -> Iterator[tuple[int, Any]]:
    """
    Yield (line_number, raw_frame) from a JSON array or JSON Lines stream.

    Unparseable JSON Lines entries are logged and skipped.
    """
    text = source.read()
    stripped = text.lstrip()

    if stripped.startswith("["):
        frames = json.loads(stripped)
        for index, frame in enumerate(frames, 1):
            yield index, frame
        return

    for line_number, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        try:
            yield line_number, json.loads(line)
        except json.JSONDecodeError as e:
            logger.error(f"Line {line_number}: invalid JSON ({e})")


def _emit(payload: dict, out: TextIO) -> None:
    out.write(json.dumps(payload) + "\n")


def run_replay(
    source: TextIO,
    config: Config,
    stream_id: str,
    out: TextIO | None = None,
    incidents: bool = False,
    stats: bool = False,
) -> int:
    """
    Replay frames through an analyzer and write results.

    Args:
        source: Readable text stream of frames
        config: Validated configuration
        stream_id: Stream id used for the analyzer and incident records
        out: Where JSON lines are written (default: sys.stdout)
        incidents: Emit incident records rather than analyses
        stats: Emit final statistics

    Returns:
        Number of frames processed
    """
    if out is None:
        out = sys.stdout
    registry = AnalyzerRegistry(config.analyzer)
    processed = 0
    skipped = 0

    for position, raw in read_frames(source):
        try:
            frame = parse_frame(raw)
        except InvalidFrameError as e:
            logger.error(f"Frame {position}: {e}")
            skipped += 1
            continue

        analysis = registry.process_frame(stream_id, frame)
        processed += 1

        if incidents:
            for incident in build_incidents(analysis, stream_id=stream_id):
                _emit(incident.to_dict(), out)
        else:
            _emit(analysis.to_dict(), out)

    if stats:
        _emit({"stream_id": stream_id, **registry.get(stream_id).get_stats().to_dict()}, out)

    logger.info(f"Processed {processed} frame(s), skipped {skipped}")
    return processed


def print_config(config: Config) -> None:
    """Print resolved configuration."""
    print("Configuration valid")
    for key, value in config.analyzer.model_dump().items():
        print(f"  analyzer.{key}: {value}")
    print(f"  logging.level: {config.logging.level}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        setup_logging(args.quiet)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(args.quiet, config.logging.level)

    if args.validate:
        print_config(config)
        return

    if not args.frames:
        logger.error("No frames file given (use '-' for stdin)")
        sys.exit(1)

    try:
        if args.frames == "-":
            run_replay(sys.stdin, config, args.stream, incidents=args.incidents, stats=args.stats)
        else:
            with open(args.frames, encoding="utf-8") as f:
                run_replay(f, config, args.stream, incidents=args.incidents, stats=args.stats)
    except OSError as e:
        logger.error(f"Cannot read frames: {e}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in frames file: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
