"""CLI interface: generate practice text and render it as CW audio."""

import argparse
import logging
import random
import sys

from cw_trainer.config import load_config
from cw_trainer.constants import (
    DEFAULT_CONFIG,
    RENDER_WORKERS,
    TRANSCODE_TIMEOUT_SECONDS,
    VERSION,
)
from cw_trainer.errors import ProductionError
from cw_trainer.models import ProductionReport
from cw_trainer.pipeline import produce
from cw_trainer.transcoder import FfmpegTranscoder, ffmpeg_available


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not ffmpeg_available():
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install with: brew install ffmpeg  (or apt install ffmpeg)", file=sys.stderr)
        raise SystemExit(1)


def _fail(error: ProductionError):
    print(f"Error [{error.error_kind}]: {error}", file=sys.stderr)
    raise SystemExit(1)


def _print_summary(report: ProductionReport) -> None:
    if report.text_artifacts:
        print(f"Generated {len(report.text_artifacts)} text files")
    if report.render.rendered or report.render.failures:
        print(f"Rendered {len(report.render.rendered)} audio files")
    if report.manifest_path:
        print(f"Manifest written to {report.manifest_path}")

    if report.render.failures:
        print(f"{len(report.render.failures)} audio file(s) failed:", file=sys.stderr)
        for kind, failures in report.render.failures_by_kind().items():
            print(f"  [{kind}] {len(failures)}", file=sys.stderr)
            for failure in failures:
                print(f"    {failure.source} @ {failure.profile.suffix}: {failure.message}",
                      file=sys.stderr)
        raise SystemExit(1)


def _produce(args, text: bool, audio: bool):
    if audio:
        _check_ffmpeg()
    try:
        config = load_config(args.config)
        report = produce(
            config,
            rng=random.Random(args.seed) if args.seed is not None else None,
            transcoder=FfmpegTranscoder(timeout=args.timeout),
            workers=args.workers,
            text=text,
            audio=audio,
        )
    except ProductionError as e:
        _fail(e)
    _print_summary(report)


def cmd_run(args):
    """Generate text, then render audio."""
    _produce(args, text=True, audio=True)


def cmd_text(args):
    """Generate text files only."""
    _produce(args, text=True, audio=False)


def cmd_audio(args):
    """Render audio for existing text files."""
    _produce(args, text=False, audio=True)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cw-trainer",
        description="CW Trainer: Morse code practice text and audio generator",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("config", nargs="?", default=DEFAULT_CONFIG,
                        help=f"Path to the JSON config (default: {DEFAULT_CONFIG})")
    common.add_argument("--seed", type=int, help="Random seed for reproducible text")
    common.add_argument("--workers", type=int, default=RENDER_WORKERS,
                        help="Concurrent audio renders")
    common.add_argument("--timeout", type=float, default=TRANSCODE_TIMEOUT_SECONDS,
                        help="Seconds before an ffmpeg run is abandoned")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", parents=[common], help="Generate text and audio")
    run_parser.set_defaults(func=cmd_run)

    text_parser = subparsers.add_parser("text", parents=[common], help="Generate text files only")
    text_parser.set_defaults(func=cmd_text)

    audio_parser = subparsers.add_parser("audio", parents=[common],
                                         help="Render audio for existing text files")
    audio_parser.set_defaults(func=cmd_audio)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.workers < 1:
        parser.error("--workers must be >= 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.func(args)
