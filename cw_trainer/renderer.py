"""Batch audio rendering: every text artifact × every speed profile."""

import asyncio
import logging
import os

from cw_trainer.artifacts import audio_base_path, list_text_files, read_text
from cw_trainer.constants import AUDIO_EXTENSION, INTERMEDIATE_EXTENSION, RENDER_WORKERS
from cw_trainer.errors import ERROR_KIND_FILESYSTEM, ProductionError, classify_error
from cw_trainer.models import (
    RenderFailure,
    RenderReport,
    SpeedProfile,
    TrainingConfig,
)
from cw_trainer.morse import MorseEncoder
from cw_trainer.transcoder import FfmpegTranscoder, Transcoder

logger = logging.getLogger(__name__)


def _write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


def _discard(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)


async def render_one(
    text_path: str,
    profile: SpeedProfile,
    encoder,
    transcoder: Transcoder,
    bitrate: str,
) -> str:
    """Render one text artifact at one speed. Returns the compressed path.

    The WAV intermediate is removed once the transcoder returns, whether or
    not it succeeded.
    """
    content = await asyncio.to_thread(read_text, text_path)
    base = audio_base_path(text_path, profile)
    wav_path = base + INTERMEDIATE_EXTENSION
    mp3_path = base + AUDIO_EXTENSION

    samples = await asyncio.to_thread(encoder.encode, content, profile.wpm, profile.farnsworth)
    data = await asyncio.to_thread(encoder.serialize, samples)
    try:
        await asyncio.to_thread(_write_bytes, wav_path, data)
        logger.debug("Written %s", wav_path)
        await transcoder.transcode(wav_path, mp3_path, bitrate)
    finally:
        await asyncio.to_thread(_discard, wav_path)
    return mp3_path


def _render_units(config: TrainingConfig) -> list[tuple[str, SpeedProfile]]:
    """Expand each category directory × its speed profiles into render units."""
    out = config.output
    units = []
    for label, directory, speeds in (
        ("segment", out.segment_dir, out.segment_speeds),
        ("ICRT", out.icrt_dir, out.icrt_speeds),
    ):
        if not speeds:
            continue
        try:
            files = list_text_files(directory)
        except OSError as e:
            raise ProductionError(
                f"Could not list {label} directory {directory}: {e}",
                error_kind=ERROR_KIND_FILESYSTEM,
            ) from e
        for profile in speeds:
            logger.info(
                "Creating %s audio for %d wpm at farnsworth speed of %d",
                label, profile.wpm, profile.farnsworth,
            )
            units.extend((path, profile) for path in files)
    return units


async def build_audio_files(
    config: TrainingConfig,
    encoder=None,
    transcoder: Transcoder | None = None,
    workers: int = RENDER_WORKERS,
) -> RenderReport:
    """Render all units concurrently, at most `workers` at a time.

    A failing unit is recorded in the report and does not stop the rest.
    Errors outside the config/filesystem/external-tool taxonomy propagate.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    encoder = encoder or MorseEncoder()
    transcoder = transcoder or FfmpegTranscoder()
    units = _render_units(config)
    total = len(units)
    semaphore = asyncio.Semaphore(workers)

    async def run(index: int, text_path: str, profile: SpeedProfile) -> str:
        async with semaphore:
            name = os.path.basename(text_path)
            print(f"  Rendering {index + 1}/{total}: {name} @ {profile.suffix}")
            return await render_one(text_path, profile, encoder, transcoder, config.output.bitrate)

    results = await asyncio.gather(
        *(run(i, path, profile) for i, (path, profile) in enumerate(units)),
        return_exceptions=True,
    )

    report = RenderReport()
    for (path, profile), result in zip(units, results):
        if isinstance(result, (ProductionError, OSError)):
            kind = classify_error(result)
            logger.warning("Render failed [%s] %s @ %s: %s", kind, path, profile.suffix, result)
            report.failures.append(RenderFailure(
                source=path, profile=profile, error_kind=kind, message=str(result),
            ))
        elif isinstance(result, BaseException):
            raise result
        else:
            report.rendered.append(result)
    return report


def render_audio_files(
    config: TrainingConfig,
    encoder=None,
    transcoder: Transcoder | None = None,
    workers: int = RENDER_WORKERS,
) -> RenderReport:
    """Sync wrapper around build_audio_files()."""
    return asyncio.run(build_audio_files(config, encoder, transcoder, workers))
