"""Orchestrates text generation followed by audio rendering."""

import logging
import random

from cw_trainer.artifacts import build_text_files
from cw_trainer.config import validate_config
from cw_trainer.constants import RENDER_WORKERS
from cw_trainer.errors import ERROR_KIND_FILESYSTEM, ProductionError
from cw_trainer.exporter import export_manifest
from cw_trainer.models import ProductionReport, TrainingConfig
from cw_trainer.renderer import render_audio_files
from cw_trainer.transcoder import Transcoder

logger = logging.getLogger(__name__)


def produce(
    config: TrainingConfig,
    rng: random.Random | None = None,
    encoder=None,
    transcoder: Transcoder | None = None,
    workers: int = RENDER_WORKERS,
    text: bool = True,
    audio: bool = True,
) -> ProductionReport:
    """Run the production steps in order.

    Text generation must finish before rendering starts, since the renderer
    reads the directories it fills. A text failure aborts the run; render
    failures are collected in the returned report.
    """
    validate_config(config)
    report = ProductionReport()

    if text:
        report.text_artifacts = build_text_files(config, rng=rng)
        logger.info("Generated %d text artifacts", len(report.text_artifacts))

    if audio:
        report.render = render_audio_files(
            config, encoder=encoder, transcoder=transcoder, workers=workers,
        )
        logger.info(
            "Rendered %d audio artifacts, %d failed",
            len(report.render.rendered), len(report.render.failures),
        )

    if config.output.manifest:
        try:
            report.manifest_path = export_manifest(
                config.output.manifest, config, report.text_artifacts, report.render,
            )
        except OSError as e:
            raise ProductionError(
                f"Could not write manifest {config.output.manifest}: {e}",
                error_kind=ERROR_KIND_FILESYSTEM,
            ) from e

    return report
