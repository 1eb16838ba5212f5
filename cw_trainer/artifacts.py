"""Text artifact tree: directory setup, naming, generation and listing."""

import logging
import os
import random

from cw_trainer.constants import ICRT_GROUP_SIZE, TEXT_EXTENSION
from cw_trainer.content import (
    build_segment_practice,
    cumulative_characters,
    icrt_groups,
    random_words,
)
from cw_trainer.errors import ERROR_KIND_FILESYSTEM, ProductionError
from cw_trainer.models import (
    KIND_DRILL_CUMULATIVE,
    KIND_DRILL_NEW,
    KIND_REPETITIVE,
    KIND_SINGLE,
    SpeedProfile,
    TextArtifact,
    TrainingConfig,
)

logger = logging.getLogger(__name__)


def segment_text_path(segment_dir: str, name: str, repetition: int) -> str:
    return os.path.join(segment_dir, f"segment_{name}_{repetition}x{TEXT_EXTENSION}")


def icrt_text_path(icrt_dir: str, name: str, scope: str) -> str:
    """scope is "new" (segment's own characters) or "all" (cumulative)."""
    return os.path.join(icrt_dir, f"icrt_{name}_{scope}{TEXT_EXTENSION}")


def audio_base_path(text_path: str, profile: SpeedProfile) -> str:
    """Strip the text extension and append the speed tag.

    "out/segment_1_2x.txt" at 25@10 → "out/segment_1_2x_25@10"
    """
    base, ext = os.path.splitext(text_path)
    if ext != TEXT_EXTENSION:
        base = text_path
    return f"{base}_{profile.suffix}"


def init_output_dirs(config: TrainingConfig) -> list[str]:
    """Create the segment and ICRT directories. Returns their paths."""
    dirs = [config.output.segment_dir, config.output.icrt_dir]
    for path in dirs:
        os.makedirs(path, exist_ok=True)
    return dirs


def write_text(path: str, content: str) -> str:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def read_text(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def list_text_files(directory: str) -> list[str]:
    """Sorted paths of the text artifacts in a directory."""
    names = sorted(
        name for name in os.listdir(directory)
        if name.endswith(TEXT_EXTENSION)
        and os.path.isfile(os.path.join(directory, name))
    )
    return [os.path.join(directory, name) for name in names]


def build_text_files(
    config: TrainingConfig,
    rng: random.Random | None = None,
) -> list[TextArtifact]:
    """Generate every text artifact for every configured segment.

    Per segment: repetitive and single-pass word practice, plus new-character
    and cumulative ICRT drills. Returns the artifacts in write order.
    """
    try:
        init_output_dirs(config)
    except OSError as e:
        raise ProductionError(
            f"Could not create output directories: {e}", error_kind=ERROR_KIND_FILESYSTEM
        ) from e

    out = config.output
    artifacts = []
    total = len(config.segments)

    for i, segment in enumerate(config.segments):
        print(f"  Generating text for segment {i + 1}/{total}: {segment.name}")
        pool = build_segment_practice(segment)

        jobs = [(
            KIND_REPETITIVE,
            segment_text_path(out.segment_dir, segment.name, config.repetition),
            lambda: random_words(pool, config.repetition, config.target_segment_length, rng),
        )]
        single_path = segment_text_path(out.segment_dir, segment.name, 1)
        if config.repetition != 1:
            jobs.append((
                KIND_SINGLE,
                single_path,
                lambda: random_words(pool, 1, config.target_segment_length, rng),
            ))
        else:
            logger.debug("Repetition is 1; %s doubles as single-pass text", single_path)

        chars = list(segment.characters)
        chars_cumulative = cumulative_characters(config.segments, i)
        jobs.append((
            KIND_DRILL_NEW,
            icrt_text_path(out.icrt_dir, segment.name, "new"),
            lambda: icrt_groups(chars, ICRT_GROUP_SIZE, config.target_icrt_length, rng),
        ))
        jobs.append((
            KIND_DRILL_CUMULATIVE,
            icrt_text_path(out.icrt_dir, segment.name, "all"),
            lambda: icrt_groups(chars_cumulative, ICRT_GROUP_SIZE, config.target_icrt_length, rng),
        ))

        for kind, path, build in jobs:
            content = build()
            try:
                write_text(path, content)
            except OSError as e:
                raise ProductionError(
                    f"Could not write {path}: {e}", error_kind=ERROR_KIND_FILESYSTEM
                ) from e
            logger.debug("Wrote %s (%d chars)", path, len(content))
            artifacts.append(TextArtifact(segment=segment.name, kind=kind, path=path))

    return artifacts
