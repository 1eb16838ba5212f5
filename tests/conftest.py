"""Shared fixtures for CW trainer tests."""

import os
import shutil

import pytest

from cw_trainer.errors import TranscodeError
from cw_trainer.models import OutputSettings, Segment, SpeedProfile, TrainingConfig
from cw_trainer.transcoder import Transcoder


class FakeTranscoder(Transcoder):
    """Copies the WAV to the output path instead of running ffmpeg."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.calls = []
        self.fail_on = fail_on
        self.seen_inputs_existed = []

    async def transcode(self, input_path, output_path, bitrate):
        self.calls.append((input_path, output_path, bitrate))
        self.seen_inputs_existed.append(os.path.exists(input_path))
        if any(token in output_path for token in self.fail_on):
            raise TranscodeError(f"fake failure: {output_path}", returncode=1)
        shutil.copyfile(input_path, output_path)


@pytest.fixture
def fake_transcoder():
    return FakeTranscoder()


@pytest.fixture
def sample_segments():
    """Two segments: the second adds characters on top of the first."""
    return (
        Segment(
            name="A",
            words=("the", "quick"),
            callsigns=("K1ABC",),
            phrases=("brown fox",),
            characters=("a", "b"),
        ),
        Segment(
            name="B",
            words=("lazy", "dog"),
            callsigns=(),
            phrases=(),
            characters=("b", "c", "d"),
        ),
    )


@pytest.fixture
def make_config(tmp_path, sample_segments):
    """Factory for a TrainingConfig writing under tmp_path."""
    def factory(
        segments=None,
        repetition=2,
        target_segment_length=40,
        target_icrt_length=20,
        segment_speeds=(SpeedProfile(25, 15),),
        icrt_speeds=(SpeedProfile(25, 25),),
        manifest=None,
    ):
        return TrainingConfig(
            segments=sample_segments if segments is None else segments,
            repetition=repetition,
            target_segment_length=target_segment_length,
            target_icrt_length=target_icrt_length,
            output=OutputSettings(
                segment_dir=str(tmp_path / "out" / "segments"),
                icrt_dir=str(tmp_path / "out" / "icrt"),
                segment_speeds=tuple(segment_speeds),
                icrt_speeds=tuple(icrt_speeds),
                manifest=manifest,
            ),
        )
    return factory


@pytest.fixture
def failing_transcoder():
    """Factory: FakeTranscoder that fails for outputs containing any token."""
    def factory(*tokens):
        return FakeTranscoder(fail_on=tokens)
    return factory
