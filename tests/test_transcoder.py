"""Tests for the ffmpeg transcoder (subprocess mocked)."""

import asyncio
from unittest.mock import patch

import pytest

from cw_trainer.errors import ERROR_KIND_EXTERNAL_TOOL, TranscodeError
from cw_trainer.transcoder import FfmpegTranscoder, ffmpeg_available


class _FakeProcess:
    def __init__(self, returncode=0, stderr=b"", output_path=None, hang=False):
        self.returncode = None
        self._final_code = returncode
        self._stderr = stderr
        self._output_path = output_path
        self._hang = hang
        self.killed = False

    async def communicate(self):
        if self._hang:
            await asyncio.sleep(10)
        if self._output_path:
            with open(self._output_path, "wb") as f:
                f.write(b"ID3fake")
        self.returncode = self._final_code
        return b"", self._stderr

    def kill(self):
        self.killed = True
        self.returncode = -9

    async def wait(self):
        return self.returncode


def _patch_exec(proc, calls=None):
    async def fake_exec(*args, **kwargs):
        if calls is not None:
            calls.append(args)
        return proc
    return patch("cw_trainer.transcoder.asyncio.create_subprocess_exec", side_effect=fake_exec)


def test_command_line():
    cmd = FfmpegTranscoder().command("in.wav", "out.mp3", "160k")
    assert cmd[0] == "ffmpeg"
    assert cmd[cmd.index("-i") + 1] == "in.wav"
    assert cmd[cmd.index("-b:a") + 1] == "160k"
    assert cmd[cmd.index("-codec:a") + 1] == "libmp3lame"
    assert cmd[-1] == "out.mp3"
    assert "-y" in cmd


def test_transcode_success(tmp_path):
    out = tmp_path / "out.mp3"
    calls = []
    proc = _FakeProcess(output_path=str(out))
    with _patch_exec(proc, calls):
        asyncio.run(FfmpegTranscoder().transcode("in.wav", str(out), "160k"))
    assert out.exists()
    assert calls[0][-1] == str(out)


def test_transcode_nonzero_exit_raises_and_cleans(tmp_path):
    out = tmp_path / "out.mp3"
    proc = _FakeProcess(returncode=1, stderr=b"Invalid data", output_path=str(out))
    with _patch_exec(proc):
        with pytest.raises(TranscodeError) as excinfo:
            asyncio.run(FfmpegTranscoder().transcode("in.wav", str(out), "160k"))
    assert excinfo.value.returncode == 1
    assert "Invalid data" in excinfo.value.stderr
    assert excinfo.value.error_kind == ERROR_KIND_EXTERNAL_TOOL
    assert not out.exists()


def test_transcode_missing_output_raises(tmp_path):
    out = tmp_path / "out.mp3"
    proc = _FakeProcess(returncode=0)
    with _patch_exec(proc):
        with pytest.raises(TranscodeError, match="no output"):
            asyncio.run(FfmpegTranscoder().transcode("in.wav", str(out), "160k"))


def test_transcode_timeout_kills_process(tmp_path):
    out = tmp_path / "out.mp3"
    proc = _FakeProcess(hang=True)
    with _patch_exec(proc):
        with pytest.raises(TranscodeError, match="timed out"):
            asyncio.run(FfmpegTranscoder(timeout=0.01).transcode("in.wav", str(out), "160k"))
    assert proc.killed


def test_transcode_ffmpeg_missing(tmp_path):
    async def missing(*args, **kwargs):
        raise FileNotFoundError("ffmpeg")
    with patch("cw_trainer.transcoder.asyncio.create_subprocess_exec", side_effect=missing):
        with pytest.raises(TranscodeError, match="not found"):
            asyncio.run(FfmpegTranscoder().transcode("in.wav", str(tmp_path / "o.mp3"), "160k"))


@patch("cw_trainer.transcoder.shutil.which", return_value=None)
def test_ffmpeg_available_false(mock_which):
    assert ffmpeg_available() is False


@patch("cw_trainer.transcoder.shutil.which", return_value="/usr/bin/ffmpeg")
def test_ffmpeg_available_true(mock_which):
    assert ffmpeg_available() is True
