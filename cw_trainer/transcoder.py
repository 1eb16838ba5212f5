"""WAV → MP3 transcoding through an ffmpeg subprocess."""

import asyncio
import logging
import os
import shutil
from abc import ABC, abstractmethod

from cw_trainer.constants import TRANSCODE_TIMEOUT_SECONDS
from cw_trainer.errors import TranscodeError

logger = logging.getLogger(__name__)


def ffmpeg_available(ffmpeg: str = "ffmpeg") -> bool:
    return shutil.which(ffmpeg) is not None


class Transcoder(ABC):
    """Converts an uncompressed audio file into a compressed one."""

    @abstractmethod
    async def transcode(self, input_path: str, output_path: str, bitrate: str) -> None:
        """Write output_path from input_path. Raises TranscodeError on failure."""


class FfmpegTranscoder(Transcoder):
    """Runs `ffmpeg ... -codec:a libmp3lame` per file, with a timeout."""

    def __init__(self, timeout: float = TRANSCODE_TIMEOUT_SECONDS, ffmpeg: str = "ffmpeg") -> None:
        self.timeout = timeout
        self.ffmpeg = ffmpeg

    def command(self, input_path: str, output_path: str, bitrate: str) -> list[str]:
        return [
            self.ffmpeg,
            "-hide_banner",
            "-loglevel", "error",
            "-y",
            "-i", input_path,
            "-codec:a", "libmp3lame",
            "-b:a", bitrate,
            output_path,
        ]

    async def transcode(self, input_path: str, output_path: str, bitrate: str) -> None:
        command = self.command(input_path, output_path, bitrate)
        logger.debug("run_command %s", " ".join(command))
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise TranscodeError(f"ffmpeg not found: {self.ffmpeg}") from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            _remove_partial(output_path)
            raise TranscodeError(
                f"ffmpeg timed out after {self.timeout}s: {output_path}"
            ) from None

        stderr_text = (stderr or b"").decode(errors="replace")
        if proc.returncode != 0:
            _remove_partial(output_path)
            raise TranscodeError(
                f"ffmpeg exited with status {proc.returncode}: {output_path}",
                returncode=proc.returncode,
                stderr=stderr_text[-1000:],
            )
        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            _remove_partial(output_path)
            raise TranscodeError(f"ffmpeg produced no output: {output_path}", returncode=0)
        if stderr_text.strip():
            logger.warning("ffmpeg reported for %s: %s", output_path, stderr_text.strip()[-500:])


def _remove_partial(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)
