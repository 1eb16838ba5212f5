"""Morse encoder: text → CW tone samples with Farnsworth timing."""

import io
import logging
import re

import numpy as np
from pydub import AudioSegment

from cw_trainer.constants import (
    DIT_SECONDS_AT_1WPM,
    RAMP_MS,
    SAMPLE_RATE,
    TONE_HZ,
    TONE_VOLUME,
)

logger = logging.getLogger(__name__)

MORSE_CODE = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "0": "-----", "1": ".----", "2": "..---", "3": "...--", "4": "....-",
    "5": ".....", "6": "-....", "7": "--...", "8": "---..", "9": "----.",
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "'": ".----.", "!": "-.-.--",
    "/": "-..-.", "(": "-.--.", ")": "-.--.-", "&": ".-...", ":": "---...",
    ";": "-.-.-.", "=": "-...-", "+": ".-.-.", "-": "-....-", "_": "..--.-",
    '"': ".-..-.", "$": "...-..-", "@": ".--.-.",
}

# Prosign such as <BT>, or any single character
_TOKEN_RE = re.compile(r"<[A-Z0-9]+>|.")


def character_code(token: str) -> str | None:
    """Dot/dash code for a character or a <XX> prosign.

    Prosigns are the letters' codes run together without a character gap,
    so <BT> is "-...-" and <SK> is "...-.-". Returns None if unmappable.
    """
    token = token.upper()
    if len(token) > 2 and token.startswith("<") and token.endswith(">"):
        codes = [MORSE_CODE.get(ch) for ch in token[1:-1]]
        if None in codes:
            return None
        return "".join(codes)
    return MORSE_CODE.get(token)


def farnsworth_timing(wpm: int, farnsworth: int) -> tuple[float, float, float]:
    """Return (dit, character gap, word gap) in seconds.

    Elements are always sent at `wpm`. When farnsworth < wpm the gaps are
    stretched with the ARRL formula so the overall rate is `farnsworth`.
    """
    if wpm <= 0 or farnsworth <= 0:
        raise ValueError(f"Speeds must be positive, got {wpm}@{farnsworth}")
    dit = DIT_SECONDS_AT_1WPM / wpm
    if farnsworth >= wpm:
        return dit, 3 * dit, 7 * dit
    total_delay = (60 * wpm - 37.2 * farnsworth) / (wpm * farnsworth)
    return dit, 3 * total_delay / 19, 7 * total_delay / 19


class MorseEncoder:
    """Render text as a mono 16-bit sine-tone CW signal."""

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        tone_hz: float = TONE_HZ,
        volume: float = TONE_VOLUME,
    ) -> None:
        self.sample_rate = sample_rate
        self.tone_hz = tone_hz
        self.volume = volume

    def _samples(self, seconds: float) -> int:
        return int(round(seconds * self.sample_rate))

    def _tone(self, seconds: float) -> np.ndarray:
        n = self._samples(seconds)
        t = np.arange(n) / self.sample_rate
        wave = np.sin(2 * np.pi * self.tone_hz * t) * self.volume

        # Raised-cosine edges to avoid key clicks
        ramp_n = min(self._samples(RAMP_MS / 1000), n // 2)
        if ramp_n > 0:
            ramp = 0.5 * (1 - np.cos(np.pi * np.arange(ramp_n) / ramp_n))
            wave[:ramp_n] *= ramp
            wave[n - ramp_n:] *= ramp[::-1]
        return (wave * 32767).astype(np.int16)

    def _silence(self, seconds: float) -> np.ndarray:
        return np.zeros(self._samples(seconds), dtype=np.int16)

    def encode(self, text: str, wpm: int, farnsworth: int) -> np.ndarray:
        """Encode text into int16 samples.

        Words are split on whitespace, so leading/trailing spaces produce no
        silence. Unmappable characters are skipped.
        """
        dit, char_gap, word_gap = farnsworth_timing(wpm, farnsworth)
        elements = {
            ".": self._tone(dit),
            "-": self._tone(3 * dit),
        }
        element_gap = self._silence(dit)
        char_silence = self._silence(char_gap)
        word_silence = self._silence(word_gap)

        chunks = []
        for word in text.split():
            codes = []
            for token in _TOKEN_RE.findall(word.upper()):
                code = character_code(token)
                if code is None:
                    logger.debug("No Morse mapping for %r, skipping", token)
                    continue
                codes.append(code)
            if not codes:
                continue
            if chunks:
                chunks.append(word_silence)
            for c_idx, code in enumerate(codes):
                if c_idx:
                    chunks.append(char_silence)
                for e_idx, symbol in enumerate(code):
                    if e_idx:
                        chunks.append(element_gap)
                    chunks.append(elements[symbol])

        if not chunks:
            return np.zeros(0, dtype=np.int16)
        return np.concatenate(chunks)

    def serialize(self, samples: np.ndarray) -> bytes:
        """Wrap samples in a WAV container."""
        audio = AudioSegment(
            data=samples.astype(np.int16).tobytes(),
            sample_width=2,
            frame_rate=self.sample_rate,
            channels=1,
        )
        buf = io.BytesIO()
        audio.export(buf, format="wav")
        return buf.getvalue()
