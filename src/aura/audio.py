"""Audio container helpers.

Gemini speech synthesis returns raw 16-bit little-endian mono PCM at 24 kHz.
Players need a container, so the CLI and TUI wrap it in a WAV header.
"""

import wave
from pathlib import Path

TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1
TTS_SAMPLE_WIDTH = 2


def write_wav(
    path: str | Path,
    pcm: bytes,
    sample_rate: int = TTS_SAMPLE_RATE,
    channels: int = TTS_CHANNELS,
    sample_width: int = TTS_SAMPLE_WIDTH,
) -> Path:
    """Write raw PCM frames to a WAV file and return its path."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(out_path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return out_path
