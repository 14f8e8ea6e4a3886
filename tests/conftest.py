"""Shared pytest fixtures for the SpeechCollect test suite.

Provides settings redirected to a temporary dataset directory, sample
audio payloads, and a default demographics record.
"""

import io
import math
import struct
import wave

import pytest

from src.core.config import get_settings
from src.core.models import Demographics

# ---------------------------------------------------------------------------
# Settings Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Point every filesystem setting at ``tmp_path`` and rebuild the cached Settings.

    Returns:
        Settings: The freshly loaded configuration.
    """
    public = tmp_path / "public"
    public.mkdir()
    (public / "phrases.txt").write_text("Hello world\n\nGood morning\n  \nHow are you\n")
    (public / "regions.txt").write_text("North\nSouth\n")

    monkeypatch.setenv("DATASET_DIR", str(public / "dataset"))
    monkeypatch.setenv("PHRASES_FILE", str(public / "phrases.txt"))
    monkeypatch.setenv("REGIONS_FILE", str(public / "regions.txt"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Demographics Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def demographics():
    return Demographics(gender="male", ageGroup="18-30", region="X")


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


def _wav_bytes(pcm: bytes) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(pcm)
    return buf.getvalue()


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The 440Hz tone wrapped in a WAV container, as a browser take would arrive.

    Returns:
        bytes: Complete WAV file contents.
    """
    return _wav_bytes(sample_pcm_bytes)


@pytest.fixture
def silent_wav_bytes():
    """One second of silence as WAV file contents."""
    return _wav_bytes(b"\x00\x00" * 16000)
