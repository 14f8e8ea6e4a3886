"""Audio processing utilities for recorded takes.

Decodes take bytes with soundfile and derives the waveform envelope,
duration, and silence flag shown next to each phrase.
"""

import io

import numpy as np
import soundfile as sf


class AudioProcessor:
    """Decodes and analyses a single recorded take.

    Takes arrive as complete encoded files (WAV from the browser recorder),
    so all methods accept raw file bytes rather than headerless PCM.
    """

    def __init__(self, envelope_points: int = 200, silence_threshold: float = 0.01) -> None:
        """Initialize the audio processor.

        Args:
            envelope_points: Number of bins in the waveform envelope.
            silence_threshold: RMS energy below this value is considered silence.
        """
        self.envelope_points = envelope_points
        self.silence_threshold = silence_threshold

    def decode(self, audio_bytes: bytes) -> tuple[np.ndarray, int]:
        """Decode encoded audio bytes to a mono float32 array.

        Args:
            audio_bytes: Complete audio file contents.

        Returns:
            Tuple of (samples in [-1.0, 1.0], sample rate in Hz).

        Raises:
            ValueError: If the bytes are empty or not a readable audio file.
        """
        if not audio_bytes:
            raise ValueError("Cannot decode empty audio data")
        try:
            data, sample_rate = sf.read(io.BytesIO(audio_bytes), dtype="float32")
        except RuntimeError as exc:  # soundfile.LibsndfileError subclasses RuntimeError
            raise ValueError(f"Unreadable audio data: {exc}") from exc

        # Convert to mono if stereo
        if data.ndim > 1:
            data = data.mean(axis=1)
        return data.astype(np.float32), int(sample_rate)

    def duration(self, audio_bytes: bytes) -> float:
        """Return the take length in seconds."""
        data, sample_rate = self.decode(audio_bytes)
        return len(data) / sample_rate if sample_rate else 0.0

    def waveform_envelope(self, audio: np.ndarray) -> np.ndarray:
        """Reduce samples to ``envelope_points`` peak amplitudes for plotting."""
        if len(audio) == 0:
            return np.zeros(0, dtype=np.float32)
        bins = min(self.envelope_points, len(audio))
        chunks = np.array_split(np.abs(audio), bins)
        return np.array([chunk.max() for chunk in chunks], dtype=np.float32)

    def is_silent(self, audio: np.ndarray) -> bool:
        """Check if a take is silence based on RMS energy."""
        if len(audio) == 0:
            return True
        # RMS (Root Mean Square) measures signal energy — low RMS = silence
        rms = np.sqrt(np.mean(audio**2))
        return float(rms) < self.silence_threshold
