"""Client-side recording sequencer.

Walks a speaker through the phrase list and tracks one take per phrase.
Each phrase moves through ``unrecorded -> recording -> recorded``;
``redo`` sends it back to ``unrecorded``. Navigation never touches takes.

Usage::

    seq = RecordingSequencer(phrases)
    seq.start_recording()
    seq.stop_recording(wav_bytes)
    seq.next_phrase()
    submission = seq.build_submission(demographics)
    # ... upload succeeded
    seq.reset_after_submit()
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.core.exceptions import RecordingStateError
from src.core.models import Demographics, TakeStatus
from src.core.utils import generate_speaker_id

logger = logging.getLogger(__name__)


@dataclass
class Take:
    """One recorded clip for a single phrase."""

    index: int
    audio: bytes
    mime_type: str = "audio/wav"


@dataclass
class Submission:
    """Everything sent to the ingestion endpoint for one batch."""

    speaker_id: str
    demographics: Demographics
    files: list[tuple[str, bytes]] = field(default_factory=list)
    metadata: str = ""

    @property
    def line_count(self) -> int:
        return len(self.metadata.splitlines()) if self.metadata else 0


class RecordingSequencer:
    """Tracks phrase navigation and per-phrase takes for one speaker session.

    Args:
        phrases: Prompt phrases, in presentation order.
        speaker_id: Session label; generated when omitted.
        shuffle: Shuffle the phrase order once at construction.
        rng: Random source for shuffling and speaker ids (tests pass a seeded one).
    """

    def __init__(
        self,
        phrases: Sequence[str],
        speaker_id: str | None = None,
        shuffle: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        ordered = list(phrases)
        if shuffle:
            self._rng.shuffle(ordered)
        self._phrases: tuple[str, ...] = tuple(ordered)
        self._takes: list[Take | None] = [None] * len(self._phrases)
        self._current_index = 0
        self._recording_index: int | None = None
        self.speaker_id = speaker_id or generate_speaker_id(self._rng)

    # -- phrases / navigation --

    @property
    def phrases(self) -> tuple[str, ...]:
        return self._phrases

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_phrase(self) -> str | None:
        if not self._phrases:
            return None
        return self._phrases[self._current_index]

    @property
    def progress(self) -> str:
        return f"{self._current_index + 1}/{len(self._phrases)}"

    def next_phrase(self) -> int:
        if self._current_index < len(self._phrases) - 1:
            self._current_index += 1
        return self._current_index

    def previous_phrase(self) -> int:
        if self._current_index > 0:
            self._current_index -= 1
        return self._current_index

    def go_to(self, index: int) -> int:
        """Jump to ``index``, clamped to the phrase list bounds."""
        last = max(len(self._phrases) - 1, 0)
        self._current_index = min(max(index, 0), last)
        return self._current_index

    # -- takes --

    @property
    def is_recording(self) -> bool:
        return self._recording_index is not None

    @property
    def recorded_count(self) -> int:
        return sum(1 for t in self._takes if t is not None)

    @property
    def has_takes(self) -> bool:
        return any(t is not None for t in self._takes)

    def _resolve(self, index: int | None) -> int:
        idx = self._current_index if index is None else index
        if not 0 <= idx < len(self._phrases):
            raise IndexError(f"Phrase index out of range: {idx}")
        return idx

    def status(self, index: int | None = None) -> TakeStatus:
        idx = self._resolve(index)
        if self._recording_index == idx:
            return TakeStatus.recording
        if self._takes[idx] is not None:
            return TakeStatus.recorded
        return TakeStatus.unrecorded

    def take(self, index: int | None = None) -> Take | None:
        return self._takes[self._resolve(index)]

    def start_recording(self) -> int:
        """Begin capturing a take for the current phrase.

        Raises:
            RecordingStateError: If a capture is already in progress.
        """
        if self._recording_index is not None:
            raise RecordingStateError("A take is already being recorded")
        idx = self._resolve(None)
        self._recording_index = idx
        return idx

    def stop_recording(self, audio: bytes, mime_type: str = "audio/wav") -> Take:
        """Finalize captured bytes into the take of the phrase being recorded.

        Raises:
            RecordingStateError: If nothing is being recorded, or ``audio`` is empty.
                An empty capture also ends the recording, leaving the phrase as before.
        """
        idx = self._recording_index
        if idx is None:
            raise RecordingStateError("No take is being recorded")
        self._recording_index = None
        if not audio:
            raise RecordingStateError("Recorded take is empty")
        take = Take(index=idx, audio=bytes(audio), mime_type=mime_type)
        self._takes[idx] = take
        return take

    def cancel_recording(self) -> None:
        """Abandon an in-progress capture without touching any take."""
        self._recording_index = None

    def redo(self, index: int | None = None) -> bool:
        """Discard the take of a phrase. Returns False if there was none."""
        idx = self._resolve(index)
        if self._takes[idx] is None:
            return False
        self._takes[idx] = None
        return True

    # -- submission --

    def filename_for(self, index: int) -> str:
        return f"{self.speaker_id}_{index}.wav"

    def can_submit(self, demographics: Demographics | None) -> bool:
        return demographics is not None and self.has_takes and not self.is_recording

    def build_submission(self, demographics: Demographics) -> Submission:
        """Package recorded takes and their transcript lines, in phrase order."""
        files: list[tuple[str, bytes]] = []
        lines: list[str] = []
        for idx, take in enumerate(self._takes):
            if take is None:
                continue
            name = self.filename_for(idx)
            phrase = self._phrases[idx]
            files.append((name, take.audio))
            lines.append(f"{name}|{phrase}|{phrase}")
        return Submission(
            speaker_id=self.speaker_id,
            demographics=demographics,
            files=files,
            metadata="\n".join(lines),
        )

    def reset_after_submit(self) -> str:
        """Clear all takes and start a fresh speaker session. Returns the new id."""
        self._takes = [None] * len(self._phrases)
        self._recording_index = None
        self._current_index = 0
        previous = self.speaker_id
        self.speaker_id = generate_speaker_id(self._rng)
        logger.info("Speaker session %s submitted; new session %s", previous, self.speaker_id)
        return self.speaker_id
