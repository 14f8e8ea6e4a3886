"""
Dataset writer for uploaded recording batches.

Owns the on-disk layout produced by the ingestion endpoint::

    <dataset_dir>/
        wavs/<speaker>_<index>.wav
        metadata.txt            # filename|phrase|phrase|gender|ageGroup|region

``metadata.txt`` is only ever appended to. All methods are blocking; the
API layer runs them through ``asyncio.to_thread()``.
"""

import logging
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from src.core.config import Settings
from src.core.exceptions import DatasetWriteError, UploadParseError
from src.core.models import Demographics
from src.core.utils import safe_filename, strip_audio_extensions

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Outcome of writing one submission batch."""

    files_saved: int = 0
    lines_written: int = 0


class DatasetWriter:
    """Writes audio takes and metadata lines under a dataset directory.

    Args:
        dataset_dir: Root directory of the dataset.
        wavs_subdir: Subdirectory holding one audio file per take.
        metadata_filename: Name of the cumulative metadata file.
        audio_extensions: Extensions stripped from the uploaded metadata text.
    """

    def __init__(
        self,
        dataset_dir: str | Path,
        wavs_subdir: str = "wavs",
        metadata_filename: str = "metadata.txt",
        audio_extensions: Iterable[str] = (".wav",),
    ) -> None:
        self._dataset_dir = Path(dataset_dir)
        self._wavs_dir = self._dataset_dir / wavs_subdir
        self._metadata_path = self._dataset_dir / metadata_filename
        self._audio_extensions = tuple(audio_extensions)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatasetWriter":
        return cls(
            dataset_dir=settings.dataset_dir,
            wavs_subdir=settings.wavs_subdir,
            metadata_filename=settings.metadata_filename,
            audio_extensions=settings.audio_extensions,
        )

    @property
    def wavs_dir(self) -> Path:
        return self._wavs_dir

    @property
    def metadata_path(self) -> Path:
        return self._metadata_path

    def ensure_layout(self) -> None:
        """Create the dataset and wavs directories if missing."""
        self._wavs_dir.mkdir(parents=True, exist_ok=True)

    def _target(self, filename: str | None) -> Path:
        try:
            return self._wavs_dir / safe_filename(filename)
        except ValueError as exc:
            raise UploadParseError(str(exc)) from exc

    def save_audio(self, filename: str | None, source: BinaryIO) -> Path:
        """Copy an uploaded audio stream verbatim into ``wavs/``.

        Only the base name of ``filename`` is used, so a client cannot
        write outside the wavs directory.

        Returns:
            Path of the written file.

        Raises:
            UploadParseError: If the filename is empty or unusable.
        """
        target = self._target(filename)
        source.seek(0)
        with target.open("wb") as out:
            shutil.copyfileobj(source, out)
        return target

    def build_metadata_lines(self, content: str, demographics: Demographics) -> list[str]:
        """Strip audio extensions and append demographics to every non-blank line."""
        content = strip_audio_extensions(content, self._audio_extensions)
        suffix = demographics.as_suffix()
        return [
            line.rstrip("\r") + suffix
            for line in content.split("\n")
            if line.strip()
        ]

    def append_metadata(self, lines: Sequence[str]) -> int:
        """Append lines to the metadata file. Returns the number written."""
        if not lines:
            return 0
        with self._metadata_path.open("a", encoding="utf-8") as fh:
            fh.write("\n".join(lines) + "\n")
        return len(lines)

    def ingest(
        self,
        audio_parts: Sequence[tuple[str | None, BinaryIO]],
        metadata_text: str,
        demographics: Demographics,
    ) -> IngestResult:
        """Persist one submission batch.

        Metadata lines and audio filenames are checked before anything
        touches the disk. Audio files already written are left in place if a later write fails.

        Raises:
            UploadParseError: If an audio part has an unusable filename, or two
                parts resolve to the same file.
            DatasetWriteError: On any filesystem failure.
        """
        lines = self.build_metadata_lines(metadata_text, demographics)
        targets: set[Path] = set()
        for filename, _ in audio_parts:
            target = self._target(filename)
            if target in targets:
                raise UploadParseError(f"Duplicate audio filename in batch: {target.name}")
            targets.add(target)
        result = IngestResult()
        try:
            self.ensure_layout()
            for filename, source in audio_parts:
                self.save_audio(filename, source)
                result.files_saved += 1
            result.lines_written = self.append_metadata(lines)
        except OSError as exc:
            logger.error(
                "Dataset write failed in %s after %d file(s): %s",
                self._dataset_dir,
                result.files_saved,
                exc,
            )
            raise DatasetWriteError(f"Failed to write dataset files: {exc.strerror or exc}") from exc
        return result
