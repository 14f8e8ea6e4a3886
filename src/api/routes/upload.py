"""
Recording upload endpoint.

Accepts one submission batch as ``multipart/form-data``:

- ``audio_files`` — zero or more audio parts, saved under ``wavs/``
- ``metadata`` — transcript text, one ``filename|phrase|phrase`` line per take
- ``speaker_id`` — session label of the submitting speaker
- ``demographics`` — JSON ``{"gender", "ageGroup", "region"}``

Metadata and demographics are validated before anything is written.
File writes delegate to ``DatasetWriter``.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from src.core.config import get_settings
from src.core.exceptions import (
    InvalidDemographicsError,
    MetadataMissingError,
    UploadParseError,
    UploadTooLargeError,
)
from src.core.models import Demographics, UploadResponse
from src.services.dataset import DatasetWriter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


async def _read_text(value: UploadFile | str, field: str) -> str:
    """Return a form value as text, whether sent as a file part or a plain field."""
    if isinstance(value, str):
        return value
    raw = await value.read()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UploadParseError(f"Field '{field}' is not valid UTF-8 text") from exc


async def _parse_demographics(form: FormData) -> Demographics:
    value = form.get("demographics")
    if value is None:
        raise InvalidDemographicsError("Upload is missing the demographics field")
    raw = await _read_text(value, "demographics")
    try:
        return Demographics.model_validate_json(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidDemographicsError(f"Invalid demographics: {problems}") from exc


@router.post("/upload-recordings", response_model=UploadResponse)
async def upload_recordings(request: Request) -> UploadResponse:
    """Persist a batch of takes and append its metadata lines.

    Steps:
    1. Parse the multipart body (spooled temp files for audio parts).
    2. Validate metadata text, demographics, and audio part sizes.
    3. Write audio files and metadata lines via ``DatasetWriter``.
    4. Close the form, releasing every temporary upload file.

    Raises:
        UploadParseError: Malformed multipart body or unusable part.
        MetadataMissingError: No ``metadata`` part.
        InvalidDemographicsError: Missing or invalid ``demographics``.
        UploadTooLargeError: An audio part exceeds ``max_upload_file_size``.
        DatasetWriteError: Filesystem failure while writing.
    """
    settings = get_settings()
    try:
        form = await request.form(max_files=settings.max_upload_files)
    except (MultiPartException, StarletteHTTPException) as exc:
        detail = getattr(exc, "message", None) or getattr(exc, "detail", None) or str(exc)
        raise UploadParseError(f"Malformed multipart body: {detail}") from exc

    try:
        audio_parts = form.getlist("audio_files")
        if not all(isinstance(p, UploadFile) for p in audio_parts):
            raise UploadParseError("Every audio_files part must be a file with a filename")
        speaker_id = form.get("speaker_id")
        speaker_id = speaker_id if isinstance(speaker_id, str) else ""

        metadata_part = form.get("metadata")
        if metadata_part is None:
            raise MetadataMissingError()
        metadata_text = await _read_text(metadata_part, "metadata")
        demographics = await _parse_demographics(form)

        for part in audio_parts:
            if part.size is not None and part.size > settings.max_upload_file_size:
                raise UploadTooLargeError(part.filename or "<unnamed>", settings.max_upload_file_size)

        writer = DatasetWriter.from_settings(settings)
        result = await asyncio.to_thread(
            writer.ingest,
            [(part.filename, part.file) for part in audio_parts],
            metadata_text,
            demographics,
        )
    finally:
        await form.close()

    logger.info(
        "Stored batch from %s: %d audio file(s), %d metadata line(s)",
        speaker_id or "<unknown speaker>",
        result.files_saved,
        result.lines_written,
    )
    return UploadResponse(
        speaker_id=speaker_id,
        files_saved=result.files_saved,
        lines_written=result.lines_written,
    )
