"""
Pydantic v2 request / response models used across the API layer.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Takes
# ---------------------------------------------------------------------------


class TakeStatus(StrEnum):
    """Per-phrase capture state on the client."""

    unrecorded = "unrecorded"
    recording = "recording"
    recorded = "recorded"


# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------


class Demographics(BaseModel):
    """Speaker demographics attached to every line of a submission batch.

    Serialized on the wire with the ``ageGroup`` key; ``age_group`` is
    accepted as well when building the model in Python.
    """

    model_config = ConfigDict(populate_by_name=True)

    gender: str
    age_group: str = Field(alias="ageGroup")
    region: str

    @field_validator("gender", "age_group", "region")
    @classmethod
    def check_metadata_safe(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        # "|" and newlines would break the metadata line format
        if "|" in value or "\n" in value or "\r" in value:
            raise ValueError("must not contain '|' or line breaks")
        return value

    def as_suffix(self) -> str:
        """Return the ``|gender|ageGroup|region`` tail appended to metadata lines."""
        return f"|{self.gender}|{self.age_group}|{self.region}"


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


class UploadResponse(BaseModel):
    """POST /upload-recordings success body."""

    message: str = "Upload successful"
    speaker_id: str = ""
    files_saved: int = 0
    lines_written: int = 0


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


class TextListResponse(BaseModel):
    """Phrase or region list loaded from a one-entry-per-line text file."""

    items: list[str] = Field(default_factory=list)
    count: int = 0


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: datetime
