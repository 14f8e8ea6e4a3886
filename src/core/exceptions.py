"""
SpeechCollect exception hierarchy.

All application-specific exceptions inherit from SpeechCollectError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class SpeechCollectError(Exception):
    """Base exception for all SpeechCollect errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SPEECHCOLLECT_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class UploadParseError(SpeechCollectError):
    """Raised when the multipart body cannot be parsed or a part is unusable."""

    def __init__(self, detail: str = "Malformed upload") -> None:
        super().__init__(
            detail=detail,
            code="UPLOAD_PARSE_ERROR",
            status_code=400,
        )


class MetadataMissingError(SpeechCollectError):
    """Raised when an upload carries no ``metadata`` part."""

    def __init__(self) -> None:
        super().__init__(
            detail="Upload is missing the metadata part",
            code="METADATA_MISSING",
            status_code=400,
        )


class InvalidDemographicsError(SpeechCollectError):
    """Raised when the ``demographics`` field is absent or not a valid record."""

    def __init__(self, detail: str = "Invalid demographics") -> None:
        super().__init__(
            detail=detail,
            code="INVALID_DEMOGRAPHICS",
            status_code=400,
        )


class UploadTooLargeError(SpeechCollectError):
    """Raised when an audio part exceeds the configured size limit."""

    def __init__(self, filename: str, limit: int) -> None:
        super().__init__(
            detail=f"Audio file {filename} exceeds the {limit} byte limit",
            code="UPLOAD_TOO_LARGE",
            status_code=413,
        )


class DatasetWriteError(SpeechCollectError):
    """Raised when audio or metadata cannot be written to the dataset directory."""

    def __init__(self, detail: str = "Failed to write dataset files") -> None:
        super().__init__(
            detail=detail,
            code="DATASET_WRITE_ERROR",
            status_code=500,
        )


class AssetReadError(SpeechCollectError):
    """Raised when a phrase or region list cannot be read."""

    def __init__(self, path: str) -> None:
        super().__init__(
            detail=f"Failed to read asset file: {path}",
            code="ASSET_READ_ERROR",
            status_code=500,
        )


class RecordingStateError(SpeechCollectError):
    """Raised on an invalid take transition (e.g. stop without start)."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            detail=detail,
            code="RECORDING_STATE_ERROR",
            status_code=409,
        )
