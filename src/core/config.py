"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SpeechCollect settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        dataset_dir: Root of the collected dataset (holds ``wavs/`` and the metadata file).
        phrases_file: Text file with one prompt phrase per line.
        regions_file: Text file with one selectable region per line.
        audio_extensions: Extensions stripped from uploaded metadata text.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Dataset layout ---
    # Paths are relative to the working directory; absolute paths also supported
    dataset_dir: str = "public/dataset"
    wavs_subdir: str = "wavs"
    metadata_filename: str = "metadata.txt"  # Cumulative, append-only

    # --- Static assets ---
    phrases_file: str = "public/phrases.txt"
    regions_file: str = "public/regions.txt"
    shuffle_phrases: bool = False  # Shuffle the phrase order once per client session

    # --- Upload limits ---
    audio_extensions: list[str] = [".wav"]
    max_upload_file_size: int = 50 * 1024 * 1024  # Per audio part, in bytes
    max_upload_files: int = 1000

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- Client ---
    api_base_url: str = "http://localhost:8000"  # Backend URL used by the Streamlit UI


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
