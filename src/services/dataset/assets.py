"""Loaders for the static phrase and region lists (one entry per line)."""

import logging
from pathlib import Path

from src.core.exceptions import AssetReadError

logger = logging.getLogger(__name__)


def load_lines(path: str | Path) -> list[str]:
    """Read a text asset and return its non-blank lines, stripped.

    Raises:
        AssetReadError: If the file is missing or unreadable.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read asset %s: %s", path, exc)
        raise AssetReadError(str(path)) from exc
    return [line.strip() for line in text.splitlines() if line.strip()]
