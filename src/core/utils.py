"""Shared utility functions for SpeechCollect."""

import random
import re
from collections.abc import Iterable
from pathlib import Path


def strip_audio_extensions(text: str, extensions: Iterable[str]) -> str:
    """Remove every occurrence of the given file extensions from ``text``."""
    exts = [e for e in extensions if e]
    if not exts:
        return text
    pattern = "|".join(re.escape(e) for e in exts)
    return re.sub(pattern, "", text)


def generate_speaker_id(rng: random.Random | None = None) -> str:
    """Return a random session label such as ``speaker4821``."""
    rng = rng or random
    return f"speaker{rng.randrange(10000)}"


def safe_filename(name: str | None) -> str:
    """Reduce an uploaded filename to its base name.

    Raises:
        ValueError: If nothing usable remains (empty, ``.`` or ``..``).
    """
    base = Path((name or "").replace("\\", "/")).name
    if base in ("", ".", ".."):
        raise ValueError(f"Unusable filename: {name!r}")
    return base
