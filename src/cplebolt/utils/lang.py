"""
Language detection utility: decides whether a file is a CPLE source.
"""
from pathlib import Path
from enum import Enum


class Language(str, Enum):
    CPLE = "cple"
    UNKNOWN = "unknown"


_EXT_MAP = {
    ".cple": Language.CPLE,
}

SUPPORTED_EXTENSIONS = set(_EXT_MAP.keys())


def detect_language(file_path: str) -> Language:
    """Detect language from file extension (case-insensitive)."""
    ext = Path(file_path).suffix.lower()
    return _EXT_MAP.get(ext, Language.UNKNOWN)


def is_supported(file_path: str) -> bool:
    """Return True if the file is a CPLE source."""
    return detect_language(file_path) == Language.CPLE
