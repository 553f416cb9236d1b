from __future__ import annotations

import re

__all__ = [
    "ALLOWED_EXTENSIONS",
    "ALLOWED_MEDIA_TYPES",
    "sanitize_filename",
    "extension",
    "is_audio_filename",
    "normalize_media_type",
    "media_type_for",
]

ALLOWED_EXTENSIONS = frozenset({"mp3", "wav", "flac", "ogg", "m4a", "aac"})

# Declared upload types, including the vendor aliases browsers actually send.
ALLOWED_MEDIA_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/wave",
        "audio/x-wav",
        "audio/vnd.wave",
        "audio/flac",
        "audio/x-flac",
        "audio/ogg",
        "audio/mp4",
        "audio/m4a",
        "audio/x-m4a",
        "audio/aac",
        "audio/x-aac",
    }
)

_MEDIA_TYPE_BY_EXTENSION = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "flac": "audio/flac",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
}

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9.-]")
_REPEATED_UNDERSCORE_RE = re.compile(r"_{2,}")


def sanitize_filename(filename: str) -> str:
    """Map an arbitrary client filename onto the managed character set.

    Rules:
    - Every character outside [A-Za-z0-9.-] becomes "_".
    - Runs of "_" collapse to one.
    - Leading and trailing "_" are trimmed.

    Path separators are replaced like any other character, so the result
    never names a subdirectory. It can still be "." or "..", which callers
    reject through their containment check.
    """
    name = _UNSAFE_CHARS_RE.sub("_", filename or "")
    name = _REPEATED_UNDERSCORE_RE.sub("_", name)
    return name.strip("_")


def extension(filename: str) -> str:
    """Return the lowercased text after the last dot, or "" when there is none."""
    _, dot, ext = (filename or "").rpartition(".")
    return ext.lower() if dot else ""


def is_audio_filename(filename: str) -> bool:
    return extension(filename) in ALLOWED_EXTENSIONS


def normalize_media_type(content_type: str | None) -> str:
    """Drop parameters (";codecs=...") and case from a declared media type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def media_type_for(filename: str) -> str:
    """Media type to serve a stored clip with; mp3 is the fallback."""
    return _MEDIA_TYPE_BY_EXTENSION.get(extension(filename), "audio/mpeg")
