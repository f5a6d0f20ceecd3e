from pathlib import PurePosixPath

UPLOADS_PREFIX = "uploads"
THUMBNAILS_PREFIX = "thumbnails"


def thumbnail_key_for(source_key: str) -> str:
    """Derive the thumbnail key: uploads/u1/a.pdf -> thumbnails/u1/a.pdf.jpg"""
    parts = list(PurePosixPath(source_key.lstrip("/")).parts)
    if UPLOADS_PREFIX in parts:
        parts[parts.index(UPLOADS_PREFIX)] = THUMBNAILS_PREFIX
    else:
        parts.insert(0, THUMBNAILS_PREFIX)
    return "/".join(parts) + ".jpg"


def key_extension(key: str) -> str:
    """Lowercase extension of the key without the dot, or '' if there is none."""
    return PurePosixPath(key).suffix.lstrip(".").lower()
