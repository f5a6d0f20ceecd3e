"""Validates parsed provider JSON and builds AIMetadata."""

from typing import Any

from app.logging.logger import Log
from app.metadata.categories import DEFAULT_CATEGORY, is_valid_category
from app.metadata.exceptions import MetadataValidationError
from app.metadata.models import AIMetadata

MAX_TAGS = 20


def validate_and_build(data: dict[str, Any]) -> AIMetadata:
    """Validate raw parsed JSON and build AIMetadata.

    'title' and 'description' are required non-empty strings. Tags are
    normalized; a category outside the closed list becomes 'other'.

    Raises:
        MetadataValidationError: on missing or malformed required fields.
    """
    title = _require_text(data, "title")
    description = _require_text(data, "description")
    return AIMetadata(
        title=title,
        description=description,
        tags=normalize_tags(data.get("tags")),
        category=_build_category(data.get("category")),
    )


def normalize_tags(raw: Any) -> list[str]:
    """Lowercased, trimmed, de-duplicated string tags; anything else is dropped."""
    if not isinstance(raw, list):
        return []
    tags: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        tag = item.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags[:MAX_TAGS]


def _require_text(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise MetadataValidationError(f"Missing required field in JSON: {field}")
    return value.strip()


def _build_category(raw: Any) -> str:
    if not isinstance(raw, str):
        return DEFAULT_CATEGORY
    category = raw.strip().lower()
    if is_valid_category(category):
        return category
    Log.warning(f"AI returned unknown category {raw!r}, using '{DEFAULT_CATEGORY}'")
    return DEFAULT_CATEGORY
