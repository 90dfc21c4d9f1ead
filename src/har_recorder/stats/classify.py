"""Resource-type classification from response MIME types."""

from __future__ import annotations

from typing import Any

# Ordered (substring, category) rules - first match wins
RESOURCE_TYPE_RULES: tuple[tuple[str, str], ...] = (
    ("text/html", "html"),
    ("text/css", "css"),
    ("javascript", "js"),
    ("image", "image"),
    ("font", "font"),
    ("video", "video"),
    ("audio", "audio"),
)

RESOURCE_TYPES: tuple[str, ...] = tuple(category for _, category in RESOURCE_TYPE_RULES) + ("other",)


def resource_type(mime_type: Any) -> str:
    """Classify a MIME type into a coarse resource category.

    Args:
        mime_type: Value of response.content.mimeType (may be None)

    Returns:
        One of html, css, js, image, font, video, audio, other

    Example:
        >>> resource_type("application/javascript; charset=utf-8")
        'js'
        >>> resource_type(None)
        'other'
    """
    if not mime_type or not isinstance(mime_type, str):
        return "other"
    for needle, category in RESOURCE_TYPE_RULES:
        if needle in mime_type:
            return category
    return "other"
