"""File extension to content type mapping."""

from __future__ import annotations

MIME_TYPES: dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "txt": "text/plain",
    "csv": "text/csv",
    "xml": "application/xml",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "ogg": "video/ogg",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "pdf": "application/pdf",
    "zip": "application/zip",
}

DEFAULT_CONTENT_TYPE = MIME_TYPES["html"]


def content_type_for(extension: str) -> str | None:
    """Return the content type for an extension, or None if unsupported."""
    return MIME_TYPES.get(extension)


def validate_content_type(extension: str) -> bool:
    """True if files with this extension can be served."""
    return extension in MIME_TYPES