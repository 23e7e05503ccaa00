"""
Static file lookup for the RSVP page.

Maps a URL path onto a file under the static root and picks the content
type from a fixed table (unknown extensions are served as binary). No
directory listings: anything that is not a readable regular file inside
the root counts as not found.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

INDEX_PAGE = "index.html"

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".mp4": "video/mp4",
}


@dataclass(frozen=True)
class StaticFile:
    path: Path
    content: bytes
    content_type: str


def content_type_for(path: str | Path) -> str:
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_path(root: Path, url_path: str) -> Path:
    """URL path -> filesystem path under root. "/" maps to the index page."""
    relative = url_path.lstrip("/") or INDEX_PAGE
    return root / relative


def read_static(root: str | Path, url_path: str) -> StaticFile | None:
    """Load the file behind url_path, or None when it cannot be served."""
    root = Path(root).resolve()
    path = resolve_path(root, url_path).resolve()

    if not path.is_relative_to(root):
        logger.warning("Refusing path outside static root: %s", url_path)
        return None

    try:
        content = path.read_bytes()
    except OSError:
        # missing file, directory, or no permission
        return None

    return StaticFile(path=path, content=content, content_type=content_type_for(path))
