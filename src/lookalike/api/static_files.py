"""Static front-end file resolution.

Any ``GET`` that is not an API route is answered from the static root
(``LookalikeConfig.static_dir``).  This module maps a URL path onto a file
inside that root and picks its content type; the route in
:mod:`lookalike.api.main` turns the exceptions below into 403 and 404
responses.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"

CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StaticFileForbidden(Exception):
    """The requested path resolves outside the static root."""


class StaticFileNotFound(Exception):
    """The requested path does not exist, is a directory or is hidden."""


def _is_hidden(parts: tuple[str, ...]) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in parts)


def resolve_static_file(root: Path, url_path: str) -> Path:
    """Resolve a URL path to a file inside ``root``.

    ``/`` maps to ``index.html``.  Symlinks and ``..`` segments are resolved
    before the containment check.  Dot-prefixed names (``.env``, ``.git/``)
    are never served; the root may also hold the settings ``.env`` file.

    Args:
        root: Static root directory.
        url_path: Decoded request path, e.g. ``/app.js``.

    Returns:
        Absolute path of an existing regular file under ``root``.

    Raises:
        StaticFileForbidden: If the path escapes ``root``.
        StaticFileNotFound: If the file is missing, is a directory or is
            hidden.
    """
    relative = url_path.lstrip("/") or INDEX_DOCUMENT
    base_resolved = root.resolve()

    try:
        full_path = (base_resolved / relative).resolve()
    except (ValueError, OSError) as e:
        raise StaticFileNotFound(url_path) from e

    # Security: Ensure path is within the static root (prevent path traversal)
    try:
        inside = full_path.relative_to(base_resolved)
    except ValueError:
        logger.warning(f"Path traversal attempt detected: {url_path}")
        raise StaticFileForbidden(url_path) from None

    if _is_hidden(Path(relative).parts) or _is_hidden(inside.parts):
        raise StaticFileNotFound(url_path)

    if not full_path.is_file():
        raise StaticFileNotFound(url_path)

    return full_path


def content_type_for(path: Path) -> str:
    """Return the response content type for a static file."""
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)
