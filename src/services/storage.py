"""Filesystem blob store for tenant documents.

Objects are addressed by a relative path such as '12/1718000000000_lease.pdf'
and served by the API under the configured URL prefix.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_name(file_name: str) -> str:
    """Strip directories and unusual characters from an uploaded file name."""
    name = Path(file_name or "").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "document"


class LocalBlobStore:
    """Blob store backed by a local directory."""

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path escapes storage root: {path}")
        return target

    def put(self, path: str, content: bytes) -> None:
        """Write an object. Raises OSError on failure."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.debug("storage.put: path=%s bytes=%d", path, len(content))

    def remove(self, path: str) -> None:
        """Delete an object; missing objects are ignored."""
        self._resolve(path).unlink(missing_ok=True)
        logger.debug("storage.remove: path=%s", path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"


__all__ = ["LocalBlobStore", "safe_file_name"]
