"""Remote filesystem adapters."""
from __future__ import annotations

import posixpath

from ..core.errors import RemoteExistsError
from ..core.protocols import RemoteFileSystem
from .listing import parse_listing
from .local import LocalFileSystem
from .smbclient import SmbClientFileSystem


def join(*parts: str) -> str:
    """Join share-relative path parts with forward slashes."""
    kept = [p.strip("/") for p in parts if p and p.strip("/")]
    return posixpath.join(*kept) if kept else ""


def ensure_directory(fs: RemoteFileSystem, path: str) -> bool:
    """Create ``path`` unless it exists. Returns True if it was created."""
    try:
        fs.make_dir(path)
    except RemoteExistsError:
        return False
    return True


__all__ = [
    "LocalFileSystem",
    "SmbClientFileSystem",
    "parse_listing",
    "join",
    "ensure_directory",
]
