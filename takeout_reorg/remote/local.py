"""RemoteFileSystem over a local directory (e.g. a mounted share)."""
from __future__ import annotations

import os
import shutil
from pathlib import Path

from ..core.errors import RemoteError, RemoteExistsError, RemoteNotFoundError
from ..core.models import DirectoryEntry


class LocalFileSystem:
    """Serves share-relative paths from ``root``.

    Mirrors smbclient semantics: ``move`` refuses to overwrite, ``upload``
    replaces an existing file.
    """

    def __init__(self, root: Path):
        """Initialize with the directory standing in for the share root.

        Args:
            root: Existing directory.
        """
        root = Path(root).expanduser().resolve()
        if not root.is_dir():
            raise RemoteNotFoundError(f"Local root does not exist: {root}")
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a share-relative path onto the local root."""
        relative = path.replace("\\", "/").strip("/")
        resolved = (self._root / relative).resolve() if relative else self._root
        if resolved != self._root and self._root not in resolved.parents:
            raise RemoteError(f"Path escapes the share root: {path}")
        return resolved

    def list_dir(self, path: str) -> list[DirectoryEntry]:
        directory = self.resolve(path)
        if not directory.is_dir():
            raise RemoteNotFoundError(f"No such directory: {path}")
        return [
            DirectoryEntry(name=child.name, is_directory=child.is_dir())
            for child in sorted(directory.iterdir(), key=lambda p: p.name)
        ]

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def make_dir(self, path: str) -> None:
        directory = self.resolve(path)
        try:
            directory.mkdir()
        except FileExistsError as e:
            raise RemoteExistsError(f"Already exists: {path}") from e
        except FileNotFoundError as e:
            raise RemoteNotFoundError(f"Parent does not exist: {path}") from e
        except OSError as e:
            raise RemoteError(f"Cannot create {path}: {e}") from e

    def move(self, source: str, target: str) -> None:
        src = self.resolve(source)
        dst = self.resolve(target)
        if not src.exists():
            raise RemoteNotFoundError(f"No such file: {source}")
        if dst.exists():
            raise RemoteExistsError(f"Target already exists: {target}")
        try:
            os.rename(src, dst)
        except FileNotFoundError as e:
            raise RemoteNotFoundError(f"Cannot move {source} -> {target}: {e}") from e
        except OSError as e:
            raise RemoteError(f"Cannot move {source} -> {target}: {e}") from e

    def fetch(self, remote_path: str, local_path: Path) -> None:
        src = self.resolve(remote_path)
        if not src.is_file():
            raise RemoteNotFoundError(f"No such file: {remote_path}")
        try:
            shutil.copy2(src, local_path)
        except OSError as e:
            raise RemoteError(f"Cannot fetch {remote_path}: {e}") from e

    def upload(self, local_path: Path, remote_path: str) -> None:
        dst = self.resolve(remote_path)
        if not dst.parent.is_dir():
            raise RemoteNotFoundError(f"Parent does not exist: {remote_path}")
        try:
            shutil.copy2(local_path, dst)
        except OSError as e:
            raise RemoteError(f"Cannot upload to {remote_path}: {e}") from e
