"""SMB access through Samba's ``smbclient`` command line tool.

Every operation is a single ``smbclient -c '<command>'`` invocation. Listing
text is handed to :mod:`.listing`; NT status codes in the output are mapped
onto the RemoteError hierarchy.
"""
from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path

from ..core.config import ShareConfig
from ..core.errors import RemoteError, RemoteExistsError, RemoteNotFoundError
from ..core.models import DirectoryEntry
from .listing import entry_lines, parse_listing

logger = logging.getLogger(__name__)


NT_STATUS = re.compile(r"NT_STATUS_[A-Z_]+")

NOT_FOUND_STATUSES = frozenset({
    "NT_STATUS_NO_SUCH_FILE",
    "NT_STATUS_OBJECT_NAME_NOT_FOUND",
    "NT_STATUS_OBJECT_PATH_NOT_FOUND",
    "NT_STATUS_NOT_A_DIRECTORY",
})

EXISTS_STATUSES = frozenset({
    "NT_STATUS_OBJECT_NAME_COLLISION",
})


def quote(path: str) -> str:
    """Quote a path for an smbclient command."""
    if '"' in path:
        raise RemoteError(f"Path cannot be quoted for smbclient: {path}")
    return f'"{path}"'


def to_share_path(path: str) -> str:
    return path.replace("\\", "/").strip("/")


class SmbClientFileSystem:
    """RemoteFileSystem backed by the ``smbclient`` binary.

    Usage:
        fs = SmbClientFileSystem(ShareConfig.from_env("192.168.1.121", "Data"))
        for entry in fs.list_dir("Pictures/Takeout"):
            ...
    """

    def __init__(
        self,
        share: ShareConfig,
        timeout: float = 300.0,
        executable: str = "smbclient",
    ):
        """Initialize the client.

        Args:
            share: Server, share and credentials.
            timeout: Seconds allowed for one smbclient invocation.
            executable: smbclient binary name or path.
        """
        resolved = shutil.which(executable)
        if resolved is None:
            raise RemoteError(f"{executable} is not installed")
        self._share = share
        self._timeout = timeout
        self._executable = resolved

    def _base_command(self) -> list[str]:
        args = [
            self._executable,
            self._share.service,
            "-W", self._share.domain,
            "-U", self._share.username,
        ]
        if not self._share.password:
            args.append("-N")
        return args

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self._share.password:
            # Keeps the password off the process list
            env["PASSWD"] = self._share.password
        return env

    def run(self, command: str) -> str:
        """Run one smbclient command and return its output.

        Raises:
            RemoteNotFoundError: The path does not exist.
            RemoteExistsError: The target already exists.
            RemoteError: Anything else went wrong.
        """
        logger.debug("smbclient %s: %s", self._share.service, command)
        try:
            result = subprocess.run(
                [*self._base_command(), "-c", command],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env=self._env(),
            )
        except subprocess.TimeoutExpired as e:
            raise RemoteError(f"smbclient timed out after {self._timeout}s: {command}") from e
        except OSError as e:
            raise RemoteError(f"smbclient could not be started: {e}") from e

        output = result.stdout or ""
        combined = output + (result.stderr or "")
        match = NT_STATUS.search(combined)
        if match:
            status = match.group(0)
            if status in NOT_FOUND_STATUSES:
                raise RemoteNotFoundError(f"{status}: {command}")
            if status in EXISTS_STATUSES:
                raise RemoteExistsError(f"{status}: {command}")
            raise RemoteError(f"{status}: {command}")
        if result.returncode != 0:
            message = combined.strip() or f"exit status {result.returncode}"
            raise RemoteError(f"smbclient failed ({message}): {command}")
        return output

    # --- RemoteFileSystem ---

    def list_dir(self, path: str) -> list[DirectoryEntry]:
        path = to_share_path(path)
        pattern = f"{path}/*" if path else "*"
        return parse_listing(self.run(f"ls {quote(pattern)}"))

    def exists(self, path: str) -> bool:
        path = to_share_path(path)
        if not path:
            return True
        try:
            output = self.run(f"ls {quote(path)}")
        except RemoteNotFoundError:
            return False
        return bool(entry_lines(output))

    def make_dir(self, path: str) -> None:
        self.run(f"mkdir {quote(to_share_path(path))}")

    def move(self, source: str, target: str) -> None:
        self.run(f"rename {quote(to_share_path(source))} {quote(to_share_path(target))}")

    def fetch(self, remote_path: str, local_path: Path) -> None:
        self.run(f"get {quote(to_share_path(remote_path))} {quote(str(local_path))}")

    def upload(self, local_path: Path, remote_path: str) -> None:
        self.run(f"put {quote(str(local_path))} {quote(to_share_path(remote_path))}")
