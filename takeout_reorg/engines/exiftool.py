"""ExifTool wrapper for reading file types and rewriting capture dates."""
from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from ..core.errors import ExifToolNotFoundError, MetadataError, MetadataWriteError

logger = logging.getLogger(__name__)


READY_MARKER = "{ready}"
UPDATED = re.compile(r"(\d+) image files updated")
UNCHANGED = re.compile(r"(\d+) image files unchanged")

# Written by write_capture_time: DateTimeOriginal, CreateDate and ModifyDate
CAPTURE_TIME_TAG = "AllDates"


def is_available(executable: str = "exiftool") -> bool:
    """Check whether the exiftool binary is on PATH."""
    return shutil.which(executable) is not None


class ExifTool:
    """Persistent ExifTool process that handles requests via stdin/stdout.

    Uses exiftool's -stay_open mode so a batch of thousands of files costs
    one process spawn. Requests are answered in order; each response ends
    with a ``{ready}`` line. stderr is merged into stdout so warnings and
    errors arrive with the response they belong to.

    Usage:
        with ExifTool() as exiftool:
            ext = exiftool.file_type_extension(path)
            exiftool.write_capture_time(path, "2021:01:01 00:00:00")
    """

    def __init__(self, executable: str = "exiftool"):
        """Start the ExifTool daemon process.

        Raises:
            ExifToolNotFoundError: exiftool is not installed.
        """
        self._executable = executable
        self._process: Optional[subprocess.Popen] = None
        self._start()

    def _start(self) -> None:
        resolved = shutil.which(self._executable)
        if resolved is None:
            raise ExifToolNotFoundError(f"{self._executable} is not installed")
        try:
            self._process = subprocess.Popen(
                [resolved, "-stay_open", "True", "-@", "-"],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                bufsize=1,  # Line buffered
            )
        except OSError as e:
            raise ExifToolNotFoundError(f"Cannot start {self._executable}: {e}") from e
        logger.debug("exiftool daemon started (pid %s)", self._process.pid)

    @property
    def is_alive(self) -> bool:
        """Check if the daemon process is running."""
        return self._process is not None and self._process.poll() is None

    def execute(self, *args: str) -> str:
        """Send one request and return its output (without the ready marker)."""
        if not self.is_alive:
            raise MetadataError("exiftool daemon is not running")

        request = "\n".join(args) + "\n-execute\n"
        try:
            self._process.stdin.write(request)
            self._process.stdin.flush()
        except (BrokenPipeError, OSError) as e:
            raise MetadataError(f"exiftool daemon went away: {e}") from e

        output_lines = []
        while True:
            line = self._process.stdout.readline()
            if not line:
                raise MetadataError("exiftool daemon exited mid-request")
            if line.strip() == READY_MARKER:
                break
            output_lines.append(line.rstrip("\n"))
        return "\n".join(output_lines)

    # --- MetadataTool ---

    def file_type_extension(self, path: Path) -> Optional[str]:
        """Extension ExifTool derives from the file's signature bytes."""
        value = self.read_tag(path, "FileTypeExtension")
        return value.lower() if value else None

    def read_tag(self, path: Path, tag: str, date_format: Optional[str] = None) -> Optional[str]:
        """Read one tag as its short value, or None if absent.

        Args:
            path: File to read.
            tag: Tag name, e.g. ``DateTimeOriginal``.
            date_format: Optional strftime format applied to date tags.
        """
        args = ["-s3"]
        if date_format:
            args += ["-d", date_format]
        args += [f"-{tag}", str(path)]
        output = self.execute(*args).strip()
        if not output or output.startswith(("Error", "Warning")):
            return None
        return output.splitlines()[0].strip() or None

    def write_tags(self, path: Path, assignments: list[str]) -> None:
        """Apply exiftool assignments (``-Tag=value``, ``-Dst<Src``) in place.

        Raises:
            MetadataWriteError: No file was updated.
        """
        output = self.execute("-overwrite_original", "-m", *assignments, str(path))
        updated = UPDATED.search(output)
        unchanged = UNCHANGED.search(output)
        if (updated and int(updated.group(1)) > 0) or (unchanged and int(unchanged.group(1)) > 0):
            return
        raise MetadataWriteError(f"exiftool did not update {path.name}: {output.strip()}")

    def write_capture_time(self, path: Path, value: str) -> None:
        """Set every EXIF date tag to ``value`` (``YYYY:MM:DD HH:MM:SS``)."""
        self.write_tags(path, [f"-{CAPTURE_TIME_TAG}={value}"])

    def close(self) -> None:
        """Shutdown the daemon gracefully."""
        if self._process is None:
            return

        try:
            if self._process.poll() is None:
                try:
                    self._process.stdin.write("-stay_open\nFalse\n")
                    self._process.stdin.flush()
                    self._process.wait(timeout=2)
                except (BrokenPipeError, OSError, subprocess.TimeoutExpired):
                    pass
        finally:
            if self._process.poll() is None:
                self._process.kill()
                self._process.wait(timeout=1)
            self._process = None
            logger.debug("exiftool daemon stopped")

    def __enter__(self) -> "ExifTool":
        return self

    def __exit__(self, *args) -> None:
        self.close()
