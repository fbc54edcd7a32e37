"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Optional, Protocol

from .models import DirectoryEntry, ProcessingStats


class RemoteFileSystem(Protocol):
    """Structured access to the share holding the Takeout folders.

    Paths are POSIX-style and relative to the share root.

    Implementations:
    - SmbClientFileSystem: shells out to Samba's smbclient
    - LocalFileSystem: a locally mounted directory
    """

    @abstractmethod
    def list_dir(self, path: str) -> list[DirectoryEntry]:
        """List entries of a directory. Raises RemoteNotFoundError."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Whether the path can be listed."""
        ...

    @abstractmethod
    def make_dir(self, path: str) -> None:
        """Create one directory. Raises RemoteExistsError if present."""
        ...

    @abstractmethod
    def move(self, source: str, target: str) -> None:
        """Rename without overwriting. Raises RemoteError on failure."""
        ...

    @abstractmethod
    def fetch(self, remote_path: str, local_path: Path) -> None:
        """Download a file."""
        ...

    @abstractmethod
    def upload(self, local_path: Path, remote_path: str) -> None:
        """Upload a file."""
        ...


class MetadataTool(Protocol):
    """Interface for reading/writing embedded metadata."""

    @abstractmethod
    def file_type_extension(self, path: Path) -> Optional[str]:
        """Extension derived from the file signature, if recognized."""
        ...

    @abstractmethod
    def read_tag(self, path: Path, tag: str, date_format: Optional[str] = None) -> Optional[str]:
        """Read one tag value as text."""
        ...

    @abstractmethod
    def write_capture_time(self, path: Path, value: str) -> None:
        """Overwrite all EXIF dates in place. Raises MetadataWriteError."""
        ...

    @abstractmethod
    def write_tags(self, path: Path, assignments: list[str]) -> None:
        """Apply raw exiftool assignments in place."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class FolderHandler(Protocol):
    """Something that consumes one source folder into a target folder."""

    @abstractmethod
    def run(self, source_dir: str, target_dir: str, stats: ProcessingStats) -> None:
        ...


class ProgressReporter(Protocol):
    """Interface for progress reporting."""

    @abstractmethod
    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase."""
        ...

    @abstractmethod
    def describe_phase(self, detail: str) -> None:
        """Show which item of the phase is being worked on."""
        ...

    @abstractmethod
    def advance_phase(self, amount: int = 1) -> None:
        """Mark ``amount`` more items of the phase as done."""
        ...

    @abstractmethod
    def end_phase(self) -> None:
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        """Log an info message."""
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        """Log a success message."""
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        """Log a warning message."""
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        """Log an error message."""
        ...

    @abstractmethod
    def debug(self, message: str) -> None:
        """Log a verbose-only message."""
        ...
