"""Domain models - small data classes passed between services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional


# Upper bound on "(n)" disambiguators tried for one derived name
MAX_NAME_SUFFIX = 9999


class ProcessingAction(Enum):
    """What happened to a single entry."""
    MOVED = "moved"
    COPIED = "copied"
    RENAMED = "renamed"
    SKIPPED_EXISTING = "skipped_existing"
    SKIPPED_ORIGINAL = "skipped_original"
    SKIPPED_SIDECAR = "skipped_sidecar"
    SKIPPED_NO_TIMESTAMP = "skipped_no_timestamp"
    DIRECTORY = "directory"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One row of a directory listing."""
    name: str
    is_directory: bool = False


@dataclass(frozen=True, slots=True)
class MediaItem:
    """A media file being renamed from its sidecar metadata."""
    source_path: str
    name: str
    sidecar_name: Optional[str] = None
    captured_at: Optional[datetime] = None
    is_edited_variant: bool = False

    @property
    def has_sidecar(self) -> bool:
        return self.sidecar_name is not None


class TargetNamespace:
    """Names already taken in one target directory during the current pass.

    Seeded from the target listing and updated as files are placed, so a
    rerun skips what is already there and new files never share a name.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: set[str] = set(names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def add(self, name: str) -> None:
        self._names.add(name)

    def unique_name(
        self,
        base: str,
        extension: str,
        max_suffix: int = MAX_NAME_SUFFIX,
    ) -> Optional[str]:
        """Return ``base.ext`` or the first free ``base(n).ext``.

        Returns None when every candidate up to ``max_suffix`` is taken.
        """
        candidate = f"{base}.{extension}"
        counter = 1
        while candidate in self._names:
            if counter > max_suffix:
                return None
            candidate = f"{base}({counter}).{extension}"
            counter += 1
        return candidate


@dataclass(slots=True)
class ProcessingStats:
    """Mutable statistics for a run."""
    moved: int = 0
    copied: int = 0
    renamed: int = 0
    skipped_existing: int = 0
    skipped_original: int = 0
    skipped_sidecar: int = 0
    skipped_no_timestamp: int = 0
    directories: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0
    failures: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return (
            self.skipped_existing
            + self.skipped_original
            + self.skipped_sidecar
            + self.skipped_no_timestamp
        )

    def record(self, action: ProcessingAction, detail: Optional[str] = None) -> None:
        """Count one action; ``detail`` is kept for errors."""
        match action:
            case ProcessingAction.MOVED:
                self.moved += 1
            case ProcessingAction.COPIED:
                self.copied += 1
            case ProcessingAction.RENAMED:
                self.renamed += 1
            case ProcessingAction.SKIPPED_EXISTING:
                self.skipped_existing += 1
            case ProcessingAction.SKIPPED_ORIGINAL:
                self.skipped_original += 1
            case ProcessingAction.SKIPPED_SIDECAR:
                self.skipped_sidecar += 1
            case ProcessingAction.SKIPPED_NO_TIMESTAMP:
                self.skipped_no_timestamp += 1
            case ProcessingAction.DIRECTORY:
                self.directories += 1
            case ProcessingAction.ERROR:
                self.errors += 1
                if detail:
                    self.failures.append(detail)

    def summary(self) -> dict[str, int]:
        return {
            "moved": self.moved,
            "copied": self.copied,
            "renamed": self.renamed,
            "skipped_existing": self.skipped_existing,
            "skipped_original": self.skipped_original,
            "skipped_sidecar": self.skipped_sidecar,
            "skipped_no_timestamp": self.skipped_no_timestamp,
            "directories": self.directories,
            "errors": self.errors,
        }
