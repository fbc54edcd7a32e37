"""Sync file modification dates with EXIF DateTimeOriginal.

Runs on a local copy of the processed library. Files without a
DateTimeOriginal get ``<year>:01:01 00:00:00`` first.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..core.config import FixDatesConfig
from ..core.errors import MetadataError
from ..core.protocols import MetadataTool, ProgressReporter
from .sidecar import EXIF_DATE_FORMAT


@dataclass(slots=True)
class DateFixStats:
    """Counters for a date-fix run."""
    synced: int = 0
    fallback: int = 0
    unchanged: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0

    def summary(self) -> dict[str, int]:
        return {
            "synced": self.synced,
            "fallback": self.fallback,
            "unchanged": self.unchanged,
            "errors": self.errors,
        }


def iter_media(root: Path, extension: str) -> Iterator[Path]:
    """Files under ``root`` with ``extension``, case-insensitive, sorted."""
    suffix = f".{extension.lower()}"
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() == suffix:
            yield path


class DateFixer:
    """Copies DateTimeOriginal into FileModifyDate for every media file."""

    def __init__(self, tool: MetadataTool, reporter: ProgressReporter, config: FixDatesConfig):
        self._tool = tool
        self._reporter = reporter
        self._config = config

    def run(self) -> DateFixStats:
        stats = DateFixStats()
        started = time.monotonic()
        for extension in self._config.extensions:
            self._reporter.info(f"Processing files with extension: {extension}")
            for path in iter_media(self._config.root, extension):
                self.fix_file(path, stats)
        stats.elapsed_seconds = time.monotonic() - started
        return stats

    def fix_file(self, path: Path, stats: DateFixStats) -> None:
        self._reporter.debug(f"Processing: {path}")
        try:
            taken = self._tool.read_tag(path, "DateTimeOriginal")
            if taken:
                modified = self._tool.read_tag(path, "FileModifyDate", date_format=EXIF_DATE_FORMAT)
                if taken == modified:
                    self._reporter.debug("FileModifyDate already matches DateTimeOriginal. Skipping.")
                    stats.unchanged += 1
                    return
                self._tool.write_tags(path, ["-FileModifyDate<DateTimeOriginal"])
                self._reporter.debug("DateTimeOriginal found. Updated FileModifyDate.")
                stats.synced += 1
            else:
                self._tool.write_tags(path, [
                    f"-DateTimeOriginal={self._config.fallback_date}",
                    "-FileModifyDate<DateTimeOriginal",
                ])
                self._reporter.info(f"{path.name}: no DateTimeOriginal, set to {self._config.fallback_date}")
                stats.fallback += 1
        except MetadataError as e:
            self._reporter.error(f"Error processing {path}: {e}")
            stats.errors += 1
