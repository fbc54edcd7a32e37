"""Test fixtures: Takeout-shaped trees, a fake metadata tool and reporter.

Fixture builders write real files (Pillow images, JSON sidecars) onto a
directory that a LocalFileSystem serves as the share root.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image

from takeout_reorg.core.errors import MetadataWriteError
from takeout_reorg.core.models import ProcessingStats


def make_image(path: Path, fmt: str = "JPEG", color: str = "red") -> Path:
    """Write a small real image in ``fmt`` regardless of the name's suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (16, 16), color=color)
    img.save(path, fmt)
    return path


def write_sidecar(
    path: Path,
    taken: Optional[str] = None,
    created: Optional[str] = None,
    **extra,
) -> Path:
    """Write a Google Takeout style JSON sidecar."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"title": path.name.removesuffix(".json"), **extra}
    if taken is not None:
        data["photoTakenTime"] = {"timestamp": taken, "formatted": "ignored"}
    if created is not None:
        data["creationTime"] = {"timestamp": created, "formatted": "ignored"}
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@dataclass
class TakeoutPhoto:
    """A photo plus its sidecar, as Takeout exports them."""
    name: str
    taken: Optional[str] = None
    created: Optional[str] = None
    fmt: str = "JPEG"
    with_sidecar: bool = True

    def create(self, folder: Path) -> Path:
        path = make_image(folder / self.name, self.fmt)
        if self.with_sidecar:
            write_sidecar(folder / f"{self.name}.json", taken=self.taken, created=self.created)
        return path


def create_takeout_structure(root: Path) -> Path:
    """Two Takeout folders with Google Photos, one without, one unrelated.

    Returns the source root (``root / "Takeout 2025-05-20"``).
    """
    source = root / "Takeout 2025-05-20"

    photos_1 = source / "Takeout" / "Google Photos"
    TakeoutPhoto("IMG_0001.jpg", taken="1609459200").create(photos_1 / "Photos from 2021")
    TakeoutPhoto("beach.jpg", taken="1625140800").create(photos_1 / "Vacation")

    photos_2 = source / "Takeout 2" / "Google Photos"
    TakeoutPhoto("IMG_0002.jpg", taken="1609459260").create(photos_2 / "Photos from 2021")
    TakeoutPhoto("sunset.jpg", taken="1625144400").create(photos_2 / "Vacation")

    (source / "Takeout 3" / "YouTube").mkdir(parents=True)
    (source / "Other" / "Google Photos").mkdir(parents=True)
    make_image(source / "Other" / "Google Photos" / "stray.jpg")
    return source


class FakeExifTool:
    """MetadataTool double that records writes instead of running exiftool."""

    def __init__(
        self,
        extensions: Optional[dict[str, str]] = None,
        tags: Optional[dict[tuple[str, str], str]] = None,
        fail_on: Optional[set[str]] = None,
    ):
        """Initialize the fake.

        Args:
            extensions: File name -> FileTypeExtension to report.
            tags: (file name, tag) -> value returned by read_tag.
            fail_on: File names whose writes raise MetadataWriteError.
        """
        self.extensions = extensions or {}
        self.tags = tags or {}
        self.fail_on = fail_on or set()
        self.capture_times: list[tuple[str, str]] = []
        self.writes: list[tuple[str, list[str]]] = []
        self.closed = False

    def file_type_extension(self, path: Path) -> Optional[str]:
        return self.extensions.get(path.name)

    def read_tag(self, path: Path, tag: str, date_format: Optional[str] = None) -> Optional[str]:
        return self.tags.get((path.name, tag))

    def write_tags(self, path: Path, assignments: list[str]) -> None:
        if path.name in self.fail_on:
            raise MetadataWriteError(f"exiftool did not update {path.name}")
        self.writes.append((path.name, list(assignments)))

    def write_capture_time(self, path: Path, value: str) -> None:
        if path.name in self.fail_on:
            raise MetadataWriteError(f"exiftool did not update {path.name}")
        self.capture_times.append((path.name, value))

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeExifTool":
        return self

    def __exit__(self, *args) -> None:
        self.close()


@dataclass
class RecordingReporter:
    """ProgressReporter double that keeps every message."""
    messages: list[tuple[str, str]] = field(default_factory=list)
    phases: list[tuple[str, int]] = field(default_factory=list)
    described: list[str] = field(default_factory=list)
    advanced: int = 0

    def start_phase(self, name: str, total: int) -> None:
        self.phases.append((name, total))

    def describe_phase(self, detail: str) -> None:
        self.described.append(detail)

    def advance_phase(self, amount: int = 1) -> None:
        self.advanced += amount

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_stats(self, stats: ProcessingStats, title: str = "") -> None:
        pass

    def text(self, level: Optional[str] = None) -> str:
        return "\n".join(m for lvl, m in self.messages if level is None or lvl == level)


def tree(root: Path) -> set[str]:
    """Relative POSIX paths of all files under ``root``."""
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
