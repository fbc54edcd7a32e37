"""Google Takeout sidecar lookup and timestamp-based naming."""
from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from ..core.errors import SidecarError


SIDECAR_EXTENSION = ".json"
EDITED_MARKER = "-edited"
TIMESTAMP_KEYS = ("photoTakenTime", "creationTime")

BASE_NAME_FORMAT = "%Y-%m-%d_%H-%M-%S"
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def is_sidecar(name: str, extension: str = SIDECAR_EXTENSION) -> bool:
    return name.lower().endswith(extension.lower())


def find_sidecar_name(
    name: str,
    names: Iterable[str],
    extension: str = SIDECAR_EXTENSION,
) -> Optional[str]:
    """Find the sidecar of ``name`` among the names in its directory.

    Takeout writes ``photo.jpg.json`` but also truncated or suffixed
    variants such as ``photo.jpg.supplemental-metadata.json``; any name
    starting with the media name and ending with the sidecar extension
    qualifies. The exact ``<name><ext>`` wins, then the first in sorted order.
    """
    exact = f"{name}{extension}"
    candidates = sorted(
        n for n in names
        if n != name and n.startswith(name) and n.endswith(extension)
    )
    if exact in candidates:
        return exact
    return candidates[0] if candidates else None


def find_media_sidecar(
    name: str,
    names: Iterable[str],
    extension: str = SIDECAR_EXTENSION,
    marker: str = EDITED_MARKER,
) -> Optional[str]:
    """Sidecar for a media file; edited variants borrow their original's."""
    names = list(names)
    found = find_sidecar_name(name, names, extension)
    if found is None and is_edited_variant(name, marker):
        found = find_sidecar_name(original_name_for(name, marker), names, extension)
    return found


def load_sidecar(path: Path) -> dict[str, Any]:
    """Read a sidecar JSON file.

    Raises:
        SidecarError: The file is unreadable or not a JSON object.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SidecarError(f"Cannot read sidecar {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise SidecarError(f"Sidecar {path.name} is not a JSON object")
    return data


def extract_capture_timestamp(sidecar: dict[str, Any]) -> Optional[int]:
    """Epoch seconds from ``photoTakenTime``, falling back to ``creationTime``."""
    for key in TIMESTAMP_KEYS:
        entry = sidecar.get(key)
        if not isinstance(entry, dict):
            continue
        value = entry.get("timestamp")
        if not value:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


def epoch_to_local(timestamp: int) -> datetime:
    """Naive local-time datetime for an epoch timestamp.

    Raises:
        SidecarError: The timestamp is outside the platform's date range.
    """
    try:
        return datetime.fromtimestamp(timestamp)
    except (OverflowError, ValueError, OSError) as e:
        raise SidecarError(f"Timestamp {timestamp} is out of range: {e}") from e


def format_base_name(moment: datetime, edited: bool = False, marker: str = EDITED_MARKER) -> str:
    """``YYYY-MM-DD_hh-mm-ss``, with the marker appended for edited variants."""
    base = moment.strftime(BASE_NAME_FORMAT)
    return f"{base}{marker}" if edited else base


def format_exif_datetime(moment: datetime) -> str:
    return moment.strftime(EXIF_DATE_FORMAT)


def is_edited_variant(name: str, marker: str = EDITED_MARKER) -> bool:
    return marker.lower() in name.lower()


def original_name_for(name: str, marker: str = EDITED_MARKER) -> str:
    """Name of the original an edited variant supersedes.

    Removes the first case-insensitive occurrence of the marker.
    """
    return re.sub(re.escape(marker), "", name, count=1, flags=re.IGNORECASE)


def superseded_originals(names: Iterable[str], marker: str = EDITED_MARKER) -> set[str]:
    """Originals to drop because an edited variant sits next to them."""
    return {original_name_for(n, marker) for n in names if is_edited_variant(n, marker)}
