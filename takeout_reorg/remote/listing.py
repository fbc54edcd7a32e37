"""Parser for smbclient's long-format ``ls`` output.

A listing looks like::

      .                                   D        0  Mon May 20 10:00:00 2025
      ..                                  D        0  Mon May 20 10:00:00 2025
      Takeout 1                           D        0  Mon May 20 10:00:00 2025
      IMG_0001.jpg                        A  2345678  Fri Jan  1 00:00:00 2021

                    976284672 blocks of size 4096. 123456 blocks available

Names may contain single spaces; columns are separated by two or more.
"""
from __future__ import annotations

import re

from ..core.models import DirectoryEntry


SUMMARY_MARKER = "blocks of size"
DIRECTORY_MARKER = " D "
COLUMN_SEPARATOR = re.compile(r"\s{2,}")
SELF_ENTRIES = frozenset({".", ".."})


def entry_lines(text: str) -> list[str]:
    """Non-blank listing lines, summary line removed."""
    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or SUMMARY_MARKER in stripped:
            continue
        lines.append(line)
    return lines


def parse_line(line: str) -> DirectoryEntry:
    name = COLUMN_SEPARATOR.split(line.strip(), maxsplit=1)[0]
    return DirectoryEntry(name=name, is_directory=DIRECTORY_MARKER in line)


def parse_listing(text: str) -> list[DirectoryEntry]:
    """Turn a raw listing into entries, in listing order.

    ``.`` and ``..`` are never returned.
    """
    entries = []
    for line in entry_lines(text):
        entry = parse_line(line)
        if entry.name in SELF_ENTRIES:
            continue
        entries.append(entry)
    return entries
