"""Service layer: the reorganization jobs."""
from .mover import CollisionSafeMover
from .renamer import MetadataRenamer
from .driver import BatchDriver
from .date_fixer import DateFixer, DateFixStats

__all__ = [
    "CollisionSafeMover",
    "MetadataRenamer",
    "BatchDriver",
    "DateFixer",
    "DateFixStats",
]
