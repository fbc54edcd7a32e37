"""Reorganize Google Takeout photo exports stored on an SMB share."""

__version__ = "1.0.0"

# Core exports
from .core.config import ShareConfig, MergeConfig, ProcessConfig, FixDatesConfig
from .core.models import (
    DirectoryEntry,
    MediaItem,
    TargetNamespace,
    ProcessingAction,
    ProcessingStats,
)
from .core.protocols import RemoteFileSystem, MetadataTool, FolderHandler, ProgressReporter

# Remote exports
from .remote import LocalFileSystem, SmbClientFileSystem, parse_listing

# Engine exports
from .engines.exiftool import ExifTool

# Service exports
from .services.mover import CollisionSafeMover
from .services.renamer import MetadataRenamer
from .services.driver import BatchDriver
from .services.date_fixer import DateFixer

# Logging exports
from .logging.rich_logger import RichProgressReporter, QuietProgressReporter

__all__ = [
    # Core
    "ShareConfig",
    "MergeConfig",
    "ProcessConfig",
    "FixDatesConfig",
    "DirectoryEntry",
    "MediaItem",
    "TargetNamespace",
    "ProcessingAction",
    "ProcessingStats",
    "RemoteFileSystem",
    "MetadataTool",
    "FolderHandler",
    "ProgressReporter",
    # Remote
    "LocalFileSystem",
    "SmbClientFileSystem",
    "parse_listing",
    # Engines
    "ExifTool",
    # Services
    "CollisionSafeMover",
    "MetadataRenamer",
    "BatchDriver",
    "DateFixer",
    # Logging
    "RichProgressReporter",
    "QuietProgressReporter",
]
