"""Core domain models, configuration, errors and protocols."""
from .protocols import (
    RemoteFileSystem,
    MetadataTool,
    FolderHandler,
    ProgressReporter,
)
from .models import (
    DirectoryEntry,
    MediaItem,
    TargetNamespace,
    ProcessingAction,
    ProcessingStats,
)
from .config import ShareConfig, MergeConfig, ProcessConfig, FixDatesConfig
from .errors import (
    TakeoutReorgError,
    RemoteError,
    RemoteNotFoundError,
    RemoteExistsError,
    MetadataError,
    ExifToolNotFoundError,
    MetadataWriteError,
    SidecarError,
)

__all__ = [
    # Protocols
    "RemoteFileSystem",
    "MetadataTool",
    "FolderHandler",
    "ProgressReporter",
    # Models
    "DirectoryEntry",
    "MediaItem",
    "TargetNamespace",
    "ProcessingAction",
    "ProcessingStats",
    # Config
    "ShareConfig",
    "MergeConfig",
    "ProcessConfig",
    "FixDatesConfig",
    # Errors
    "TakeoutReorgError",
    "RemoteError",
    "RemoteNotFoundError",
    "RemoteExistsError",
    "MetadataError",
    "ExifToolNotFoundError",
    "MetadataWriteError",
    "SidecarError",
]
