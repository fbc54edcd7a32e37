"""Exception hierarchy shared by the remote, engine and service layers."""


class TakeoutReorgError(Exception):
    """Base class for all takeout-reorg errors."""


class RemoteError(TakeoutReorgError):
    """A remote filesystem operation failed."""


class RemoteNotFoundError(RemoteError):
    """The remote path does not exist."""


class RemoteExistsError(RemoteError):
    """The remote path already exists."""


class MetadataError(TakeoutReorgError):
    """Reading or writing embedded metadata failed."""


class ExifToolNotFoundError(MetadataError):
    """The exiftool binary is not installed or could not be started."""


class MetadataWriteError(MetadataError):
    """ExifTool did not update the file."""


class SidecarError(TakeoutReorgError):
    """A JSON sidecar could not be read or decoded."""
