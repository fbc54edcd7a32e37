"""Run configuration models.

Built once by the CLI and handed to the services; nothing reads module-level
settings.
"""
from __future__ import annotations

import os
import posixpath
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "mov", "mp4")


def normalize_remote_path(value: str) -> str:
    """Use forward slashes and drop leading/trailing separators."""
    value = value.replace("\\", "/").strip().strip("/")
    if not value:
        return ""
    value = posixpath.normpath(value)
    return "" if value == "." else value


class ShareConfig(BaseModel):
    """Network identity of the SMB share."""
    server: str = Field(..., description="Host name or address of the SMB server")
    share: str = Field(..., description="Share name on the server")
    domain: str = Field(default="WORKGROUP", description="Workgroup or domain")
    username: str = Field(default="guest", description="Login name")
    password: str = Field(default="", repr=False, description="Login password")

    @field_validator("server", "share")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip().strip("/\\")
        if not value:
            raise ValueError("must not be empty")
        return value

    @classmethod
    def from_env(cls, server: str, share: str, domain: str = "WORKGROUP") -> "ShareConfig":
        """Take credentials from SMB_USERNAME / SMB_PASSWORD."""
        return cls(
            server=server,
            share=share,
            domain=domain,
            username=os.environ.get("SMB_USERNAME") or "guest",
            password=os.environ.get("SMB_PASSWORD", ""),
        )

    @property
    def service(self) -> str:
        return f"//{self.server}/{self.share}"


class MergeConfig(BaseModel):
    """Settings for consolidating Takeout extraction folders."""
    source_root: str = Field(..., description="Folder holding the Takeout* folders")
    target_root: Optional[str] = Field(
        default=None,
        description="Consolidated target (default: <source_root>/merged)",
    )
    folder_prefix: str = Field(default="Takeout", description="Case-sensitive folder prefix")
    photos_folder: str = Field(default="Google Photos", description="Subfolder to consolidate")
    dry_run: bool = Field(default=False, description="Log intended changes only")

    @field_validator("source_root", "target_root")
    @classmethod
    def normalize(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return normalize_remote_path(value)

    @field_validator("folder_prefix", "photos_folder")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="after")
    def default_target(self) -> "MergeConfig":
        if self.target_root is None:
            self.target_root = posixpath.join(self.source_root, "merged") if self.source_root else "merged"
        return self


class ProcessConfig(BaseModel):
    """Settings for the metadata-driven rename pass."""
    source_root: str = Field(..., description="Folder to read media and sidecars from")
    target_root: str = Field(..., description="Folder to write renamed media to")
    dry_run: bool = Field(default=False, description="Log intended changes only")
    staging_dir: Optional[Path] = Field(
        default=None,
        description="Local folder for staged downloads (default: system temp)",
    )
    sidecar_extension: str = Field(default=".json", description="Sidecar file extension")
    edited_marker: str = Field(default="-edited", description="Marker of edited variants")

    @field_validator("source_root", "target_root")
    @classmethod
    def normalize(cls, value: str) -> str:
        return normalize_remote_path(value)

    @field_validator("staging_dir")
    @classmethod
    def expand_staging(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        return value.expanduser().resolve()

    @field_validator("sidecar_extension")
    @classmethod
    def dotted(cls, value: str) -> str:
        value = value.lower()
        return value if value.startswith(".") else f".{value}"

    @model_validator(mode="after")
    def distinct_roots(self) -> "ProcessConfig":
        if self.source_root == self.target_root:
            raise ValueError("source_root and target_root must differ")
        return self


class FixDatesConfig(BaseModel):
    """Settings for syncing file modification dates with EXIF."""
    year: str = Field(..., description="Fallback capture year (4 digits)")
    root: Path = Field(default=Path("."), description="Directory to walk")
    extensions: tuple[str, ...] = Field(default=DEFAULT_EXTENSIONS)

    @field_validator("year")
    @classmethod
    def four_digits(cls, value: str) -> str:
        if not re.fullmatch(r"\d{4}", value or ""):
            raise ValueError("year must be exactly 4 digits")
        return value

    @field_validator("root")
    @classmethod
    def expand_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @property
    def fallback_date(self) -> str:
        return f"{self.year}:01:01 00:00:00"
