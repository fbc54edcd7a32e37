"""Metadata engines."""
from .exiftool import ExifTool, is_available
from .filetype import resolve_extension, sniff_image_extension

__all__ = ["ExifTool", "is_available", "resolve_extension", "sniff_image_extension"]
