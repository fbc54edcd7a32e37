"""True file extension from signature bytes.

Takeout exports regularly mislabel files (PNG screenshots saved as .jpg,
HEIC as .jpg), so the name's suffix is the last resort.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..core.errors import MetadataError
from ..core.protocols import MetadataTool

logger = logging.getLogger(__name__)


# Pillow format name -> extension
PIL_FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "WEBP": "webp",
    "BMP": "bmp",
    "TIFF": "tif",
    "HEIF": "heic",
}


def sniff_image_extension(path: Path) -> Optional[str]:
    """Identify an image by its header using Pillow."""
    try:
        with Image.open(path) as img:
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return None
    if fmt is None:
        return None
    return PIL_FORMAT_EXTENSIONS.get(fmt, fmt.lower())


def name_extension(name: str) -> str:
    suffix = Path(name).suffix
    return suffix[1:].lower() if suffix else ""


def resolve_extension(path: Path, name: str, tool: Optional[MetadataTool] = None) -> str:
    """Best extension for the staged file at ``path``, originally ``name``.

    Order: ExifTool's FileTypeExtension, Pillow sniffing, the name suffix.
    """
    if tool is not None:
        try:
            extension = tool.file_type_extension(path)
        except MetadataError as e:
            logger.debug("exiftool could not type %s: %s", name, e)
            extension = None
        if extension:
            return extension.lower()

    extension = sniff_image_extension(path)
    if extension:
        return extension
    return name_extension(name)
