"""
Validation and naming for uploaded images and videos.
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from portfolio_backend.errors import ApiError

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_VIDEO_BYTES = 100 * 1024 * 1024

# Gallery rows per project, videos included.
MAX_PROJECT_IMAGES = 7

# Declared content type -> the Pillow format the bytes must decode as.
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}

# Declared content type -> stored extension.
ALLOWED_VIDEO_TYPES = {
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
}

_DEFAULT_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp"}
_EXTENSION_FORMATS = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "webp": "WEBP"}

# ISO base media boxes that may open an mp4 or QuickTime file.
_ISO_MEDIA_BOXES = {b"ftyp", b"moov", b"mdat", b"wide", b"free", b"skip"}
_EBML_MAGIC = b"\x1a\x45\xdf\xa3"

INVALID_TYPE_MESSAGE = "Invalid file type. Only JPG, PNG, and WebP files are allowed."
TOO_LARGE_MESSAGE = "File size exceeds 5MB limit."
INVALID_VIDEO_TYPE_MESSAGE = "Invalid file type. Only MP4, WebM, and QuickTime videos are allowed."
VIDEO_TOO_LARGE_MESSAGE = "File size exceeds 100MB limit."


def _normalize(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def check_image_upload(content_type: Optional[str], size: Optional[int]) -> str:
    """
    Reject an image upload on its declared type and size alone.

    Called before the body is read, so an oversized file never lands in
    memory. ``size`` may be unknown, in which case only the type is checked.
    """
    normalized = _normalize(content_type)
    if normalized not in ALLOWED_IMAGE_TYPES:
        raise ApiError(400, INVALID_TYPE_MESSAGE)
    if size is not None and size > MAX_IMAGE_BYTES:
        raise ApiError(400, TOO_LARGE_MESSAGE)
    return normalized


def validate_image(content_type: Optional[str], data: bytes) -> str:
    """
    Check an upload against the allowed types and size limit.

    The declared content type is checked first, then the size, then the bytes
    themselves must decode as the declared image family.

    Returns:
        The lower-cased content type.

    Raises:
        ApiError: 400 with the user-facing reason.
    """
    normalized = check_image_upload(content_type, len(data))
    expected_format = ALLOWED_IMAGE_TYPES[normalized]

    try:
        with Image.open(io.BytesIO(data)) as img:
            detected_format = img.format
    except (UnidentifiedImageError, OSError):
        logger.info("Rejected upload: bytes are not a readable %s", expected_format)
        raise ApiError(400, INVALID_TYPE_MESSAGE)
    if detected_format != expected_format:
        logger.info(
            "Rejected upload: declared %s but decoded as %s",
            normalized,
            detected_format,
        )
        raise ApiError(400, INVALID_TYPE_MESSAGE)
    return normalized


def file_extension(filename: Optional[str], content_type: str) -> str:
    """
    Pick the stored extension for a validated image.

    The filename's extension is kept only when it names the format the bytes
    decoded as; otherwise the format's usual extension is used.
    """
    image_format = ALLOWED_IMAGE_TYPES[content_type]
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].strip().lower()
        if _EXTENSION_FORMATS.get(ext) == image_format:
            return ext
    return _DEFAULT_EXTENSIONS[image_format]


def check_video_upload(content_type: Optional[str], size: Optional[int]) -> str:
    normalized = _normalize(content_type)
    if normalized not in ALLOWED_VIDEO_TYPES:
        raise ApiError(400, INVALID_VIDEO_TYPE_MESSAGE)
    if size is not None and size > MAX_VIDEO_BYTES:
        raise ApiError(400, VIDEO_TOO_LARGE_MESSAGE)
    return normalized


def validate_video(content_type: Optional[str], data: bytes) -> str:
    """
    Check a video upload: declared type, size, then the container signature.

    MP4 and QuickTime share the ISO base media layout; WebM is EBML.
    """
    normalized = check_video_upload(content_type, len(data))
    if normalized == "video/webm":
        valid = data[:4] == _EBML_MAGIC
    else:
        valid = data[4:8] in _ISO_MEDIA_BOXES
    if not valid:
        logger.info("Rejected upload: bytes are not a %s container", normalized)
        raise ApiError(400, INVALID_VIDEO_TYPE_MESSAGE)
    return normalized


def video_extension(content_type: str) -> str:
    return ALLOWED_VIDEO_TYPES[content_type]
