# =============================================================================
# lib/uploads.py - Deferred Image Uploads
# =============================================================================
# Editors let admins pick an image before saving. The file is held in memory
# as a PendingImage and only uploaded when the surrounding form is saved;
# the resulting storage path then replaces the image field in the record.
#
#   DeferredImage = PendingImage(file, preview_url) | UploadedImage(path, url)
#
# Usage:
#   staged = stage_image(ImageFile(name, content_type, data), max_size_mb=10)
#   record = commit_images(record, {"logo_image_url": staged}, uploader)
# =============================================================================

from __future__ import annotations

import base64
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Union

from app.exceptions import FileTooLargeError, InvalidFileTypeError, ValidationFailedError

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
PDF_MIME_TYPES = ("application/pdf",)


@dataclass(frozen=True)
class ImageFile:
    """A file received from a multipart form, held in memory."""

    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()

    @property
    def stem(self) -> str:
        """Filename without its extension, used as default alt text."""
        if "." not in self.filename:
            return self.filename
        return self.filename.rsplit(".", 1)[0]


@dataclass(frozen=True)
class PendingImage:
    """Selected but not yet uploaded; lives only until the form is saved."""

    file: ImageFile
    preview_url: str
    kind: Literal["pending"] = "pending"


@dataclass(frozen=True)
class UploadedImage:
    """Already in object storage."""

    path: str
    url: str
    kind: Literal["uploaded"] = "uploaded"


DeferredImage = Union[PendingImage, UploadedImage]

Uploader = Callable[[ImageFile], UploadedImage]


# =============================================================================
# Validation
# =============================================================================

def validate_image(
    file: ImageFile,
    max_size_mb: int,
    allowed_types: tuple[str, ...] | list[str] | None = IMAGE_MIME_TYPES,
) -> None:
    """
    Enforce the editor's MIME allow-list and size ceiling.

    Args:
        file: The received file
        max_size_mb: Size ceiling in MB
        allowed_types: Exact MIME allow-list, or None to accept any image/*

    Raises:
        InvalidFileTypeError: Wrong content type
        FileTooLargeError: Over the ceiling
    """
    content_type = (file.content_type or "").lower()

    if allowed_types is None:
        if not content_type.startswith("image/"):
            raise InvalidFileTypeError(file.filename, ["image/*"])
    elif content_type not in allowed_types:
        raise InvalidFileTypeError(file.filename, list(allowed_types))

    if file.size > max_size_mb * 1024 * 1024:
        raise FileTooLargeError(file.size / (1024 * 1024), max_size_mb)


def preview_url_for(file: ImageFile) -> str:
    """Inline data: URL so the editor can preview before upload."""
    encoded = base64.b64encode(file.content).decode("ascii")
    return f"data:{file.content_type};base64,{encoded}"


def stage_image(
    file: ImageFile,
    max_size_mb: int,
    allowed_types: tuple[str, ...] | list[str] | None = IMAGE_MIME_TYPES,
) -> PendingImage:
    """Validate a selected file and hold it until save."""
    validate_image(file, max_size_mb, allowed_types)
    return PendingImage(file=file, preview_url=preview_url_for(file))


# =============================================================================
# Storage Paths
# =============================================================================

def unique_filename(original: str, now: float | None = None, token: str | None = None) -> str:
    """
    Build a collision-resistant filename keeping the original extension.

    Example:
        unique_filename("stand.PNG", now=1700000000.0, token="a1b2c3")
        # "1700000000000_a1b2c3.png"
    """
    timestamp = int((now if now is not None else time.time()) * 1000)
    token = token or secrets.token_hex(3)
    ext = original.rsplit(".", 1)[-1].lower() if "." in original else "bin"
    return f"{timestamp}_{token}.{ext}"


def build_storage_path(folder: str | None, filename: str) -> str:
    """Join a bucket folder and filename; empty folder means bucket root."""
    folder = (folder or "").strip("/")
    return f"{folder}/{filename}" if folder else filename


# =============================================================================
# Commit (phase two)
# =============================================================================

def commit_images(
    record: Mapping[str, Any],
    images: Mapping[str, DeferredImage | None],
    uploader: Uploader,
) -> dict[str, Any]:
    """
    Upload pending images and substitute their storage paths into a record.

    Each key of `images` names the record column that stores the image.
    Pending images are uploaded in order; already-uploaded images keep their
    URL. A None value leaves the column untouched.

    There is no rollback: if the third upload fails, the first two files stay
    in storage and the error propagates to the caller.

    Returns:
        A new dict; the input record is not modified
    """
    result = dict(record)

    for column, image in images.items():
        if image is None:
            continue
        if isinstance(image, PendingImage):
            uploaded = uploader(image.file)
            logger.info(f"Committed deferred image for {column}: {uploaded.path}")
            result[column] = uploaded.path
        elif isinstance(image, UploadedImage):
            result[column] = image.url
        else:
            raise ValidationFailedError(f"Unsupported image value for {column}")

    return result
