"""Image validation, metadata and thumbnail rendering with Pillow."""

import base64
import io
import os
from pathlib import Path
from typing import List

from PIL import Image, UnidentifiedImageError

from core.errors import BackendError, ErrorKind
from core.interfaces import SUPPORTED_EXTENSIONS
from core.models import ImageInfo, InvalidImage, ValidationResult


MAX_FILE_SIZE = 50 * 1024 * 1024


def validate_image(file_path: str, max_bytes: int = MAX_FILE_SIZE) -> int:
    """Check that `file_path` is a readable, supported image. Returns its size in bytes."""
    if not file_path or not os.path.isfile(file_path):
        raise BackendError(ErrorKind.IMAGE_NOT_FOUND, f"Image file not found: {file_path}", file_path)

    ext = Path(file_path).suffix.lower().lstrip(".")
    if not ext:
        raise BackendError(ErrorKind.UNSUPPORTED_FORMAT, "Unsupported image format: no file extension", file_path)
    if ext not in SUPPORTED_EXTENSIONS:
        raise BackendError(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"Unsupported image format: .{ext} (supported: {', '.join(SUPPORTED_EXTENSIONS)})",
            file_path,
        )

    try:
        file_size = os.path.getsize(file_path)
    except OSError as e:
        raise BackendError(ErrorKind.IO_ERROR, f"IO error: {e}", file_path) from e
    if file_size == 0:
        raise BackendError(ErrorKind.IMAGE_READ_ERROR, "Failed to read image: file is empty", file_path)
    if file_size > max_bytes:
        raise BackendError(
            ErrorKind.IMAGE_TOO_LARGE,
            f"Image file too large: {file_size} bytes (max {max_bytes // (1024 * 1024)} MB)",
            file_path,
        )

    try:
        with Image.open(file_path) as img:
            img.verify()
    except Exception as e:
        raise BackendError(ErrorKind.IMAGE_READ_ERROR, f"Failed to read image: {e}", file_path) from e

    return file_size


def validate_images(paths: List[str], max_bytes: int = MAX_FILE_SIZE) -> ValidationResult:
    result = ValidationResult()
    for path in paths:
        try:
            validate_image(path, max_bytes)
        except BackendError as e:
            result.invalid.append(InvalidImage(path=path, error=e.message))
        else:
            result.valid.append(path)
    return result


def read_image_info(file_path: str, max_bytes: int = MAX_FILE_SIZE) -> ImageInfo:
    size_bytes = validate_image(file_path, max_bytes)
    try:
        with Image.open(file_path) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as e:
        raise BackendError(ErrorKind.IMAGE_READ_ERROR, f"Failed to read image: {e}", file_path) from e

    fmt = Path(file_path).suffix.lstrip(".").upper() or "UNKNOWN"
    return ImageInfo(width=width, height=height, format=fmt, size_bytes=size_bytes)


def render_thumbnail(file_path: str, size: int = 96) -> str:
    """Return a PNG thumbnail bounded by size x size as a base64 data URL."""
    if size <= 0:
        raise BackendError(ErrorKind.IMAGE_READ_ERROR, f"Invalid thumbnail size: {size}", file_path)
    try:
        with Image.open(file_path) as img:
            img.seek(0)
            thumb = img.convert("RGBA" if _has_alpha(img) else "RGB")
            thumb.thumbnail((size, size))
            buf = io.BytesIO()
            thumb.save(buf, format="PNG")
    except FileNotFoundError as e:
        raise BackendError(ErrorKind.IMAGE_NOT_FOUND, f"Image file not found: {file_path}", file_path) from e
    except (UnidentifiedImageError, OSError) as e:
        raise BackendError(ErrorKind.IMAGE_READ_ERROR, f"Failed to read image: {e}", file_path) from e

    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def decode_thumbnail(data_url: str) -> bytes:
    """Inverse of render_thumbnail: the raw PNG bytes of a data URL."""
    _, _, payload = data_url.partition("base64,")
    return base64.b64decode(payload)


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)
