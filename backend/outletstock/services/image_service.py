# Overview: Service-layer operations for waste photos; validates, downsizes and stores uploads.

from __future__ import annotations

import io
import os
import uuid

from flask import current_app
from PIL import Image, UnidentifiedImageError

from ..errors import InternalError, ValidationError
from outletstock.time_utils import utcnow

RESAMPLE_LANCZOS = Image.Resampling.LANCZOS

WASTE_SUBDIR = "waste"


def upload_root() -> str:
    folder = current_app.config.get("UPLOAD_FOLDER")
    if not folder:
        folder = os.path.join(current_app.instance_path, "uploads")
    return folder


def validate_upload(content_type: str | None, data: bytes) -> None:
    """Content type must be image/*, size within WASTE_IMAGE_MAX_BYTES."""
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")

    max_bytes = current_app.config["WASTE_IMAGE_MAX_BYTES"]
    if len(data) > max_bytes:
        raise ValidationError(f"Image must be smaller than {max_bytes // (1024 * 1024)} MB")


def compress_image(data: bytes, max_dimension: int, quality: int) -> bytes:
    """
    Fit the image inside a max_dimension square and re-encode as WebP.

    Aspect ratio is kept and small images are never enlarged (thumbnail only
    shrinks). Raises InternalError if the bytes cannot be decoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            img.thumbnail((max_dimension, max_dimension), RESAMPLE_LANCZOS)

            out = io.BytesIO()
            img.save(out, format="WEBP", quality=quality)
            return out.getvalue()
    except (UnidentifiedImageError, OSError, ValueError):
        current_app.logger.exception("Failed to process waste image")
        raise InternalError()


def store_waste_image(content_type: str | None, data: bytes) -> tuple[str, str]:
    """
    Validate, compress and write a waste photo.

    Returns (public_url, filesystem_path). The URL is what goes on the Waste
    row; the path lets the caller remove the file if the row is not saved.
    """
    validate_upload(content_type, data)

    compressed = compress_image(
        data,
        current_app.config["WASTE_IMAGE_MAX_DIMENSION"],
        current_app.config["WASTE_IMAGE_QUALITY"],
    )

    target_dir = os.path.join(upload_root(), WASTE_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)

    stamp = utcnow().strftime("%Y%m%d%H%M%S")
    filename = f"waste-{stamp}-{uuid.uuid4().hex[:8]}.webp"
    path = os.path.join(target_dir, filename)

    try:
        with open(path, "wb") as fh:
            fh.write(compressed)
    except OSError:
        current_app.logger.exception("Failed to write waste image %s", path)
        raise InternalError()

    return f"/uploads/{WASTE_SUBDIR}/{filename}", path


def discard(path: str | None) -> None:
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        current_app.logger.warning("Could not remove orphaned image %s", path)
