"""File storage for submission logos and product images."""

from __future__ import annotations

import io
import logging
import os
import secrets
import time
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from saasdir.core.config import get_settings
from saasdir.core.errors import UploadError

logger = logging.getLogger(__name__)

LOGO_BUCKET = "logos"
IMAGE_BUCKET = "product-images"
PUBLIC_PREFIX = "/uploads"

LOGO_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}
IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
PIL_FORMATS = {"jpg": "JPEG", "png": "PNG", "webp": "WEBP"}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes


def _looks_like_svg(data: bytes) -> bool:
    head = data[:1024].lstrip().lower()
    if b"<script" in data.lower():
        return False
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in head)


def _verify_raster(data: bytes, expected_format: str) -> bool:
    try:
        with Image.open(io.BytesIO(data)) as image:
            detected = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return False
    return detected == expected_format


class StorageService:
    """Validates uploads and writes them below the configured uploads directory."""

    def __init__(self, root: str | None = None) -> None:
        self._root = root

    @property
    def root(self) -> str:
        return self._root or get_settings().uploads_dir

    def _store(self, bucket: str, name: str, data: bytes) -> str:
        dest_dir = os.path.join(self.root, bucket)
        os.makedirs(dest_dir, exist_ok=True)
        dest_path = os.path.join(dest_dir, name)
        with open(dest_path, "xb") as handle:
            handle.write(data)
        return f"{PUBLIC_PREFIX}/{bucket}/{name}"

    def _check(self, upload: UploadedFile, allowed: dict, max_bytes: int, label: str) -> str:
        content_type = (upload.content_type or "").lower()
        ext = allowed.get(content_type)
        if not ext:
            kinds = ", ".join(sorted(v.upper() for v in allowed.values()))
            raise UploadError(f"{label} must be one of: {kinds}", field=label.lower())
        if not upload.data:
            raise UploadError(f"{label} file is empty", field=label.lower())
        if len(upload.data) > max_bytes:
            raise UploadError(f"{label} must be less than {max_bytes // (1024 * 1024)}MB", field=label.lower())
        valid = _looks_like_svg(upload.data) if ext == "svg" else _verify_raster(upload.data, PIL_FORMATS[ext])
        if not valid:
            raise UploadError(f"{label} is not a valid image file", field=label.lower())
        return ext

    def upload_logo(self, upload: UploadedFile) -> str:
        settings = get_settings()
        ext = self._check(upload, LOGO_TYPES, settings.max_logo_bytes, "Logo")
        name = f"logo_{int(time.time() * 1000)}_{secrets.token_hex(4)}.{ext}"
        try:
            url = self._store(LOGO_BUCKET, name, upload.data)
        except OSError as exc:
            logger.error("Error uploading logo %s", name, exc_info=True)
            raise UploadError(f"Failed to upload logo: {exc.strerror or exc}") from exc
        logger.info("Stored logo %s (%d bytes)", name, len(upload.data))
        return url

    def upload_product_image(self, upload: UploadedFile) -> str:
        settings = get_settings()
        ext = self._check(upload, IMAGE_TYPES, settings.max_image_bytes, "Image")
        name = f"{secrets.token_hex(12)}.{ext}"
        try:
            url = self._store(IMAGE_BUCKET, name, upload.data)
        except OSError as exc:
            logger.error("Error uploading product image %s", name, exc_info=True)
            raise UploadError(f"Failed to upload product image: {exc.strerror or exc}") from exc
        logger.info("Stored product image %s (%d bytes)", name, len(upload.data))
        return url

    def delete_file(self, public_url: str) -> None:
        """Remove a file previously returned by one of the upload methods."""
        prefix = f"{PUBLIC_PREFIX}/"
        if not public_url or not public_url.startswith(prefix):
            return
        relative = public_url[len(prefix):]
        bucket, _, name = relative.partition("/")
        if bucket not in (LOGO_BUCKET, IMAGE_BUCKET) or not name or "/" in name or name.startswith("."):
            raise UploadError("Invalid file path")
        path = os.path.join(self.root, bucket, name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
