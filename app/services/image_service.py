"""
Image Service - stores uploaded photos on disk and keeps an image registry.

Photos are written to UPLOAD_DIR and served by the app under /uploads.
The registry (UPLOAD_DIR/images.json) lists every upload.
"""

import json
import logging
import os
import random
import re
import tempfile
import threading
import time
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.core.settings import settings
from app.models.image import ImageAsset

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
REGISTRY_FILENAME = "images.json"
_SAFE_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


class ImageService:
    """Service for handling image uploads and storage."""

    def __init__(self, upload_dir: str, max_size: int):
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size
        self.registry_path = self.upload_dir / REGISTRY_FILENAME
        self._lock = threading.RLock()

    def validate_image(self, content_type: Optional[str], data: bytes) -> None:
        """Reject non-image, empty and oversized uploads."""
        if not content_type or not content_type.startswith("image/"):
            logger.warning(f"Invalid content type: {content_type}")
            raise ValidationError("Only image files are allowed!")

        if not data:
            raise ValidationError("Uploaded image is empty")

        if len(data) > self.max_size:
            raise ValidationError(
                f"File too large. Maximum size is {self.max_size / (1024 * 1024):.0f}MB."
            )

    @staticmethod
    def _unique_filename(original_name: str) -> str:
        suffix = Path(original_name or "").suffix.lower()
        if not _SAFE_SUFFIX.match(suffix):
            suffix = ".jpg"
        unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"uploaded-{unique}{suffix}"

    def _read_registry(self) -> List[ImageAsset]:
        if not self.registry_path.exists():
            return []
        try:
            records = json.loads(self.registry_path.read_text(encoding="utf-8") or "[]")
            return [ImageAsset(**record) for record in records]
        except (OSError, json.JSONDecodeError, PydanticValidationError, TypeError) as e:
            logger.error(f"Failed to read image registry {self.registry_path}: {e}")
            raise StoreError(f"Could not read image registry: {e}") from e

    def _write_registry(self, images: List[ImageAsset]) -> None:
        payload = [image.model_dump(mode="json") for image in images]
        tmp_path = None
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.upload_dir), prefix=".images-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.registry_path)
        except OSError as e:
            logger.error(f"Failed to write image registry: {e}", exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Could not write image registry: {e}") from e

    def save_image(self, original_name: str, content_type: Optional[str], data: bytes) -> ImageAsset:
        """
        Validate, store and register an uploaded photo.

        Returns:
            The registered ImageAsset, whose `url` goes into the report
        """
        self.validate_image(content_type, data)

        filename = self._unique_filename(original_name)
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            (self.upload_dir / filename).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to save image {filename}: {e}", exc_info=True)
            raise StoreError(f"Could not save image: {e}") from e

        with self._lock:
            images = self._read_registry()
            image = ImageAsset(
                id=max([int(time.time() * 1000)] + [img.id + 1 for img in images]),
                filename=filename,
                original_name=original_name or "",
                url=f"{UPLOAD_URL_PREFIX}/{filename}",
                size=len(data),
            )
            images.append(image)
            self._write_registry(images)

        logger.info(f"Image saved: {filename} ({len(data)} bytes)")
        return image

    def list_images(self) -> List[ImageAsset]:
        with self._lock:
            return self._read_registry()

    def delete_image(self, image_id: int) -> ImageAsset:
        """Remove the photo file and its registry entry."""
        with self._lock:
            images = self._read_registry()
            match = next((img for img in images if img.id == image_id), None)
            if match is None:
                raise NotFoundError("Image", image_id)

            file_path = self.upload_dir / match.filename
            if file_path.exists():
                file_path.unlink()

            self._write_registry([img for img in images if img.id != image_id])

        logger.info(f"Image deleted: {match.filename}")
        return match


# Global service instance
_image_service: Optional[ImageService] = None


def get_image_service() -> ImageService:
    """Get or create ImageService singleton."""
    global _image_service
    if _image_service is None:
        _image_service = ImageService(upload_dir=settings.UPLOAD_DIR, max_size=settings.MAX_IMAGE_SIZE)
    return _image_service


def reset_image_service() -> None:
    global _image_service
    _image_service = None
