"""
Media Storage
Stores listing images on local disk and maps them to public URLs.
"""

import base64
import binascii
import logging
import re
import time
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import get_settings
from ..errors import MediaUploadError

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"[^A-Za-z0-9._-]+")


class StoredImage:
    """A saved image: its path under the media root and its public URL."""

    def __init__(self, storage_path: str, url: str):
        self.storage_path = storage_path
        self.url = url

    def __repr__(self):
        return f"<StoredImage(path={self.storage_path})>"


class MediaStorage:
    """
    Local-disk image store.

    Files live at <root>/<user_id>/<timestamp>-<index>-<name> and are served
    under <base_url>/<same relative path>.
    """

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        settings = get_settings()
        self.root = Path(root or settings.media_root)
        self.base_url = (base_url or settings.media_base_url).rstrip("/")

    @staticmethod
    def safe_name(name: Optional[str]) -> str:
        cleaned = _SAFE_NAME.sub("-", Path(name or "image").name).strip("-.")
        return cleaned or "image"

    @staticmethod
    def decode_data_url(data: str) -> Tuple[Optional[str], bytes]:
        """
        Decode a base64 payload, with or without a data: URL prefix.

        Returns:
            (content type from the prefix or None, raw bytes)
        """
        content_type = None
        payload = data
        if data.startswith("data:"):
            header, sep, payload = data.partition(",")
            if not sep:
                raise ValueError("data URL has no payload")
            content_type = header[5:].split(";")[0] or None
        return content_type, base64.b64decode(payload, validate=True)

    def url_for(self, storage_path: str) -> str:
        return f"{self.base_url}/{storage_path}"

    def save_images(self, user_id: str, images: List[dict]) -> List[StoredImage]:
        """
        Save uploaded images for a user.

        Args:
            user_id: Owner of the files
            images: Dicts with name, type and data (base64 data URL)

        Raises:
            MediaUploadError: when an image is not an image or cannot be decoded
        """
        stored: List[StoredImage] = []
        timestamp = int(time.time() * 1000)

        for index, image in enumerate(images):
            try:
                declared_type = image.get("type") or ""
                content_type, raw = self.decode_data_url(image.get("data") or "")
                content_type = declared_type or content_type or ""
                if not content_type.startswith("image/"):
                    raise ValueError(f"unsupported content type '{content_type}'")
                if not raw:
                    raise ValueError("empty image")

                relative = f"{user_id}/{timestamp}-{index}-{self.safe_name(image.get('name'))}"
                target = self.root / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(raw)
            except (ValueError, binascii.Error, OSError) as e:
                logger.error(f"Image upload error for file {index + 1}: {e}")
                # Don't leave a partial set behind
                self.delete_files([s.storage_path for s in stored])
                raise MediaUploadError(
                    f"Image upload failed for file {index + 1}",
                    details={"index": index, "name": image.get("name")},
                )

            stored.append(StoredImage(relative, self.url_for(relative)))

        logger.info(f"Stored {len(stored)} images for user {user_id}")
        return stored

    def delete_files(self, storage_paths: List[Optional[str]]) -> int:
        """Delete stored files; missing files are ignored. Returns the number removed."""
        removed = 0
        for storage_path in storage_paths:
            if not storage_path:
                continue
            target = self.root / storage_path
            try:
                target.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to delete media file {storage_path}: {e}")
        return removed


def get_media_storage() -> MediaStorage:
    """Media storage bound to current settings."""
    return MediaStorage()
