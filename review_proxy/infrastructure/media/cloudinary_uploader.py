"""
Cloudinary Uploader - Review Image Hosting
==========================================

Uploads customer-supplied images (remote URLs or data URIs) to Cloudinary so
Judge.me can fetch them from a public URL.

Judge.me expects pictures as an object of filename -> URL:
    {"img_3f9a2c1d.jpg": "https://res.cloudinary.com/..."}

Uploads run in parallel; a failed upload is logged and dropped.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import cloudinary
import cloudinary.uploader

from ..config import get_settings
from ..config.settings import CloudinarySettings

logger = logging.getLogger(__name__)

MAX_PARALLEL_UPLOADS = 8


def picture_source(item: Any) -> Optional[str]:
    """Extract the upload source from a picture entry (string or object)."""
    if isinstance(item, str):
        return item or None
    if isinstance(item, dict):
        return item.get("url") or item.get("image_url")
    return None


class CloudinaryUploader:
    """
    Image upload client.

    USAGE:
        uploader = CloudinaryUploader()
        pictures = uploader.upload_many(["https://example.com/a.jpg"])
        # {"img_3f9a2c1d.jpg": "https://res.cloudinary.com/..."}
    """

    def __init__(self, settings: Optional[CloudinarySettings] = None):
        self._settings = settings or get_settings().cloudinary
        cloudinary.config(
            cloud_name=self._settings.cloud_name,
            api_key=self._settings.api_key,
            api_secret=self._settings.api_secret,
        )

    def upload(self, item: Any) -> Optional[Dict[str, str]]:
        """
        Upload a single picture.

        Returns:
            One-entry mapping {filename: secure_url}, or None on failure.
        """
        source = picture_source(item)
        if not source:
            logger.warning(f"No image source found in item: {item!r}")
            return None

        file_name = f"img_{uuid.uuid4().hex[:8]}.jpg"
        logger.info(f"Uploading image to Cloudinary [{file_name}]...")
        try:
            result = cloudinary.uploader.upload(
                source,
                folder=self._settings.folder,
                resource_type="auto",
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed for {file_name}: {e}")
            return None

        secure_url = result.get("secure_url")
        if not secure_url:
            logger.warning(f"Cloudinary returned no secure_url for {file_name}")
            return None

        logger.info(f"Cloudinary uploaded: {file_name} -> {secure_url}")
        return {file_name: secure_url}

    def upload_many(self, items: List[Any]) -> Dict[str, str]:
        """Upload all pictures concurrently and merge the successful results."""
        if not items:
            return {}

        logger.info(f"Processing {len(items)} images...")
        workers = min(len(items), MAX_PARALLEL_UPLOADS)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cloudinary-upload") as pool:
            results = list(pool.map(self.upload, items))

        uploaded: Dict[str, str] = {}
        for result in results:
            if result:
                uploaded.update(result)

        logger.info(f"Prepared {len(uploaded)} images for Judge.me")
        return uploaded
