"""Cloudinary-backed media upload service."""
from __future__ import annotations

import logging
import os

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

logger = logging.getLogger(__name__)


class MediaUploader:
    """Upload local files to Cloudinary and return their hosted URL.

    The local file is always deleted once ``upload`` returns, whether the
    upload succeeded or not.
    """

    def __init__(self, cloud_name: str | None, api_key: str | None, api_secret: str | None):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self._configured = False

    @classmethod
    def from_config(cls, config) -> "MediaUploader":
        return cls(
            config.get("CLOUDINARY_CLOUD_NAME"),
            config.get("CLOUDINARY_API_KEY"),
            config.get("CLOUDINARY_API_SECRET"),
        )

    def _configure(self):
        if not self._configured:
            cloudinary.config(
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                secure=True,
            )
            self._configured = True

    def upload(self, local_path: str) -> str | None:
        """Upload ``local_path``; returns the URL, or None if the upload failed."""
        try:
            self._configure()
            result = cloudinary.uploader.upload(local_path, resource_type="auto")
            url = (result or {}).get("secure_url") or (result or {}).get("url")
            if not url:
                logger.warning("Upload of %s returned no url", local_path)
            return url
        except CloudinaryError as exc:
            logger.warning("Upload of %s failed: %s", local_path, exc)
            return None
        finally:
            self._remove_local(local_path)

    @staticmethod
    def _remove_local(local_path: str) -> None:
        try:
            os.remove(local_path)
        except FileNotFoundError:
            pass
