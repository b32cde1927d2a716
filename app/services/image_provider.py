"""
Image synthesis provider (ClipDrop HTTP API).

Returns raw image bytes; callers store them and keep only the public URL.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from app.core.config import CLIPDROP_API_KEY, CLIPDROP_BASE_URL, PROVIDER_TIMEOUT_SECONDS
from app.core.errors import ProviderError

logger = logging.getLogger(__name__)


class ImageProvider(ABC):

    @abstractmethod
    def text_to_image(self, prompt: str) -> bytes:
        """Generate an image for a text prompt."""

    @abstractmethod
    def remove_background(self, image: bytes, filename: str = "image.png", content_type: str = "image/png") -> bytes:
        """Return the image with its background removed."""


class ClipDropImageProvider(ImageProvider):

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or CLIPDROP_API_KEY
        if not self.api_key:
            raise ValueError("CLIPDROP_API_KEY not configured")
        self.base_url = (base_url or CLIPDROP_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=PROVIDER_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._client.close()

    def _post(self, path: str, files: dict) -> bytes:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.post(url, files=files, headers={"x-api-key": self.api_key})
        except httpx.HTTPError as e:
            logger.error(f"ClipDrop request failed: path={path}, error={e}")
            raise ProviderError() from e

        if response.status_code >= 300:
            logger.error(f"ClipDrop error: path={path}, status={response.status_code}, body={response.text[:200]}")
            raise ProviderError(f"Image service error ({response.status_code})")
        return response.content

    def text_to_image(self, prompt: str) -> bytes:
        return self._post("/text-to-image/v1", {"prompt": (None, prompt)})

    def remove_background(self, image: bytes, filename: str = "image.png", content_type: str = "image/png") -> bytes:
        return self._post("/remove-background/v1", {"image_file": (filename, image, content_type)})
