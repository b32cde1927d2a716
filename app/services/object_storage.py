"""
Object storage for generated assets (S3 / R2 / MinIO compatible).

store() accepts raw bytes or a base64 data URL and returns a public URL.
When ASSET_PUBLIC_BASE_URL is set the bucket is assumed to be served publicly
(e.g. behind a CDN); otherwise a presigned GET URL is returned.
"""
import base64
import binascii
import logging
import re
import uuid
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core import config
from app.core.errors import StorageError

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.+)$", re.DOTALL)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "application/pdf": "pdf",
}


def decode_data_url(data_url: str) -> Tuple[bytes, str]:
    """Split a base64 data URL into (bytes, content_type)."""
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        raise StorageError("Unsupported data URL")
    try:
        return base64.b64decode(match.group("data"), validate=True), match.group("mime")
    except (binascii.Error, ValueError) as e:
        raise StorageError("Malformed data URL") from e


class ObjectStorage(ABC):

    @abstractmethod
    def store(self, data: Union[bytes, str], content_type: str = "image/png") -> str:
        """Persist bytes (or a data URL) and return its public URL."""


class S3ObjectStorage(ObjectStorage):

    def __init__(
        self,
        bucket: Optional[str] = None,
        public_base_url: Optional[str] = None,
        prefix: str = "creations",
        client=None,
    ):
        self.bucket = bucket or config.S3_BUCKET
        if not self.bucket:
            raise ValueError("S3_BUCKET not configured")
        base = public_base_url if public_base_url is not None else config.ASSET_PUBLIC_BASE_URL
        self.public_base_url = base.rstrip("/") if base else None
        self.prefix = prefix.strip("/")
        self._client = client or boto3.client(
            "s3",
            endpoint_url=config.S3_ENDPOINT_URL,
            region_name=config.S3_REGION,
            aws_access_key_id=config.S3_ACCESS_KEY_ID,
            aws_secret_access_key=config.S3_SECRET_ACCESS_KEY,
        )

    def _key_for(self, content_type: str) -> str:
        ext = _EXTENSIONS.get(content_type, "bin")
        return f"{self.prefix}/{uuid.uuid4().hex}.{ext}"

    def store(self, data: Union[bytes, str], content_type: str = "image/png") -> str:
        if isinstance(data, str):
            data, content_type = decode_data_url(data)

        key = self._key_for(content_type)
        try:
            self._client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
            if self.public_base_url:
                url = f"{self.public_base_url}/{key}"
            else:
                url = self._client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=config.ASSET_URL_EXPIRES_SECONDS,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Asset upload failed: bucket={self.bucket}, key={key}, error={e}")
            raise StorageError() from e

        logger.info(f"Asset stored: key={key}, bytes={len(data)}")
        return url
