from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import boto3

from src.infrastructure.storage.ports import PresignedUpload, StorageService

logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per call
DELETE_BATCH_SIZE = 1000


@dataclass(slots=True)
class S3StorageService(StorageService):
    bucket: str
    region: str
    prefix: str = ""
    public_url_base: str | None = None

    def __post_init__(self) -> None:
        self._s3 = boto3.client("s3", region_name=self.region)

    def _full_key(self, key: str) -> str:
        if self.prefix and not key.startswith(self.prefix):
            return f"{self.prefix}{key}"
        return key

    async def get_presigned_upload(
        self, key: str, content_type: str, *, expires_seconds: int = 600
    ) -> PresignedUpload:
        full_key = self._full_key(key)
        conditions = [
            {"bucket": self.bucket},
            ["starts-with", "$key", full_key.rsplit("/", 1)[0] + "/"],
            {"Content-Type": content_type},
        ]
        post = self._s3.generate_presigned_post(
            Bucket=self.bucket,
            Key=full_key,
            Fields={"Content-Type": content_type},
            Conditions=conditions,
            ExpiresIn=expires_seconds,
        )
        return PresignedUpload(upload_url=post["url"], storage_key=full_key, fields=post["fields"])

    async def get_public_url(self, key: str) -> str:
        full_key = self._full_key(key)
        if self.public_url_base:
            base = self.public_url_base.rstrip("/")
            return f"{base}/{full_key}"
        # default AWS URL
        if self.region == "us-east-1":
            return f"https://{self.bucket}.s3.amazonaws.com/{full_key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{full_key}"

    async def delete_objects(self, keys: Iterable[str]) -> int:
        full_keys = [self._full_key(k) for k in keys if k]
        deleted = 0
        for start in range(0, len(full_keys), DELETE_BATCH_SIZE):
            batch = full_keys[start : start + DELETE_BATCH_SIZE]
            response = self._s3.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
            )
            errors = response.get("Errors") or []
            for err in errors:
                logger.warning(
                    "S3 delete failed for key=%s: %s", err.get("Key"), err.get("Message")
                )
            deleted += len(batch) - len(errors)
        logger.info("Deleted %s object(s) from bucket %s", deleted, self.bucket)
        return deleted
