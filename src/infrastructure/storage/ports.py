from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol


@dataclass(slots=True)
class PresignedUpload:
    upload_url: str
    storage_key: str
    fields: dict[str, str] | None = None


class StorageService(Protocol):
    async def get_presigned_upload(
        self, key: str, content_type: str, *, expires_seconds: int = 600
    ) -> PresignedUpload: ...

    async def get_public_url(self, key: str) -> str: ...

    async def delete_objects(self, keys: Iterable[str]) -> int: ...
