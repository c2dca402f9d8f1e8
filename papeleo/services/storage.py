"""Client for the hosted object storage REST API (Supabase-compatible)."""

import logging

import httpx

from papeleo.core.config import settings
from papeleo.errors import StorageError

logger = logging.getLogger(__name__)


class StorageClient:
    """Upload, publish, sign and remove objects in storage buckets.

    Every method raises StorageError on a non-2xx answer or a transport error.
    """

    def __init__(self, base_url: str | None, service_key: str | None, timeout: float = 30.0):
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key
        self.timeout = timeout

    def _require_configured(self) -> None:
        if not self.base_url or not self.service_key:
            raise StorageError(
                "Storage is not configured. Please configure STORAGE_URL and STORAGE_SERVICE_KEY in .env file."
            )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key or "",
        }

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        self._require_configured()
        url = f"{self.base_url}/storage/v1{path}"
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            logger.error("Storage %s %s failed with status %s", method, path, e.response.status_code)
            raise StorageError(
                f"Storage request failed with status {e.response.status_code}: {e.response.text}"
            )
        except httpx.RequestError as e:
            logger.error("Storage %s %s failed: %s", method, path, e)
            raise StorageError(f"Storage request failed: {str(e)}")

    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str | None = None,
        bucket: str | None = None,
        upsert: bool = True,
    ) -> str:
        """Store ``content`` at ``path`` and return the path."""
        bucket = bucket or settings.storage_bucket
        await self._request(
            "POST",
            f"/object/{bucket}/{path}",
            content=content,
            headers={
                "Content-Type": content_type or "application/octet-stream",
                "x-upsert": "true" if upsert else "false",
            },
        )
        return path

    def get_public_url(self, path: str, bucket: str | None = None) -> str:
        bucket = bucket or settings.storage_bucket
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def create_signed_url(
        self, path: str, expires_in: int, bucket: str | None = None
    ) -> str:
        bucket = bucket or settings.storage_bucket
        response = await self._request(
            "POST", f"/object/sign/{bucket}/{path}", json={"expiresIn": expires_in}
        )
        signed = response.json().get("signedURL") or response.json().get("signedUrl")
        if not signed:
            raise StorageError(f"Storage returned no signed URL for {path}")
        return f"{self.base_url}/storage/v1{signed}"

    async def remove(self, paths: list[str], bucket: str | None = None) -> None:
        bucket = bucket or settings.storage_bucket
        await self._request("DELETE", f"/object/{bucket}", json={"prefixes": paths})


def get_storage_client() -> StorageClient:
    return StorageClient(settings.storage_url, settings.storage_service_key)
