"""Content-addressed blob storage for assessment reports and certificates.

``put`` returns an address derived from the stored bytes; ``get`` returns the
JSON object stored under that address. Transport and provider failures are
raised as StorageUnavailable.
"""

import hashlib
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from config import settings
from services.errors import NotFound, StorageUnavailable

logger = logging.getLogger(__name__)


def canonical_json(obj: Any) -> bytes:
    """Stable serialization: same object -> same bytes."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class BlobStore(ABC):

    @abstractmethod
    async def put(self, obj: dict) -> str:
        """Store a JSON object, return its content address."""

    @abstractmethod
    async def get(self, address: str) -> dict:
        """Fetch the JSON object stored under ``address``."""


class InMemoryBlobStore(BlobStore):
    """Local content-addressed store (sha256 of canonical JSON).

    Used when no pinning provider is configured, and in tests.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    async def put(self, obj: dict) -> str:
        data = canonical_json(obj)
        address = "sha256-" + hashlib.sha256(data).hexdigest()
        self._blobs[address] = data
        return address

    async def get(self, address: str) -> dict:
        data = self._blobs.get(address)
        if data is None:
            raise NotFound(f"No blob stored at {address}")
        return json.loads(data)

    def __len__(self) -> int:
        return len(self._blobs)


class PinataBlobStore(BlobStore):
    """IPFS pinning through the Pinata HTTP API."""

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        api_url: str = settings.pinata_api_url,
        gateway_url: str = settings.pinata_gateway_url,
        timeout: float = settings.blob_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._headers = {
            "pinata_api_key": api_key,
            "pinata_secret_api_key": secret_key,
        }
        self._api_url = api_url.rstrip("/")
        self._gateway_url = gateway_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def url_for(self, address: str) -> str:
        return f"{self._gateway_url}/{address}"

    async def put(self, obj: dict) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self._api_url}/pinning/pinJSONToIPFS",
                    content=canonical_json(obj),
                    headers={**self._headers, "Content-Type": "application/json"},
                )
                response.raise_for_status()
                address = response.json()["IpfsHash"]
        except httpx.HTTPStatusError as e:
            logger.error("Pinata rejected pin request (%s): %s", e.response.status_code, e)
            raise StorageUnavailable("Blob store rejected the upload") from e
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Pinata upload failed: %s", e)
            raise StorageUnavailable("Blob store is unreachable") from e

        logger.info("Pinned blob %s", address)
        return address

    async def get(self, address: str) -> dict:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(self.url_for(address))
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFound(f"No blob stored at {address}") from e
            logger.error("Gateway error %s for %s", e.response.status_code, address)
            raise StorageUnavailable("Blob store gateway error") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch blob %s: %s", address, e)
            raise StorageUnavailable("Blob store is unreachable") from e
