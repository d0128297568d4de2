# ============================================================================
# OFF-CHAIN IMAGE STORAGE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Infrastructure - IPFS pinning service client
# PURPOSE: store(binary) -> content ref, resolve content ref -> URL
# CREATED: 19 OCT 2026
# ============================================================================
"""
Off-chain Image Storage

Project images live on IPFS via a pinning service; the ledger stores only
the content ref (CID). This module is the one concrete adapter for the
`store(binary) -> contentRef` capability.

Async httpx client. Credentials: API key + secret headers when both are
configured, bearer JWT otherwise.
"""

import json
from typing import Any, Dict, Optional

import httpx

from core.config import PinningDefaults, get_defaults
from core.errors import ConfigurationError, ImageValidationError, PinningError
from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.STORAGE)


def validate_image(
    size_bytes: int,
    content_type: str,
    defaults: Optional[PinningDefaults] = None,
) -> None:
    """
    Check an image before upload.

    Raises:
        ImageValidationError if too large or not a supported type
    """
    defaults = defaults or get_defaults().pinning
    if size_bytes > defaults.max_image_bytes:
        limit_mb = defaults.max_image_bytes // (1024 * 1024)
        raise ImageValidationError(f"File size must be less than {limit_mb}MB")
    if content_type not in defaults.allowed_image_types:
        raise ImageValidationError("File must be an image (JPEG, PNG, GIF, or WebP)")


def resolve_content_ref(ref: str, gateway_url: Optional[str] = None) -> str:
    """
    Turn a stored content ref into a retrievable URL.

    - http(s) URLs are returned unchanged
    - an ipfs:// prefix is stripped
    - bare CIDs are joined onto the gateway URL
    - empty refs resolve to ""
    """
    if not ref:
        return ""
    if ref.startswith("http://") or ref.startswith("https://"):
        return ref
    if ref.startswith("ipfs://"):
        ref = ref[len("ipfs://"):]
    gateway = (gateway_url or get_defaults().pinning.gateway_url).rstrip("/")
    return f"{gateway}/{ref}"


class PinningClient:
    """
    Async client for the pinning service's pinFileToIPFS endpoint.

    Usage:
        async with PinningClient() as client:
            cid = await client.store(data, "plot.png", "image/png")
    """

    def __init__(
        self,
        defaults: Optional[PinningDefaults] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.defaults = defaults or get_defaults().pinning
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "PinningClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.defaults.request_timeout_seconds)
        return self._client

    def _auth_headers(self) -> Dict[str, str]:
        if self.defaults.api_key and self.defaults.api_secret:
            return {
                "pinata_api_key": self.defaults.api_key,
                "pinata_secret_api_key": self.defaults.api_secret,
            }
        if self.defaults.jwt:
            return {"Authorization": f"Bearer {self.defaults.jwt}"}
        raise ConfigurationError(
            "Pinning credentials are not configured "
            "(set PINATA_JWT or PINATA_API_KEY/PINATA_API_SECRET)"
        )

    async def store(self, data: bytes, filename: str, content_type: str) -> str:
        """
        Upload an image and return its content ref (CID).

        Raises:
            ImageValidationError, ConfigurationError, PinningError
        """
        validate_image(len(data), content_type, self.defaults)
        headers = self._auth_headers()

        files = {"file": (filename, data, content_type)}
        form = {"pinataMetadata": json.dumps({"name": filename})}

        try:
            resp = await self._get_client().post(
                self.defaults.api_url, headers=headers, files=files, data=form
            )
        except httpx.HTTPError as e:
            logger.error(f"Pinning service unreachable: {e}")
            raise PinningError(f"Pinning upload failed: {e}") from e

        if resp.status_code >= 400:
            detail = _error_detail(resp)
            logger.error(f"Pinning service error {resp.status_code}: {detail}")
            raise PinningError(f"Pinning upload failed: {detail}")

        try:
            body: Any = resp.json()
        except ValueError as e:
            logger.error(f"Pinning service returned a non-JSON body ({resp.status_code})")
            raise PinningError("Pinning upload failed: response was not JSON") from e

        ipfs_hash = body.get("IpfsHash") if isinstance(body, dict) else None
        if not ipfs_hash:
            raise PinningError("Pinning upload failed: response had no IpfsHash")

        logger.info(f"Pinned {filename} as {ipfs_hash}")
        return ipfs_hash

    def url_for(self, ref: str) -> str:
        return resolve_content_ref(ref, self.defaults.gateway_url)


def _error_detail(resp: httpx.Response) -> str:
    """Best-effort human-readable error from a pinning service response."""
    try:
        body: Any = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("details") or error.get("reason") or error)
        if error:
            return str(error)
    return json.dumps(body)


__all__ = ["PinningClient", "validate_image", "resolve_content_ref"]
