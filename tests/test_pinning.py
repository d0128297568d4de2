# ============================================================================
# OFF-CHAIN IMAGE STORAGE TESTS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Tests - Pinning client
# PURPOSE: Verify image validation, auth headers, and content ref resolution
# CREATED: 19 OCT 2026
# ============================================================================
"""
Pinning Client Tests

HTTP is served by httpx.MockTransport; nothing leaves the process.

Run with:
    pytest tests/test_pinning.py -v
"""

import asyncio
import pytest

import httpx

from core.config import PinningDefaults
from core.errors import ConfigurationError, ImageValidationError, PinningError
from infrastructure.pinning import PinningClient, resolve_content_ref, validate_image

API_URL = "https://pin.example/pinning/pinFileToIPFS"
GATEWAY = "https://gw.example/ipfs"


def _defaults(**overrides):
    values = {"api_url": API_URL, "gateway_url": GATEWAY, "jwt": "jwt-token"}
    values.update(overrides)
    return PinningDefaults(**values)


def _client(handler, **overrides):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PinningClient(defaults=_defaults(**overrides), client=http), http


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidateImage:

    def test_accepts_png(self):
        validate_image(1024, "image/png", _defaults())

    def test_rejects_large_file(self):
        with pytest.raises(ImageValidationError) as exc_info:
            validate_image(11 * 1024 * 1024, "image/png", _defaults())
        assert "10MB" in str(exc_info.value)

    def test_rejects_non_image(self):
        with pytest.raises(ImageValidationError):
            validate_image(10, "application/pdf", _defaults())


class TestResolveContentRef:

    def test_http_ref_unchanged(self):
        assert resolve_content_ref("https://cdn.example/a.png", GATEWAY) == "https://cdn.example/a.png"

    def test_ipfs_scheme_stripped(self):
        assert resolve_content_ref("ipfs://QmAbc", GATEWAY) == f"{GATEWAY}/QmAbc"

    def test_bare_cid(self):
        assert resolve_content_ref("QmAbc", GATEWAY + "/") == f"{GATEWAY}/QmAbc"

    def test_empty_ref(self):
        assert resolve_content_ref("", GATEWAY) == ""


# ============================================================================
# UPLOAD
# ============================================================================

class TestStore:

    def test_upload_returns_cid(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = request.content
            return httpx.Response(200, json={"IpfsHash": "QmPlot", "PinSize": 4})

        client, http = _client(handler)

        async def run():
            try:
                return await client.store(b"\x89PNG", "plot.png", "image/png")
            finally:
                await http.aclose()

        assert asyncio.run(run()) == "QmPlot"
        assert seen["url"] == API_URL
        assert seen["auth"] == "Bearer jwt-token"
        assert b"plot.png" in seen["body"]

    def test_key_and_secret_preferred(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={"IpfsHash": "Qm1"})

        client, http = _client(handler, api_key="key", api_secret="secret")
        asyncio.run(client.store(b"x", "a.png", "image/png"))
        assert seen["pinata_api_key"] == "key"
        assert seen["pinata_secret_api_key"] == "secret"
        assert "authorization" not in seen

    def test_missing_credentials(self):
        client, _ = _client(lambda request: httpx.Response(200), jwt=None)
        with pytest.raises(ConfigurationError):
            asyncio.run(client.store(b"x", "a.png", "image/png"))

    def test_service_error_detail(self):
        def handler(request):
            return httpx.Response(401, json={"error": {"reason": "INVALID_CREDENTIALS"}})

        client, _ = _client(handler)
        with pytest.raises(PinningError) as exc_info:
            asyncio.run(client.store(b"x", "a.png", "image/png"))
        assert "INVALID_CREDENTIALS" in str(exc_info.value)

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client, _ = _client(handler)
        with pytest.raises(PinningError):
            asyncio.run(client.store(b"x", "a.png", "image/png"))

    def test_invalid_image_never_uploaded(self):
        calls = []
        client, _ = _client(lambda request: calls.append(request) or httpx.Response(200))
        with pytest.raises(ImageValidationError):
            asyncio.run(client.store(b"x", "a.txt", "text/plain"))
        assert calls == []

    def test_url_for(self):
        client, _ = _client(lambda request: httpx.Response(200))
        assert client.url_for("QmZ") == f"{GATEWAY}/QmZ"

    def test_non_json_success_body(self):
        client, _ = _client(lambda request: httpx.Response(200, text="<html>ok</html>"))
        with pytest.raises(PinningError) as exc_info:
            asyncio.run(client.store(b"x", "a.png", "image/png"))
        assert "not JSON" in str(exc_info.value)

    def test_json_list_body(self):
        client, _ = _client(lambda request: httpx.Response(200, json=["QmPlot"]))
        with pytest.raises(PinningError):
            asyncio.run(client.store(b"x", "a.png", "image/png"))
