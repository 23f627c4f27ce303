"""Tests for the httpx transport adapter (httpx.MockTransport, no network)."""

import httpx
import pytest

from adapters.http_client import HttpxNetworkClient, build_async_client
from core.config import AppSettings, ClientConfig
from core.domain.errors import SudojoTransportError
from core.interfaces.transport import NetworkClient
from core.services.sudojo_client import SudojoClient

from conftest import PUZZLE, SOLUTION


def make_transport(handler) -> HttpxNetworkClient:
    settings = AppSettings(_env_file=None, user_agent="sudojo-tests/1.0")
    client = build_async_client(settings, transport=httpx.MockTransport(handler))
    return HttpxNetworkClient(settings, client=client)


class TestHttpxNetworkClient:
    """Test response mapping and error translation."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(make_transport(lambda request: httpx.Response(200)), NetworkClient)

    @pytest.mark.asyncio
    async def test_json_response(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": {"status": "ok"}})

        async with make_transport(handler) as transport:
            response = await transport.request(
                "http://api.test/", method="GET", headers={"Accept": "application/json"}
            )

        assert response.ok
        assert response.status == 200
        assert response.data == {"success": True, "data": {"status": "ok"}}
        assert seen[0].headers["User-Agent"] == "sudojo-tests/1.0"

    @pytest.mark.asyncio
    async def test_empty_body_has_no_data(self) -> None:
        async with make_transport(lambda request: httpx.Response(204)) as transport:
            response = await transport.request("http://api.test/x", method="DELETE", headers={})
        assert not response.has_data

    @pytest.mark.asyncio
    async def test_text_body_kept_as_text(self) -> None:
        async with make_transport(lambda request: httpx.Response(502, text="Bad gateway")) as transport:
            response = await transport.request("http://api.test/x", method="GET", headers={})
        assert not response.ok
        assert response.data == "Bad gateway"
        assert response.status_text == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_body_sent_as_content(self) -> None:
        bodies: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return httpx.Response(201, json={"success": True, "data": {}})

        async with make_transport(handler) as transport:
            await transport.request("http://api.test/x", method="POST", headers={}, body='{"level": 1}')

        assert bodies == [b'{"level": 1}']

    @pytest.mark.asyncio
    async def test_connect_error_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(SudojoTransportError) as info:
                await transport.request("http://api.test/x", method="GET", headers={})

        assert info.value.kind == "transport"
        assert info.value.url == "http://api.test/x"
        assert isinstance(info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(SudojoTransportError, match="timed out"):
                await transport.request("http://api.test/x", method="GET", headers={}, timeout=1.0)


class TestEndToEnd:
    """Client + httpx adapter together."""

    @pytest.mark.asyncio
    async def test_validate_through_httpx(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/solver/validate"
            assert request.url.params["original"] == PUZZLE
            return httpx.Response(
                200, json={"success": True, "data": {"board": {"original": PUZZLE, "solution": SOLUTION}}}
            )

        async with make_transport(handler) as transport:
            client = SudojoClient(transport, ClientConfig(base_url="http://api.test/"))
            result = await client.validate({"original": PUZZLE})

        assert result.data.board.solution == SOLUTION
