"""Implementación httpx del protocolo `NetworkClient`.

Por qué un wrapper:
- Estandariza timeouts, headers y User-Agent en todas las llamadas.
- Mantiene httpx fuera del Core: el cliente solo ve `NetworkResponse`, así que
  un test puede sustituirlo por un transporte fake (o `httpx.MockTransport`).
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import SudojoTransportError
from core.interfaces.transport import MISSING, HttpMethod, NetworkResponse

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los llamadores se comporten igual.
    - `transport` permite a los tests enchufar `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    """JSON si es posible, texto crudo si no; `MISSING` para un body vacío."""

    if not response.content:
        return MISSING
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def to_network_response(response: httpx.Response) -> NetworkResponse:
    return NetworkResponse(
        ok=response.is_success,
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=dict(response.headers),
        data=_decode_body(response),
    )


class HttpxNetworkClient:
    """`NetworkClient` respaldado por un único `httpx.AsyncClient` compartido.

    Uso:
        async with HttpxNetworkClient(settings) as transport:
            client = SudojoClient(transport, settings.to_client_config())
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_async_client(self._settings)

    async def request(
        self,
        url: str,
        *,
        method: HttpMethod,
        headers: dict[str, str],
        body: str | None = None,
        timeout: float | None = None,
    ) -> NetworkResponse:
        kwargs: dict[str, Any] = {"headers": headers}
        if body is not None:
            kwargs["content"] = body
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, url)
            raise SudojoTransportError(f"Request timed out: {method} {url}", url=url) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise SudojoTransportError(f"Request failed: {method} {url}: {exc}", url=url) from exc

        return to_network_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpxNetworkClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
