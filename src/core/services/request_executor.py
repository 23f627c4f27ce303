"""Request pipeline: headers, auth, body, transport, envelope unwrapping.

Every façade method funnels through `RequestExecutor.send`, which:
1. merges the default headers with per-call overrides;
2. adds `Authorization: Bearer <token>` only when a token is present;
3. serializes the body to JSON for non-GET methods only;
4. hands the request to the transport and interprets its envelope.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from core.config import ClientConfig
from core.domain.errors import (
    HINT_ACCESS_DENIED_CODE,
    HintAccessDeniedError,
    SudojoApiError,
    SudojoNoDataError,
)
from core.domain.models import HintAccessDeniedPayload
from core.interfaces.transport import HttpMethod, NetworkClient, NetworkResponse
from core.query_string import join_url

logger = logging.getLogger(__name__)

PAYMENT_REQUIRED = 402


@dataclass(frozen=True)
class RequestDescriptor:
    """One outgoing request, built fresh per call."""

    method: HttpMethod
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout: float | None = None


def _serialize_body(body: Any) -> str:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", exclude_none=True)
    return json.dumps(body)


def build_request(
    *,
    method: HttpMethod,
    default_headers: Mapping[str, str],
    headers: Mapping[str, str] | None = None,
    token: str | None = None,
    body: Any = None,
    timeout: float | None = None,
) -> RequestDescriptor:
    merged = {**default_headers, **(headers or {})}
    if token:
        merged["Authorization"] = f"Bearer {token}"

    payload = None
    # GET never carries a body, even if the caller passed one.
    if body is not None and method != "GET":
        payload = _serialize_body(body)

    return RequestDescriptor(method=method, headers=merged, body=payload, timeout=timeout)


def _error_message(response: NetworkResponse) -> str:
    data = response.data
    detail: Any = None
    if isinstance(data, dict):
        detail = data.get("error") or data.get("message")
        if isinstance(detail, dict):
            detail = detail.get("message") or detail.get("code")
    elif isinstance(data, str) and data.strip():
        detail = data.strip()
    reason = detail or response.status_text or "request failed"
    return f"Sudojo API error {response.status}: {reason}"


def _access_denied_payload(data: Any) -> HintAccessDeniedPayload | None:
    """Find a recognized paywall payload, top-level or nested under `error`."""

    if not isinstance(data, dict):
        return None
    for candidate in (data, data.get("error")):
        if isinstance(candidate, dict) and candidate.get("code") == HINT_ACCESS_DENIED_CODE:
            try:
                return HintAccessDeniedPayload.model_validate(candidate)
            except ValidationError as exc:
                logger.warning("Malformed %s payload: %s errors", HINT_ACCESS_DENIED_CODE, exc.error_count())
                return None
    return None


class RequestExecutor:
    """Turns a path + options into a transport call and unwraps the result."""

    def __init__(self, transport: NetworkClient, config: ClientConfig) -> None:
        self._transport = transport
        self._config = config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def send(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        token: str | None = None,
        timeout: float | None = None,
        paywall: bool = False,
    ) -> NetworkResponse:
        """Perform the request and return the successful response.

        Raises:
        - SudojoNoDataError: the envelope carries no payload (whatever `ok` says).
        - HintAccessDeniedError: `paywall=True` and a recognized 402 payload.
        - SudojoApiError: any other non-success status.
        Transport exceptions propagate unchanged.
        """

        url = join_url(self._config.base_url, path)
        request = build_request(
            method=method,
            default_headers=self._config.default_headers,
            headers=headers,
            token=token,
            body=body,
            timeout=timeout,
        )

        logger.debug(
            "%s %s (auth=%s, timeout=%s)",
            request.method,
            url,
            "yes" if token else "no",
            request.timeout,
        )
        response = await self._transport.request(
            url,
            method=request.method,
            headers=dict(request.headers),
            body=request.body,
            timeout=request.timeout,
        )

        if not response.has_data:
            logger.warning("%s %s -> %s with no payload", request.method, url, response.status)
            raise SudojoNoDataError(status_code=response.status)

        if not response.ok:
            logger.warning("%s %s -> %s %s", request.method, url, response.status, response.status_text)
            if paywall and response.status == PAYMENT_REQUIRED:
                denied = _access_denied_payload(response.data)
                if denied is not None:
                    raise HintAccessDeniedError(
                        denied.message or "Hint access denied",
                        hint_level=denied.hint_level,
                        required_entitlement=denied.required_entitlement,
                        user_state=denied.user_state,
                        status_code=response.status,
                        status_text=response.status_text or "Payment Required",
                        detail=response.data,
                    )
            raise SudojoApiError(
                _error_message(response),
                status_code=response.status,
                status_text=response.status_text,
                detail=response.data,
            )

        return response

    async def execute(self, path: str, **kwargs: Any) -> Any:
        """Like `send`, but return only the decoded payload."""

        response = await self.send(path, **kwargs)
        return response.data
