"""Shared fixtures: a recording fake transport and ready-made clients."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

from core.config import ClientConfig
from core.interfaces.transport import MISSING, NetworkResponse
from core.services.sudojo_client import SudojoClient

BASE_URL = "http://localhost:5000"

PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"

LEVEL_UUID = "123e4567-e89b-12d3-a456-426614174000"


@dataclass
class RecordedCall:
    url: str
    method: str
    headers: dict[str, str]
    body: str | None
    timeout: float | None

    @property
    def json(self) -> Any:
        return None if self.body is None else json.loads(self.body)


def ok(data: Any = None, *, status: int = 200, envelope: bool = True) -> NetworkResponse:
    payload = {"success": True, "data": data, "timestamp": "2025-01-01T00:00:00Z"} if envelope else data
    return NetworkResponse(ok=True, status=status, status_text="OK", data=payload)


def fail(status: int, data: Any = MISSING, status_text: str = "") -> NetworkResponse:
    return NetworkResponse(ok=False, status=status, status_text=status_text, data=data)


@dataclass
class RecordingTransport:
    """Fake `NetworkClient`: records every call, answers from a handler or a queue."""

    responses: list[NetworkResponse] = field(default_factory=list)
    handler: Callable[[RecordedCall], NetworkResponse] | None = None
    error: Exception | None = None
    calls: list[RecordedCall] = field(default_factory=list)

    async def request(
        self,
        url: str,
        *,
        method: str,
        headers: dict[str, str],
        body: str | None = None,
        timeout: float | None = None,
    ) -> NetworkResponse:
        call = RecordedCall(url=url, method=method, headers=dict(headers), body=body, timeout=timeout)
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        if self.handler is not None:
            return self.handler(call)
        if self.responses:
            return self.responses.pop(0)
        return ok({})

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def client(transport: RecordingTransport, config: ClientConfig) -> SudojoClient:
    return SudojoClient(transport, config)
