"""Contrato del transporte de red.

Por qué Protocol:
- El cliente nunca abre sockets ni parsea HTTP crudo; entrega una petición ya
  construida a cualquier objeto que cumpla `NetworkClient` e interpreta el
  `NetworkResponse` normalizado que recibe.
- El adaptador httpx, los fakes de test y los transportes record/replay son
  intercambiables sin heredar de una clase concreta.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Protocol, runtime_checkable

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


class _Missing:
    """Marca una respuesta sin ningún payload (distinto de un JSON null)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class NetworkResponse:
    """Envelope de respuesta normalizado que produce un transporte."""

    ok: bool
    status: int
    status_text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Any = MISSING

    @property
    def has_data(self) -> bool:
        return self.data is not MISSING


@runtime_checkable
class NetworkClient(Protocol):
    """Contrato mínimo del objeto que hace el I/O real.

    Reglas:
    - `body` ya viene serializado (texto JSON) o es None.
    - `timeout` en segundos; None significa "default del transporte".
    - Los fallos de transporte se lanzan, nunca se codifican en el envelope.
    """

    async def request(
        self,
        url: str,
        *,
        method: HttpMethod,
        headers: Mapping[str, str],
        body: str | None = None,
        timeout: float | None = None,
    ) -> NetworkResponse:
        ...
