"""Construcción determinista del query string.

Reglas:
- las claves salen en orden lexicográfico ascendente, sea cual sea el orden de
  inserción, así que una misma petición lógica siempre da la misma URL;
- los valores se codifican en porcentaje salvo `,` (las listas de pencilmarks
  y de técnicas van separadas por comas y el solver las espera tal cual);
- `None` significa "ausente" y elimina el parámetro; `""` es un valor presente;
- sin `?` cuando no queda nada.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_format_value(v) for v in value)
    return str(value)


def build_query(params: Mapping[str, Any] | None) -> str:
    if not params:
        return ""
    parts: list[str] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        parts.append(f"{quote(str(key), safe='')}={quote(_format_value(value), safe=',')}")
    return "&".join(parts)


def build_path(path: str, params: Mapping[str, Any] | None = None) -> str:
    query = build_query(params)
    return f"{path}?{query}" if query else path


def join_url(base_url: str, path: str) -> str:
    """Une una base URL normalizada (sin barra final) y una ruta absoluta."""

    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
