"""Exportación JSON de respuestas de la API.

Por qué JSON:
- Interoperabilidad con otras herramientas de Sudoku y pipelines.
- Permite persistir un puzzle generado/resuelto sin volver a llamar al solver.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel


def export_response_json(*, response: BaseModel, output_path: Path) -> Path:
    """Exporta un modelo de respuesta a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = response.model_dump(mode="json", by_alias=True, exclude_none=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
