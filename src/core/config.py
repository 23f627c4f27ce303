"""Configuración del Core.

Dos capas:
- `ClientConfig`: valor inmutable con el que se construye un `SudojoClient`
  (base URL, token estático opcional, timeout de validate). El cliente nunca
  lee el entorno; quien lo construye se lo pasa explícitamente.
- `AppSettings` (pydantic-settings): lee variables `SUDOJO_*` y ficheros `.env`
  para la CLI y los adaptadores, y produce un `ClientConfig`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
)

DEFAULT_VALIDATE_TIMEOUT_SECONDS = 120.0


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (multiplataforma, sin dependencias extra)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "sudojo"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "sudojo"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sudojo"
    return Path.home() / ".config" / "sudojo"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# sudojo-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ClientConfig(BaseModel):
    """Configuración inmutable de un `SudojoClient`."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1, description="API root, trailing slashes stripped.")
    api_token: str | None = Field(
        default=None,
        description="Static bearer token used when a call supplies no credential.",
    )
    validate_timeout_seconds: float = Field(
        default=DEFAULT_VALIDATE_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout override for the validate endpoint (iterative solving).",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped:
            raise ValueError("base_url must not be empty")
        return stripped

    @field_validator("api_token")
    @classmethod
    def _blank_token_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def default_headers(self) -> Mapping[str, str]:
        return DEFAULT_HEADERS


class AppSettings(BaseSettings):
    """Settings de la aplicación (CLI + adaptadores).

    Por qué pydantic-settings:
    - Variables de entorno tipadas y validadas en el borde, sin que el propio
      cliente acceda al entorno.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUDOJO_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="http://localhost:3000",
        min_length=1,
        description="Root URL of the Sudojo API.",
    )
    api_token: str | None = Field(
        default=None,
        description="Optional static bearer token.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Default transport timeout per request (seconds).",
    )
    validate_timeout_seconds: float = Field(
        default=DEFAULT_VALIDATE_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for /solver/validate (seconds).",
    )
    user_agent: str = Field(
        default="sudojo-client/0.1",
        min_length=1,
        description="User-Agent sent by the httpx transport.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the CLI (DEBUG, INFO, WARNING...).",
    )

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            base_url=self.base_url,
            api_token=self.api_token,
            validate_timeout_seconds=self.validate_timeout_seconds,
        )
