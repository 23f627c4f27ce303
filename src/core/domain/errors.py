"""Taxonomía de errores del cliente Sudojo.

Todo fallo que lanza el cliente deriva de `SudojoError` y lleva un
discriminante `kind`, así que se puede ramificar con una comparación simple
(`if exc.kind == "accessDenied": ...`) en vez de cadenas de `isinstance`.

Kinds:
- validation   -> entrada inválida, antes de cualquier llamada de red.
- transport    -> falló la propia capa de red (lo lanzan los adaptadores).
- noData       -> llegó una respuesta sin payload.
- api          -> status HTTP no exitoso.
- accessDenied -> paywall 402 de pistas en el endpoint solve.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

ErrorKind = Literal["validation", "transport", "noData", "api", "accessDenied"]

ValidationReason = Literal["required", "invalid_format", "out_of_range", "invalid_length"]

HINT_ACCESS_DENIED_CODE = "HINT_ACCESS_DENIED"


class SudojoError(Exception):
    """Clase base de todos los errores que lanza el cliente."""

    kind: ClassVar[ErrorKind]


class SudojoValidationError(SudojoError, ValueError):
    """Entrada rechazada localmente (identificador, fecha, rango o longitud)."""

    kind: ClassVar[ErrorKind] = "validation"

    def __init__(
        self,
        message: str,
        *,
        reason: ValidationReason,
        field: str,
        value: Any = None,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class SudojoTransportError(SudojoError):
    """El transporte no pudo completar el intercambio (DNS, conexión, timeout...)."""

    kind: ClassVar[ErrorKind] = "transport"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class SudojoNoDataError(SudojoError):
    """Llegó una respuesta pero sin nada utilizable."""

    kind: ClassVar[ErrorKind] = "noData"

    def __init__(self, message: str = "No data received from server", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SudojoApiError(SudojoError):
    """Status HTTP no exitoso devuelto por el backend."""

    kind: ClassVar[ErrorKind] = "api"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status_text: str = "",
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.detail = detail


class HintAccessDeniedError(SudojoApiError):
    """402 del solver: el nivel de pista pedido requiere un entitlement superior.

    Lleva contexto suficiente para ofrecer un upgrade: el nivel de pista
    solicitado, el entitlement que lo desbloquea y lo que tiene el usuario.
    """

    kind: ClassVar[ErrorKind] = "accessDenied"
    code: ClassVar[str] = HINT_ACCESS_DENIED_CODE

    def __init__(
        self,
        message: str,
        *,
        hint_level: int | None,
        required_entitlement: str | None,
        user_state: Any = None,
        status_code: int = 402,
        status_text: str = "Payment Required",
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, status_text=status_text, detail=detail)
        self.hint_level = hint_level
        self.required_entitlement = required_entitlement
        self.user_state = user_state
