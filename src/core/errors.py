"""Errores del cliente.

Dos momentos de fallo distintos:
- construcción del request (`InvalidArgumentError`, síncrono, sin I/O);
- ejecución (`TransportError` y subclases, `DecodeError`).
"""

from __future__ import annotations

from typing import Any


class JobsClientError(Exception):
    """Raíz de todos los errores propios del cliente."""


class InvalidArgumentError(JobsClientError, ValueError):
    """Parámetro requerido ausente o vacío."""


class TransportError(JobsClientError):
    """Fallo de red o respuesta HTTP no exitosa."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiError(TransportError):
    """Respuesta no-2xx de la API, con el payload de error si pudo decodificarse."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error: str | None = None,
        error_code: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.error = error
        self.error_code = error_code
        self.payload = payload


class RateLimitError(ApiError):
    """HTTP 429. Expone los headers `X-RateLimit-*` cuando vienen en la respuesta."""

    def __init__(
        self,
        message: str,
        *,
        limit: int | None = None,
        remaining: int | None = None,
        reset: int | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        self.limit = limit
        self.remaining = remaining
        self.reset = reset


class DecodeError(JobsClientError):
    """Respuesta 2xx cuyo cuerpo no tiene la forma esperada."""

    def __init__(self, message: str, *, status_code: int | None = None, body: bytes = b"") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
