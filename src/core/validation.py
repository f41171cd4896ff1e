"""Validación de argumentos requeridos.

Se ejecuta antes de construir cualquier body o request: un fallo nunca deja
un request a medio construir.
"""

from __future__ import annotations

from typing import TypeVar

from core.errors import InvalidArgumentError

T = TypeVar("T")


def require_non_empty(label: str, value: T | None) -> T:
    """Devuelve `value` o lanza `InvalidArgumentError("'<label>' cannot be null!")`.

    Cadenas vacías cuentan como ausentes.
    """

    if value is None or (isinstance(value, str) and value == ""):
        raise InvalidArgumentError(f"'{label}' cannot be null!")
    return value
