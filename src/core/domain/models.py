"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación de forma de las respuestas sin acoplar el Core a httpx.
- `model_dump(exclude_none=True)` da gratis la regla "campo ausente = clave
  omitida" que exige el body de exportación.

Nota:
- `Job` es opaco: solo se comprueba que sea un objeto; el resto se conserva.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.validation import require_non_empty


class Job(BaseModel):
    """Job asíncrono devuelto por la API (export, import, verification email)."""

    model_config = ConfigDict(extra="allow")

    id: str | None = Field(
        default=None,
        description="Identificador del job (p.ej. 'job_0000000000000001').",
    )
    status: str | None = Field(
        default=None,
        description="Estado: pending, processing, completed, failed.",
    )
    type: str | None = Field(
        default=None,
        description="Tipo de job (users_export, users_import, verification_email).",
    )
    created_at: datetime | None = None
    connection_id: str | None = None
    connection: str | None = None
    format: str | None = None
    limit: int | None = None
    fields: list[dict[str, Any]] | None = None
    location: str | None = Field(
        default=None,
        description="URL de descarga del export cuando el job termina.",
    )
    percentage_done: int | None = None
    time_left_seconds: int | None = None
    summary: dict[str, Any] | None = None


class JobError(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: str | None = None
    message: str | None = None
    path: str | None = None


class JobErrorDetails(BaseModel):
    """Un registro de usuario que falló durante un import."""

    model_config = ConfigDict(extra="allow")

    user: dict[str, Any] = Field(default_factory=dict)
    errors: list[JobError] = Field(default_factory=list)


class UsersExportField(BaseModel):
    """Campo a exportar: `name` es la ruta origen (admite puntos), `export_as` el alias."""

    name: str
    export_as: str | None = None

    def __init__(self, name: str | None = None, export_as: str | None = None, **data: Any) -> None:
        data["name"] = require_non_empty("name", name if name is not None else data.get("name"))
        if export_as is not None:
            data["export_as"] = export_as
        super().__init__(**data)

    def as_body(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class EmailVerificationIdentity(BaseModel):
    """Identidad secundaria a verificar (usuarios con cuentas vinculadas)."""

    provider: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)

    def as_body(self) -> dict[str, str]:
        return {"user_id": self.user_id, "provider": self.provider}
