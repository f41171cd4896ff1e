"""Builders de parámetros opcionales.

Cada setter sobrescribe su clave (la última escritura gana) y devuelve `self`
para poder encadenar. Solo las claves seteadas aparecen al renderizar; no hay
validación de rango ni de enum.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from core.domain.models import UsersExportField


class ExportFormat(str, Enum):
    """Formatos conocidos de export. `with_format` acepta también cualquier str."""

    CSV = "csv"
    JSON = "json"


class UsersExportFilter:
    def __init__(self) -> None:
        self._parameters: dict[str, Any] = {}

    def with_limit(self, limit: int) -> UsersExportFilter:
        self._parameters["limit"] = limit
        return self

    def with_format(self, format: str | ExportFormat) -> UsersExportFilter:
        self._parameters["format"] = format.value if isinstance(format, ExportFormat) else format
        return self

    def with_fields(self, fields: Iterable[UsersExportField]) -> UsersExportFilter:
        self._parameters["fields"] = list(fields)
        return self

    def as_body(self) -> dict[str, Any]:
        """Snapshot ordenado listo para fusionar en un body JSON."""

        body: dict[str, Any] = {}
        for key, value in self._parameters.items():
            if key == "fields":
                body[key] = [field.as_body() for field in value]
            else:
                body[key] = value
        return body

    def __repr__(self) -> str:
        return f"UsersExportFilter({self._parameters!r})"


class UsersImportOptions:
    """Campos extra del formulario de import, enviados tras el archivo."""

    def __init__(self) -> None:
        self._parameters: dict[str, str] = {}

    def with_upsert(self, upsert: bool) -> UsersImportOptions:
        self._parameters["upsert"] = _form_bool(upsert)
        return self

    def with_external_id(self, external_id: str) -> UsersImportOptions:
        self._parameters["external_id"] = external_id
        return self

    def with_send_completion_email(self, send: bool) -> UsersImportOptions:
        self._parameters["send_completion_email"] = _form_bool(send)
        return self

    def as_form_fields(self) -> list[tuple[str, str]]:
        return list(self._parameters.items())

    def __repr__(self) -> str:
        return f"UsersImportOptions({self._parameters!r})"


def _form_bool(value: bool) -> str:
    return "true" if value else "false"
