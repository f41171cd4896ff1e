"""Entidad Jobs de la Management API.

Cada operación:
1. valida sus argumentos requeridos (síncrono, antes de tocar filtros);
2. congela el body (JSON o multipart) en un snapshot propio;
3. devuelve un `DeferredRequest` sin hacer I/O.
"""

from __future__ import annotations

import os
from typing import Any, Callable
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from adapters.multipart import MultipartBody
from adapters.request import JSON_CONTENT_TYPE, DeferredRequest, JsonBody
from core.domain.filters import UsersExportFilter, UsersImportOptions
from core.domain.models import EmailVerificationIdentity, Job, JobErrorDetails
from core.validation import require_non_empty

USERS_FILE_CONTENT_TYPE = "text/json"

_job_errors_adapter = TypeAdapter(list[JobErrorDetails])


def _decode_job_errors(payload: Any) -> list[JobErrorDetails]:
    # Un job sin errores responde con el propio job (objeto), no con una lista.
    if isinstance(payload, dict):
        return []
    return _job_errors_adapter.validate_python(payload)


class JobsEntity:
    """Fábrica de requests para `/jobs`."""

    def __init__(
        self,
        base_url: str,
        client: httpx.Client,
        async_client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = client
        self._async_client_factory = async_client_factory

    def _url(self, *segments: str) -> str:
        return self._base_url + "/".join(quote(s, safe="") for s in segments)

    def _request(self, method: str, url: str, decoder: Callable[[Any], Any], **kwargs: Any) -> DeferredRequest[Any]:
        return DeferredRequest(
            method,
            url,
            decoder=decoder,
            client=self._client,
            async_client_factory=self._async_client_factory,
            **kwargs,
        )

    def get(self, job_id: str) -> DeferredRequest[Job]:
        """`GET jobs/{id}`."""

        require_non_empty("job id", job_id)
        return self._request(
            "GET",
            self._url("jobs", job_id),
            Job.model_validate,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    def get_errors(self, job_id: str) -> DeferredRequest[list[JobErrorDetails]]:
        """`GET jobs/{id}/errors`: registros fallidos de un import."""

        require_non_empty("job id", job_id)
        return self._request(
            "GET",
            self._url("jobs", job_id, "errors"),
            _decode_job_errors,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    def export_users(
        self,
        connection_id: str,
        filter: UsersExportFilter | None = None,
    ) -> DeferredRequest[Job]:
        """`POST jobs/users-exports`.

        El filtro se renderiza aquí: cambios posteriores sobre el mismo
        builder no afectan al request ya construido.
        """

        require_non_empty("connection id", connection_id)
        payload: dict[str, Any] = {"connection_id": connection_id}
        if filter is not None:
            for key, value in filter.as_body().items():
                payload[key] = value
        return self._request(
            "POST",
            self._url("jobs", "users-exports"),
            Job.model_validate,
            body=JsonBody(payload),
        )

    def send_verification_email(
        self,
        user_id: str,
        client_id: str | None = None,
        identity: EmailVerificationIdentity | None = None,
    ) -> DeferredRequest[Job]:
        """`POST jobs/verification-email`. `client_id`/`identity` solo si se pasan."""

        require_non_empty("user id", user_id)
        payload: dict[str, Any] = {"user_id": user_id}
        if client_id is not None:
            payload["client_id"] = client_id
        if identity is not None:
            payload["identity"] = identity.as_body()
        return self._request(
            "POST",
            self._url("jobs", "verification-email"),
            Job.model_validate,
            body=JsonBody(payload),
        )

    def import_users(
        self,
        connection_id: str,
        users_file: str | os.PathLike[str],
        options: UsersImportOptions | None = None,
    ) -> DeferredRequest[Job]:
        """`POST jobs/users-imports` (multipart).

        Partes, en orden: `connection_id`, archivo `users` (`text/json`) y
        luego las opciones. El archivo se lee completo al ejecutar.
        """

        require_non_empty("connection id", connection_id)
        require_non_empty("users file", users_file)
        body = (
            MultipartBody()
            .add_part("connection_id", connection_id)
            .add_file("users", users_file, USERS_FILE_CONTENT_TYPE)
        )
        if options is not None:
            for name, value in options.as_form_fields():
                body.add_part(name, value)
        return self._request(
            "POST",
            self._url("jobs", "users-imports"),
            Job.model_validate,
            body=body,
        )
