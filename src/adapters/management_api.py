"""Punto de entrada del cliente: dueño de los clientes httpx y del token."""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, build_base_url, build_client
from adapters.jobs_entity import JobsEntity
from core.config import ClientSettings
from core.validation import require_non_empty


class ManagementAPI:
    """Fachada de la Management API.

    Uso:
        with ManagementAPI("tenant.example.com", token) as api:
            job = api.jobs().get("job_123").execute()

        async with ManagementAPI("tenant.example.com", token) as api:
            job = await api.jobs().get("job_123").execute_async()

    Cada `execute_async` abre y cierra su propio `httpx.AsyncClient`, así que
    no queda ningún cliente asíncrono vivo entre ejecuciones.
    """

    def __init__(
        self,
        domain: str,
        api_token: str,
        *,
        settings: ClientSettings | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = build_base_url(domain)
        require_non_empty("api token", api_token)
        self._settings = settings or ClientSettings()
        self._async_transport = async_transport
        self._client = build_client(self._settings, transport=transport)
        self.set_api_token(api_token)

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None, **kwargs: object) -> ManagementAPI:
        settings = settings or ClientSettings()
        return cls(
            require_non_empty("domain", settings.domain),
            require_non_empty("api token", settings.api_token),
            settings=settings,
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_api_token(self, api_token: str) -> None:
        """Reemplaza el token; afecta a requests ejecutados a partir de ahora."""

        self._api_token = require_non_empty("api token", api_token)
        self._client.headers["Authorization"] = f"Bearer {self._api_token}"

    def _new_async_client(self) -> httpx.AsyncClient:
        # Uno por ejecución: el pool de un AsyncClient queda atado a su event loop.
        return build_async_client(
            self._settings,
            extra_headers={"Authorization": f"Bearer {self._api_token}"},
            transport=self._async_transport,
        )

    def jobs(self) -> JobsEntity:
        return JobsEntity(self._base_url, self._client, self._new_async_client)

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        self.close()

    def __enter__(self) -> ManagementAPI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> ManagementAPI:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
