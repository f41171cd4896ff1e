"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers para el cliente síncrono y el asíncrono.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import ClientSettings
from core.validation import require_non_empty

API_PATH = "/api/v2/"


def build_base_url(domain: str) -> str:
    """Normaliza `domain` a `https://<domain>/api/v2/`.

    Acepta dominio pelado o URL con esquema (útil para tests/local con http).
    """

    domain = require_non_empty("domain", domain).strip()
    if "://" not in domain:
        domain = f"https://{domain}"
    return domain.rstrip("/") + API_PATH


def _default_headers(settings: ClientSettings, extra_headers: dict[str, str] | None) -> dict[str, str]:
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return headers


def build_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros."""

    settings = settings or ClientSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=_default_headers(settings, extra_headers),
        transport=transport,
    )


def build_async_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los mismos defaults que `build_client`."""

    settings = settings or ClientSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=_default_headers(settings, extra_headers),
        transport=transport,
    )
