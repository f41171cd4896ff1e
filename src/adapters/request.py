"""Request diferido: se construye sin I/O y se ejecuta explícitamente.

Responsabilidad:
- Guardar método, URL, headers, cuerpo y decodificador (inmutables).
- `execute()` / `execute_async()`: exactamente un intento HTTP por llamada.
- Traducir la respuesta a `T` o a un error tipado (`TransportError`,
  `ApiError`, `RateLimitError`, `DecodeError`).

Sin reintentos ni caché: eso pertenece al transporte (httpx).
"""

from __future__ import annotations

import asyncio
import json
import logging
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, TypeVar

import httpx
from pydantic import ValidationError

from core.errors import ApiError, DecodeError, RateLimitError, TransportError
from core.interfaces.body import RequestBody

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


class JsonBody:
    kind = "json"

    def __init__(self, payload: Mapping[str, Any]) -> None:
        self._payload = dict(payload)

    @property
    def payload(self) -> dict[str, Any]:
        return dict(self._payload)

    def render(self) -> tuple[bytes, str]:
        return json.dumps(self._payload, ensure_ascii=False).encode("utf-8"), JSON_CONTENT_TYPE


class DeferredRequest(Generic[T]):
    """Un request HTTP completamente construido pero aún no ejecutado."""

    def __init__(
        self,
        method: str,
        url: str,
        *,
        decoder: Callable[[Any], T],
        client: httpx.Client,
        async_client_factory: Callable[[], httpx.AsyncClient] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
    ) -> None:
        self._method = method.upper()
        self._url = url
        self._decoder = decoder
        self._client = client
        self._async_client_factory = async_client_factory
        self._headers = MappingProxyType(dict(headers or {}))
        self._body = body

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def body(self) -> RequestBody | None:
        return self._body

    def _prepare(self) -> tuple[dict[str, str], bytes | None]:
        headers = dict(self._headers)
        content: bytes | None = None
        if self._body is not None:
            content, content_type = self._body.render()
            headers["Content-Type"] = content_type
        logger.debug(
            "%s %s (body=%s)",
            self._method,
            self._url,
            self._body.kind if self._body is not None else "none",
        )
        return headers, content

    def execute(self) -> T:
        headers, content = self._prepare()
        try:
            response = self._client.request(self._method, self._url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to execute request to '{self._url}': {exc}") from exc
        return self._parse(response)

    async def execute_async(self) -> T:
        if self._async_client_factory is None:
            raise RuntimeError("This request was built without an async client")
        # render() puede leer el archivo de import; fuera del event loop.
        headers, content = await asyncio.to_thread(self._prepare)
        try:
            async with self._async_client_factory() as client:
                response = await client.request(self._method, self._url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to execute request to '{self._url}': {exc}") from exc
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> T:
        logger.debug("%s %s -> %d", self._method, self._url, response.status_code)
        if not response.is_success:
            raise _api_error(response)

        try:
            payload = response.json()
            return self._decoder(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            raise DecodeError(
                f"Failed to decode response from '{self._url}': {exc}",
                status_code=response.status_code,
                body=response.content,
            ) from exc

    def __repr__(self) -> str:
        return f"DeferredRequest({self._method} {self._url})"


def _int_header(response: httpx.Response, name: str) -> int | None:
    raw = response.headers.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _api_error(response: httpx.Response) -> ApiError:
    status = response.status_code
    payload: Any = None
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    error: str | None = None
    error_code: str | None = None
    message = f"Request failed with status code {status}"
    if isinstance(payload, dict):
        error = payload.get("error")
        error_code = payload.get("errorCode")
        description = (
            payload.get("message")
            or payload.get("error_description")
            or payload.get("description")
        )
        if isinstance(description, str) and description:
            message = description
        elif isinstance(error, str) and error:
            message = f"{message}: {error}"
    elif response.text:
        message = f"{message}: {response.text[:200]}"

    if status == 429:
        return RateLimitError(
            message,
            limit=_int_header(response, "X-RateLimit-Limit"),
            remaining=_int_header(response, "X-RateLimit-Remaining"),
            reset=_int_header(response, "X-RateLimit-Reset"),
            error=error,
            error_code=error_code,
            payload=payload,
        )
    return ApiError(
        message,
        status_code=status,
        error=error,
        error_code=error_code,
        payload=payload,
    )
