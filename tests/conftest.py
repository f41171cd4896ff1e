from __future__ import annotations

import json
import re
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import httpx
import pytest

from adapters.management_api import ManagementAPI

FIXTURES = Path(__file__).parent / "fixtures"

API_TOKEN = "apiToken"


class MockServer:
    """Cola de respuestas + registro de requests recibidos (sin red)."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: deque[httpx.Response] = deque()

    def json_response(self, fixture: str, status: int = 200, headers: dict[str, str] | None = None) -> None:
        content = (FIXTURES / fixture).read_bytes()
        self.raw_response(content, status, {"Content-Type": "application/json", **(headers or {})})

    def raw_response(self, content: bytes, status: int = 200, headers: dict[str, str] | None = None) -> None:
        self._responses.append(httpx.Response(status, content=content, headers=headers))

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._responses.popleft()

    def take_request(self) -> httpx.Request:
        return self.requests.pop(0)


def body_from_request(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


@dataclass
class RecordedPart:
    name: str
    value: bytes
    filename: str | None = None
    content_type: str | None = None


@dataclass
class RecordedMultipart:
    boundary: str
    parts: list[RecordedPart] = field(default_factory=list)

    def key_value(self, name: str) -> RecordedPart | None:
        return next((p for p in self.parts if p.name == name and p.filename is None), None)

    def file_part(self, name: str) -> RecordedPart | None:
        return next((p for p in self.parts if p.name == name and p.filename is not None), None)


_DISPOSITION_PARAM = re.compile(r'(\w+)="([^"]*)"')


def parse_multipart(body: bytes) -> RecordedMultipart:
    """Reconstruye las partes usando el boundary que aparece en el propio body."""

    first_line, _, _ = body.partition(b"\r\n")
    assert first_line.startswith(b"--")
    boundary = first_line[2:].decode("ascii")
    delimiter = b"--" + boundary.encode("ascii")

    sections = body.split(delimiter)
    assert sections[0] == b""
    assert sections[-1] == b"--\r\n"

    recorded = RecordedMultipart(boundary=boundary)
    for section in sections[1:-1]:
        assert section.startswith(b"\r\n") and section.endswith(b"\r\n")
        raw_headers, _, payload = section[2:-2].partition(b"\r\n\r\n")
        headers: dict[str, str] = {}
        for line in raw_headers.decode("utf-8").split("\r\n"):
            key, _, value = line.partition(": ")
            headers[key.lower()] = value
        params = dict(_DISPOSITION_PARAM.findall(headers["content-disposition"]))
        recorded.parts.append(
            RecordedPart(
                name=params["name"],
                value=payload,
                filename=params.get("filename"),
                content_type=headers.get("content-type"),
            )
        )
    return recorded


@pytest.fixture
def server() -> MockServer:
    return MockServer()


@pytest.fixture
def api(server: MockServer) -> Iterator[ManagementAPI]:
    transport = httpx.MockTransport(server.handler)
    client = ManagementAPI(
        "https://tenant.example.com",
        API_TOKEN,
        transport=transport,
        async_transport=transport,
    )
    yield client
    client.close()


@pytest.fixture
def users_file() -> Path:
    return FIXTURES / "job_post_users_imports_input.json"
