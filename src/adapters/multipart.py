"""Encoder multipart/form-data.

Alcance:
- Solo las formas que usa la API: N partes clave/valor y como mucho un archivo.
- No es una librería multipart general (sin streaming, sin partes anidadas).

Reglas:
- El orden de codificación es el orden de inserción.
- Cada llamada a `encode_multipart_formdata` sin boundary explícito genera uno
  nuevo; el mismo token va al body y al header `Content-Type`.
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence, Union

CRLF = b"\r\n"


@dataclass(frozen=True)
class KeyValuePart:
    name: str
    value: str
    kind: Literal["key_value"] = field(default="key_value", init=False)


@dataclass(frozen=True)
class FilePart:
    name: str
    filename: str
    content_type: str
    content: bytes = field(repr=False)
    kind: Literal["file"] = field(default="file", init=False)

    @classmethod
    def from_path(cls, name: str, path: str | os.PathLike[str], content_type: str) -> FilePart:
        """Lee el archivo completo en memoria; `filename` es el nombre base."""

        source = Path(path)
        return cls(
            name=name,
            filename=source.name,
            content_type=content_type,
            content=source.read_bytes(),
        )


Part = Union[KeyValuePart, FilePart]


def choose_boundary() -> str:
    return uuid.uuid4().hex


def _quote(value: str) -> str:
    # Mismo escape que aplican los navegadores en Content-Disposition.
    return value.replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")


def _part_headers(part: Part) -> list[str]:
    if part.kind == "key_value":
        return [f'Content-Disposition: form-data; name="{_quote(part.name)}"']
    if part.kind == "file":
        return [
            f'Content-Disposition: form-data; name="{_quote(part.name)}"; '
            f'filename="{_quote(part.filename)}"',
            f"Content-Type: {part.content_type}",
        ]
    raise ValueError(f"Unsupported multipart part kind: {part.kind!r}")


def _part_payload(part: Part) -> bytes:
    if part.kind == "key_value":
        return part.value.encode("utf-8")
    return part.content


def encode_multipart_formdata(
    parts: Sequence[Part],
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """Serializa `parts` y devuelve `(body, content_type)`.

    El content type es exactamente `multipart/form-data; boundary=<token>`.
    No se re-escanea el contenido buscando colisiones con el boundary: un
    token aleatorio de 128 bits hace la colisión despreciable.
    """

    boundary = boundary or choose_boundary()
    delimiter = f"--{boundary}".encode("ascii")

    chunks: list[bytes] = []
    for part in parts:
        chunks.append(delimiter + CRLF)
        for header in _part_headers(part):
            chunks.append(header.encode("utf-8") + CRLF)
        chunks.append(CRLF)
        chunks.append(_part_payload(part))
        chunks.append(CRLF)
    chunks.append(delimiter + b"--" + CRLF)

    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


class MultipartBody:
    """Cuerpo multipart diferido.

    Las partes se acumulan en orden; los archivos se registran por ruta y se
    leen al renderizar, es decir, durante la ejecución del request.
    """

    kind = "multipart"

    def __init__(self) -> None:
        self._entries: list[Part | tuple[str, Path, str]] = []

    def add_part(self, name: str, value: str) -> MultipartBody:
        self._entries.append(KeyValuePart(name=name, value=value))
        return self

    def add_file(
        self,
        name: str,
        path: str | os.PathLike[str],
        content_type: str,
    ) -> MultipartBody:
        if any(not isinstance(entry, KeyValuePart) for entry in self._entries):
            raise ValueError("Only one file part is supported per multipart body")
        self._entries.append((name, Path(path), content_type))
        return self

    def parts(self) -> list[Part]:
        out: list[Part] = []
        for entry in self._entries:
            if isinstance(entry, tuple):
                name, path, content_type = entry
                out.append(FilePart.from_path(name, path, content_type))
            else:
                out.append(entry)
        return out

    def render(self) -> tuple[bytes, str]:
        return encode_multipart_formdata(self.parts())

    def __len__(self) -> int:
        return len(self._entries)
