"""Contrato de cuerpos de request.

Por qué Protocol:
- El request diferido no sabe si envía JSON o multipart; solo pide bytes y
  content type en el momento de ejecutar.
- Permite tests con cuerpos falsos sin herencia.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RequestBody(Protocol):
    """Productor de cuerpo.

    Reglas de diseño:
    - `render` se invoca una vez por ejecución; puede hacer I/O local (leer un
      archivo) pero nunca de red.
    - Devuelve `(bytes, content_type)`; el content type va al header tal cual.
    """

    kind: str

    def render(self) -> tuple[bytes, str]:
        ...
