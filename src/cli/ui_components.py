"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from rich.table import Table

from core.domain.models import Job, JobErrorDetails

_STATUS_STYLES = {
    "completed": "green",
    "failed": "red",
    "processing": "yellow",
    "pending": "cyan",
}


def _render(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return repr(value)
    return str(value)


def build_job_table(job: Job) -> Table:
    """Tabla campo/valor con los campos presentes del `Job`."""

    title = f"Job {job.id}" if job.id else "Job"
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for key, value in job.model_dump(exclude_none=True).items():
        style = _STATUS_STYLES.get(value, "") if key == "status" else ""
        table.add_row(key, _render(value), style=style)
    return table


def build_job_errors_table(errors: list[JobErrorDetails]) -> Table:
    table = Table(title=f"Import errors ({len(errors)})")
    table.add_column("User", style="magenta", no_wrap=True)
    table.add_column("Code", style="red", no_wrap=True)
    table.add_column("Message", style="white")
    table.add_column("Path", style="dim")

    for details in errors:
        user = details.user.get("email") or details.user.get("user_id") or _render(details.user)
        for err in details.errors:
            table.add_row(str(user), err.code or "", err.message or "", err.path or "")
    return table
