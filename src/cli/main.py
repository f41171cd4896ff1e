"""CLI `mgmt-jobs` (Typer).

La CLI solo traduce opciones a llamadas de `JobsEntity` y pinta el resultado;
la construcción/validación de requests vive en `adapters/`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.management_api import ManagementAPI
from cli import doctor
from cli.ui_components import build_job_errors_table, build_job_table
from core.config import ClientSettings
from core.domain.filters import UsersExportFilter, UsersImportOptions
from core.domain.models import Job, UsersExportField
from core.errors import JobsClientError

app = typer.Typer(no_args_is_help=True, help="Manage Jobs of the Management API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class CliState:
    as_json: bool = False


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def _build_api() -> ManagementAPI:
    return ManagementAPI.from_settings(ClientSettings())


@contextmanager
def _api_session() -> Iterator[ManagementAPI]:
    """Abre la API y convierte errores del cliente en salida roja + exit 1."""

    try:
        with _build_api() as api:
            yield api
    except JobsClientError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _parse_field(raw: str) -> UsersExportField:
    name, sep, alias = raw.partition(":")
    return UsersExportField(name, alias if sep and alias else None)


def _print_job(ctx: typer.Context, job: Job) -> None:
    state: CliState = ctx.obj
    if state.as_json:
        _console.print_json(job.model_dump_json(exclude_none=True))
    else:
        _console.print(build_job_table(job))


@app.callback()
def main(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of tables."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP requests to stderr."),
) -> None:
    _configure_logging(verbose)
    ctx.obj = CliState(as_json=as_json)


@app.command()
def get(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job id.")) -> None:
    """Show a job."""

    with _api_session() as api:
        job = api.jobs().get(job_id).execute()
    _print_job(ctx, job)


@app.command()
def errors(ctx: typer.Context, job_id: str = typer.Argument(..., help="Import job id.")) -> None:
    """Show the failed records of a users import job."""

    with _api_session() as api:
        details = api.jobs().get_errors(job_id).execute()

    state: CliState = ctx.obj
    if state.as_json:
        payload: list[Any] = [d.model_dump(exclude_none=True) for d in details]
        _console.print_json(data=payload)
    else:
        _console.print(build_job_errors_table(details))


@app.command(name="export-users")
def export_users(
    ctx: typer.Context,
    connection_id: str = typer.Argument(..., help="Connection to export users from."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of users."),
    format: Optional[str] = typer.Option(None, "--format", help="Export format (csv, json)."),
    field: Optional[List[str]] = typer.Option(
        None,
        "--field",
        help="Field to export as name[:alias]. Repeatable.",
    ),
) -> None:
    """Start a users export job."""

    export_filter: UsersExportFilter | None = None
    if limit is not None or format is not None or field:
        export_filter = UsersExportFilter()
        if limit is not None:
            export_filter.with_limit(limit)
        if format is not None:
            export_filter.with_format(format)
        if field:
            export_filter.with_fields([_parse_field(raw) for raw in field])

    with _api_session() as api:
        job = api.jobs().export_users(connection_id, export_filter).execute()
    _print_job(ctx, job)


@app.command(name="import-users")
def import_users(
    ctx: typer.Context,
    connection_id: str = typer.Argument(..., help="Connection to import users into."),
    users_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON users file."),
    upsert: Optional[bool] = typer.Option(None, "--upsert/--no-upsert", help="Update existing users."),
    external_id: Optional[str] = typer.Option(None, "--external-id", help="Caller-defined job id."),
    send_completion_email: Optional[bool] = typer.Option(
        None,
        "--send-completion-email/--no-send-completion-email",
        help="Email tenant owners when the import finishes.",
    ),
) -> None:
    """Start a users import job from a JSON file."""

    options: UsersImportOptions | None = None
    if upsert is not None or external_id is not None or send_completion_email is not None:
        options = UsersImportOptions()
        if upsert is not None:
            options.with_upsert(upsert)
        if external_id is not None:
            options.with_external_id(external_id)
        if send_completion_email is not None:
            options.with_send_completion_email(send_completion_email)

    with _api_session() as api:
        job = api.jobs().import_users(connection_id, users_file, options).execute()
    _print_job(ctx, job)


@app.command(name="verify-email")
def verify_email(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User to send the verification email to."),
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Application the email is sent for."),
) -> None:
    """Send a verification email job for a user."""

    with _api_session() as api:
        job = api.jobs().send_verification_email(user_id, client_id).execute()
    _print_job(ctx, job)


def run() -> None:
    app()
