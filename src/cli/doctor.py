"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_base_url, build_client
from core.config import ClientSettings, write_user_env_vars
from core.errors import InvalidArgumentError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(settings: ClientSettings, url: str) -> tuple[bool, str]:
    try:
        with build_client(settings) as client:
            response = client.get(url)
    except Exception as exc:
        return False, str(exc)
    return True, f"HTTP {response.status_code}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = ClientSettings()

    table = Table(title="mgmt-jobs Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    base_url: str | None = None
    try:
        base_url = build_base_url(settings.domain)  # type: ignore[arg-type]
        table.add_row("Domain", "OK", base_url)
    except InvalidArgumentError as exc:
        table.add_row("Domain", "FAIL", str(exc))

    if settings.api_token:
        table.add_row("API token", "OK", "Token configured")
    else:
        table.add_row("API token", "FAIL", "Run `mgmt-jobs doctor setup`")
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    # Connectivity (best-effort): cualquier respuesta HTTP cuenta como alcanzable.
    if base_url:
        ok_http, detail_http = _check_http(settings, base_url)
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores domain and token in the user config .env)."""

    domain = typer.prompt("Tenant domain").strip()
    api_token = typer.prompt("Management API token", hide_input=True, confirmation_prompt=False).strip()

    if not domain or not api_token:
        raise typer.BadParameter("domain and api token are required")

    env_path = write_user_env_vars(
        {
            "MGMT_JOBS_DOMAIN": domain,
            "MGMT_JOBS_API_TOKEN": api_token,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
