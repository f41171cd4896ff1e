from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from adapters.management_api import ManagementAPI
from cli import doctor
from cli import main as cli_main
from conftest import MockServer, body_from_request, parse_multipart
from core import config

runner = CliRunner()


@pytest.fixture
def cli_server(monkeypatch: pytest.MonkeyPatch) -> MockServer:
    server = MockServer()

    def _build_api() -> ManagementAPI:
        return ManagementAPI("tenant.example.com", "cliToken", transport=httpx.MockTransport(server.handler))

    monkeypatch.setattr(cli_main, "_build_api", _build_api)
    return server


def test_get_prints_job_table(cli_server: MockServer) -> None:
    cli_server.json_response("job.json")

    result = runner.invoke(cli_main.app, ["get", "job_0000000000000001"])

    assert result.exit_code == 0, result.output
    assert "job_0000000000000001" in result.output
    assert "pending" in result.output
    assert cli_server.take_request().url.path == "/api/v2/jobs/job_0000000000000001"


def test_get_json_output(cli_server: MockServer) -> None:
    cli_server.json_response("job.json")

    result = runner.invoke(cli_main.app, ["--json", "get", "job_0000000000000001"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["type"] == "verification_email"


def test_export_users_builds_filter(cli_server: MockServer) -> None:
    cli_server.json_response("job_post_users_exports.json")

    result = runner.invoke(
        cli_main.app,
        [
            "export-users",
            "con_123456789",
            "--limit",
            "82",
            "--format",
            "csv",
            "--field",
            "email",
            "--field",
            "user_metadata.company_name:company",
        ],
    )

    assert result.exit_code == 0, result.output
    assert body_from_request(cli_server.take_request()) == {
        "connection_id": "con_123456789",
        "limit": 82,
        "format": "csv",
        "fields": [
            {"name": "email"},
            {"name": "user_metadata.company_name", "export_as": "company"},
        ],
    }


def test_export_users_without_options_sends_only_connection(cli_server: MockServer) -> None:
    cli_server.json_response("job_post_users_exports.json")

    result = runner.invoke(cli_main.app, ["export-users", "con_123456789"])

    assert result.exit_code == 0, result.output
    assert body_from_request(cli_server.take_request()) == {"connection_id": "con_123456789"}


def test_import_users_with_options(cli_server: MockServer, users_file: Path) -> None:
    cli_server.json_response("job_post_users_imports.json")

    result = runner.invoke(
        cli_main.app,
        ["import-users", "con_123456789", str(users_file), "--upsert", "--external-id", "ext-1"],
    )

    assert result.exit_code == 0, result.output
    multipart = parse_multipart(cli_server.take_request().content)
    assert [p.name for p in multipart.parts] == ["connection_id", "users", "upsert", "external_id"]
    assert multipart.file_part("users").value == users_file.read_bytes()


def test_verify_email_with_client_id(cli_server: MockServer) -> None:
    cli_server.json_response("job_post_verification_email.json")

    result = runner.invoke(cli_main.app, ["verify-email", "auth0|1", "--client-id", "abc"])

    assert result.exit_code == 0, result.output
    assert body_from_request(cli_server.take_request()) == {"user_id": "auth0|1", "client_id": "abc"}


def test_errors_table(cli_server: MockServer) -> None:
    cli_server.json_response("job_errors.json")

    result = runner.invoke(cli_main.app, ["errors", "job_0000000000000002"])

    assert result.exit_code == 0, result.output
    assert "INVALID_FORMAT" in result.output
    assert "john.doe@contoso.com" in result.output


def test_api_error_exits_with_code_1(cli_server: MockServer) -> None:
    cli_server.raw_response(b'{"statusCode": 404, "error": "Not Found", "message": "Job not found"}', status=404)

    result = runner.invoke(cli_main.app, ["get", "missing"])

    assert result.exit_code == 1
    assert "Job not found" in result.output


def test_missing_configuration_exits_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def _build_api() -> ManagementAPI:
        return ManagementAPI.from_settings(config.ClientSettings(_env_file=None, domain=None))

    monkeypatch.setattr(cli_main, "_build_api", _build_api)

    result = runner.invoke(cli_main.app, ["get", "job_1"])

    assert result.exit_code == 1
    assert "'domain' cannot be null!" in result.output


def test_doctor_setup_writes_user_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    monkeypatch.setattr(config, "get_user_env_file", lambda: env_file)

    result = runner.invoke(cli_main.app, ["doctor", "setup"], input="tenant.example.com\nsecret\n")

    assert result.exit_code == 0, result.output
    content = env_file.read_text(encoding="utf-8")
    assert "MGMT_JOBS_DOMAIN=tenant.example.com" in content
    assert "MGMT_JOBS_API_TOKEN=secret" in content


def test_doctor_run_reports_checks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MGMT_JOBS_DOMAIN", "tenant.example.com")
    monkeypatch.setenv("MGMT_JOBS_API_TOKEN", "secret")
    monkeypatch.setattr(doctor, "_check_http", lambda settings, url: (True, "HTTP 401"))

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "HTTP 401" in result.output
    assert "Token configured" in result.output
