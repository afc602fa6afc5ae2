"""CLI tests for the Bot Manager Typer commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from actors.cli import main
from resources.adapters.telegram.adapter import TelegramAdapterDependencyError
from resources.adapters.telegram.entities import UpdatesResponse
from services.action.bot_manager.tests.fakes import FakeBackend, message_update

runner = CliRunner()


def _config(tmp_path: Path, *bot_lines: str) -> Path:
    path = tmp_path / "botmanager.yaml"
    path.write_text(
        "\n".join(
            [
                "logging:",
                "  json_output: false",
                "bot:",
                "  api_key: '123:token'",
                "  secret: s3cret",
                *bot_lines,
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def backend(monkeypatch: Any) -> FakeBackend:
    fake = FakeBackend()
    monkeypatch.setattr(main, "_build_backend", lambda settings: fake)
    return fake


def _invoke(config: Path, *args: str):
    return runner.invoke(
        main.app,
        ["--config", str(config), "--log-level", "error", "run", *args],
    )


def test_run_defaults_to_single_poll(tmp_path: Path, backend: FakeBackend) -> None:
    backend.updates_responses.append(
        UpdatesResponse(ok=True, result=[message_update(1, 42, "  hi   there  ")])
    )

    result = _invoke(_config(tmp_path))

    assert result.exit_code == 0
    assert "Updates processed: 1\n42: hi there\n" in result.stdout
    assert backend.call_names() == ["fetch_updates"]
    assert backend.closed is True


def test_run_unset_needs_no_secret_from_cli(tmp_path: Path, backend: FakeBackend) -> None:
    result = _invoke(_config(tmp_path), "-a", "unset")

    assert result.exit_code == 0
    assert "Webhook was deleted" in result.stdout
    assert backend.call_names() == ["deregister_webhook"]


def test_run_reset_registers_configured_url(tmp_path: Path, backend: FakeBackend) -> None:
    config = _config(tmp_path, "  webhook:", "    url: https://bot.example.com/hook")

    result = _invoke(config, "--action", "reset")

    assert result.exit_code == 0
    assert backend.call_names() == ["deregister_webhook", "register_webhook"]
    assert backend.calls[1][1][0] == "https://bot.example.com/hook?a=handle&s=s3cret"


def test_forced_secret_rejects_wrong_echo(tmp_path: Path, backend: FakeBackend) -> None:
    result = _invoke(_config(tmp_path), "-a", "unset", "-s", "nope", "--force-secret")

    assert result.exit_code == main.DOMAIN_ERROR_EXIT_CODE
    assert backend.calls == []


def test_invalid_action_exits_with_domain_error(tmp_path: Path, backend: FakeBackend) -> None:
    result = _invoke(_config(tmp_path), "-a", "explode")

    assert result.exit_code == main.DOMAIN_ERROR_EXIT_CODE
    assert backend.calls == []


def test_set_without_url_exits_with_domain_error(tmp_path: Path, backend: FakeBackend) -> None:
    result = _invoke(_config(tmp_path), "-a", "set")

    assert result.exit_code == main.DOMAIN_ERROR_EXIT_CODE
    assert backend.calls == []


def test_delivery_failure_exits_with_transport_error(
    tmp_path: Path, backend: FakeBackend
) -> None:
    backend.delivery_error = TelegramAdapterDependencyError("telegram down")
    config = _config(tmp_path, "  webhook:", "    url: https://bot.example.com/hook")

    result = _invoke(config)

    assert result.exit_code == main.TRANSPORT_ERROR_EXIT_CODE
    assert backend.call_names() == ["handle_inbound_delivery"]
    assert backend.closed is True


def test_invalid_configuration_exits_with_config_error(
    tmp_path: Path, backend: FakeBackend
) -> None:
    config = tmp_path / "botmanager.yaml"
    config.write_text("bot:\n  api_key: '123:token'\n", encoding="utf-8")

    result = _invoke(config)

    assert result.exit_code == main.CONFIG_ERROR_EXIT_CODE
    assert backend.calls == []
