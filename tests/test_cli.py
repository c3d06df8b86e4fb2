import os

import pytest
from typer.testing import CliRunner

from fifa_tracker import cli
from fifa_tracker.cli import app
from fifa_tracker.data.manager import DataManager
from fifa_tracker.errors import ErrorKind, RemoteError
from tests.fakes.database import FakeDatabaseClient

runner = CliRunner()

_TABLES = {
    "players": [{"id": 1, "name": "Max Müller", "team": "AEK"}, {"id": 2, "name": "Jan Schmidt", "team": "Real"}],
    "matches": [{"id": 1, "goalslista": "[]", "goalslistb": []}],
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("FIFA_TRACKER__"):
            monkeypatch.delenv(key)


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabaseClient:
    db = FakeDatabaseClient(_TABLES)
    monkeypatch.setattr(cli, "create_data_manager", lambda config: DataManager(db))
    return db


class TestRootCli:
    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "FIFA tracker database tools" in result.output

    def test_health_help(self) -> None:
        result = runner.invoke(app, ["health", "--help"])
        assert result.exit_code == 0
        assert "--config" in result.output


class TestHealth:
    def test_reachable(self, fake_db: FakeDatabaseClient) -> None:
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 0
        assert "Database reachable" in result.output
        assert fake_db.closed

    def test_unreachable_exits_nonzero(self, fake_db: FakeDatabaseClient) -> None:
        fake_db.fail_always("players", RemoteError(ErrorKind.AUTH, "Invalid API key", status=401))
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 1
        assert "Database unreachable" in result.output
        assert "Nicht autorisiert" in result.output
        assert fake_db.closed

    def test_network_failure_is_described(self, fake_db: FakeDatabaseClient) -> None:
        fake_db.fail_always("players", RemoteError(ErrorKind.TRANSIENT, "Network error: connection refused"))
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 1
        assert "Verbindungsfehler" in result.output

    def test_missing_configuration_exits_with_2(self) -> None:
        result = runner.invoke(app, ["health", "--config", "/nonexistent/config.yaml"])
        assert result.exit_code == 2
        assert "Configuration error" in result.output


class TestLoad:
    def test_prints_row_counts(self, fake_db: FakeDatabaseClient) -> None:
        result = runner.invoke(app, ["load"])
        assert result.exit_code == 0
        assert "Application data" in result.output
        assert "players" in result.output
        assert "managers" in result.output
        assert fake_db.closed
