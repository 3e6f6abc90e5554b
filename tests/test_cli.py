"""
Unit tests for the CLI interface.
"""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest
from click.testing import CliRunner

from analytics_dashboard import cli as cli_module
from analytics_dashboard.analytics import aggregate_users
from analytics_dashboard.cli import cli
from analytics_dashboard.token_store import JsonFileTokenStore

USERS = [
    {"status": "active", "gender": "F", "isApproved": True,
     "metadata": {"register_date": "2024-01-15T00:00:00Z"}},
    {"status": "active", "metadata": {"register_date": "nope"}},
]


class TestCLI:
    """Test cases for the CLI commands."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_cli_help(self) -> None:
        result = self.runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Site analytics dashboard CLI" in result.output

    def test_aggregate_text(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text(json.dumps(USERS), encoding="utf-8")
        result = self.runner.invoke(cli, ["aggregate", str(path)])
        assert result.exit_code == 0
        assert "User Activity\n  active: 2" in result.output
        assert "Monthly Registrations\n  Jan: 1\n  Feb: 0" in result.output
        assert "Gender Distribution\n  F: 1\n  Unknown: 1" in result.output
        assert "Approval Status\n  Approved: 1\n  Not Approved: 1" in result.output

    def test_aggregate_json(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text(json.dumps(USERS), encoding="utf-8")
        result = self.runner.invoke(cli, ["aggregate", str(path), "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["userStats"] == [{"name": "active", "value": 2}]

    def test_aggregate_rejects_non_array(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text('{"users": []}', encoding="utf-8")
        result = self.runner.invoke(cli, ["aggregate", str(path)])
        assert result.exit_code != 0
        assert "JSON array" in result.output

    def test_summary_prints_fetched_tables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_load(token_store, settings, **kwargs):
            return aggregate_users(USERS)

        monkeypatch.setattr(cli_module, "load_dashboard", fake_load)
        result = self.runner.invoke(cli, ["summary"])
        assert result.exit_code == 0
        assert "active: 2" in result.output

    def test_summary_without_data(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_load(token_store, settings, **kwargs):
            from analytics_dashboard.models import AggregateResult

            return AggregateResult.empty()

        monkeypatch.setattr(cli_module, "load_dashboard", fake_load)
        result = self.runner.invoke(cli, ["summary"])
        assert result.exit_code == 0
        assert "No data available." in result.output

    def test_store_token(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        result = self.runner.invoke(cli, ["store-token", "abc123", "--path", str(path)])
        assert result.exit_code == 0
        assert JsonFileTokenStore(path).get("token") == "abc123"

    def test_serve_runs_flask_app(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake_app = Mock()
        monkeypatch.setattr(cli_module, "create_app", Mock(return_value=fake_app))
        result = self.runner.invoke(cli, ["serve", "--port", "8080"])
        assert result.exit_code == 0
        fake_app.run.assert_called_once_with(host="127.0.0.1", port=8080, debug=False)
