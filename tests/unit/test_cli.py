"""
Tests for the commands in talentbridge.cli that need no database.
"""

from typer.testing import CliRunner

from talentbridge import __version__, cli
from talentbridge.cli import app
from talentbridge.core.exceptions import DuplicateApplicationError
from talentbridge.data import database

runner = CliRunner()


class TestVersion:
    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestInfo:
    def test_shows_configuration(self):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "talentbridge_test" in result.output


class TestCommission:
    def test_percentage_breakdown(self):
        result = runner.invoke(
            app, ["commission", "--salary", "600000", "--percentage", "10", "--reduction", "40"]
        )
        assert result.exit_code == 0
        assert "36,000.00" in result.output
        assert "24,000.00" in result.output

    def test_fixed_breakdown(self):
        result = runner.invoke(
            app, ["commission", "--type", "fixed", "--amount", "50000", "--reduction", "40"]
        )
        assert result.exit_code == 0
        assert "30,000.00" in result.output
        assert "20,000.00" in result.output

    def test_unknown_type(self):
        result = runner.invoke(app, ["commission", "--type", "bonus"])
        assert result.exit_code == 1
        assert "Unknown commission type" in result.output


class TestChangeStatus:
    def test_unknown_status_rejected_before_database(self):
        result = runner.invoke(app, ["change-status", "65f000000000000000000000", "PROMOTED"])
        assert result.exit_code == 1
        assert "Unknown status" in result.output

    def test_revival_clash_reported(self, monkeypatch):
        class ClashingService:
            def change_status(self, application_id, new_status, actor):
                raise DuplicateApplicationError("job-1", "priya.raman@talentmail.com", "+919876543210")

        monkeypatch.setattr(cli, "_workflow_service", ClashingService)
        result = runner.invoke(app, ["change-status", "65f000000000000000000000", "REVIEWED"])
        assert result.exit_code == 1
        assert "Error changing status" in result.output
        assert "already has an application for job job-1" in result.output


class TestConnectionCleanup:
    def test_clients_closed_after_command(self, monkeypatch):
        closed = []

        class RecordingManager:
            def close_all(self):
                closed.append(True)

        monkeypatch.setattr(database, "get_database_manager", RecordingManager)
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert closed == [True]
