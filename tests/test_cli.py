"""Unit tests for the davsync CLI commands."""

import json
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from click.testing import CliRunner

from davsync import __version__
from davsync.cli import main
from davsync.exceptions import ConfigError, ProtocolError, UnexpectedRemoteState
from davsync.models import RemoteEntry
from davsync.sync import SyncEngine, SyncPlan, SyncResult
from davsync.sync.scanner import LocalFile


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_client():
    """Patch the WebDAV client class used by the CLI."""
    with patch("davsync.cli.WebDavClient") as mock_class:
        client = MagicMock()
        client.__enter__.return_value = client
        client.server = "https://dav.example.com"
        client.username = "alice"
        mock_class.return_value = client
        yield client


@pytest.fixture
def mock_engine():
    """Patch the sync engine class used by the CLI."""
    with patch("davsync.cli.SyncEngine") as mock_class:
        engine = Mock(spec=SyncEngine)
        mock_class.return_value = engine
        yield engine


def empty_stats(**overrides):
    stats = {"adds": 0, "updates": 0, "deletes": 0, "skips": 0, "directories_created": 0}
    stats.update(overrides)
    return stats


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_main_help(self, runner):
        """Test main help shows all commands."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "davsync" in result.output
        assert "--server" in result.output
        assert "init" in result.output
        assert "sync" in result.output
        assert "ls" in result.output
        assert "status" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSyncCommand:
    """Tests for the sync command."""

    def test_sync_success(self, runner, mock_client, mock_engine, tmp_path):
        """Test a successful run exits with status 0."""
        mock_engine.sync_pair.return_value = SyncResult(stats=empty_stats(adds=2))

        result = runner.invoke(
            main, ["sync", str(tmp_path), "www/site/", "--no-progress"]
        )

        assert result.exit_code == 0
        pair = mock_engine.sync_pair.call_args.args[0]
        assert pair.local == tmp_path
        assert pair.remote == "/www/site"
        assert pair.exclude_dot_files is False
        assert mock_engine.sync_pair.call_args.kwargs["dry_run"] is False

    def test_sync_dry_run(self, runner, mock_client, mock_engine, tmp_path):
        """Test that --dry-run is passed to the engine."""
        mock_engine.sync_pair.return_value = SyncResult(
            stats=empty_stats(), dry_run=True
        )

        result = runner.invoke(
            main, ["sync", str(tmp_path), "/www", "--dry-run", "--exclude-dot-files"]
        )

        assert result.exit_code == 0
        assert mock_engine.sync_pair.call_args.kwargs["dry_run"] is True
        assert mock_engine.sync_pair.call_args.args[0].exclude_dot_files is True

    def test_sync_failure_exit_code(self, runner, mock_client, mock_engine, tmp_path):
        """Test that a failed run reports the error kind and exits 1."""
        mock_engine.sync_pair.return_value = SyncResult(
            stats=empty_stats(),
            error=UnexpectedRemoteState(
                "Target already exists on the server", "/www/a.txt"
            ),
        )

        result = runner.invoke(main, ["sync", str(tmp_path), "/www", "--no-progress"])

        assert result.exit_code == 1
        assert "UnexpectedRemoteState" in result.output
        assert "/www/a.txt" in result.output

    def test_sync_json_output(self, runner, mock_client, mock_engine, tmp_path):
        """Test the JSON report of a run."""
        local_file = LocalFile(tmp_path / "a.txt", "a.txt", 1, 1.0)
        mock_engine.sync_pair.return_value = SyncResult(
            stats=empty_stats(adds=1),
            plan=SyncPlan(to_add=[local_file]),
        )

        result = runner.invoke(main, ["--json", "sync", str(tmp_path), "/www"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["stats"]["adds"] == 1
        assert data["plan"] == {"add": ["a.txt"], "update": [], "delete": []}

    def test_sync_uses_progress_display(self, runner, mock_client, tmp_path):
        """Test that interactive runs go through the progress display."""
        with patch("davsync.cli_progress.run_sync_with_progress") as mock_run:
            mock_run.return_value = SyncResult(stats=empty_stats())
            result = runner.invoke(main, ["sync", str(tmp_path), "/www"])

        assert result.exit_code == 0
        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] is mock_client

    def test_sync_without_server(self, runner, tmp_path):
        """Test that a missing server configuration exits 1."""
        with patch("davsync.cli.WebDavClient") as mock_class:
            mock_class.side_effect = ConfigError("No WebDAV server configured")
            result = runner.invoke(main, ["sync", str(tmp_path), "/www"])

        assert result.exit_code == 1
        assert "No WebDAV server configured" in result.output

    def test_global_options_reach_client(
        self, runner, mock_client, mock_engine, tmp_path
    ):
        """Test that connection options are forwarded to the client."""
        mock_engine.sync_pair.return_value = SyncResult(stats=empty_stats())

        with patch("davsync.cli.WebDavClient") as mock_class:
            mock_class.return_value = mock_client
            runner.invoke(
                main,
                [
                    "-s",
                    "https://dav.example.com/dav",
                    "-u",
                    "bob",
                    "-p",
                    "pw",
                    "--timeout",
                    "5",
                    "sync",
                    str(tmp_path),
                    "/www",
                    "--no-progress",
                ],
            )

        mock_class.assert_called_once_with(
            server="https://dav.example.com/dav",
            username="bob",
            password="pw",
            timeout=5.0,
        )


class TestLsCommand:
    """Tests for the ls command."""

    def test_ls_json(self, runner, mock_client):
        """Test listing remote files as JSON."""
        mock_client.exists.return_value = True
        mock_client.list_recursive.return_value = [
            RemoteEntry("/www", "directory", ""),
            RemoteEntry("/www/b.txt", "file", "Thu, 01 Jan 1970 00:02:00 GMT", 7),
            RemoteEntry("/www/a.txt", "file", "Thu, 01 Jan 1970 00:01:00 GMT", 3),
        ]

        result = runner.invoke(main, ["--json", "ls", "/www"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [item["path"] for item in data] == ["a.txt", "b.txt"]
        assert data[0]["remote_path"] == "/www/a.txt"
        assert data[0]["size"] == 3
        assert data[0]["modified"] == 60.0

    def test_ls_text(self, runner, mock_client):
        mock_client.list_recursive.return_value = [
            RemoteEntry("/a.txt", "file", "Thu, 01 Jan 1970 00:01:00 GMT", 2048),
        ]

        result = runner.invoke(main, ["ls"])

        assert result.exit_code == 0
        assert "a.txt" in result.output
        assert "2.0 KB" in result.output
        assert "1 file(s)" in result.output

    def test_ls_empty(self, runner, mock_client):
        mock_client.exists.return_value = False

        result = runner.invoke(main, ["ls", "/missing"])

        assert result.exit_code == 0
        assert "No files found in /missing" in result.output

    def test_ls_error(self, runner, mock_client):
        """Test that listing errors exit 1."""
        mock_client.exists.return_value = True
        mock_client.list_recursive.side_effect = ProtocolError(
            "Access forbidden", "/www", 403
        )

        result = runner.invoke(main, ["ls", "/www"])

        assert result.exit_code == 1
        assert "ProtocolError: Access forbidden" in result.output


class TestStatusCommand:
    """Tests for the status command."""

    def test_status_ok(self, runner, mock_client):
        result = runner.invoke(main, ["--json", "status"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "server": "https://dav.example.com",
            "username": "alice",
            "ok": True,
        }
        mock_client.exists.assert_called_once_with("/")

    def test_status_unreachable(self, runner, mock_client):
        """Test that a failing connection check exits 1."""
        mock_client.exists.side_effect = ProtocolError("Network error: refused", "/")

        result = runner.invoke(main, ["status"])

        assert result.exit_code == 1
        assert "Network error" in result.output


class TestInitCommand:
    """Tests for the init command."""

    @patch("davsync.cli.config")
    def test_init_saves_credentials(self, mock_config, runner, mock_client):
        """Test init with a reachable server."""
        mock_config.get_config_path.return_value = Path("/home/x/.config/davsync/config")

        result = runner.invoke(
            main,
            ["init", "-s", "https://dav.example.com", "-u", "alice", "-p", "pw"],
        )

        assert result.exit_code == 0
        mock_client.exists.assert_called_once_with("/")
        mock_config.save_credentials.assert_called_once_with(
            "https://dav.example.com", "alice", "pw"
        )

    @patch("davsync.cli.config")
    def test_init_failed_check_declined(self, mock_config, runner, mock_client):
        """Test that declining to save after a failed check exits 1."""
        mock_client.exists.side_effect = ProtocolError(
            "Authentication failed", "/", 401
        )

        result = runner.invoke(
            main,
            ["init", "-s", "https://dav.example.com", "-u", "alice", "-p", "bad"],
            input="n\n",
        )

        assert result.exit_code == 1
        assert "Connection check failed" in result.output
        mock_config.save_credentials.assert_not_called()

    @patch("davsync.cli.config")
    def test_init_failed_check_saved_anyway(self, mock_config, runner, mock_client):
        mock_client.exists.side_effect = ProtocolError("Network error", "/")
        mock_config.get_config_path.return_value = Path("/tmp/config")

        result = runner.invoke(
            main,
            ["init", "-s", "https://dav.example.com", "-u", "", "-p", ""],
            input="y\n",
        )

        assert result.exit_code == 0
        mock_config.save_credentials.assert_called_once_with(
            "https://dav.example.com", None, None
        )
