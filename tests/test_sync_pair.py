"""Unit tests for sync pairs."""

from pathlib import Path

import pytest

from davsync.sync.pair import SyncPair


class TestSyncPair:
    """Tests for SyncPair class."""

    def test_create_sync_pair(self):
        """Test creating a basic sync pair."""
        pair = SyncPair(local=Path("/home/user/site"), remote="/www/site")

        assert pair.local == Path("/home/user/site")
        assert pair.remote == "/www/site"
        assert pair.exclude_dot_files is False

    def test_sync_pair_normalization(self):
        """Test that paths are normalized."""
        pair = SyncPair(
            local="/home/user/site",  # String converted to Path
            remote="www/site/",  # Leading slash added, trailing removed
        )

        assert isinstance(pair.local, Path)
        assert pair.remote == "/www/site"

    def test_server_root(self):
        """Test that an empty remote means the server root."""
        assert SyncPair(local="/tmp", remote="").remote == "/"
        assert SyncPair(local="/tmp", remote="/").remote == "/"

    def test_from_dict(self):
        """Test creating sync pair from dictionary."""
        pair = SyncPair.from_dict(
            {"local": "/home/user/site", "remote": "/www", "excludeDotFiles": True}
        )

        assert pair.local == Path("/home/user/site")
        assert pair.remote == "/www"
        assert pair.exclude_dot_files is True

    def test_from_dict_cli_keys(self):
        """Test the local-dir and server-dir spelling."""
        pair = SyncPair.from_dict({"local-dir": "./dist", "server-dir": "public/"})

        assert pair.local == Path("./dist")
        assert pair.remote == "/public"
        assert pair.exclude_dot_files is False

    def test_from_dict_exclude_dot_files_cli_key(self):
        """Test the exclude-dot-files spelling, including string flags."""
        data = {"local-dir": "./dist", "server-dir": "/public"}

        assert SyncPair.from_dict({**data, "exclude-dot-files": True}).exclude_dot_files
        assert SyncPair.from_dict({**data, "exclude-dot-files": "true"}).exclude_dot_files
        assert not SyncPair.from_dict(
            {**data, "exclude-dot-files": "false"}
        ).exclude_dot_files

    def test_from_dict_missing_remote(self):
        """Test that both directories are required."""
        with pytest.raises(ValueError, match="local and a remote"):
            SyncPair.from_dict({"local": "/home/user/site"})

    def test_from_dict_missing_local(self):
        with pytest.raises(ValueError):
            SyncPair.from_dict({"remote": "/www"})
