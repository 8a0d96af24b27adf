"""Unit tests for settings backup files."""

import json

import pytest

from core.settings.backups import BackupManager


@pytest.fixture
def backups(store, tmp_path):
    return BackupManager(store, tmp_path / "backups", max_backups=3)


class TestBackupManager:

    def test_write_backup(self, backups, store):
        store.set("theme", "dark")

        path = backups.write_backup()

        assert path.exists()
        assert path.name.startswith("settings-backup-")
        assert json.loads(path.read_text())["settings"] == {"theme": "dark"}

    def test_list_newest_first(self, backups):
        first = backups.write_backup()
        second = backups.write_backup()

        assert backups.list_backups() == [second, first]

    def test_list_without_directory(self, store, tmp_path):
        assert BackupManager(store, tmp_path / "missing").list_backups() == []

    def test_prune_keeps_max_backups(self, backups):
        paths = [backups.write_backup() for _ in range(5)]

        remaining = backups.list_backups()
        assert len(remaining) == 3
        assert remaining == list(reversed(paths[-3:]))

    def test_max_backups_setting_overrides_default(self, backups, store):
        store.set("max_backups", 1)
        backups.write_backup()
        backups.write_backup()

        assert len(backups.list_backups()) == 1

    def test_restore_latest(self, backups, store):
        store.set("theme", "dark")
        backups.write_backup()
        store.set("theme", "light")

        assert backups.restore_latest() == ["theme"]
        assert store.get("theme") == "dark"

    def test_restore_latest_without_backups(self, backups):
        with pytest.raises(FileNotFoundError):
            backups.restore_latest()

    def test_invalid_max_backups(self, store, tmp_path):
        with pytest.raises(ValueError):
            BackupManager(store, tmp_path, max_backups=0)
