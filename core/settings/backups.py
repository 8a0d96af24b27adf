"""Backup files for the settings store.

Backups are written to a directory as timestamped JSON files. Only the
newest ``max_backups`` files are kept.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List

from core.settings.store import SettingsStore
from utils.logger import get_logger

logger = get_logger(__name__)

BACKUP_PREFIX = "settings-backup-"
BACKUP_SUFFIX = ".json"


class BackupManager:
    """
    Write, list, prune and restore settings backup files.

    Args:
        store: Settings store to back up
        backup_dir: Directory holding backup files
        max_backups: Backups to keep when the max_backups setting is unset
    """

    def __init__(self, store: SettingsStore, backup_dir: Path, max_backups: int = 5):
        if max_backups < 1:
            raise ValueError(f"max_backups must be at least 1, got {max_backups}")
        self.store = store
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups

    def write_backup(self) -> Path:
        """Write a new backup file and prune old ones."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)

        stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        sequence = 0
        path = self.backup_dir / f"{BACKUP_PREFIX}{stamp}-{sequence:03d}{BACKUP_SUFFIX}"
        while path.exists():
            sequence += 1
            path = self.backup_dir / f"{BACKUP_PREFIX}{stamp}-{sequence:03d}{BACKUP_SUFFIX}"

        path.write_text(self.store.create_backup(), encoding="utf-8")
        logger.info(f"Settings backup written: {path.name}")

        self.prune()
        return path

    def list_backups(self) -> List[Path]:
        """Backup files, newest first."""
        if not self.backup_dir.exists():
            return []
        # Timestamped names sort chronologically
        return sorted(
            self.backup_dir.glob(f"{BACKUP_PREFIX}*{BACKUP_SUFFIX}"),
            key=lambda p: p.name,
            reverse=True,
        )

    def retention(self) -> int:
        """Number of backups to keep; the ``max_backups`` setting wins when valid."""
        configured = self.store.get_int("max_backups", self.max_backups)
        return configured if configured >= 1 else self.max_backups

    def prune(self) -> List[Path]:
        """Delete backups beyond the retention limit and return the removed paths."""
        removed = self.list_backups()[self.retention():]
        for path in removed:
            path.unlink()
            logger.debug(f"Pruned settings backup: {path.name}")
        return removed

    def restore(self, path: Path) -> List[str]:
        """Restore the store from a backup file."""
        data = Path(path).read_text(encoding="utf-8")
        return self.store.restore_from_backup(data)

    def restore_latest(self) -> List[str]:
        """Restore the newest backup file."""
        backups = self.list_backups()
        if not backups:
            raise FileNotFoundError(f"No settings backups in {self.backup_dir}")
        return self.restore(backups[0])
