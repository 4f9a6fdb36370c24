"""
Backups of the persisted state blob as JSON files.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from makhzan.services.inventory_store import InventoryStore
from makhzan.services.notification_log import utc_now

logger = logging.getLogger(__name__)

# backup_interval setting -> days between automatic backups
BACKUP_INTERVAL_DAYS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
}


def write_backup(store: InventoryStore, backup_dir: str | Path, now: Optional[datetime] = None) -> Path:
    """Write the current state snapshot to a timestamped file and return its path."""
    now = now or utc_now()
    directory = Path(backup_dir)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"inventory-backup-{now:%Y-%m-%d-%H%M%S}.json"
    path.write_text(
        json.dumps(store.snapshot(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    logger.info(f"Backup written to {path}")
    return path


def list_backups(backup_dir: str | Path) -> list[dict]:
    """Existing backup files, newest first."""
    directory = Path(backup_dir)
    if not directory.exists():
        return []
    files = sorted(directory.glob("inventory-backup-*.json"), reverse=True)
    return [
        {"filename": f.name, "size_bytes": f.stat().st_size}
        for f in files
    ]
