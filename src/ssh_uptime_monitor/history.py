"""Bounded probe history and current status per target."""

import logging

from ssh_uptime_monitor.models import HealthStatus, ProbeRecord
from ssh_uptime_monitor.storage import BaseStore, StorageError

logger = logging.getLogger(__name__)

KEY_PREFIX = "monitoring:"
DEFAULT_HISTORY_LIMIT = 1000


def history_key(target_id: str) -> str:
    return f"{KEY_PREFIX}history:{target_id}"


def status_key(target_id: str) -> str:
    return f"{KEY_PREFIX}status:{target_id}"


class HistoryStore:
    """Append-only, size-capped log of probe records plus the latest status.

    History is diagnostic data: storage failures are logged and swallowed so
    that a broken disk never stops a monitoring pass.

    The cap is a record count, not a time span. A target probed often enough
    can push its whole 24h window out of the log, after which uptime reads as
    100% again. That is existing behavior and is kept as is.
    """

    def __init__(self, store: BaseStore, max_records: int = DEFAULT_HISTORY_LIMIT) -> None:
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.store = store
        self.max_records = max_records

    def append(self, target_id: str, record: ProbeRecord) -> None:
        """Add a record, evicting the oldest ones beyond the cap."""
        key = history_key(target_id)
        try:
            entries = self.store.get(key) or []
            entries.append(record.to_dict())
            self.store.set(key, entries[-self.max_records:])
        except StorageError as e:
            logger.error(f"Failed to add history entry for {target_id}: {e}")

    def recent(self, target_id: str, limit: int | None = None) -> list[ProbeRecord]:
        """Return up to limit newest records, oldest first."""
        if limit is not None and limit <= 0:
            return []
        try:
            entries = self.store.get(history_key(target_id)) or []
        except StorageError as e:
            logger.error(f"Failed to get health history for {target_id}: {e}")
            return []

        if limit is not None:
            entries = entries[-limit:]

        records = []
        for entry in entries:
            try:
                records.append(ProbeRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed history entry for {target_id}: {e}")
        return records

    def clear(self, target_id: str) -> None:
        try:
            self.store.delete(history_key(target_id))
        except StorageError as e:
            logger.error(f"Failed to clear history for {target_id}: {e}")

    def get_status(self, target_id: str) -> HealthStatus | None:
        try:
            data = self.store.get(status_key(target_id))
        except StorageError as e:
            logger.error(f"Failed to get status for {target_id}: {e}")
            return None

        if data is None:
            return None
        try:
            return HealthStatus.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed status for {target_id}: {e}")
            return None

    def set_status(self, target_id: str, status: HealthStatus) -> None:
        """Replace the stored status record as a whole."""
        try:
            self.store.set(status_key(target_id), status.to_dict())
        except StorageError as e:
            logger.error(f"Failed to save status for {target_id}: {e}")

    def delete_status(self, target_id: str) -> None:
        try:
            self.store.delete(status_key(target_id))
        except StorageError as e:
            logger.error(f"Failed to delete status for {target_id}: {e}")
