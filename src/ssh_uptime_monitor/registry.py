"""Per-target monitoring configuration."""

import logging
from dataclasses import replace

from ssh_uptime_monitor.models import HealthCheckConfig
from ssh_uptime_monitor.storage import BaseStore, StorageError

logger = logging.getLogger(__name__)

CONFIGS_KEY = "monitoring:configs"


class ScheduleRegistry:
    """In-memory registry of health check configs, flushed in full on every change.

    The registry is loaded once at construction and then treated as the
    source of truth. Flush failures are logged; the in-memory copy keeps the
    change so the current process behaves consistently.
    """

    def __init__(self, store: BaseStore) -> None:
        self.store = store
        self._configs: dict[str, HealthCheckConfig] = {}
        self.load()

    def load(self) -> None:
        """(Re)load all configs from the store."""
        self._configs = {}
        try:
            data = self.store.get(CONFIGS_KEY) or []
        except StorageError as e:
            logger.error(f"Failed to load monitoring configs: {e}")
            return

        for entry in data:
            try:
                config = HealthCheckConfig.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed monitoring config: {e}")
                continue
            self._configs[config.target_id] = config
        logger.debug(f"Loaded {len(self._configs)} monitoring configs")

    def _save(self) -> None:
        try:
            self.store.set(CONFIGS_KEY, [c.to_dict() for c in self._configs.values()])
        except StorageError as e:
            logger.error(f"Failed to save monitoring configs: {e}")

    def upsert(self, config: HealthCheckConfig) -> None:
        """Insert or replace the config for config.target_id."""
        if config.interval_minutes < 1:
            raise ValueError("interval_minutes must be a positive integer")
        # Stored configs change only through the registry
        self._configs[config.target_id] = replace(config)
        self._save()

    def remove(self, target_id: str) -> None:
        if self._configs.pop(target_id, None) is not None:
            self._save()

    def set_enabled(self, target_id: str, enabled: bool) -> None:
        """Toggle a config. Unknown targets are ignored."""
        config = self._configs.get(target_id)
        if config is None:
            logger.debug(f"No monitoring config for {target_id}, ignoring toggle")
            return
        config.enabled = enabled
        self._save()

    def get(self, target_id: str) -> HealthCheckConfig | None:
        return self._configs.get(target_id)

    def configs(self) -> list[HealthCheckConfig]:
        return list(self._configs.values())

    def enabled_configs(self) -> list[HealthCheckConfig]:
        return [c for c in self._configs.values() if c.enabled]

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._configs

    def __len__(self) -> int:
        return len(self._configs)
