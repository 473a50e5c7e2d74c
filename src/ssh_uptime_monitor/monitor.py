"""Core uptime monitoring logic."""

import logging
import threading
from datetime import datetime
from typing import Callable

from ssh_uptime_monitor.config import Config
from ssh_uptime_monitor.credentials import BaseCredentialStore, ConfigCredentialStore
from ssh_uptime_monitor.history import HistoryStore
from ssh_uptime_monitor.models import (
    Credentials,
    HealthCheckConfig,
    HealthStatus,
    Notification,
    ProbeRecord,
    Target,
    TargetState,
    utcnow,
)
from ssh_uptime_monitor.notifiers import BaseNotifier, build_notifier
from ssh_uptime_monitor.probes import ProbeExecutor, SSHProber
from ssh_uptime_monitor.registry import ScheduleRegistry
from ssh_uptime_monitor.storage import BaseStore, JsonFileStore
from ssh_uptime_monitor.transitions import TransitionNotifier
from ssh_uptime_monitor.uptime import compute_uptime

logger = logging.getLogger(__name__)

TargetResolver = Callable[[str], Target | None]


class HealthMonitor:
    """Main uptime monitoring orchestrator.

    One instance is built at process start and handed to whatever wakes the
    process up (the `sshmon watch` loop, cron, a systemd timer). Each call to
    run_monitoring_pass() probes every enabled target once, in sequence.
    """

    def __init__(
        self,
        registry: ScheduleRegistry,
        history: HistoryStore,
        executor: ProbeExecutor,
        credentials: BaseCredentialStore,
        resolve_target: TargetResolver,
        notifier: BaseNotifier | None = None,
        transitions: TransitionNotifier | None = None,
        clock: Callable[[], datetime] = utcnow,
        history_page_size: int = 100,
    ) -> None:
        """Initialize health monitor.

        Args:
            registry: Per-target monitoring configs.
            history: Probe history and current status store.
            executor: Runs liveness probes.
            credentials: Source of per-target secrets.
            resolve_target: Looks a target up by id; returns None if gone.
            notifier: Optional sink for transition notifications.
            transitions: Decides which status changes notify.
            clock: Returns the current aware datetime.
            history_page_size: Default limit for get_history().
        """
        self.registry = registry
        self.history = history
        self.executor = executor
        self.credentials = credentials
        self.resolve_target = resolve_target
        self.notifier = notifier
        self.transitions = transitions or TransitionNotifier()
        self.clock = clock
        self.history_page_size = history_page_size
        self._pass_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: BaseStore | None = None,
        notifier: BaseNotifier | None = None,
    ) -> "HealthMonitor":
        """Wire up a monitor from application configuration."""
        store = store or JsonFileStore(config.storage.path)
        prober = SSHProber(
            known_hosts=config.known_hosts,
            strict_host_keys=config.strict_host_keys,
        )
        return cls(
            registry=ScheduleRegistry(store),
            history=HistoryStore(store, max_records=config.history_limit),
            executor=ProbeExecutor(prober, timeout_ms=config.probe_timeout_ms),
            credentials=ConfigCredentialStore(config),
            resolve_target=config.resolve_target,
            notifier=notifier or build_notifier(config.notifiers),
            history_page_size=config.history_page_size,
        )

    # Monitoring passes

    def run_monitoring_pass(self) -> list[HealthStatus]:
        """Probe every enabled target once.

        Safe to call at any cadence. A pass requested while another is still
        running is skipped. One target failing never stops the others.

        Returns:
            New statuses for the targets that were probed.
        """
        if not self._pass_lock.acquire(blocking=False):
            logger.warning("Monitoring pass already in progress, skipping this tick")
            return []

        try:
            configs = self.registry.enabled_configs()
            if not configs:
                logger.info("No enabled monitoring configs")
                return []

            logger.info(f"Starting monitoring pass over {len(configs)} targets")
            results: list[HealthStatus] = []
            for config in configs:
                try:
                    status = self._check(config.target_id, config)
                except Exception:
                    logger.exception(f"Health check for {config.target_id} failed")
                    continue
                if status is not None:
                    results.append(status)

            logger.info(f"Monitoring pass complete: {len(results)}/{len(configs)} targets checked")
            return results
        finally:
            self._pass_lock.release()

    def check_target(self, target_id: str) -> HealthStatus | None:
        """Check one target right now, whether or not it is scheduled.

        Returns:
            The new status, or None if the target or its credentials could
            not be resolved.
        """
        return self._check(target_id, self.registry.get(target_id))

    def _resolve(self, target_id: str) -> tuple[Target, Credentials] | None:
        try:
            target = self.resolve_target(target_id)
            credentials = self.credentials.get_credentials(target_id) if target else None
        except Exception as e:
            logger.warning(f"Could not resolve {target_id}: {e}")
            return None

        if target is None:
            logger.warning(f"Target {target_id} not found, skipping")
            return None
        if credentials is None:
            logger.warning(f"No credentials for {target_id}, skipping")
            return None
        return target, credentials

    def _check(self, target_id: str, config: HealthCheckConfig | None) -> HealthStatus | None:
        resolved = self._resolve(target_id)
        if resolved is None:
            return None
        target, credentials = resolved

        result = self.executor.check(target, credentials, timeout_ms=target.timeout_ms)
        record = result.to_record()
        self.history.append(target_id, record)

        previous = self.history.get_status(target_id)
        status = self._build_status(target_id, result.state, record, previous)
        self.history.set_status(target_id, status)

        logger.info(
            f"{target_id}: {status.status.value} "
            f"(failures={status.consecutive_failures}, uptime={status.uptime_percentage}%)"
        )

        if config is not None:
            notification = self.transitions.evaluate(target, status, previous, config)
            if notification is not None:
                self._deliver(notification)

        return status

    def _build_status(
        self,
        target_id: str,
        state: TargetState,
        record: ProbeRecord,
        previous: HealthStatus | None,
    ) -> HealthStatus:
        now = self.clock()
        online = state == TargetState.ONLINE
        previous_failures = previous.consecutive_failures if previous else 0
        uptime = compute_uptime(
            target_id,
            self.history.recent(target_id, self.history.max_records),
            now,
        )

        return HealthStatus(
            target_id=target_id,
            status=state,
            last_checked_at=now,
            last_online_at=now if online else (previous.last_online_at if previous else None),
            consecutive_failures=0 if online else previous_failures + 1,
            uptime_percentage=uptime,
            response_time_ms=record.response_time_ms,
            error_message=record.error_detail,
        )

    def _deliver(self, notification: Notification) -> None:
        if self.notifier is None:
            return
        try:
            sent = self.notifier.send(notification)
        except Exception as e:
            logger.error(f"Notifier failed for {notification.target_id}: {e}")
            return
        if not sent:
            logger.warning(f"Notification for {notification.target_id} was not delivered")

    # Registry mutations

    def set_monitoring(
        self,
        target_id: str,
        interval_minutes: int = 15,
        notify_on_failure: bool = True,
        notify_on_recovery: bool = True,
        enabled: bool = True,
    ) -> HealthCheckConfig:
        """Start (or reconfigure) monitoring for a target."""
        config = HealthCheckConfig(
            target_id=target_id,
            interval_minutes=interval_minutes,
            enabled=enabled,
            notify_on_failure=notify_on_failure,
            notify_on_recovery=notify_on_recovery,
        )
        self.registry.upsert(config)
        return config

    def stop_monitoring(self, target_id: str) -> None:
        """Stop monitoring a target and drop its current status."""
        self.registry.remove(target_id)
        self.history.delete_status(target_id)

    def set_enabled(self, target_id: str, enabled: bool) -> None:
        self.registry.set_enabled(target_id, enabled)

    def forget_target(self, target_id: str) -> None:
        """Remove everything stored for a deleted target."""
        self.stop_monitoring(target_id)
        self.history.clear(target_id)

    # Queries

    def get_status(self, target_id: str) -> HealthStatus | None:
        return self.history.get_status(target_id)

    def get_history(self, target_id: str, limit: int | None = None) -> list[ProbeRecord]:
        if limit is None:
            limit = self.history_page_size
        return self.history.recent(target_id, limit)

    def get_configs(self) -> list[HealthCheckConfig]:
        return self.registry.configs()
