"""Decide when a status change deserves a notification."""

from ssh_uptime_monitor.models import (
    HealthCheckConfig,
    HealthStatus,
    Notification,
    Target,
    TargetState,
    TransitionKind,
)

DEFAULT_FAILURE_BODY = "Connection check failed"


class TransitionNotifier:
    """Turn status transitions into notifications.

    Only changes are reported, never levels: a target that stays offline
    alerts once. The first status ever recorded for a target has nothing to
    compare against and never alerts.
    """

    def evaluate(
        self,
        target: Target,
        new_status: HealthStatus,
        previous_status: HealthStatus | None,
        config: HealthCheckConfig,
    ) -> Notification | None:
        if previous_status is None or previous_status.status == new_status.status:
            return None

        if new_status.status != TargetState.ONLINE:
            if not config.notify_on_failure:
                return None
            return Notification(
                title=f"Server {target.display_name} is {new_status.status.value}",
                body=new_status.error_message or DEFAULT_FAILURE_BODY,
                kind=TransitionKind.FAILURE,
                target_id=target.id,
                status=new_status.status,
            )

        if not config.notify_on_recovery:
            return None
        return Notification(
            title=f"Server {target.display_name} is back online",
            body=f"Response time: {new_status.response_time_ms}ms",
            kind=TransitionKind.RECOVERY,
            target_id=target.id,
            status=new_status.status,
        )
