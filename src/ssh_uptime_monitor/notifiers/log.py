"""Logging notifier."""

import logging

from ssh_uptime_monitor.models import Notification, TransitionKind
from ssh_uptime_monitor.notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)


class LogNotifier(BaseNotifier):
    """Write notifications to the log. Used when no sink is configured."""

    def send(self, notification: Notification) -> bool:
        level = logging.INFO if notification.kind == TransitionKind.RECOVERY else logging.WARNING
        logger.log(level, f"{notification.title}: {notification.body}")
        return True
