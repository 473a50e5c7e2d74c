"""Base notifier interface."""

from abc import ABC, abstractmethod

from ssh_uptime_monitor.models import Notification


class BaseNotifier(ABC):
    """Abstract base class for alert notifiers."""

    @abstractmethod
    def send(self, notification: Notification) -> bool:
        """Deliver a notification.

        Args:
            notification: Title, body and metadata to deliver.

        Returns:
            True if notification was sent successfully.
        """
        ...


class MultiNotifier(BaseNotifier):
    """Fan a notification out to several notifiers."""

    def __init__(self, notifiers: list[BaseNotifier]) -> None:
        self.notifiers = notifiers

    def send(self, notification: Notification) -> bool:
        results = [n.send(notification) for n in self.notifiers]
        return bool(results) and all(results)
