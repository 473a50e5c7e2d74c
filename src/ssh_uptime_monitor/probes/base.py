"""Base prober interface."""

from abc import ABC, abstractmethod

from ssh_uptime_monitor.models import Credentials, Target


class BaseProber(ABC):
    """Abstract base class for connectivity checks."""

    @abstractmethod
    def check_connection(self, target: Target, credentials: Credentials, timeout: float) -> bool:
        """Open and close a session to the target.

        Args:
            target: Target to connect to.
            credentials: Resolved secrets for the target.
            timeout: Connect timeout in seconds.

        Returns:
            True if a session could be established. Implementations may
            return False or raise on failure; the executor handles both.
        """
        ...
