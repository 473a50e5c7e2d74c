"""Slack notification handler."""

import logging

import httpx

from ssh_uptime_monitor.models import Notification, TransitionKind
from ssh_uptime_monitor.notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)


class SlackNotifier(BaseNotifier):
    """Send alerts via Slack webhook."""

    def __init__(self, webhook_url: str, channel: str | None = None) -> None:
        """Initialize Slack notifier.

        Args:
            webhook_url: Slack incoming webhook URL.
            channel: Optional channel override.
        """
        self.webhook_url = webhook_url
        self.channel = channel

    def send(self, notification: Notification) -> bool:
        """Send notification via Slack."""
        return self._send_webhook(self._build_payload(notification))

    def _build_payload(self, notification: Notification) -> dict:
        """Build Slack message payload with an attachment."""
        color_map = {
            "online": "good",
            "offline": "danger",
            "error": "warning",
        }
        color = color_map.get(notification.status.value, "#808080")
        icon = "✅" if notification.kind == TransitionKind.RECOVERY else "🚨"

        payload = {
            "text": f"{icon} {notification.title}",
            "attachments": [
                {
                    "color": color,
                    "title": notification.title,
                    "text": notification.body,
                    "fields": [
                        {"title": "Target", "value": notification.target_id, "short": True},
                        {"title": "Status", "value": notification.status.value.upper(), "short": True},
                    ],
                    "footer": "SSH Uptime Monitor",
                }
            ],
        }

        if self.channel:
            payload["channel"] = self.channel

        return payload

    def _send_webhook(self, payload: dict) -> bool:
        """Send payload to Slack webhook."""
        try:
            response = httpx.post(
                self.webhook_url,
                json=payload,
                timeout=10,
            )

            if response.status_code == 200:
                logger.info("Slack notification sent")
                return True
            else:
                logger.error(f"Slack webhook error: {response.status_code}")
                return False

        except Exception as e:
            logger.error(f"Failed to send Slack notification: {e}")
            return False
