"""Telegram notification handler."""

import logging

import httpx

from ssh_uptime_monitor.models import Notification, TransitionKind
from ssh_uptime_monitor.notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)


class TelegramNotifier(BaseNotifier):
    """Send alerts via Telegram bot."""

    def __init__(self, bot_token: str, chat_id: str | int) -> None:
        """Initialize Telegram notifier.

        Args:
            bot_token: Telegram bot API token.
            chat_id: Chat ID to send messages to.
        """
        self.bot_token = bot_token
        self.chat_id = str(chat_id)
        self.api_base = f"https://api.telegram.org/bot{bot_token}"

    def send(self, notification: Notification) -> bool:
        """Send notification via Telegram."""
        return self._send_message(self.format_message(notification))

    def _send_message(self, text: str) -> bool:
        """Send a message via Telegram API."""
        try:
            response = httpx.post(
                f"{self.api_base}/sendMessage",
                json={
                    "chat_id": self.chat_id,
                    "text": text,
                    "parse_mode": "Markdown",
                },
                timeout=10,
            )

            if response.status_code == 200:
                logger.info(f"Telegram notification sent to {self.chat_id}")
                return True
            else:
                logger.error(f"Telegram API error: {response.status_code} - {response.text}")
                return False

        except Exception as e:
            logger.error(f"Failed to send Telegram notification: {e}")
            return False

    def format_message(self, notification: Notification) -> str:
        """Format notification for Telegram (Markdown)."""
        emoji = "✅" if notification.kind == TransitionKind.RECOVERY else "🔴"
        return "\n".join([
            f"{emoji} *{notification.title}*",
            f"_{notification.body}_",
            "",
            f"Target: `{notification.target_id}`",
        ])
