"""Alert notification handlers."""

from ssh_uptime_monitor.config import NotifierConfig
from ssh_uptime_monitor.notifiers.base import BaseNotifier, MultiNotifier
from ssh_uptime_monitor.notifiers.log import LogNotifier
from ssh_uptime_monitor.notifiers.slack import SlackNotifier
from ssh_uptime_monitor.notifiers.telegram import TelegramNotifier
from ssh_uptime_monitor.notifiers.webhook import WebhookNotifier


def build_notifier(config: NotifierConfig) -> BaseNotifier:
    """Build the configured notifiers, always including the log notifier."""
    notifiers: list[BaseNotifier] = [LogNotifier()]

    if config.telegram:
        notifiers.append(TelegramNotifier(
            bot_token=config.telegram["bot_token"],
            chat_id=config.telegram["chat_id"],
        ))
    if config.slack:
        notifiers.append(SlackNotifier(
            webhook_url=config.slack["webhook_url"],
            channel=config.slack.get("channel"),
        ))
    if config.webhook:
        auth = config.webhook.get("auth")
        notifiers.append(WebhookNotifier(
            url=config.webhook["url"],
            method=config.webhook.get("method", "POST"),
            headers=config.webhook.get("headers"),
            auth=(auth["username"], auth["password"]) if auth else None,
        ))

    if len(notifiers) == 1:
        return notifiers[0]
    return MultiNotifier(notifiers)


__all__ = [
    "BaseNotifier",
    "LogNotifier",
    "MultiNotifier",
    "SlackNotifier",
    "TelegramNotifier",
    "WebhookNotifier",
    "build_notifier",
]
