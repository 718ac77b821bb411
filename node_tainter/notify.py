"""Notifications sent when a node is newly marked."""

import requests

from node_tainter.exceptions import NotificationError
from node_tainter.logging_config import get_logger

logger = get_logger(__name__)

USERNAME = "node-tainter"


class SlackNotifier:
    """Posts messages to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, channel: str, dry_run: bool = False, timeout: float = 10):
        """Initialize the notifier.

        Args:
            webhook_url: Slack incoming webhook URL
            channel: Channel to post to
            dry_run: If True, mark messages as coming from a dry run
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.channel = channel
        self.dry_run = dry_run
        self.timeout = timeout

    @property
    def username(self) -> str:
        if self.dry_run:
            return f"[DRY-RUN] {USERNAME}"
        return USERNAME

    def build_payload(self, message: str) -> dict:
        """Build the webhook payload for a mrkdwn message."""
        return {
            "channel": self.channel,
            "username": self.username,
            "text": message,
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": message},
                }
            ],
        }

    def notify(self, message: str) -> None:
        """
        Send a message.

        Raises:
            NotificationError: If the webhook call fails.
        """
        logger.debug(f"Posting Slack notification to {self.channel}")
        try:
            response = requests.post(
                self.webhook_url, json=self.build_payload(message), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"Failed to send Slack notification: {e}") from e


def build_notifier(
    webhook_url: str | None, channel: str | None, dry_run: bool = False
) -> SlackNotifier | None:
    """Return a notifier only when both webhook and channel are configured."""
    if not webhook_url or not channel:
        logger.debug("Slack webhook or channel not set, notifications disabled")
        return None
    return SlackNotifier(webhook_url, channel, dry_run=dry_run)
