from __future__ import annotations

import json
import logging
import re

import httpx

from lp_watcher.application.ports.notification_port import NotificationPort
from lp_watcher.domain.entities.notification import NotificationMessage


logger = logging.getLogger(__name__)

# Discord rejects message content longer than this.
MAX_CONTENT_LENGTH = 2000


class NotificationDeliveryError(RuntimeError):
    pass


_ROLE_MENTION = re.compile(r"^<@&(\d+)>$")
_USER_MENTION = re.compile(r"^<@!?(\d+)>$")


def allowed_mentions_for(mention: str) -> dict:
    """Limits what Discord pings to the configured escalation target."""
    if mention in ("@here", "@everyone"):
        return {"parse": ["everyone"]}
    role = _ROLE_MENTION.match(mention)
    if role:
        return {"parse": [], "roles": [role.group(1)]}
    user = _USER_MENTION.match(mention)
    if user:
        return {"parse": [], "users": [user.group(1)]}
    return {"parse": []}


def message_to_embed(message: NotificationMessage) -> dict:
    author = {"name": message.author.name, "url": message.author.url}
    if message.author.icon_url:
        author["icon_url"] = message.author.icon_url
    footer = {"text": message.footer.text}
    if message.footer.icon_url:
        footer["icon_url"] = message.footer.icon_url
    return {
        "title": message.title,
        "url": message.url,
        "color": int(message.color.lstrip("#"), 16),
        "author": author,
        "description": message.description,
        "fields": [
            {"name": row.name, "value": row.value, "inline": row.inline}
            for row in message.fields
        ],
        "footer": footer,
        "timestamp": message.timestamp.isoformat(),
    }


def raw_to_content(text: str) -> str:
    fence_open, fence_close = "```json\n", "\n```"
    budget = MAX_CONTENT_LENGTH - len(fence_open) - len(fence_close)
    if len(text) > budget:
        text = text[: budget - 3] + "..."
    return f"{fence_open}{text}{fence_close}"


class DiscordWebhookClient(NotificationPort):
    def __init__(
        self,
        *,
        webhook_url: str,
        log_webhook_url: str,
        http_client: httpx.Client,
    ):
        self._webhook_url = webhook_url
        self._log_webhook_url = log_webhook_url
        self._http = http_client

    def send_message(self, message: NotificationMessage) -> None:
        payload: dict = {"embeds": [message_to_embed(message)]}
        if message.mention:
            # mentions inside embeds never notify
            payload["content"] = message.mention
            payload["allowed_mentions"] = allowed_mentions_for(message.mention)
        self._post(self._webhook_url, payload, channel="primary")

    def send_raw(self, text: str) -> None:
        self._post(self._log_webhook_url, {"content": raw_to_content(text)}, channel="diagnostic")

    def _post(self, url: str, payload: dict, *, channel: str) -> None:
        if not url:
            logger.info(
                "discord_webhook_client: channel_not_configured channel=%s payload=%s",
                channel,
                json.dumps(payload)[:200],
            )
            return
        try:
            response = self._http.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError(f"Discord {channel} webhook failed: {exc}") from exc
