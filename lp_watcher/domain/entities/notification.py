from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationAuthor:
    name: str
    icon_url: str | None
    url: str


@dataclass(frozen=True)
class NotificationField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class NotificationFooter:
    text: str
    icon_url: str | None = None


@dataclass(frozen=True)
class NotificationMessage:
    title: str
    color: str
    url: str
    author: NotificationAuthor
    description: str
    fields: tuple[NotificationField, ...]
    footer: NotificationFooter
    timestamp: datetime
    # set when the message must page someone outside the embed
    mention: str | None = None
