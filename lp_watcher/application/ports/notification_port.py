from __future__ import annotations

from typing import Protocol

from lp_watcher.domain.entities.notification import NotificationMessage


class NotificationPort(Protocol):
    def send_message(self, message: NotificationMessage) -> None:
        ...

    def send_raw(self, text: str) -> None:
        ...
