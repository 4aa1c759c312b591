from __future__ import annotations

from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
import logging

from lp_watcher.application.dto.dispatch import DispatchResult
from lp_watcher.application.ports.notification_port import NotificationPort
from lp_watcher.application.use_cases.value_event import ValuationEngine
from lp_watcher.domain.entities.events import RawEvent
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.exceptions import ValuationError
from lp_watcher.domain.services.event_log import serialize_event
from lp_watcher.domain.services.notification import NotificationOptions, compose_notification


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchPolicy:
    is_production: bool
    log_raw_on_failure: bool = True
    notification: NotificationOptions = field(default_factory=NotificationOptions)


class EventDispatcher:
    """Runs the valuation pipeline for one event and hands the results to the channels.

    Event tasks run on ``executor``; sends go to ``send_executor`` and are never
    awaited or retried: delivery is at-most-once and best-effort. Keeping the
    two pools apart lets ``shutdown`` drain in-flight events before the send
    pool stops accepting work.
    """

    def __init__(
        self,
        *,
        valuation_engine: ValuationEngine,
        notifier: NotificationPort,
        executor: Executor,
        send_executor: Executor,
        policy: DispatchPolicy,
    ):
        self._valuation_engine = valuation_engine
        self._notifier = notifier
        self._executor = executor
        self._send_executor = send_executor
        self._policy = policy

    def submit(self, event: RawEvent, pool: PoolConfig) -> Future:
        future = self._executor.submit(self.on_event, event, pool)
        future.add_done_callback(lambda done: _log_task_failure(done, event))
        return future

    def announce(self, text: str) -> Future:
        """Posts an operational notice (startup and the like) to the diagnostic channel."""
        future = self._send_executor.submit(self._notifier.send_raw, text)
        future.add_done_callback(_log_announce_failure)
        return future

    def shutdown(self) -> None:
        # events first: their sends must still find the send pool open
        self._executor.shutdown(wait=True)
        self._send_executor.shutdown(wait=True)
        logger.info("event_dispatcher: shutdown_complete")

    def on_event(self, event: RawEvent, pool: PoolConfig) -> DispatchResult:
        raw = serialize_event(event)
        try:
            valuation = self._valuation_engine.execute(event, pool)
        except ValuationError as exc:
            logger.warning(
                "event_dispatcher: valuation_failed pool=%s kind=%s tx=%s error_type=%s error=%s",
                pool.name,
                event.kind,
                event.transaction_hash,
                type(exc).__name__,
                exc,
            )
            logged_raw = None
            if self._policy.log_raw_on_failure:
                self._send(self._notifier.send_raw, raw, channel="diagnostic", event=event)
                logged_raw = raw
            return DispatchResult(sent=None, logged_raw=logged_raw, error=str(exc))

        message = compose_notification(
            event,
            valuation,
            pool,
            is_production=self._policy.is_production,
            options=self._policy.notification,
        )
        self._send(self._notifier.send_message, message, channel="primary", event=event)
        self._send(self._notifier.send_raw, raw, channel="diagnostic", event=event)

        logger.info(
            "event_dispatcher: dispatched pool=%s kind=%s tx=%s total_usd=%s anomalous=%s",
            pool.name,
            event.kind,
            event.transaction_hash,
            valuation.total_usd,
            valuation.is_anomalous,
        )
        return DispatchResult(sent=message, logged_raw=raw, valuation=valuation)

    def _send(self, send, payload, *, channel: str, event: RawEvent) -> None:
        future = self._send_executor.submit(send, payload)
        future.add_done_callback(lambda done: _log_send_failure(done, channel, event))


def _log_announce_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.warning("event_dispatcher: announce_failed error=%s", exc)


def _log_send_failure(future: Future, channel: str, event: RawEvent) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is None:
        return
    logger.warning(
        "event_dispatcher: send_failed channel=%s kind=%s tx=%s error=%s",
        channel,
        event.kind,
        event.transaction_hash,
        exc,
    )


def _log_task_failure(future: Future, event: RawEvent) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is None:
        return
    logger.error(
        "event_dispatcher: event_task_failed kind=%s tx=%s",
        event.kind,
        event.transaction_hash,
        exc_info=exc,
    )
