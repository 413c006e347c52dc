from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional

from corehook.notification.base import DeliveryOutcome, DeliveryResult, Dispatcher
from corehook.notification.webhook_config import WebhookConfig
from corehook.notification.webhook_notifier import send

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationThreadConfig:
    max_queue: int = 2000
    poll_timeout_s: float = 0.5
    join_timeout_s: float = 2.0


@dataclass(frozen=True)
class _Job:
    config: WebhookConfig
    payload: str
    label: str


_STOP = _Job(config=WebhookConfig(), payload="", label="__stop__")


class NotificationWorkerThread:
    """
    Moves webhook sends off the thread that processes the domain event.

    The worker is a drop-in :class:`~corehook.notification.base.Dispatcher`:
    calling it enqueues the payload and returns immediately with
    ``DeliveryOutcome.QUEUED``. A daemon thread then makes exactly one
    delivery attempt per item through ``sender``. Nothing is retried and a
    full queue drops the newest item.
    """

    def __init__(self, sender: Dispatcher = send, cfg: NotificationThreadConfig | None = None):
        self._sender = sender
        self._cfg = cfg or NotificationThreadConfig()
        self._q: "queue.Queue[_Job]" = queue.Queue(maxsize=self._cfg.max_queue)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="webhook-worker", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        try:
            self._q.put_nowait(_STOP)
        except queue.Full:
            pass
        if self._thread.is_alive():
            self._thread.join(timeout=self._cfg.join_timeout_s)

        discarded = 0
        while True:
            try:
                job = self._q.get_nowait()
            except queue.Empty:
                break
            if job is not _STOP:
                discarded += 1
        if discarded:
            logger.warning("Webhook worker stopped, discarded %d queued notification(s)", discarded)

    @property
    def pending(self) -> int:
        return self._q.qsize()

    def __call__(self, config: WebhookConfig, payload: str, label: str) -> DeliveryResult:
        if not config.is_active:
            return DeliveryResult(outcome=DeliveryOutcome.SKIPPED, label=label)

        try:
            self._q.put_nowait(_Job(config=config, payload=payload, label=label))
        except queue.Full:
            logger.warning("Webhook queue full, dropping [%s]", label)
            return DeliveryResult(outcome=DeliveryOutcome.FAILED, label=label, error="queue full")
        return DeliveryResult(outcome=DeliveryOutcome.QUEUED, label=label)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                job = self._q.get(timeout=self._cfg.poll_timeout_s)
            except queue.Empty:
                continue

            if job is _STOP:
                break

            self._deliver(job)

    def _deliver(self, job: _Job) -> Optional[DeliveryResult]:
        try:
            return self._sender(job.config, job.payload, job.label)
        except Exception:
            # The worker must survive a misbehaving sender.
            logger.exception("Webhook sender raised [%s]", job.label)
            return None
