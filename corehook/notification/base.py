from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from corehook.notification.webhook_config import WebhookConfig


class DeliveryOutcome(str, Enum):
    """
    What happened to a single notification attempt.

    Members
    -------
    SKIPPED : str
        Webhook disabled; no network I/O was performed.
    DELIVERED : str
        Endpoint answered with a 2xx status.
    REJECTED : str
        Endpoint answered with any other status.
    FAILED : str
        Transport failure (connect, TLS, timeout).
    QUEUED : str
        Handed to the background worker; the attempt happens later.
    """

    SKIPPED = "SKIPPED"
    DELIVERED = "DELIVERED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"
    QUEUED = "QUEUED"


@dataclass(frozen=True)
class DeliveryResult:
    """
    Result of a dispatch call.

    Only a transport failure makes ``ok`` False. A non-2xx answer still
    counts as a successful attempt: callers only learn whether the request
    was made, not whether the remote party accepted it.

    Parameters
    ----------
    outcome
        Classification of the attempt.
    label
        Log correlation label passed by the hook.
    status_code
        HTTP status, when a response was received.
    error
        Transport diagnostic for FAILED attempts.
    """

    outcome: DeliveryOutcome
    label: str
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is not DeliveryOutcome.FAILED


class Dispatcher(Protocol):
    """
    Anything that can send a serialized payload for a given config.

    The synchronous :func:`~corehook.notification.webhook_notifier.send`
    and :class:`~corehook.notification.notification_thread.NotificationWorkerThread`
    both satisfy this protocol, so hooks do not care which one they get.
    """

    def __call__(self, config: "WebhookConfig", payload: str, label: str) -> DeliveryResult:
        ...
