"""
Unit tests for corehook.notification.base.

These tests validate notification-layer contracts:
- DeliveryResult is immutable (frozen)
- only FAILED attempts are reported as not ok
- the Dispatcher protocol supports duck typing (no inheritance required)
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from corehook.notification.base import DeliveryOutcome, DeliveryResult, Dispatcher
from corehook.notification.webhook_config import WebhookConfig


class _FakeDispatcher:
    """Dispatcher implementation without inheriting from the protocol."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def __call__(self, config: WebhookConfig, payload: str, label: str) -> DeliveryResult:
        self.seen.append(label)
        return DeliveryResult(outcome=DeliveryOutcome.SKIPPED, label=label)


@pytest.mark.parametrize(
    "outcome, ok",
    [
        (DeliveryOutcome.SKIPPED, True),
        (DeliveryOutcome.DELIVERED, True),
        (DeliveryOutcome.REJECTED, True),
        (DeliveryOutcome.QUEUED, True),
        (DeliveryOutcome.FAILED, False),
    ],
)
def test_delivery_result_ok(outcome: DeliveryOutcome, ok: bool) -> None:
    assert DeliveryResult(outcome=outcome, label="x").ok is ok


def test_delivery_result_defaults_and_frozen() -> None:
    r = DeliveryResult(outcome=DeliveryOutcome.DELIVERED, label="x")
    assert r.status_code is None
    assert r.error is None
    with pytest.raises(FrozenInstanceError):
        r.label = "y"  # type: ignore[misc]


def test_dispatcher_protocol_duck_typing() -> None:
    d = _FakeDispatcher()
    dispatcher: Dispatcher = d

    result = dispatcher(WebhookConfig(), "{}", "enb_attached:1")

    assert d.seen == ["enb_attached:1"]
    assert result.outcome is DeliveryOutcome.SKIPPED
