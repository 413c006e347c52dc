"""
Unit tests for corehook.hooks.smf.SmfWebhookHooks.

These tests validate:
- inactive configs short-circuit before any lookup
- a missing SMF UE is logged and nothing is sent
- deallocation without any address is skipped
- transport failures do not raise into the caller
"""

from __future__ import annotations

import json
import logging
from ipaddress import IPv4Address, IPv6Address
from typing import List, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from corehook.core.directory import InMemoryDirectory
from corehook.domain.models import SmfSession, SmfUe, SNssai
from corehook.hooks.smf import SmfWebhookHooks
from corehook.notification.base import DeliveryOutcome, DeliveryResult
from corehook.notification.webhook_config import WebhookConfig


class _Recorder:
    def __init__(self) -> None:
        self.sent: List[Tuple[dict, str]] = []

    def __call__(self, config: WebhookConfig, payload: str, label: str) -> DeliveryResult:
        self.sent.append((json.loads(payload), label))
        return DeliveryResult(outcome=DeliveryOutcome.DELIVERED, label=label, status_code=200)


def _active_cfg() -> WebhookConfig:
    cfg = WebhookConfig()
    cfg.apply_options({"url": "https://example.test/hook", "timeout": 1000})
    cfg.validate()
    return cfg


def _session(**kw) -> SmfSession:
    base = dict(
        smf_ue_id=1,
        s_nssai=SNssai(sst=1),
        psi=5,
        dnn="internet",
        ipv4=IPv4Address("10.45.0.2"),
        ipv6=IPv6Address("2001:db8:cafe::2"),
    )
    base.update(kw)
    return SmfSession(**base)


@pytest.fixture
def directory() -> InMemoryDirectory:
    d = InMemoryDirectory()
    d.add_smf_ue(SmfUe(id=1, supi="imsi-001010000000001", imsi="001010000000001"))
    return d


def test_inactive_config_skips_lookup() -> None:
    directory = MagicMock()
    rec = _Recorder()
    hooks = SmfWebhookHooks(WebhookConfig(), directory, rec)

    assert hooks.ip_assigned(_session()) is None
    assert hooks.ip_deallocated(_session()) is None
    directory.find_smf_ue.assert_not_called()
    assert rec.sent == []


def test_ip_assigned_sends_both_addresses(directory) -> None:
    rec = _Recorder()
    hooks = SmfWebhookHooks(_active_cfg(), directory, rec)

    result = hooks.ip_assigned(_session())

    assert result is not None and result.ok
    payload, label = rec.sent[0]
    assert label == "ue_ip_assigned:imsi-001010000000001"
    assert payload["assigned_ips"] == {
        "ipv4": "10.45.0.2",
        "ipv6": "2001:db8:cafe::2",
        "ipv6_prefix_length": 64,
    }
    assert payload["network_type"] == "5gc"


def test_ip_deallocated_label_falls_back_to_imsi() -> None:
    directory = InMemoryDirectory()
    directory.add_smf_ue(SmfUe(id=1, imsi="001010000000001"))
    rec = _Recorder()

    SmfWebhookHooks(_active_cfg(), directory, rec).ip_deallocated(_session(ipv6=None))

    payload, label = rec.sent[0]
    assert label == "ue_ip_deallocated:001010000000001"
    assert payload["deallocated_ips"] == {"ipv4": "10.45.0.2"}


def test_missing_smf_ue_is_logged_and_not_sent(caplog) -> None:
    rec = _Recorder()
    hooks = SmfWebhookHooks(_active_cfg(), InMemoryDirectory(), rec)

    with caplog.at_level(logging.ERROR):
        assert hooks.ip_assigned(_session()) is None
        assert hooks.ip_deallocated(_session()) is None

    assert rec.sent == []
    assert "Cannot find SMF UE" in caplog.text


def test_deallocation_without_addresses_is_skipped(directory, caplog) -> None:
    rec = _Recorder()
    hooks = SmfWebhookHooks(_active_cfg(), directory, rec)

    with caplog.at_level(logging.DEBUG):
        assert hooks.ip_deallocated(_session(ipv4=None, ipv6=None)) is None

    assert rec.sent == []
    assert "No IPs to deallocate" in caplog.text


def test_transport_failure_does_not_raise(directory, monkeypatch) -> None:
    """
    With the real dispatcher, an unreachable endpoint yields a failed result
    and the caller continues normally.
    """
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("requests.post", fake_post)

    result = SmfWebhookHooks(_active_cfg(), directory).ip_assigned(_session())

    assert result is not None
    assert result.ok is False
    assert result.outcome is DeliveryOutcome.FAILED
