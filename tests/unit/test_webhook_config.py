"""
Unit tests for corehook.notification.webhook_config.

These tests validate:
- defaults and reset()
- apply_option() effects, including url implicitly enabling the webhook
- unknown keys are ignored with a warning
- validate() failure conditions and the combinations that pass

No I/O is performed.
"""

from __future__ import annotations

import logging

import pytest

from corehook.notification.errors import ConfigError
from corehook.notification.webhook_config import DEFAULT_TIMEOUT_MS, WebhookConfig


def test_defaults() -> None:
    """
    A fresh config is disabled, 5000 ms, TLS verified, no url/auth.
    """
    cfg = WebhookConfig()
    assert cfg.enabled is False
    assert cfg.url is None
    assert cfg.timeout_ms == DEFAULT_TIMEOUT_MS == 5000
    assert cfg.verify_tls is True
    assert cfg.auth_header is None
    assert cfg.is_active is False


def test_reset_restores_defaults() -> None:
    cfg = WebhookConfig()
    cfg.apply_options({
        "url": "https://example.test/hook",
        "timeout": 10,
        "verify_ssl": False,
        "auth_header": "Bearer X",
    })

    cfg.reset()

    assert cfg == WebhookConfig()


def test_url_enables_webhook() -> None:
    """
    A non-empty url forces enabled=True regardless of its prior value.
    """
    cfg = WebhookConfig()
    cfg.apply_option("enabled", False)
    cfg.apply_option("url", "https://example.test/hook")

    assert cfg.enabled is True
    assert cfg.is_active is True


def test_enabled_after_url_wins() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("url", "https://example.test/hook")
    cfg.apply_option("enabled", False)

    assert cfg.enabled is False
    assert cfg.is_active is False


def test_empty_url_does_not_enable() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("url", "")
    assert cfg.enabled is False


def test_options_are_typed() -> None:
    cfg = WebhookConfig()
    cfg.apply_options({
        "timeout": "2000",
        "verify_ssl": "no",
        "auth_header": "Bearer TOKEN",
        "enabled": "yes",
    })

    assert cfg.timeout_ms == 2000
    assert cfg.timeout_s == 2.0
    assert cfg.verify_tls is False
    assert cfg.auth_header == "Bearer TOKEN"
    assert cfg.enabled is True


def test_zero_timeout_means_unbounded() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("timeout", 0)
    assert cfg.timeout_s is None


@pytest.mark.parametrize("value", ["abc", -1, None, True])
def test_bad_timeout_raises(value) -> None:
    cfg = WebhookConfig()
    with pytest.raises(ConfigError):
        cfg.apply_option("timeout", value)


def test_bad_boolean_raises() -> None:
    cfg = WebhookConfig()
    with pytest.raises(ConfigError):
        cfg.apply_option("verify_ssl", "maybe")


@pytest.mark.parametrize(
    "value",
    ["Bearer 令牌", "Bearer abc\r\nX-Injected: 1", "Bearer abc\n"],
)
def test_auth_header_must_be_single_line_latin1(value: str) -> None:
    cfg = WebhookConfig()
    with pytest.raises(ConfigError):
        cfg.apply_option("auth_header", value)
    assert cfg.auth_header is None


def test_auth_header_accepts_latin1() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("auth_header", "Basic dXNlcjpww6Fzcw== é")
    assert cfg.auth_header == "Basic dXNlcjpww6Fzcw== é"


def test_unknown_key_is_ignored_with_warning(caplog) -> None:
    cfg = WebhookConfig()
    with caplog.at_level(logging.WARNING):
        cfg.apply_option("retries", 3)

    assert cfg == WebhookConfig()
    assert "unknown webhook key `retries`" in caplog.text


def test_validate_enabled_without_url_fails() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("enabled", True)
    with pytest.raises(ConfigError, match="no URL"):
        cfg.validate()


@pytest.mark.parametrize("url", ["ftp://example.test", "example.test/hook", "HTTP//x"])
def test_validate_rejects_non_http_url(url: str) -> None:
    cfg = WebhookConfig()
    cfg.apply_option("url", url)
    with pytest.raises(ConfigError, match="must start with"):
        cfg.validate()


def test_validate_rejects_bad_url_even_when_disabled() -> None:
    cfg = WebhookConfig()
    cfg.apply_option("url", "ftp://example.test")
    cfg.apply_option("enabled", False)
    with pytest.raises(ConfigError):
        cfg.validate()


@pytest.mark.parametrize(
    "options",
    [
        {},
        {"enabled": False},
        {"url": "http://example.test/hook"},
        {"url": "https://example.test/hook", "enabled": False},
        {"url": "", "enabled": False},
    ],
)
def test_validate_accepts_consistent_configs(options) -> None:
    cfg = WebhookConfig()
    cfg.apply_options(options)
    cfg.validate()
