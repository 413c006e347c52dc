from __future__ import annotations


class WebhookError(Exception):
    """Base class for errors raised by the webhook notification layer."""


class ConfigError(WebhookError):
    """Invalid static webhook configuration. Fatal at startup."""


class BuildError(WebhookError):
    """A domain entity required for a payload could not be located."""


class TransportError(WebhookError):
    """
    The HTTP request could not be completed (connect, TLS, timeout).

    Parameters
    ----------
    label
        Log correlation label of the notification.
    reason
        Transport diagnostic.
    """

    def __init__(self, label: str, reason: str):
        super().__init__(f"[{label}] {reason}")
        self.label = label
        self.reason = reason


class RemoteStatusWarning(UserWarning):
    """The endpoint answered with a non-2xx status. Logged, never escalated."""

    def __init__(self, label: str, status_code: int):
        super().__init__(f"HTTP {status_code} [{label}]")
        self.label = label
        self.status_code = status_code
