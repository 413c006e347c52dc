from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from corehook.notification.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


class WebhookOption(str, Enum):
    """
    Keys recognized under a ``webhook`` configuration section.

    Members
    -------
    URL : str
        Destination URL. A non-empty value also enables the webhook.
    ENABLED : str
        Explicit on/off toggle.
    TIMEOUT : str
        Request timeout in milliseconds.
    VERIFY_SSL : str
        TLS certificate and hostname verification.
    AUTH_HEADER : str
        Raw value of the ``Authorization`` header.
    """

    URL = "url"
    ENABLED = "enabled"
    TIMEOUT = "timeout"
    VERIFY_SSL = "verify_ssl"
    AUTH_HEADER = "auth_header"


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"webhook.{key} must be a boolean, got {value!r}")


def _as_timeout_ms(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"webhook.timeout must be an integer, got {value!r}")
    try:
        ms = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"webhook.timeout must be an integer, got {value!r}") from e
    if ms < 0:
        raise ConfigError(f"webhook.timeout must be >= 0, got {ms}")
    return ms


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_header_value(key: str, value: Any) -> Optional[str]:
    text = _as_optional_str(value)
    if text is None:
        return None
    if "\r" in text or "\n" in text:
        raise ConfigError(f"webhook.{key} must not contain CR or LF characters")
    try:
        text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise ConfigError(f"webhook.{key} must be Latin-1 encodable, got {text!r}") from e
    return text


@dataclass
class WebhookConfig:
    """
    Webhook settings owned by one subsystem (MME or SMF).

    The object is populated through :meth:`apply_option` while the
    configuration file is ingested, validated once with :meth:`validate`,
    and from then on only read. It is passed explicitly to the dispatcher
    and the hooks.

    Parameters
    ----------
    url
        Target webhook URL. Empty or None disables sending.
    enabled
        Explicit toggle; a non-empty url turns it on.
    timeout_ms
        HTTP request timeout in milliseconds. 0 means no timeout.
    verify_tls
        Whether to verify TLS certificates and hostnames.
    auth_header
        Optional Authorization header value (e.g. "Bearer TOKEN").
    """

    url: Optional[str] = None
    enabled: bool = False
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    verify_tls: bool = True
    auth_header: Optional[str] = None

    def reset(self) -> None:
        """Restore defaults: disabled, 5000 ms, TLS verified, no url or auth."""
        self.url = None
        self.enabled = False
        self.timeout_ms = DEFAULT_TIMEOUT_MS
        self.verify_tls = True
        self.auth_header = None

    @property
    def is_active(self) -> bool:
        """True when notifications should actually be sent."""
        return self.enabled and bool(self.url)

    @property
    def timeout_s(self) -> Optional[float]:
        """Timeout in seconds for the HTTP client; None when unbounded."""
        if self.timeout_ms == 0:
            return None
        return self.timeout_ms / 1000.0

    def apply_option(self, key: str, value: Any) -> None:
        """
        Apply one ``webhook`` configuration key.

        Parameters
        ----------
        key
            Option name, see :class:`WebhookOption`.
        value
            Raw value from the configuration source.

        Raises
        ------
        ConfigError
            If the value cannot be interpreted for a recognized key, or if
            ``auth_header`` is not a valid single-line Latin-1 header value.

        Notes
        -----
        Unknown keys are logged and ignored.
        """
        try:
            option = WebhookOption(key)
        except ValueError:
            logger.warning("unknown webhook key `%s`", key)
            return

        if option is WebhookOption.URL:
            self.url = _as_optional_str(value)
            if self.url:
                self.enabled = True
        elif option is WebhookOption.ENABLED:
            self.enabled = _as_bool(key, value)
        elif option is WebhookOption.TIMEOUT:
            self.timeout_ms = _as_timeout_ms(value)
        elif option is WebhookOption.VERIFY_SSL:
            self.verify_tls = _as_bool(key, value)
        elif option is WebhookOption.AUTH_HEADER:
            self.auth_header = _as_header_value(key, value)

    def apply_options(self, options: Mapping[str, Any]) -> None:
        """Apply every key of a ``webhook`` section in mapping order."""
        for key, value in options.items():
            self.apply_option(str(key), value)

    def validate(self) -> None:
        """
        Check the configuration once, after all options are applied.

        Raises
        ------
        ConfigError
            If the webhook is enabled without a URL, or if the URL does not
            start with ``http://`` or ``https://``.
        """
        if self.enabled and not self.url:
            raise ConfigError("Webhook enabled but no URL configured")

        if self.url and not self.url.startswith(("http://", "https://")):
            raise ConfigError(
                f"Invalid webhook URL (must start with http:// or https://): {self.url}"
            )

        logger.debug(
            "webhook config: enabled=%s url=%s timeout_ms=%d verify_tls=%s auth=%s",
            self.enabled,
            self.url,
            self.timeout_ms,
            self.verify_tls,
            "set" if self.auth_header else "unset",
        )
