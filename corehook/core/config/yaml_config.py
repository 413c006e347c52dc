from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from corehook.notification.errors import ConfigError
from corehook.notification.webhook_config import WebhookConfig

CONFIG_ENV_VAR = "COREHOOK_CONFIG"
WEBHOOK_SECTION = "webhook"


@dataclass(frozen=True)
class AppConfig:
    """
    Webhook configuration of every subsystem found in one YAML file.

    Each subsystem owns its own :class:`WebhookConfig`; they are never
    shared even when loaded from the same file.
    """
    mme: WebhookConfig
    smf: WebhookConfig


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError("config.yaml must contain a YAML mapping at the root")
    return data


def _resolve_default_config_path() -> Path:
    """
    Resolve config.yaml location.

    Priority:
    1) COREHOOK_CONFIG env var if provided
    2) ./config.yaml in current working directory
    """
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser().resolve()
    return Path("config.yaml").resolve()


def parse_webhook_section(section: Optional[Mapping[str, Any]]) -> WebhookConfig:
    """
    Build and validate a WebhookConfig from a ``webhook`` mapping.

    Parameters
    ----------
    section
        The ``webhook`` mapping, or None when the section is absent
        (yields a disabled config).

    Raises
    ------
    ConfigError
        If the section is not a mapping or fails validation.
    """
    cfg = WebhookConfig()
    if section is None:
        return cfg
    if not isinstance(section, Mapping):
        raise ConfigError("webhook section must be a YAML mapping")

    cfg.apply_options(section)
    cfg.validate()
    return cfg


def _subsystem_webhook(raw: Mapping[str, Any], subsystem: str) -> WebhookConfig:
    block = raw.get(subsystem)
    if block is None:
        return WebhookConfig()
    if not isinstance(block, Mapping):
        raise ConfigError(f"{subsystem} section must be a YAML mapping")
    return parse_webhook_section(block.get(WEBHOOK_SECTION))


def _config_path(path: Optional[str]) -> Path:
    cfg_path = Path(path).expanduser().resolve() if path else _resolve_default_config_path()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")
    return cfg_path


def load_webhook_config(path: Optional[str] = None, subsystem: str = "mme") -> WebhookConfig:
    """
    Load the ``<subsystem>.webhook`` section of a YAML file.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution.
    subsystem
        Top-level section owning the webhook ("mme" or "smf").

    Returns
    -------
    WebhookConfig
        Validated configuration; disabled if the section is missing.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ConfigError
        If the file or section is malformed or fails validation.
    """
    raw = _read_yaml(_config_path(path))
    return _subsystem_webhook(raw, subsystem)


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """Load the MME and SMF webhook sections of one file."""
    raw = _read_yaml(_config_path(path))
    return AppConfig(
        mme=_subsystem_webhook(raw, "mme"),
        smf=_subsystem_webhook(raw, "smf"),
    )
