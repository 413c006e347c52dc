from __future__ import annotations

import logging
import threading
from typing import Any, Dict

import requests

from corehook.notification.base import DeliveryOutcome, DeliveryResult
from corehook.notification.errors import RemoteStatusWarning, TransportError
from corehook.notification.webhook_config import WebhookConfig

logger = logging.getLogger(__name__)


def _headers(cfg: WebhookConfig) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if cfg.auth_header:
        headers["Authorization"] = cfg.auth_header
    return headers


def _post(cfg: WebhookConfig, payload: str, label: str) -> int:
    """
    Issue the POST and return the HTTP status code.

    Raises
    ------
    TransportError
        For connection, TLS and timeout failures, and for requests the
        HTTP client refuses to encode (e.g. a non Latin-1 header value).
    """
    try:
        r = requests.post(
            cfg.url,
            data=payload.encode("utf-8"),
            headers=_headers(cfg),
            timeout=cfg.timeout_s,
            verify=cfg.verify_tls,
        )
    except (requests.RequestException, ValueError) as e:
        raise TransportError(label, str(e) or type(e).__name__) from e

    # Body is not inspected; only the status is used for logging.
    status = r.status_code
    r.close()
    return status


def _post_within_deadline(cfg: WebhookConfig, payload: str, label: str) -> int:
    """
    Run :func:`_post` under one wall-clock deadline of ``cfg.timeout_ms``.

    The requests timeout bounds each connect/read phase separately, so a
    server that trickles its answer can keep a plain ``requests.post``
    busy much longer. The exchange therefore runs on a short-lived daemon
    thread and the caller waits for it at most ``cfg.timeout_s``. An
    abandoned exchange ends on its own once a socket phase times out or
    the server closes the connection; its result is discarded.

    Raises
    ------
    TransportError
        On transport failure or when the deadline expires.
    """
    deadline_s = cfg.timeout_s
    if deadline_s is None:
        return _post(cfg, payload, label)

    outcome: Dict[str, Any] = {}

    def run() -> None:
        try:
            outcome["status"] = _post(cfg, payload, label)
        except Exception as e:  # re-raised on the calling thread
            outcome["error"] = e

    t = threading.Thread(target=run, name=f"webhook-post[{label}]", daemon=True)
    t.start()
    t.join(timeout=deadline_s)

    if t.is_alive():
        raise TransportError(label, f"no complete response within {cfg.timeout_ms} ms")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["status"]


def send(cfg: WebhookConfig, payload: str, label: str) -> DeliveryResult:
    """
    Send a serialized payload to the configured webhook endpoint.

    Parameters
    ----------
    cfg
        Validated webhook configuration of the calling subsystem.
    payload
        JSON document, already serialized.
    label
        Human-readable label (event kind plus identifier) for log correlation.

    Returns
    -------
    DeliveryResult
        ``ok`` is False only on transport failure. A non-2xx answer is
        logged as a warning and still reported as ``ok``.

    Notes
    -----
    - Exactly one attempt is made; there is no retry.
    - The call blocks the current thread for at most ``cfg.timeout_ms``
      in total (unbounded when the timeout is 0).
    - Nothing is raised to the caller.
    """
    if not cfg.is_active:
        return DeliveryResult(outcome=DeliveryOutcome.SKIPPED, label=label)

    try:
        status = _post_within_deadline(cfg, payload, label)
    except TransportError as e:
        logger.error("Webhook failed [%s]: %s", e.label, e.reason)
        return DeliveryResult(outcome=DeliveryOutcome.FAILED, label=label, error=e.reason)

    if 200 <= status < 300:
        logger.info("Webhook sent [%s] to %s: HTTP %d", label, cfg.url, status)
        return DeliveryResult(outcome=DeliveryOutcome.DELIVERED, label=label, status_code=status)

    warning = RemoteStatusWarning(label, status)
    logger.warning("Webhook completed with %s", warning)
    return DeliveryResult(outcome=DeliveryOutcome.REJECTED, label=label, status_code=status)


class WebhookNotifier:
    """
    Notification sender bound to one subsystem's webhook configuration.

    Thin object form of :func:`send` for call sites that prefer to hold
    a sender instead of passing the config around.
    """

    def __init__(self, cfg: WebhookConfig):
        self._cfg = cfg

    @property
    def config(self) -> WebhookConfig:
        return self._cfg

    def send(self, payload: str, label: str) -> DeliveryResult:
        return send(self._cfg, payload, label)
