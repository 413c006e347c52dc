from __future__ import annotations

import logging
from typing import Callable, Optional

from corehook.core.directory import EntityDirectory
from corehook.domain.events import EventKind
from corehook.domain.models import SmfSession, SmfUe
from corehook.notification.base import DeliveryResult, Dispatcher
from corehook.notification.errors import BuildError
from corehook.notification.payload import build_ue_ip_assigned, build_ue_ip_deallocated
from corehook.notification.webhook_config import WebhookConfig
from corehook.notification.webhook_notifier import send

logger = logging.getLogger(__name__)


def _ue_name(smf_ue: Optional[SmfUe]) -> str:
    if smf_ue is None:
        return "unknown"
    return smf_ue.supi or smf_ue.imsi or "unknown"


class SmfWebhookHooks:
    """
    Webhook hooks for the session-management subsystem.

    Called when UE addresses are allocated for a session and when they are
    released. A session whose subscriber cannot be found is logged and
    skipped without touching the network.

    Parameters
    ----------
    config
        Validated webhook configuration owned by the SMF.
    directory
        Lookup of SMF UEs by id.
    dispatcher
        Sender used for the HTTP call; synchronous :func:`send` by default.
    """

    def __init__(
        self,
        config: WebhookConfig,
        directory: EntityDirectory,
        dispatcher: Dispatcher = send,
    ):
        self._config = config
        self._directory = directory
        self._dispatch = dispatcher

    def ip_assigned(self, sess: SmfSession) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        return self._notify(EventKind.UE_IP_ASSIGNED, sess, build_ue_ip_assigned)

    def ip_deallocated(self, sess: SmfSession) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        if not sess.has_ip:
            logger.debug("No IPs to deallocate for session %d", sess.psi)
            return None
        return self._notify(EventKind.UE_IP_DEALLOCATED, sess, build_ue_ip_deallocated)

    def _notify(
        self,
        kind: EventKind,
        sess: SmfSession,
        build: Callable[[SmfSession, Optional[SmfUe]], str],
    ) -> Optional[DeliveryResult]:
        smf_ue = self._directory.find_smf_ue(sess.smf_ue_id)
        name = _ue_name(smf_ue)
        try:
            payload = build(sess, smf_ue)
        except BuildError as e:
            logger.error("Failed to build %s payload for UE [%s]: %s", kind, name, e)
            return None

        logger.debug("Sending %s notification for UE [%s]", kind, name)
        return self._dispatch(self._config, payload, f"{kind}:{name}")
