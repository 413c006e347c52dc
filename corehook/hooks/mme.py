"""
MME call sites for webhook notifications.

The MME invokes these hooks at the moment an eNB completes or tears down S1
setup and when a UE attach or detach completes. Each hook bails out early
when the webhook is inactive, resolves the serving eNB for UE events,
renders the payload and hands it to the dispatcher.

Hooks never raise and their return value is for observability only; the
MME's protocol handling does not depend on it.
"""

from __future__ import annotations

import logging
from typing import Optional

from corehook.core.directory import EntityDirectory
from corehook.domain.events import EventKind
from corehook.domain.models import Enb, MmeUe
from corehook.notification.base import DeliveryResult, Dispatcher
from corehook.notification.payload import (
    build_enb_attached,
    build_enb_detached,
    build_ue_attached,
    build_ue_detached,
)
from corehook.notification.webhook_config import WebhookConfig
from corehook.notification.webhook_notifier import send

logger = logging.getLogger(__name__)


class MmeWebhookHooks:
    """
    Webhook hooks for the mobility-management subsystem.

    Parameters
    ----------
    config
        Validated webhook configuration owned by the MME.
    directory
        Lookup of eNB-UE associations and eNBs.
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

    def _serving_enb(self, mme_ue: MmeUe) -> Optional[Enb]:
        if mme_ue.enb_ue_id is None:
            return None
        enb_ue = self._directory.find_enb_ue(mme_ue.enb_ue_id)
        if enb_ue is None:
            return None
        return self._directory.find_enb(enb_ue.enb_id)

    def enb_attached(self, enb: Enb) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        payload = build_enb_attached(enb)
        return self._dispatch(self._config, payload, f"{EventKind.ENB_ATTACHED}:{enb.enb_id}")

    def enb_detached(self, enb: Enb) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        payload = build_enb_detached(enb)
        return self._dispatch(self._config, payload, f"{EventKind.ENB_DETACHED}:{enb.enb_id}")

    def ue_attached(self, mme_ue: MmeUe) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        enb = self._serving_enb(mme_ue)
        if enb is None:
            logger.debug("No serving eNB for UE [%s], omitting enb_id", mme_ue.imsi or "unknown")
        payload = build_ue_attached(mme_ue, enb)
        return self._dispatch(
            self._config, payload, f"{EventKind.UE_ATTACHED}:{mme_ue.imsi or 'unknown'}"
        )

    def ue_detached(self, mme_ue: MmeUe) -> Optional[DeliveryResult]:
        if not self._config.is_active:
            return None
        enb = self._serving_enb(mme_ue)
        payload = build_ue_detached(mme_ue, enb)
        return self._dispatch(
            self._config, payload, f"{EventKind.UE_DETACHED}:{mme_ue.imsi or 'unknown'}"
        )
