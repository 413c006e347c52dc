"""
Notification event kinds.

Each member's value is the fixed ``event`` tag written into the payload.
"""

from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """
    Lifecycle events reported to the webhook.

    Members
    -------
    ENB_ATTACHED, ENB_DETACHED
        S1 association of an eNB set up / torn down (MME).
    UE_ATTACHED, UE_DETACHED
        UE attach accepted / detach completed (MME).
    UE_IP_ASSIGNED, UE_IP_DEALLOCATED
        UE address allocated / released for a session (SMF).
    """

    ENB_ATTACHED = "enb_attached"
    ENB_DETACHED = "enb_detached"
    UE_ATTACHED = "ue_attached"
    UE_DETACHED = "ue_detached"
    UE_IP_ASSIGNED = "ue_ip_assigned"
    UE_IP_DEALLOCATED = "ue_ip_deallocated"

    def __str__(self) -> str:
        return self.value
