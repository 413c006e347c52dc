from __future__ import annotations

import logging
import sys
from ipaddress import IPv4Address, IPv6Address
from typing import List, Optional

from corehook.bootstrap import HookWiring, build_hooks
from corehook.domain.events import EventKind
from corehook.domain.models import (
    DetachType,
    Enb,
    EnbUe,
    MmeUe,
    PlmnId,
    SmfSession,
    SmfUe,
    SNssai,
    SupportedTa,
    Tai,
)
from corehook.notification.base import DeliveryResult

PLMN = PlmnId.parse("001/01")
SAMPLE_ENB = Enb(
    enb_id=5,
    plmn_id=PLMN,
    sctp_addr="10.0.0.5",
    supported_ta_list=(SupportedTa(tac=1, plmn_id=PLMN),),
)
SAMPLE_UE = MmeUe(
    imsi="001010000000001",
    tai=Tai(plmn_id=PLMN, tac=1),
    enb_ue_id=1,
    detach_type=DetachType.UE_INITIATED,
)
SAMPLE_SMF_UE = SmfUe(id=1, supi="imsi-001010000000001", imsi="001010000000001")
SAMPLE_SESSION = SmfSession(
    smf_ue_id=1,
    s_nssai=SNssai(sst=1),
    psi=1,
    dnn="internet",
    ipv4=IPv4Address("10.45.0.2"),
    ipv6=IPv6Address("2001:db8:cafe::2"),
)


def _arg(argv: List[str], name: str) -> Optional[str]:
    if name in argv:
        i = argv.index(name)
        if i + 1 < len(argv):
            return argv[i + 1]
    return None


def fire(wiring: HookWiring, kind: EventKind) -> Optional[DeliveryResult]:
    """Fire one sample event of the given kind through the wired hooks."""
    d = wiring.directory
    d.add_enb(SAMPLE_ENB)
    d.add_enb_ue(EnbUe(id=1, enb_id=SAMPLE_ENB.enb_id))
    d.add_smf_ue(SAMPLE_SMF_UE)

    if kind is EventKind.ENB_ATTACHED:
        return wiring.mme.enb_attached(SAMPLE_ENB)
    if kind is EventKind.ENB_DETACHED:
        return wiring.mme.enb_detached(SAMPLE_ENB)
    if kind is EventKind.UE_ATTACHED:
        return wiring.mme.ue_attached(SAMPLE_UE)
    if kind is EventKind.UE_DETACHED:
        return wiring.mme.ue_detached(SAMPLE_UE)
    if kind is EventKind.UE_IP_ASSIGNED:
        return wiring.smf.ip_assigned(SAMPLE_SESSION)
    return wiring.smf.ip_deallocated(SAMPLE_SESSION)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Send one sample notification to the configured webhook.

    Usage:
        python -m corehook.dev.send_test_event --config config.yaml --event enb_attached
    """
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=logging.DEBUG if "--verbose" in argv else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    kind = EventKind(_arg(argv, "--event") or EventKind.ENB_ATTACHED.value)
    wiring = build_hooks(config_path=_arg(argv, "--config"))

    result = fire(wiring, kind)
    if result is None:
        logging.getLogger(__name__).info("Webhook disabled for %s; nothing sent", kind)
        return 0
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
