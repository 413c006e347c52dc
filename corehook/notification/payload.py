"""
Webhook payload construction.

Every event kind has a typed payload record. Builders map domain snapshots
into those records and :func:`serialize` turns a record into compact JSON.
Optional fields are typed ``Optional`` and the serializer leaves a key out
entirely when its value is None or an empty string, so no payload ever
contains ``null``.

All builders are pure apart from reading the clock, and accept ``now`` so
callers and tests can pin the timestamp.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from corehook.domain.events import EventKind
from corehook.domain.models import (
    IPV6_DEFAULT_PREFIX_LEN,
    DetachType,
    Enb,
    MmeUe,
    SmfSession,
    SmfUe,
)
from corehook.notification.errors import BuildError

UNKNOWN_DETACH_TYPE = "unknown"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a UTC timestamp as ``YYYY-MM-DDTHH:MM:SSZ``.

    Parameters
    ----------
    now
        Moment to format. Naive datetimes are taken as UTC. Defaults to the
        current time.
    """
    ts = now or datetime.now(timezone.utc)
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


def detach_type_token(code: Optional[int]) -> str:
    """Map a raw detach cause code to its token, "unknown" if unrecognized."""
    if code is None:
        return UNKNOWN_DETACH_TYPE
    try:
        return DetachType(code).token
    except ValueError:
        return UNKNOWN_DETACH_TYPE


# ---- payload records ----

@dataclass(frozen=True)
class TaItem:
    tac: int
    plmn_id: str


@dataclass(frozen=True)
class TaiItem:
    plmn_id: str
    tac: int


@dataclass(frozen=True)
class SNssaiItem:
    sst: int
    sd: Optional[int] = None


@dataclass(frozen=True)
class IpSet:
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None
    ipv6_prefix_length: Optional[int] = None


@dataclass(frozen=True)
class EnbAttachedPayload:
    event: str
    timestamp: str
    enb_id: int
    plmn_id: str
    sctp_addr: Optional[str] = None
    supported_ta_list: List[TaItem] = field(default_factory=list)


@dataclass(frozen=True)
class EnbDetachedPayload:
    event: str
    timestamp: str
    enb_id: int
    plmn_id: str
    sctp_addr: Optional[str] = None


@dataclass(frozen=True)
class UeAttachedPayload:
    event: str
    timestamp: str
    tai: TaiItem
    imsi: Optional[str] = None
    enb_id: Optional[int] = None


@dataclass(frozen=True)
class UeDetachedPayload:
    event: str
    timestamp: str
    detach_type: str
    imsi: Optional[str] = None
    enb_id: Optional[int] = None


@dataclass(frozen=True)
class UeIpAssignedPayload:
    event: str
    timestamp: str
    s_nssai: SNssaiItem
    pdu_session_id: int
    assigned_ips: IpSet
    network_type: str
    supi: Optional[str] = None
    imsi: Optional[str] = None
    dnn: Optional[str] = None


@dataclass(frozen=True)
class UeIpDeallocatedPayload:
    event: str
    timestamp: str
    s_nssai: SNssaiItem
    pdu_session_id: int
    deallocated_ips: IpSet
    network_type: str
    supi: Optional[str] = None
    imsi: Optional[str] = None
    dnn: Optional[str] = None


# Key order on the wire; fields not listed keep declaration order.
_KEY_ORDER = (
    "event",
    "timestamp",
    "supi",
    "imsi",
    "detach_type",
    "enb_id",
    "plmn_id",
    "sctp_addr",
    "supported_ta_list",
    "tai",
    "dnn",
    "s_nssai",
    "pdu_session_id",
    "assigned_ips",
    "deallocated_ips",
    "network_type",
)


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def to_document(record: Any) -> Any:
    """
    Convert a payload record into plain JSON-compatible data.

    Absent optional fields are dropped; nested records and lists are
    converted recursively.
    """
    if is_dataclass(record) and not isinstance(record, type):
        doc: Dict[str, Any] = {}
        for f in fields(record):
            value = getattr(record, f.name)
            if _is_absent(value):
                continue
            doc[f.name] = to_document(value)
        if "event" in doc:
            rank = {k: i for i, k in enumerate(_KEY_ORDER)}
            doc = dict(sorted(doc.items(), key=lambda kv: rank.get(kv[0], len(rank))))
        return doc
    if isinstance(record, (list, tuple)):
        return [to_document(v) for v in record]
    return record


def serialize(record: Any) -> str:
    """Render a payload record as compact UTF-8 JSON text."""
    return json.dumps(to_document(record), separators=(",", ":"))


# ---- MME builders ----

def build_enb_attached(enb: Enb, now: Optional[datetime] = None) -> str:
    """
    Build the ``enb_attached`` payload.

    Parameters
    ----------
    enb
        eNB that completed S1 setup.
    now
        Optional timestamp override.

    Returns
    -------
    str
        Compact JSON document.
    """
    record = EnbAttachedPayload(
        event=EventKind.ENB_ATTACHED.value,
        timestamp=utc_timestamp(now),
        enb_id=enb.enb_id,
        plmn_id=str(enb.plmn_id),
        sctp_addr=enb.sctp_addr,
        supported_ta_list=[
            TaItem(tac=ta.tac, plmn_id=str(ta.plmn_id)) for ta in enb.supported_ta_list
        ],
    )
    return serialize(record)


def build_enb_detached(enb: Enb, now: Optional[datetime] = None) -> str:
    """Build the ``enb_detached`` payload."""
    record = EnbDetachedPayload(
        event=EventKind.ENB_DETACHED.value,
        timestamp=utc_timestamp(now),
        enb_id=enb.enb_id,
        plmn_id=str(enb.plmn_id),
        sctp_addr=enb.sctp_addr,
    )
    return serialize(record)


def build_ue_attached(
    mme_ue: MmeUe, enb: Optional[Enb] = None, now: Optional[datetime] = None
) -> str:
    """
    Build the ``ue_attached`` payload.

    Parameters
    ----------
    mme_ue
        UE context that completed attach.
    enb
        Serving eNB, if it could be resolved; ``enb_id`` is omitted otherwise.
    now
        Optional timestamp override.
    """
    record = UeAttachedPayload(
        event=EventKind.UE_ATTACHED.value,
        timestamp=utc_timestamp(now),
        imsi=mme_ue.imsi,
        enb_id=enb.enb_id if enb is not None else None,
        tai=TaiItem(plmn_id=str(mme_ue.tai.plmn_id), tac=mme_ue.tai.tac),
    )
    return serialize(record)


def build_ue_detached(
    mme_ue: MmeUe, enb: Optional[Enb] = None, now: Optional[datetime] = None
) -> str:
    """Build the ``ue_detached`` payload; see :func:`detach_type_token`."""
    record = UeDetachedPayload(
        event=EventKind.UE_DETACHED.value,
        timestamp=utc_timestamp(now),
        imsi=mme_ue.imsi,
        detach_type=detach_type_token(mme_ue.detach_type),
        enb_id=enb.enb_id if enb is not None else None,
    )
    return serialize(record)


# ---- SMF builders ----

def _ip_set(sess: SmfSession) -> IpSet:
    ipv4 = str(sess.ipv4) if sess.ipv4 is not None else None
    if sess.ipv6 is None:
        return IpSet(ipv4=ipv4)
    return IpSet(
        ipv4=ipv4,
        ipv6=str(sess.ipv6),
        ipv6_prefix_length=IPV6_DEFAULT_PREFIX_LEN,
    )


def _require_smf_ue(smf_ue: Optional[SmfUe], event: EventKind) -> SmfUe:
    if smf_ue is None:
        raise BuildError(f"Cannot find SMF UE for {event.value} payload")
    return smf_ue


def build_ue_ip_assigned(
    sess: SmfSession, smf_ue: Optional[SmfUe], now: Optional[datetime] = None
) -> str:
    """
    Build the ``ue_ip_assigned`` payload.

    Parameters
    ----------
    sess
        Session whose UE addresses were allocated.
    smf_ue
        Owning subscriber, resolved from ``sess.smf_ue_id``.
    now
        Optional timestamp override.

    Raises
    ------
    BuildError
        If ``smf_ue`` is None.
    """
    ue = _require_smf_ue(smf_ue, EventKind.UE_IP_ASSIGNED)
    record = UeIpAssignedPayload(
        event=EventKind.UE_IP_ASSIGNED.value,
        timestamp=utc_timestamp(now),
        supi=ue.supi,
        imsi=ue.imsi,
        dnn=sess.dnn,
        s_nssai=SNssaiItem(
            sst=sess.s_nssai.sst,
            sd=sess.s_nssai.sd if sess.s_nssai.has_sd else None,
        ),
        pdu_session_id=sess.psi,
        assigned_ips=_ip_set(sess),
        network_type="epc" if sess.epc else "5gc",
    )
    return serialize(record)


def build_ue_ip_deallocated(
    sess: SmfSession, smf_ue: Optional[SmfUe], now: Optional[datetime] = None
) -> str:
    """Build the ``ue_ip_deallocated`` payload. Raises BuildError without a UE."""
    ue = _require_smf_ue(smf_ue, EventKind.UE_IP_DEALLOCATED)
    record = UeIpDeallocatedPayload(
        event=EventKind.UE_IP_DEALLOCATED.value,
        timestamp=utc_timestamp(now),
        supi=ue.supi,
        imsi=ue.imsi,
        dnn=sess.dnn,
        s_nssai=SNssaiItem(
            sst=sess.s_nssai.sst,
            sd=sess.s_nssai.sd if sess.s_nssai.has_sd else None,
        ),
        pdu_session_id=sess.psi,
        deallocated_ips=_ip_set(sess),
        network_type="epc" if sess.epc else "5gc",
    )
    return serialize(record)
