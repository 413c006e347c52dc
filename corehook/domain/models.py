"""
Domain snapshots and enums.

This module defines the read-only views of the owning subsystems' objects
that the notification layer needs:
- PLMN / TAI identifiers
- eNB and its per-UE association (MME side)
- MME UE context with its detach cause
- SMF UE and PDU session with slice and IP allocation (SMF side)

These are frozen dataclasses so a snapshot taken by a hook cannot change
while a payload is being built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Sequence

NO_SD_VALUE = 0xFFFFFF
IPV6_DEFAULT_PREFIX_LEN = 64


@dataclass(frozen=True)
class PlmnId:
    """
    Public Land Mobile Network identifier.

    Parameters
    ----------
    mcc
        Mobile country code, three digits.
    mnc
        Mobile network code, two or three digits.
    """

    mcc: str
    mnc: str

    def __post_init__(self) -> None:
        if not (self.mcc.isdigit() and len(self.mcc) == 3):
            raise ValueError(f"Invalid MCC: {self.mcc!r}")
        if not (self.mnc.isdigit() and len(self.mnc) in (2, 3)):
            raise ValueError(f"Invalid MNC: {self.mnc!r}")

    @classmethod
    def parse(cls, text: str) -> "PlmnId":
        """
        Parse "001/01", "001-01" or the concatenated "00101" form.

        Concatenated input is split after the third digit.
        """
        s = text.strip()
        for sep in ("/", "-"):
            if sep in s:
                mcc, mnc = s.split(sep, 1)
                return cls(mcc=mcc.strip(), mnc=mnc.strip())
        return cls(mcc=s[:3], mnc=s[3:])

    def __str__(self) -> str:
        return f"{self.mcc}{self.mnc}"


@dataclass(frozen=True)
class Tai:
    """Tracking area identity."""

    plmn_id: PlmnId
    tac: int


@dataclass(frozen=True)
class SupportedTa:
    """One entry of an eNB's supported tracking area list."""

    tac: int
    plmn_id: PlmnId


@dataclass(frozen=True)
class Enb:
    """
    eNodeB as seen by the MME after S1 setup.

    Parameters
    ----------
    enb_id
        Global eNB identifier (numeric part).
    plmn_id
        PLMN the eNB belongs to.
    sctp_addr
        Remote SCTP address in textual form, if the association is known.
    supported_ta_list
        Tracking areas advertised in S1 Setup.
    """

    enb_id: int
    plmn_id: PlmnId
    sctp_addr: Optional[str] = None
    supported_ta_list: Sequence[SupportedTa] = field(default_factory=tuple)


@dataclass(frozen=True)
class EnbUe:
    """S1 association of a UE with an eNB."""

    id: int
    enb_id: int


class DetachType(IntEnum):
    """
    Cause of a UE detach as recorded by the MME.

    Members
    -------
    UE_INITIATED
        Detach request from the UE.
    MME_EXPLICIT, HSS_EXPLICIT
        Network-initiated explicit detach.
    MME_IMPLICIT, HSS_IMPLICIT
        Network-initiated implicit detach (timers, purge).
    """

    UE_INITIATED = 1
    MME_EXPLICIT = 2
    HSS_EXPLICIT = 3
    MME_IMPLICIT = 4
    HSS_IMPLICIT = 5

    @property
    def token(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class MmeUe:
    """
    UE context held by the MME.

    Parameters
    ----------
    imsi
        IMSI in BCD digits, None until identity is known.
    enb_ue_id
        Id of the current eNB-UE association, if any.
    tai
        Last reported tracking area.
    detach_type
        Raw detach cause code; unknown codes are tolerated.
    """

    imsi: Optional[str]
    tai: Tai
    enb_ue_id: Optional[int] = None
    detach_type: Optional[int] = None


@dataclass(frozen=True)
class SNssai:
    """Single network slice selection assistance information."""

    sst: int
    sd: Optional[int] = None

    @property
    def has_sd(self) -> bool:
        return self.sd is not None and self.sd != NO_SD_VALUE


@dataclass(frozen=True)
class SmfUe:
    """Subscriber context held by the SMF."""

    id: int
    supi: Optional[str] = None
    imsi: Optional[str] = None


@dataclass(frozen=True)
class SmfSession:
    """
    PDU session (5GC) or PDN connection (EPC) held by the SMF.

    Parameters
    ----------
    smf_ue_id
        Owning SmfUe id.
    dnn
        Data network name / APN.
    s_nssai
        Slice the session belongs to.
    psi
        PDU session identity.
    ipv4, ipv6
        Allocated UE addresses, None when not allocated.
    epc
        True when the session was set up through EPC interworking.
    """

    smf_ue_id: int
    s_nssai: SNssai
    psi: int
    dnn: Optional[str] = None
    ipv4: Optional[IPv4Address] = None
    ipv6: Optional[IPv6Address] = None
    epc: bool = False

    @property
    def has_ip(self) -> bool:
        return self.ipv4 is not None or self.ipv6 is not None
