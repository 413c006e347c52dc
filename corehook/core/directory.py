from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from corehook.domain.models import Enb, EnbUe, SmfUe


class EntityDirectory(Protocol):
    """
    Lookup of domain entities by identifier.

    Hooks use it to resolve cross references (the serving eNB of a UE, the
    subscriber owning a session). The owning subsystem provides the real
    implementation; every method returns None when the entity is gone.
    """

    def find_enb_ue(self, enb_ue_id: int) -> Optional[EnbUe]:
        ...

    def find_enb(self, enb_id: int) -> Optional[Enb]:
        ...

    def find_smf_ue(self, smf_ue_id: int) -> Optional[SmfUe]:
        ...


@dataclass
class InMemoryDirectory:
    """
    Thread-safe in-memory :class:`EntityDirectory`.

    Concurrency Model
    -----------------
    All reads/writes are guarded by a single re-entrant lock so hooks running
    on different threads see consistent maps while entities are added or
    removed.
    """

    enbs: Dict[int, Enb] = field(default_factory=dict)
    enb_ues: Dict[int, EnbUe] = field(default_factory=dict)
    smf_ues: Dict[int, SmfUe] = field(default_factory=dict)

    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # --- MME side ---
    def add_enb(self, enb: Enb) -> None:
        with self._lock:
            self.enbs[enb.enb_id] = enb

    def remove_enb(self, enb_id: int) -> None:
        with self._lock:
            self.enbs.pop(enb_id, None)

    def add_enb_ue(self, enb_ue: EnbUe) -> None:
        with self._lock:
            self.enb_ues[enb_ue.id] = enb_ue

    def remove_enb_ue(self, enb_ue_id: int) -> None:
        with self._lock:
            self.enb_ues.pop(enb_ue_id, None)

    def find_enb(self, enb_id: int) -> Optional[Enb]:
        with self._lock:
            return self.enbs.get(enb_id)

    def find_enb_ue(self, enb_ue_id: int) -> Optional[EnbUe]:
        with self._lock:
            return self.enb_ues.get(enb_ue_id)

    # --- SMF side ---
    def add_smf_ue(self, smf_ue: SmfUe) -> None:
        with self._lock:
            self.smf_ues[smf_ue.id] = smf_ue

    def remove_smf_ue(self, smf_ue_id: int) -> None:
        with self._lock:
            self.smf_ues.pop(smf_ue_id, None)

    def find_smf_ue(self, smf_ue_id: int) -> Optional[SmfUe]:
        with self._lock:
            return self.smf_ues.get(smf_ue_id)
