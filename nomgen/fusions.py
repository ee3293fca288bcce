"""Plasma fusions granted at genesis.

Fusion ids are content addressed: ``sha3_256(role_address || role_tag)``.
The tag separates fusions that share an address but serve different roles,
e.g. a pillar whose owner and withdraw addresses are the same.
"""

from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .address import PLASMA_CONTRACT, Address
from .balances import BalanceLedger
from .config import FUSION_EXPIRATION_HEIGHT
from .errors import DuplicateError, RangeError


class FusionRole(enum.Enum):
    """Role a fusion is anchored to, with the tag byte mixed into its id."""

    SELF = b""
    OWNER = b"H"
    WITHDRAW = b"Q"
    PRODUCER = b"Z"

    @property
    def tag(self) -> bytes:
        return self.value


def fusion_id(address: Address, role: FusionRole) -> str:
    """Return the hex id of the fusion anchored to ``address`` in ``role``."""
    return hashlib.sha3_256(bytes(address) + role.tag).hexdigest()


@dataclass(frozen=True)
class FusionEntry:
    owner: Address
    beneficiary: Address
    id: str
    amount: int
    expiration_height: int = FUSION_EXPIRATION_HEIGHT


class FusionRegistrar:
    """Collects fusions and locks their amount in the plasma contract pool."""

    def __init__(self, ledger: BalanceLedger, pool: Address = PLASMA_CONTRACT) -> None:
        self._ledger = ledger
        self._pool = pool
        self._entries: List[FusionEntry] = []
        self._ids: Set[str] = set()

    @property
    def pool(self) -> Address:
        return self._pool

    def register(
        self,
        role_address: Address,
        beneficiary: Address,
        amount: int,
        role: FusionRole,
        *,
        owner: Optional[Address] = None,
    ) -> FusionEntry:
        """Add a fusion whose id derives from ``role_address`` and ``role``.

        ``owner`` defaults to ``role_address``. A repeated
        ``(role_address, role)`` pair raises :class:`DuplicateError`.
        """

        if amount <= 0:
            raise RangeError(f"fusion amount must be positive, got {amount}")
        fid = fusion_id(role_address, role)
        if fid in self._ids:
            raise DuplicateError(f"fusion {role.name.lower()} for {role_address} already registered ({fid})")

        entry = FusionEntry(
            owner=owner or role_address,
            beneficiary=beneficiary,
            id=fid,
            amount=amount,
        )
        self._ledger.contribute(self._pool, amount)
        self._ids.add(fid)
        self._entries.append(entry)
        return entry

    def register_self(self, address: Address, amount: int) -> FusionEntry:
        """Fuse ``amount`` from ``address`` to itself."""
        return self.register(address, address, amount, FusionRole.SELF)

    def register_pillar_roles(self, owner: Address, withdraw: Address, producer: Address, amount: int) -> None:
        """Fuse ``amount`` for each role address of an imported pillar."""
        self.register(owner, owner, amount, FusionRole.OWNER, owner=owner)
        self.register(withdraw, withdraw, amount, FusionRole.WITHDRAW, owner=owner)
        self.register(producer, producer, amount, FusionRole.PRODUCER, owner=owner)

    @property
    def entries(self) -> Tuple[FusionEntry, ...]:
        return tuple(self._entries)


__all__ = ["FusionEntry", "FusionRegistrar", "FusionRole", "fusion_id"]
