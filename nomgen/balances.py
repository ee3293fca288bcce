"""Genesis account balances.

Direct credits and pooled contract balances are tracked separately. A pool
only becomes a balance row when :meth:`BalanceLedger.entries` is called, so
the contract never shows up half filled or twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from .address import Address, TokenStandard
from .errors import DuplicateError, InputFormatError
from .tokens import TokenRegistry


@dataclass(frozen=True)
class BalanceEntry:
    address: Address
    balances: Mapping[TokenStandard, int]

    def amount(self, standard: TokenStandard) -> int:
        return self.balances.get(standard, 0)


class BalanceLedger:
    """Per-address credits bound to a :class:`TokenRegistry`.

    Every credited or pooled amount is minted in the registry at the same
    time, which keeps the sum of balances equal to the token supply.
    """

    def __init__(self, registry: TokenRegistry) -> None:
        self._registry = registry
        self._credits: Dict[Address, Dict[TokenStandard, int]] = {}
        self._pools: Dict[Address, Tuple[TokenStandard, List[int]]] = {}

    def credit(self, address: Address, standard: TokenStandard, amount: int) -> None:
        if address in self._pools:
            raise InputFormatError(f"{address} is a pool; use contribute()")
        self._registry.mint(standard, amount)
        row = self._credits.setdefault(address, {})
        row[standard] = row.get(standard, 0) + amount

    def open_pool(self, address: Address, standard: TokenStandard) -> None:
        if address in self._pools:
            raise DuplicateError(f"pool {address} already open")
        if address in self._credits:
            raise InputFormatError(f"{address} already holds direct credits")
        self._registry.get(standard)
        self._pools[address] = (standard, [])

    def contribute(self, pool: Address, amount: int) -> None:
        try:
            standard, contributions = self._pools[pool]
        except KeyError:
            raise InputFormatError(f"pool {pool} is not open") from None
        self._registry.mint(standard, amount)
        contributions.append(amount)

    def pool_balance(self, pool: Address) -> int:
        _, contributions = self._pools[pool]
        return sum(contributions)

    def has_pool(self, pool: Address) -> bool:
        return pool in self._pools

    def entries(self) -> Tuple[BalanceEntry, ...]:
        """Return direct credits in insertion order followed by pool rows."""

        rows = [
            BalanceEntry(address, MappingProxyType(dict(row)))
            for address, row in self._credits.items()
        ]
        for address, (standard, contributions) in self._pools.items():
            rows.append(BalanceEntry(address, MappingProxyType({standard: sum(contributions)})))
        return tuple(rows)


__all__ = ["BalanceEntry", "BalanceLedger"]
