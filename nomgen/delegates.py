"""Pillar (delegate) registrations."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .address import PILLAR_CONTRACT, Address
from .balances import BalanceLedger
from .errors import AddressValidationError, InputFormatError, RangeError

# Column positions in the registration export.
NAME_COLUMN = 4
OWNER_COLUMN = 5
WITHDRAW_COLUMN = 6
PRODUCER_COLUMN = 7

OPERATOR_DELEGATE_NAME = "Local"


@dataclass(frozen=True)
class RewardSplit:
    """Share of rewards (percent) a pillar hands to its delegators."""

    block_reward_percentage: int = 0
    delegate_reward_percentage: int = 100

    def __post_init__(self) -> None:
        for value in (self.block_reward_percentage, self.delegate_reward_percentage):
            if not 0 <= value <= 100:
                raise RangeError(f"reward percentage {value} outside 0..100")


@dataclass(frozen=True)
class DelegateEntry:
    name: str
    stake_address: Address
    withdraw_address: Address
    producer_address: Address
    amount: int
    reward_split: RewardSplit = RewardSplit()
    pillar_type: int = 1
    revoke_time: int = 0


@dataclass(frozen=True)
class Registration:
    """One accepted row of the registration export."""

    name: str
    owner: Address
    withdraw: Address
    producer: Address


def _row_address(row: Sequence[str], column: int, name: str) -> Address:
    try:
        return Address.parse(row[column])
    except AddressValidationError as exc:
        raise AddressValidationError(f"delegate {name!r} column {column}: {exc}") from exc


def parse_registration(row: Sequence[str]) -> Optional[Registration]:
    """Return the registration in ``row`` or ``None`` if its name is empty."""

    if not any(cell.strip() for cell in row):
        return None
    if len(row) <= NAME_COLUMN:
        raise InputFormatError(f"registration row has {len(row)} columns: {list(row)!r}")
    name = row[NAME_COLUMN].strip()
    if not name:
        return None
    if len(row) <= PRODUCER_COLUMN:
        raise InputFormatError(f"registration row for {name!r} has {len(row)} columns")
    return Registration(
        name=name,
        owner=_row_address(row, OWNER_COLUMN, name),
        withdraw=_row_address(row, WITHDRAW_COLUMN, name),
        producer=_row_address(row, PRODUCER_COLUMN, name),
    )


def parse_registrations(rows: Iterable[Sequence[str]]) -> Tuple[Registration, ...]:
    registrations: List[Registration] = []
    for row in rows:
        registration = parse_registration(row)
        if registration is None:
            continue
        logging.info("Forming pillar: %s", registration.name)
        registrations.append(registration)
    return tuple(registrations)


def read_registrations(path: Path) -> Tuple[Registration, ...]:
    """Parse the CSV export at ``path``; the first row is a header."""

    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            reader = csv.reader(fh)
            next(reader, None)
            return parse_registrations(reader)
    except (UnicodeDecodeError, csv.Error) as exc:
        raise InputFormatError(f"registration export {path} is not a UTF-8 CSV file: {exc}") from exc


class DelegateRegistrar:
    """Collects pillars and locks their stake in the pillar contract pool."""

    def __init__(self, ledger: BalanceLedger, pool: Address = PILLAR_CONTRACT) -> None:
        self._ledger = ledger
        self._pool = pool
        self._entries: List[DelegateEntry] = []

    @property
    def pool(self) -> Address:
        return self._pool

    def register(
        self,
        name: str,
        stake_address: Address,
        withdraw_address: Address,
        producer_address: Address,
        amount: int,
        reward_split: RewardSplit = RewardSplit(),
    ) -> DelegateEntry:
        if not name:
            raise InputFormatError("delegate name must not be empty")
        entry = DelegateEntry(
            name=name,
            stake_address=stake_address,
            withdraw_address=withdraw_address,
            producer_address=producer_address,
            amount=amount,
            reward_split=reward_split,
        )
        self._ledger.contribute(self._pool, amount)
        self._entries.append(entry)
        return entry

    def register_operator(self, address: Address, amount: int) -> DelegateEntry:
        """Register the single devnet pillar; ``address`` fills every role."""
        return self.register(OPERATOR_DELEGATE_NAME, address, address, address, amount)

    def register_rows(self, registrations: Iterable[Registration], amount: int) -> Tuple[DelegateEntry, ...]:
        """Register one pillar per imported row, each staking ``amount``."""
        return tuple(self.register(r.name, r.owner, r.withdraw, r.producer, amount) for r in registrations)

    @property
    def entries(self) -> Tuple[DelegateEntry, ...]:
        return tuple(self._entries)


__all__ = [
    "DelegateEntry",
    "DelegateRegistrar",
    "Registration",
    "RewardSplit",
    "parse_registration",
    "parse_registrations",
    "read_registrations",
]
