"""Validation of ``--genesis-block`` and ``--genesis-fusion`` values.

Every value is checked before any builder runs. Amounts are given in whole
token units and are scaled later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from .address import Address, parse_user_address
from .config import MAX_FUSION_GRANT, MIN_FUSION_GRANT
from .errors import AddressValidationError, DuplicateError, InputFormatError, RangeError

MAX_UINT64 = 2**64 - 1

BALANCE_GRANT_FORMAT = "<address>/<znnAmount>/<qsrAmount>"
FUSION_GRANT_FORMAT = "<address>/<qsrAmount>"


@dataclass(frozen=True)
class BalanceGrant:
    address: Address
    znn: int
    qsr: int


@dataclass(frozen=True)
class FusionGrant:
    address: Address
    qsr: int


def parse_amount(text: str) -> int:
    """Parse an unsigned decimal amount of whole units."""
    text = text.strip()
    if not text.isascii() or not text.isdigit():
        raise InputFormatError(f"amount must be an unsigned integer, got {text!r}")
    value = int(text)
    if value > MAX_UINT64:
        raise RangeError(f"amount {value} does not fit in 64 bits")
    return value


def _split(value: str, parts: int, flag: str, fmt: str) -> List[str]:
    fields = value.split("/")
    if len(fields) != parts:
        raise InputFormatError(f"{flag} flags must be in the format --{flag}={fmt}, got {value!r}")
    return fields


def _user_address(text: str, flag: str) -> Address:
    try:
        return parse_user_address(text)
    except AddressValidationError as exc:
        raise AddressValidationError(f"{flag} flag can only be set for user addresses: {exc}") from exc


def parse_balance_grant(value: str) -> BalanceGrant:
    addr, znn, qsr = _split(value, 3, "genesis-block", BALANCE_GRANT_FORMAT)
    grant = BalanceGrant(_user_address(addr, "genesis-block"), parse_amount(znn), parse_amount(qsr))
    if grant.znn == 0 and grant.qsr == 0:
        raise RangeError("genesis-block znn and qsr amount cannot both be 0")
    return grant


def parse_fusion_grant(value: str) -> FusionGrant:
    addr, qsr = _split(value, 2, "genesis-fusion", FUSION_GRANT_FORMAT)
    grant = FusionGrant(_user_address(addr, "genesis-fusion"), parse_amount(qsr))
    if not MIN_FUSION_GRANT <= grant.qsr <= MAX_FUSION_GRANT:
        raise RangeError(
            f"genesis-fusion amount must be between min:{MIN_FUSION_GRANT} max:{MAX_FUSION_GRANT}"
        )
    return grant


def require_unique(addresses: Iterable[Address], flag: str, reserved: Iterable[Address] = ()) -> None:
    seen: Set[Address] = set(reserved)
    for address in addresses:
        if address in seen:
            raise DuplicateError(f"{flag} addresses must be unique: {address}")
        seen.add(address)


def parse_balance_grants(values: Iterable[str]) -> Tuple[BalanceGrant, ...]:
    grants = tuple(parse_balance_grant(v) for v in values)
    require_unique((g.address for g in grants), "genesis-block")
    return grants


def parse_fusion_grants(values: Iterable[str], *, reserved: Iterable[Address] = ()) -> Tuple[FusionGrant, ...]:
    """Parse fusion grants.

    ``reserved`` lists addresses that already own a self-fusion, such as the
    devnet operator; a grant naming one of them would reuse its id.
    """
    grants = tuple(parse_fusion_grant(v) for v in values)
    require_unique((g.address for g in grants), "genesis-fusion", reserved)
    return grants


__all__ = [
    "BalanceGrant",
    "FusionGrant",
    "parse_amount",
    "parse_balance_grant",
    "parse_balance_grants",
    "parse_fusion_grant",
    "parse_fusion_grants",
    "require_unique",
]
