"""Token definitions and their running supply."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Tuple

from .address import TOKEN_CONTRACT, Address, TokenStandard
from .config import DECIMAL_PLACES, MAX_SUPPLY_RAW
from .errors import DuplicateError, InputFormatError, RangeError, SupplyOverflowError


@dataclass(frozen=True)
class TokenDefinition:
    name: str
    symbol: str
    domain: str
    standard: TokenStandard
    total_supply: int = 0
    max_supply: int = MAX_SUPPLY_RAW
    decimals: int = DECIMAL_PLACES
    owner: Address = TOKEN_CONTRACT
    mintable: bool = True
    burnable: bool = True
    utility: bool = True


class TokenRegistry:
    """Registered tokens keyed by token standard.

    Definitions are immutable; minting swaps in a copy with the new supply.
    """

    def __init__(self) -> None:
        self._tokens: Dict[TokenStandard, TokenDefinition] = {}

    def initialize(self, definition: TokenDefinition) -> None:
        if definition.standard in self._tokens:
            raise DuplicateError(f"token {definition.standard} already registered")
        if definition.total_supply < 0:
            raise RangeError(f"{definition.symbol} starting supply is negative")
        if definition.total_supply > definition.max_supply:
            raise SupplyOverflowError(f"{definition.symbol} starting supply exceeds max supply")
        self._tokens[definition.standard] = definition

    def mint(self, standard: TokenStandard, amount: int) -> int:
        """Increase the supply of ``standard`` by ``amount`` and return it."""

        token = self.get(standard)
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise RangeError(f"mint amount must be a non-negative integer, got {amount!r}")
        supply = token.total_supply + amount
        if supply > token.max_supply:
            raise SupplyOverflowError(
                f"minting {amount} {token.symbol} raises supply to {supply}, "
                f"above max supply {token.max_supply}"
            )
        self._tokens[standard] = replace(token, total_supply=supply)
        return supply

    def get(self, standard: TokenStandard) -> TokenDefinition:
        try:
            return self._tokens[standard]
        except KeyError:
            raise InputFormatError(f"unknown token {standard}") from None

    def total_supply(self, standard: TokenStandard) -> int:
        return self.get(standard).total_supply

    def __contains__(self, standard: object) -> bool:
        return standard in self._tokens

    def __iter__(self) -> Iterator[TokenDefinition]:
        return iter(self._tokens.values())

    def freeze(self) -> Tuple[TokenDefinition, ...]:
        return tuple(self._tokens.values())


__all__ = ["TokenDefinition", "TokenRegistry"]
