"""Bech32 encoded addresses and token standards."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from bech32 import CHARSET, bech32_decode, bech32_encode, convertbits

from .errors import AddressValidationError

ADDRESS_HRP = "z"
ADDRESS_SIZE = 20
TOKEN_STANDARD_HRP = "zts"
TOKEN_STANDARD_SIZE = 10

USER_ADDRESS_BYTE = 0
CONTRACT_ADDRESS_BYTE = 1


def _decode(text: str, hrp: str, size: int) -> bytes:
    found_hrp, data = bech32_decode(text)
    if found_hrp is None or data is None:
        raise AddressValidationError(f"invalid bech32 string: {text!r}")
    if found_hrp != hrp:
        raise AddressValidationError(f"expected prefix {hrp!r}, got {found_hrp!r} in {text!r}")
    raw = convertbits(data, 5, 8, False)
    if raw is None or len(raw) != size:
        raise AddressValidationError(f"expected {size} bytes in {text!r}")
    return bytes(raw)


def _encode(hrp: str, raw: bytes) -> str:
    return bech32_encode(hrp, convertbits(raw, 8, 5))


def _from_vanity(chars: str, size: int) -> bytes:
    """Return the raw bytes spelled by bech32 data characters ``chars``."""
    data = [CHARSET.index(c) for c in chars]
    raw = convertbits(data, 5, 8, False)
    if raw is None or len(raw) != size:
        raise ValueError(f"vanity string {chars!r} does not encode {size} bytes")
    return bytes(raw)


@dataclass(frozen=True, order=True)
class Address:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != ADDRESS_SIZE:
            raise AddressValidationError(f"address must be {ADDRESS_SIZE} bytes")

    @classmethod
    def parse(cls, text: str) -> "Address":
        return cls(_decode(text.strip(), ADDRESS_HRP, ADDRESS_SIZE))

    @classmethod
    def from_public_key(cls, public_key: bytes) -> "Address":
        digest = hashlib.sha3_256(public_key).digest()
        return cls(bytes([USER_ADDRESS_BYTE]) + digest[: ADDRESS_SIZE - 1])

    @property
    def is_embedded(self) -> bool:
        return self.raw[0] == CONTRACT_ADDRESS_BYTE

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return _encode(ADDRESS_HRP, self.raw)

    def __repr__(self) -> str:
        return f"Address({str(self)!r})"


@dataclass(frozen=True, order=True)
class TokenStandard:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != TOKEN_STANDARD_SIZE:
            raise AddressValidationError(f"token standard must be {TOKEN_STANDARD_SIZE} bytes")

    @classmethod
    def parse(cls, text: str) -> "TokenStandard":
        return cls(_decode(text.strip(), TOKEN_STANDARD_HRP, TOKEN_STANDARD_SIZE))

    def __str__(self) -> str:
        return _encode(TOKEN_STANDARD_HRP, self.raw)

    def __repr__(self) -> str:
        return f"TokenStandard({str(self)!r})"


def _embedded(label: str) -> Address:
    # Embedded contracts spell their name in the data part: z1qxemdeddedx<label>xxx...
    return Address(_from_vanity(("qxemdeddedx" + label).ljust(32, "x"), ADDRESS_SIZE))


def _standard(label: str) -> TokenStandard:
    return TokenStandard(_from_vanity(label.ljust(16, "x"), TOKEN_STANDARD_SIZE))


PILLAR_CONTRACT = _embedded("pyllar")
PLASMA_CONTRACT = _embedded("plasma")
TOKEN_CONTRACT = _embedded("t0ken")
ACCELERATOR_CONTRACT = _embedded("accelerat0r")

ZNN_TOKEN_STANDARD = _standard("znn")
QSR_TOKEN_STANDARD = _standard("qsr")
UTILZ_TOKEN_STANDARD = _standard("utylz")
UTILQ_TOKEN_STANDARD = _standard("utylq")


def parse_user_address(text: str) -> Address:
    """Parse ``text`` and reject embedded contract addresses."""
    address = Address.parse(text)
    if address.is_embedded:
        raise AddressValidationError(f"{text} is an embedded contract address")
    return address


__all__ = [
    "Address",
    "TokenStandard",
    "parse_user_address",
    "PILLAR_CONTRACT",
    "PLASMA_CONTRACT",
    "TOKEN_CONTRACT",
    "ACCELERATOR_CONTRACT",
    "ZNN_TOKEN_STANDARD",
    "QSR_TOKEN_STANDARD",
    "UTILZ_TOKEN_STANDARD",
    "UTILQ_TOKEN_STANDARD",
]
