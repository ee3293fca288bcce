"""Sporks (protocol feature flags) active at genesis."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import DuplicateError, InputFormatError


def _flag_id(label: str) -> str:
    return hashlib.sha3_256(label.encode("utf-8")).hexdigest()


ACCELERATOR_SPORK_ID = _flag_id("spork accelerator-z")
HTLC_SPORK_ID = _flag_id("spork htlc")
BRIDGE_AND_LIQUIDITY_SPORK_ID = _flag_id("spork bridge and liquidity")
# Fixed id of the spork that turns off open pillar registration.
NO_PILLAR_REGISTRATION_SPORK_ID = "c35c80695e6f1739ce19bd9b31e4a6702335fafd643139eb73b76541be2ca9e4"


@dataclass(frozen=True)
class FeatureFlag:
    id: str
    name: str
    description: str
    activated: bool
    enforcement_height: int = 0


@dataclass(frozen=True)
class FlagPreset:
    name: str
    flags: Tuple[FeatureFlag, ...]


_ACCELERATOR = FeatureFlag(ACCELERATOR_SPORK_ID, "az", "az", True)
_HTLC = FeatureFlag(HTLC_SPORK_ID, "htlc", "htlc", True)
_BRIDGE = FeatureFlag(BRIDGE_AND_LIQUIDITY_SPORK_ID, "bridge-liq", "bridge-liq", True)
_NO_PILLAR_REG = FeatureFlag(
    NO_PILLAR_REGISTRATION_SPORK_ID,
    "hyperqube-no-pillar-reg",
    "hyperqube-no-pillar-reg",
    False,
)

STANDARD_PRESET = FlagPreset("standard", (_ACCELERATOR, _HTLC, _BRIDGE))
RESTRICTED_PRESET = FlagPreset("restricted", (_ACCELERATOR, _HTLC, _BRIDGE, _NO_PILLAR_REG))

PRESETS: Dict[str, FlagPreset] = {p.name: p for p in (STANDARD_PRESET, RESTRICTED_PRESET)}


class FeatureFlagRegistrar:
    def __init__(self) -> None:
        self._flags: List[FeatureFlag] = []
        self._ids: Dict[str, FeatureFlag] = {}

    def register(
        self,
        id: str,
        name: str,
        description: str,
        activated: bool,
        enforcement_height: int = 0,
    ) -> FeatureFlag:
        """Add a flag; registering the same id twice raises :class:`DuplicateError`."""

        flag_id = id.lower()
        if len(flag_id) != 64 or any(c not in "0123456789abcdef" for c in flag_id):
            raise InputFormatError(f"spork id must be 32 bytes of hex, got {id!r}")
        if enforcement_height < 0:
            raise InputFormatError(f"enforcement height must not be negative, got {enforcement_height}")
        if flag_id in self._ids:
            raise DuplicateError(f"spork {flag_id} already registered as {self._ids[flag_id].name!r}")
        flag = FeatureFlag(flag_id, name, description, activated, enforcement_height)
        self._ids[flag_id] = flag
        self._flags.append(flag)
        return flag

    def register_preset(self, preset: FlagPreset) -> None:
        for flag in preset.flags:
            self.register(flag.id, flag.name, flag.description, flag.activated, flag.enforcement_height)

    @property
    def flags(self) -> Tuple[FeatureFlag, ...]:
        return tuple(self._flags)


__all__ = [
    "FeatureFlag",
    "FeatureFlagRegistrar",
    "FlagPreset",
    "PRESETS",
    "STANDARD_PRESET",
    "RESTRICTED_PRESET",
    "ACCELERATOR_SPORK_ID",
    "HTLC_SPORK_ID",
    "BRIDGE_AND_LIQUIDITY_SPORK_ID",
    "NO_PILLAR_REGISTRATION_SPORK_ID",
]
