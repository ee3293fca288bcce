"""Assembly of the genesis snapshot.

A run is described by a :data:`GenerationMode`: either :class:`Standard`
(a devnet around one local operator) or :class:`BulkImport` (pillars read
from a registration export). Both go through the same builders; the
:class:`NetworkPreset` they carry holds everything that differs between
networks.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .address import (
    ACCELERATOR_CONTRACT,
    QSR_TOKEN_STANDARD,
    UTILQ_TOKEN_STANDARD,
    UTILZ_TOKEN_STANDARD,
    ZNN_TOKEN_STANDARD,
    Address,
    TokenStandard,
)
from .balances import BalanceEntry, BalanceLedger
from .config import (
    DECIMALS,
    DELEGATE_STAKE,
    DEVNET_CHAIN_ID,
    EASY_MODE_QSR,
    EASY_MODE_ZNN,
    HYPERQUBE_CHAIN_ID,
    IMPORT_FUSION_QSR,
    IMPORT_OWNER_QSR,
    IMPORT_OWNER_ZNN,
    OPERATOR_FUSION_QSR,
)
from .delegates import DelegateEntry, DelegateRegistrar, Registration
from .errors import InvariantError
from .fusions import FusionEntry, FusionRegistrar
from .sporks import RESTRICTED_PRESET, STANDARD_PRESET, FeatureFlag, FeatureFlagRegistrar, FlagPreset
from .tokens import TokenDefinition, TokenRegistry
from .validation import BalanceGrant, FusionGrant, require_unique


@dataclass(frozen=True)
class TokenMeta:
    name: str
    symbol: str
    domain: str
    standard: TokenStandard

    def definition(self) -> TokenDefinition:
        return TokenDefinition(name=self.name, symbol=self.symbol, domain=self.domain, standard=self.standard)


@dataclass(frozen=True)
class NetworkPreset:
    """Parameters that distinguish one bootstrap network from another.

    ``seed_znn``/``seed_qsr`` are raw amounts credited to the accelerator
    contract. ``spork_authority`` is a fixed spork address; ``None`` means
    the operator of a standard run holds it.
    """

    name: str
    chain_id: int
    extra_data: str
    znn: TokenMeta
    qsr: TokenMeta
    flags: FlagPreset
    seed_znn: int
    seed_qsr: int
    spork_authority: Optional[str] = None


DEVNET = NetworkPreset(
    name="devnet",
    chain_id=DEVNET_CHAIN_ID,
    extra_data="/thank_you_bich_dao",
    znn=TokenMeta("tZNN", "tZNN", "biginches.club", ZNN_TOKEN_STANDARD),
    qsr=TokenMeta("tQSR", "tQSR", "biginches.club", QSR_TOKEN_STANDARD),
    flags=STANDARD_PRESET,
    seed_znn=77213599988800,
    seed_qsr=772135999888000,
)

HYPERQUBE_DEVNET = NetworkPreset(
    name="hyperqube-devnet",
    chain_id=DEVNET_CHAIN_ID,
    extra_data="HYPERQUBE LOCAL UNIFORM 60",
    znn=TokenMeta("utilZ", "utilZ", "hyperqube.network", UTILZ_TOKEN_STANDARD),
    qsr=TokenMeta("utilQ", "utilQ", "hyperqube.network", UTILQ_TOKEN_STANDARD),
    flags=RESTRICTED_PRESET,
    seed_znn=77213599988800,
    seed_qsr=772135999888000,
)

HYPERQUBE = NetworkPreset(
    name="hyperqube",
    chain_id=HYPERQUBE_CHAIN_ID,
    extra_data="HYPERQUBE Z UNIFORM 60",
    znn=TokenMeta("utilZ", "utilZ", "hyperqube.network", UTILZ_TOKEN_STANDARD),
    qsr=TokenMeta("utilQ", "utilQ", "hyperqube.network", UTILQ_TOKEN_STANDARD),
    flags=RESTRICTED_PRESET,
    seed_znn=1_000_000 * DECIMALS,
    seed_qsr=10_000_000 * DECIMALS,
    spork_authority="z1qpg8v63m534t2vv09yzndv9gu9t6gyrvq3n6qv",
)


@dataclass(frozen=True)
class Standard:
    """Single operator devnet."""

    operator: Address
    preset: NetworkPreset = DEVNET
    easy_mode: bool = False
    balance_grants: Tuple[BalanceGrant, ...] = ()
    fusion_grants: Tuple[FusionGrant, ...] = ()
    spork_authority: Optional[Address] = None

    @property
    def fusions_enabled(self) -> bool:
        return self.easy_mode or bool(self.fusion_grants)

    @property
    def default_spork_authority(self) -> Optional[Address]:
        return self.operator

    def validate(self) -> None:
        require_unique((g.address for g in self.balance_grants), "genesis-block")
        reserved = (self.operator,) if self.fusions_enabled else ()
        require_unique((g.address for g in self.fusion_grants), "genesis-fusion", reserved)

    def expected_counts(self) -> Tuple[int, int]:
        fusions = 1 + len(self.fusion_grants) if self.fusions_enabled else 0
        return 1, fusions

    def populate(self, ledger: BalanceLedger, delegates: DelegateRegistrar, fusions: FusionRegistrar) -> None:
        znn, qsr = self.preset.znn.standard, self.preset.qsr.standard
        delegates.register_operator(self.operator, DELEGATE_STAKE * DECIMALS)

        if self.easy_mode:
            ledger.credit(self.operator, znn, EASY_MODE_ZNN * DECIMALS)
            ledger.credit(self.operator, qsr, EASY_MODE_QSR * DECIMALS)

        for grant in self.balance_grants:
            ledger.credit(grant.address, znn, grant.znn * DECIMALS)
            ledger.credit(grant.address, qsr, grant.qsr * DECIMALS)

        if self.fusions_enabled:
            ledger.open_pool(fusions.pool, qsr)
            fusions.register_self(self.operator, OPERATOR_FUSION_QSR * DECIMALS)
            for grant in self.fusion_grants:
                fusions.register_self(grant.address, grant.qsr * DECIMALS)


@dataclass(frozen=True)
class BulkImport:
    """Test network seeded from a registration export."""

    registrations: Tuple[Registration, ...]
    preset: NetworkPreset = HYPERQUBE
    spork_authority: Optional[Address] = None

    @property
    def default_spork_authority(self) -> Optional[Address]:
        return None

    def validate(self) -> None:
        # each role tag must see every address at most once
        require_unique((r.owner for r in self.registrations), "owner")
        require_unique((r.withdraw for r in self.registrations), "withdraw")
        require_unique((r.producer for r in self.registrations), "producer")

    def expected_counts(self) -> Tuple[int, int]:
        count = len(self.registrations)
        return count, 3 * count

    def populate(self, ledger: BalanceLedger, delegates: DelegateRegistrar, fusions: FusionRegistrar) -> None:
        znn, qsr = self.preset.znn.standard, self.preset.qsr.standard
        ledger.open_pool(fusions.pool, qsr)
        delegates.register_rows(self.registrations, DELEGATE_STAKE * DECIMALS)
        for reg in self.registrations:
            ledger.credit(reg.owner, znn, IMPORT_OWNER_ZNN * DECIMALS)
            ledger.credit(reg.owner, qsr, IMPORT_OWNER_QSR * DECIMALS)
            fusions.register_pillar_roles(reg.owner, reg.withdraw, reg.producer, IMPORT_FUSION_QSR * DECIMALS)


GenerationMode = Union[Standard, BulkImport]


@dataclass(frozen=True)
class Snapshot:
    chain_id: int
    extra_data: str
    timestamp: int
    spork_address: Address
    tokens: Tuple[TokenDefinition, ...]
    delegates: Tuple[DelegateEntry, ...]
    fusions: Tuple[FusionEntry, ...]
    balances: Tuple[BalanceEntry, ...]
    flags: Tuple[FeatureFlag, ...]

    def token(self, standard: TokenStandard) -> TokenDefinition:
        for token in self.tokens:
            if token.standard == standard:
                return token
        raise KeyError(str(standard))

    def balance(self, address: Address, standard: TokenStandard) -> int:
        for entry in self.balances:
            if entry.address == address:
                return entry.amount(standard)
        return 0


def spork_authority(mode: GenerationMode) -> Address:
    """Return the address allowed to activate sporks after genesis.

    An explicit override wins, then the preset's fixed address, then the
    operator of a standard run.
    """
    if mode.spork_authority is not None:
        return mode.spork_authority
    if mode.preset.spork_authority is not None:
        return Address.parse(mode.preset.spork_authority)
    if mode.default_spork_authority is not None:
        return mode.default_spork_authority
    raise InvariantError(f"preset {mode.preset.name} has no spork authority")


def build_snapshot(mode: GenerationMode, *, timestamp: Optional[int] = None) -> Snapshot:
    """Run every builder for ``mode`` and return the verified snapshot."""

    if not isinstance(mode, (Standard, BulkImport)):
        raise TypeError(f"unknown generation mode {type(mode).__name__}")
    mode.validate()
    authority = spork_authority(mode)
    preset = mode.preset

    registry = TokenRegistry()
    registry.initialize(preset.znn.definition())
    registry.initialize(preset.qsr.definition())
    ledger = BalanceLedger(registry)
    delegates = DelegateRegistrar(ledger)
    fusions = FusionRegistrar(ledger)
    flags = FeatureFlagRegistrar()

    flags.register_preset(preset.flags)
    ledger.open_pool(delegates.pool, preset.znn.standard)
    ledger.credit(ACCELERATOR_CONTRACT, preset.znn.standard, preset.seed_znn)
    ledger.credit(ACCELERATOR_CONTRACT, preset.qsr.standard, preset.seed_qsr)
    mode.populate(ledger, delegates, fusions)

    return assemble(
        mode,
        registry,
        ledger,
        delegates,
        fusions,
        flags,
        chain_id=preset.chain_id,
        extra_data=preset.extra_data,
        flag_authority=authority,
        timestamp=timestamp,
    )


def assemble(
    mode: GenerationMode,
    registry: TokenRegistry,
    ledger: BalanceLedger,
    delegates: DelegateRegistrar,
    fusions: FusionRegistrar,
    flags: FeatureFlagRegistrar,
    *,
    chain_id: int,
    extra_data: str,
    flag_authority: Address,
    timestamp: Optional[int] = None,
) -> Snapshot:
    """Freeze the builders into a :class:`Snapshot` after reconciling them.

    Raises :class:`InvariantError` when balances and supply disagree, when a
    pool row differs from the sum of its contributions, or when fusion ids
    repeat.
    """

    tokens = registry.freeze()
    balances = ledger.entries()
    delegate_entries = delegates.entries
    fusion_entries = fusions.entries

    for token in tokens:
        held = sum(entry.amount(token.standard) for entry in balances)
        if held != token.total_supply:
            raise InvariantError(
                f"{token.symbol} balances sum to {held} but total supply is {token.total_supply}"
            )
        if token.total_supply > token.max_supply:
            raise InvariantError(f"{token.symbol} supply exceeds max supply")

    rows = {entry.address: entry for entry in balances}
    pools = ((delegates.pool, delegate_entries), (fusions.pool, fusion_entries))
    for pool, entries in pools:
        contributed = sum(e.amount for e in entries)
        if not ledger.has_pool(pool):
            if entries:
                raise InvariantError(f"{len(entries)} entries routed to unopened pool {pool}")
            continue
        row = rows[pool]
        if sum(row.balances.values()) != contributed:
            raise InvariantError(f"pool {pool} holds {dict(row.balances)} but entries sum to {contributed}")

    ids = [f.id for f in fusion_entries]
    if len(set(ids)) != len(ids):
        raise InvariantError("fusion ids are not unique")
    for entry in fusion_entries:
        if entry.expiration_height != 1:
            raise InvariantError(f"fusion {entry.id} expires at {entry.expiration_height}")

    expected = mode.expected_counts()
    if (len(delegate_entries), len(fusion_entries)) != expected:
        raise InvariantError(
            f"expected {expected[0]} pillars and {expected[1]} fusions, "
            f"built {len(delegate_entries)} and {len(fusion_entries)}"
        )

    snapshot = Snapshot(
        chain_id=chain_id,
        extra_data=extra_data,
        timestamp=int(time.time()) if timestamp is None else int(timestamp),
        spork_address=flag_authority,
        tokens=tokens,
        delegates=delegate_entries,
        fusions=fusion_entries,
        balances=balances,
        flags=flags.flags,
    )
    logging.info(
        "Assembled %s genesis: %d pillars, %d fusions, %d balance rows",
        mode.preset.name,
        len(delegate_entries),
        len(fusion_entries),
        len(balances),
    )
    return snapshot


__all__ = [
    "BulkImport",
    "DEVNET",
    "GenerationMode",
    "HYPERQUBE",
    "HYPERQUBE_DEVNET",
    "NetworkPreset",
    "Snapshot",
    "Standard",
    "TokenMeta",
    "assemble",
    "build_snapshot",
    "spork_authority",
]
