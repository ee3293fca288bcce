"""Configuration constants for genesis generation.

Amounts below are expressed in whole token units unless their name ends in
``_RAW``; multiply by :data:`DECIMALS` to get the on-chain integer value.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

# Both network tokens use eight decimal places.
DECIMAL_PLACES = 8
DECIMALS = 10**DECIMAL_PLACES

# Largest integer a JavaScript client can represent exactly.
MAX_SUPPLY_RAW = 9007199254740991

DEVNET_CHAIN_ID = 321
HYPERQUBE_CHAIN_ID = 26

# Stake locked in the pillar contract for every delegate.
DELEGATE_STAKE = 15_000
# Devnet easy mode self-allocation.
EASY_MODE_ZNN = 100_000
EASY_MODE_QSR = 500_000
# Operator self-fusion added whenever fusions are enabled on a devnet.
OPERATOR_FUSION_QSR = 1_000
# Per-row grants for bulk imported delegates.
IMPORT_OWNER_ZNN = 10_000
IMPORT_OWNER_QSR = 100_000
IMPORT_FUSION_QSR = 1_000

MIN_FUSION_GRANT = 1
MAX_FUSION_GRANT = 5_000

# Expiration height of genesis fusions; 1 makes them cancellable immediately.
FUSION_EXPIRATION_HEIGHT = 1

DEFAULT_DATA_DIR = Path.home() / ".znn"
DATA_DIR_ENV = "NOMGEN_DATA"
CONFIG_FILE = "config.json"
GENESIS_FILE = "genesis.json"
WALLET_DIR = "wallet"


@dataclass(frozen=True)
class GeneratorConfig:
    """Paths used by a single generation run.

    ``wallet_path`` and ``genesis_file`` default to locations inside
    ``data_path`` when left unset.
    """

    data_path: Path = DEFAULT_DATA_DIR
    wallet_path: Path | None = None
    genesis_file: Path | None = None

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorConfig":
        env_dir = os.environ.get(DATA_DIR_ENV)
        base = cls(data_path=Path(env_dir)) if env_dir else cls()
        values = {k: Path(v) for k, v in overrides.items() if v}
        return replace(base, **values)

    @property
    def wallet_dir(self) -> Path:
        return self.wallet_path or self.data_path / WALLET_DIR

    @property
    def genesis_path(self) -> Path:
        return self.genesis_file or self.data_path / GENESIS_FILE

    @property
    def config_path(self) -> Path:
        return self.data_path / CONFIG_FILE

    def absolute(self) -> "GeneratorConfig":
        """Return a copy with every path expanded and made absolute."""
        return GeneratorConfig(
            data_path=self.data_path.expanduser().resolve(),
            wallet_path=self.wallet_dir.expanduser().resolve(),
            genesis_file=self.genesis_path.expanduser().resolve(),
        )
