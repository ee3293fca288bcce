"""Reading and writing the ``genesis.json`` artifact."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .errors import ArtifactWriteError
from .snapshot import Snapshot


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    """Return ``snapshot`` using the field names the node expects."""

    return {
        "ChainIdentifier": snapshot.chain_id,
        "ExtraData": snapshot.extra_data,
        "GenesisTimestampSec": snapshot.timestamp,
        "SporkAddress": str(snapshot.spork_address),
        "PillarConfig": {
            "Pillars": [
                {
                    "Name": p.name,
                    "BlockProducingAddress": str(p.producer_address),
                    "StakeAddress": str(p.stake_address),
                    "RewardWithdrawAddress": str(p.withdraw_address),
                    "Amount": p.amount,
                    "RevokeTime": p.revoke_time,
                    "PillarType": p.pillar_type,
                    "GiveBlockRewardPercentage": p.reward_split.block_reward_percentage,
                    "GiveDelegateRewardPercentage": p.reward_split.delegate_reward_percentage,
                }
                for p in snapshot.delegates
            ],
            "Delegations": [],
            "LegacyEntries": [],
        },
        "TokenConfig": {
            "Tokens": [
                {
                    "TokenName": t.name,
                    "TokenSymbol": t.symbol,
                    "TokenDomain": t.domain,
                    "TotalSupply": t.total_supply,
                    "MaxSupply": t.max_supply,
                    "Decimals": t.decimals,
                    "Owner": str(t.owner),
                    "TokenStandard": str(t.standard),
                    "IsMintable": t.mintable,
                    "IsBurnable": t.burnable,
                    "IsUtility": t.utility,
                }
                for t in snapshot.tokens
            ]
        },
        "PlasmaConfig": {
            "Fusions": [
                {
                    "Owner": str(f.owner),
                    "Id": f.id,
                    "Amount": f.amount,
                    "ExpirationHeight": f.expiration_height,
                    "Beneficiary": str(f.beneficiary),
                }
                for f in snapshot.fusions
            ]
        },
        "SwapConfig": {"Entries": []},
        "SporkConfig": {
            "Sporks": [
                {
                    "Id": s.id,
                    "Name": s.name,
                    "Description": s.description,
                    "Activated": s.activated,
                    "EnforcementHeight": s.enforcement_height,
                }
                for s in snapshot.flags
            ]
        },
        "GenesisBlocks": {
            "Blocks": [
                {
                    "Address": str(b.address),
                    "BalanceList": {str(zts): amount for zts, amount in sorted(b.balances.items())},
                }
                for b in snapshot.balances
            ]
        },
    }


def dumps(snapshot: Snapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot), indent=2) + "\n"


def write_genesis(snapshot: Snapshot, path: Path) -> Path:
    """Write ``snapshot`` to ``path`` and return the path."""

    file = Path(path)
    data = dumps(snapshot)
    try:
        with open(file, "w", encoding="utf-8") as fh:
            fh.write(data)
    except OSError as exc:
        raise ArtifactWriteError(f"could not write genesis file {file}: {exc}") from exc
    return file


def load_genesis(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def summarize(snapshot: Snapshot) -> List[str]:
    """Return human readable summary lines for ``snapshot``."""

    lines = [
        f"Chain identifier: {snapshot.chain_id}",
        f"Spork address: {snapshot.spork_address}",
    ]
    for token in snapshot.tokens:
        whole, frac = divmod(token.total_supply, 10**token.decimals)
        lines.append(f"{token.symbol} total supply: {whole}.{frac:0{token.decimals}d}")
    lines.append(f"Pillars: {len(snapshot.delegates)}")
    lines.append(f"Fusions: {len(snapshot.fusions)}")
    lines.append(f"Balance rows: {len(snapshot.balances)}")
    return lines


__all__ = ["dumps", "load_genesis", "snapshot_to_dict", "summarize", "write_genesis"]
