"""Command line entry point for genesis generation."""

from __future__ import annotations

import argparse
import json
import logging
import shutil
from pathlib import Path
from typing import List

from . import genesis_file, wallet
from .address import Address, parse_user_address
from .config import GeneratorConfig
from .delegates import read_registrations
from .errors import ArtifactWriteError, GenesisError
from .snapshot import DEVNET, HYPERQUBE, HYPERQUBE_DEVNET, BulkImport, Snapshot, Standard, build_snapshot
from .validation import BALANCE_GRANT_FORMAT, FUSION_GRANT_FORMAT, parse_balance_grants, parse_fusion_grants


def _spork_address(value: str | None) -> Address | None:
    if not value:
        return None
    return parse_user_address(value)


def _discard(paths: List[Path]) -> None:
    for path in reversed(paths):
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        elif path.exists():
            path.unlink()


def _write_devnet(cfg: GeneratorConfig, key: wallet.OperatorKey, snapshot: Snapshot) -> Path:
    """Create the data directory, key file, genesis and node config.

    Anything created here is removed again if a later step fails, so a
    failed run can simply be repeated.
    """

    created: List[Path] = []
    try:
        cfg.data_path.mkdir(parents=True, mode=0o700)
        created.append(cfg.data_path)
        if not cfg.wallet_dir.exists():
            cfg.wallet_dir.mkdir(parents=True, mode=0o700)
            created.append(cfg.wallet_dir)
        key_file = wallet.save_operator_key(key, cfg.wallet_dir)
        created.append(key_file)
        path = genesis_file.write_genesis(snapshot, cfg.genesis_path)
        created.append(path)

        node_config = {
            "DataPath": str(cfg.data_path),
            "WalletPath": str(cfg.wallet_dir),
            "GenesisFile": str(cfg.genesis_path),
            "Producer": wallet.producer_config(key, key_file),
        }
        with open(cfg.config_path, "w", encoding="utf-8") as fh:
            json.dump(node_config, fh, indent=2)
    except ArtifactWriteError:
        _discard(created)
        raise
    except OSError as exc:
        _discard(created)
        raise ArtifactWriteError(f"could not write devnet files under {cfg.data_path}: {exc}") from exc
    return path


def cmd_generate_devnet(args: argparse.Namespace) -> None:
    # flags first; nothing touches the disk until the snapshot is built
    balance_grants = parse_balance_grants(args.genesis_block or [])
    fusion_grants = parse_fusion_grants(args.genesis_fusion or [])
    spork_address = _spork_address(args.spork_address)

    cfg = GeneratorConfig.from_env(
        data_path=args.data,
        wallet_path=args.wallet,
        genesis_file=args.genesis,
    ).absolute()
    if cfg.data_path.exists():
        raise SystemExit(f"data path already exists: {cfg.data_path}")

    key = wallet.generate_operator_key()
    mode = Standard(
        operator=key.address,
        preset=HYPERQUBE_DEVNET if args.hyperqube else DEVNET,
        easy_mode=args.ez,
        balance_grants=balance_grants,
        fusion_grants=fusion_grants,
        spork_authority=spork_address,
    )
    snapshot = build_snapshot(mode)
    path = _write_devnet(cfg, key, snapshot)

    print(f"Producer address: {key.address}")
    print(f"Genesis written to {path}")
    for line in genesis_file.summarize(snapshot):
        print(line)


def cmd_generate_bulk(args: argparse.Namespace) -> None:
    spork_address = _spork_address(args.spork_address)
    csv_path = Path(args.csv)
    if not csv_path.exists():
        raise SystemExit(f"registration export not found: {csv_path}")
    registrations = read_registrations(csv_path)
    mode = BulkImport(registrations=registrations, preset=HYPERQUBE, spork_authority=spork_address)
    snapshot = build_snapshot(mode)
    path = genesis_file.write_genesis(snapshot, Path(args.genesis))

    print(f"Genesis written to {path}")
    for line in genesis_file.summarize(snapshot):
        print(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nomgen", description="Genesis generator")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    p_dev = sub.add_parser("generate-devnet", help="Generate config and genesis for a devnet")
    p_dev.add_argument("--data", help="Data directory; must not exist yet")
    p_dev.add_argument("--wallet", help="Wallet directory (default: <data>/wallet)")
    p_dev.add_argument("--genesis", help="Genesis file (default: <data>/genesis.json)")
    p_dev.add_argument("--genesis-block", action="append", metavar=BALANCE_GRANT_FORMAT)
    p_dev.add_argument("--genesis-fusion", action="append", metavar=FUSION_GRANT_FORMAT)
    p_dev.add_argument("--spork-address", metavar="<address>")
    p_dev.add_argument("--ez", action="store_true", help="Fund and fuse for the local producer")
    p_dev.add_argument("--hyperqube", action="store_true", help="Use HyperQube token metadata and sporks")
    p_dev.set_defaults(func=cmd_generate_devnet)

    p_bulk = sub.add_parser("generate-bulk", help="Generate genesis from a pillar registration export")
    p_bulk.add_argument("--csv", required=True, help="Path to the registration CSV export")
    p_bulk.add_argument("--genesis", default="genesis.json", help="Output genesis file")
    p_bulk.add_argument("--spork-address", metavar="<address>")
    p_bulk.set_defaults(func=cmd_generate_bulk)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(message)s")
    try:
        args.func(args)
    except GenesisError as exc:
        raise SystemExit(f"error: {exc}")


__all__ = [
    "main",
    "build_parser",
    "cmd_generate_devnet",
    "cmd_generate_bulk",
]
