"""Operator key handling for devnet generation."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from nacl import signing

from .address import Address


@dataclass(frozen=True)
class OperatorKey:
    """Ed25519 key pair of the local block producer."""

    public: str
    private: str

    @property
    def address(self) -> Address:
        return Address.from_public_key(base64.b64decode(self.public))


def generate_operator_key() -> OperatorKey:
    """Return a fresh key pair with base64 encoded halves."""

    signing_key = signing.SigningKey.generate()
    verify_key = signing_key.verify_key

    pub_b64 = base64.b64encode(verify_key.encode()).decode("ascii")
    priv_b64 = base64.b64encode(signing_key.encode()).decode("ascii")
    return OperatorKey(pub_b64, priv_b64)


def save_operator_key(key: OperatorKey, wallet_dir: Path) -> Path:
    """Write ``key`` to ``wallet_dir/<address>`` and return the file path.

    The file holds the public key on the first line and the private key on
    the second line.
    """

    path = Path(wallet_dir) / str(key.address)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(f"{key.public}\n{key.private}\n")
    return path


def load_operator_key(path: Path) -> OperatorKey:
    """Load a key written by :func:`save_operator_key`."""

    with open(path, "r", encoding="utf-8") as fh:
        content = fh.read().strip()

    lines = content.splitlines()
    if len(lines) < 2:
        raise ValueError("key file malformed")
    public, private = lines[0].strip(), lines[1].strip()

    # the private half must rebuild the stored public half
    derived = signing.SigningKey(base64.b64decode(private)).verify_key.encode()
    if base64.b64encode(derived).decode("ascii") != public:
        raise ValueError("key file public and private halves do not match")
    return OperatorKey(public, private)


def producer_config(key: OperatorKey, key_file: Path, index: int = 0) -> Dict[str, Any]:
    """Return the ``Producer`` section of the node configuration."""
    return {
        "Address": str(key.address),
        "Index": index,
        "KeyFilePath": str(key_file),
    }


__all__ = [
    "OperatorKey",
    "generate_operator_key",
    "save_operator_key",
    "load_operator_key",
    "producer_config",
]
