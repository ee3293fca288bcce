import csv
import importlib.util
import time

import pytest

from nomgen.address import Address

if importlib.util.find_spec("nacl") is None:
    raise pytest.UsageError(
        "PyNaCl is required for the test suite. Install dependencies with 'pip install -e .[test]'."
    )


FIXED_TIME = 1_700_000_000


@pytest.fixture(autouse=True)
def _deterministic(monkeypatch):
    """Freeze ``time.time`` so snapshots carry a stable timestamp."""
    monkeypatch.setattr(time, "time", lambda: float(FIXED_TIME))


def user_address(seed: int) -> Address:
    """Return a user address derived from a fixed fake public key."""
    return Address.from_public_key(bytes([seed]) * 32)


@pytest.fixture
def operator() -> Address:
    return user_address(1)


@pytest.fixture
def addresses() -> list:
    """Ten distinct user addresses, none equal to ``operator``."""
    return [user_address(i) for i in range(10, 20)]


def registration_row(name: str, owner: Address, withdraw: Address, producer: Address) -> list:
    return ["2023-01-01", "x@example.org", "tg", "yes", name, str(owner), str(withdraw), str(producer)]


@pytest.fixture
def registration_csv(tmp_path, addresses):
    """Write a registration export with two pillars and one skipped row."""
    path = tmp_path / "pillars.csv"
    a = addresses
    rows = [
        ["Timestamp", "Email", "Telegram", "Agree", "Name", "Owner", "Withdraw", "Producer"],
        registration_row("alpha", a[0], a[0], a[1]),
        ["2023-01-02", "", "", "", "", "", "", ""],
        registration_row("beta", a[2], a[3], a[4]),
    ]
    with open(path, "w", encoding="utf-8", newline="") as fh:
        csv.writer(fh).writerows(rows)
    return path
