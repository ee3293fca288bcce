import pytest

from nomgen.address import PILLAR_CONTRACT, ZNN_TOKEN_STANDARD
from nomgen.balances import BalanceLedger
from nomgen.delegates import (
    DelegateRegistrar,
    Registration,
    RewardSplit,
    parse_registration,
    read_registrations,
)
from nomgen.errors import AddressValidationError, InputFormatError, RangeError
from nomgen.tokens import TokenDefinition, TokenRegistry

from conftest import registration_row, user_address


@pytest.fixture
def ledger():
    registry = TokenRegistry()
    registry.initialize(TokenDefinition("tZNN", "tZNN", "test", ZNN_TOKEN_STANDARD))
    ledger = BalanceLedger(registry)
    ledger.open_pool(PILLAR_CONTRACT, ZNN_TOKEN_STANDARD)
    return ledger


def test_stake_goes_to_pool_not_role_addresses(ledger):
    delegates = DelegateRegistrar(ledger)
    owner, withdraw, producer = user_address(2), user_address(3), user_address(4)
    entry = delegates.register("p1", owner, withdraw, producer, 1_500)

    assert entry.stake_address == owner
    assert entry.reward_split == RewardSplit(0, 100)
    rows = ledger.entries()
    assert [r.address for r in rows] == [PILLAR_CONTRACT]
    assert rows[0].amount(ZNN_TOKEN_STANDARD) == 1_500


def test_operator_fills_every_role(ledger):
    delegates = DelegateRegistrar(ledger)
    op = user_address(1)
    entry = delegates.register_operator(op, 10)
    assert entry.name == "Local"
    assert entry.stake_address == entry.withdraw_address == entry.producer_address == op
    assert delegates.entries == (entry,)


def test_parse_registration_skips_blank_name():
    row = ["a", "b", "c", "d", "  ", "", "", ""]
    assert parse_registration(row) is None
    assert parse_registration([]) is None


def test_parse_registration_reads_roles():
    a, b, c = user_address(2), user_address(3), user_address(4)
    reg = parse_registration(registration_row("gamma", a, b, c))
    assert (reg.name, reg.owner, reg.withdraw, reg.producer) == ("gamma", a, b, c)


def test_parse_registration_short_row():
    with pytest.raises(InputFormatError):
        parse_registration(["a", "b", "c", "d", "name", str(user_address(2))])
    with pytest.raises(InputFormatError):
        parse_registration(["a", "b"])


def test_parse_registration_bad_address():
    row = registration_row("delta", user_address(2), user_address(3), user_address(4))
    row[6] = "z1notanaddress"
    with pytest.raises(AddressValidationError):
        parse_registration(row)


def test_read_registrations(registration_csv, addresses):
    regs = read_registrations(registration_csv)
    assert [r.name for r in regs] == ["alpha", "beta"]
    assert regs[0].owner == regs[0].withdraw == addresses[0]
    assert regs[1].producer == addresses[4]


def test_reward_split_bounds():
    with pytest.raises(RangeError):
        RewardSplit(block_reward_percentage=101)


def test_read_registrations_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "pillars.csv"
    path.write_bytes(b"Timestamp,Email\n\xff,x\n")
    with pytest.raises(InputFormatError):
        read_registrations(path)


def test_register_rows_stakes_each_row(ledger):
    delegates = DelegateRegistrar(ledger)
    a = [user_address(i) for i in range(2, 8)]
    rows = (Registration("p1", a[0], a[1], a[2]), Registration("p2", a[3], a[4], a[5]))
    entries = delegates.register_rows(rows, 100)

    assert [e.name for e in entries] == ["p1", "p2"]
    assert entries[1].producer_address == a[5]
    assert ledger.pool_balance(PILLAR_CONTRACT) == 200
