import pytest

from nomgen.address import (
    ACCELERATOR_CONTRACT,
    PILLAR_CONTRACT,
    PLASMA_CONTRACT,
    QSR_TOKEN_STANDARD,
    ZNN_TOKEN_STANDARD,
    Address,
    TokenStandard,
    parse_user_address,
)
from nomgen.errors import AddressValidationError

from conftest import user_address


def test_user_address_round_trip():
    addr = user_address(7)
    text = str(addr)
    assert text.startswith("z1q")
    assert Address.parse(text) == addr
    assert not addr.is_embedded


def test_embedded_contract_addresses():
    assert str(PILLAR_CONTRACT).startswith("z1qxemdeddedxpyllar")
    assert str(PLASMA_CONTRACT).startswith("z1qxemdeddedxplasma")
    assert str(ACCELERATOR_CONTRACT).startswith("z1qxemdeddedxaccelerat0r")
    for contract in (PILLAR_CONTRACT, PLASMA_CONTRACT, ACCELERATOR_CONTRACT):
        assert contract.is_embedded
        assert Address.parse(str(contract)) == contract


def test_token_standards():
    assert str(ZNN_TOKEN_STANDARD).startswith("zts1znn")
    assert str(QSR_TOKEN_STANDARD).startswith("zts1qsr")
    assert TokenStandard.parse(str(QSR_TOKEN_STANDARD)) == QSR_TOKEN_STANDARD


def test_parse_rejects_bad_checksum():
    text = str(user_address(3))
    last = "q" if text[-1] != "q" else "p"
    with pytest.raises(AddressValidationError):
        Address.parse(text[:-1] + last)


def test_parse_rejects_token_standard_as_address():
    with pytest.raises(AddressValidationError):
        Address.parse(str(ZNN_TOKEN_STANDARD))


def test_parse_rejects_garbage():
    with pytest.raises(AddressValidationError):
        Address.parse("not-an-address")


def test_parse_user_address_rejects_contracts():
    with pytest.raises(AddressValidationError):
        parse_user_address(str(PILLAR_CONTRACT))
    assert parse_user_address(str(user_address(4))) == user_address(4)


def test_known_user_address_parses():
    addr = Address.parse("z1qpg8v63m534t2vv09yzndv9gu9t6gyrvq3n6qv")
    assert not addr.is_embedded
    assert str(addr) == "z1qpg8v63m534t2vv09yzndv9gu9t6gyrvq3n6qv"
