import json

import pytest

pytest.importorskip("nacl")

from nomgen import wallet


def test_generate_and_reload_operator_key(tmp_path):
    key = wallet.generate_operator_key()
    path = wallet.save_operator_key(key, tmp_path)
    assert path.name == str(key.address)

    loaded = wallet.load_operator_key(path)
    assert loaded == key
    assert loaded.address == key.address
    assert not key.address.is_embedded


def test_load_rejects_mismatched_halves(tmp_path):
    first = wallet.generate_operator_key()
    second = wallet.generate_operator_key()
    path = tmp_path / "broken"
    path.write_text(f"{first.public}\n{second.private}\n")
    with pytest.raises(ValueError):
        wallet.load_operator_key(path)


def test_load_rejects_truncated_file(tmp_path):
    path = tmp_path / "short"
    path.write_text("onlyone\n")
    with pytest.raises(ValueError):
        wallet.load_operator_key(path)


def test_producer_config(tmp_path):
    key = wallet.generate_operator_key()
    cfg = wallet.producer_config(key, tmp_path / "k")
    assert cfg == {"Address": str(key.address), "Index": 0, "KeyFilePath": str(tmp_path / "k")}


def test_load_rejects_json_key_file(tmp_path):
    key = wallet.generate_operator_key()
    path = tmp_path / "key.json"
    path.write_text(json.dumps({"public": key.public, "private": key.private}))
    with pytest.raises(ValueError):
        wallet.load_operator_key(path)
