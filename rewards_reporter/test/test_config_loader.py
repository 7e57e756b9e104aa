import datetime
import json
from decimal import Decimal
from pathlib import Path

import pytest

from rewards_reporter import config as config_module
from rewards_reporter.config import create_conf, load_conf, save_conf
from rewards_reporter.errors import ConfigurationError
from rewards_reporter.test.conftest import STUBS


def test_create_conf_from_stub():
    conf = create_conf(str(STUBS / "config.json"))

    assert conf.name == "2021-03"
    assert conf.from_block == 100
    assert conf.to_block == 199
    assert conf.price == Decimal(2)
    assert conf.reward_rate == Decimal("0.5")
    assert conf.attestation_threshold == 2


def test_event_paths_resolved_against_config_dir():
    conf = create_conf(str(STUBS / "config.json"))

    assert conf.attestation_events == [str(STUBS / "events/attestations.json")]
    assert conf.transfer_events == [
        str(STUBS / "events/transfers-1.json"),
        str(STUBS / "events/transfers-2.json"),
    ]
    assert all(Path(p).exists() for p in conf.transfer_events)


def write_input(tmp_path, **overrides) -> str:
    dct = {
        "name": "dates",
        "price": "1",
        "attestation_events": ["/abs/attestations.json"],
        "transfer_events": ["transfers.json"],
        **overrides,
    }
    path = tmp_path / "input.json"
    path.write_text(json.dumps(dct))
    return str(path)


def test_absolute_paths_kept(tmp_path):
    conf = create_conf(write_input(tmp_path, from_block=1, to_block=2))

    assert conf.attestation_events == ["/abs/attestations.json"]
    assert conf.transfer_events == [str(tmp_path / "transfers.json")]


def test_dates_resolved_to_blocks(tmp_path, monkeypatch):
    requested = []

    def mock_block_by_date(w3, date):
        requested.append(date)
        return {1: 1000, 31: 2000}[date.day]

    monkeypatch.setattr(config_module, "block_by_date", mock_block_by_date)
    monkeypatch.setattr(config_module, "get_web3", lambda: "w3")

    conf = create_conf(
        write_input(tmp_path, from_date="2021-03-01T00:00:00", to_date="2021-03-31T00:00:00")
    )

    assert (conf.from_block, conf.to_block) == (1000, 2000)
    assert requested == [datetime.datetime(2021, 3, 1), datetime.datetime(2021, 3, 31)]


def test_no_node_needed_for_block_numbers(tmp_path, monkeypatch):
    def fail():
        raise AssertionError("should not connect")

    monkeypatch.setattr(config_module, "get_web3", fail)
    conf = create_conf(write_input(tmp_path, from_block=5, to_block=6))
    assert conf.from_block == 5


def test_mixed_block_and_date(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "block_by_date", lambda w3, date: 50)
    monkeypatch.setattr(config_module, "get_web3", lambda: "w3")

    conf = create_conf(write_input(tmp_path, from_block=10, to_date="2021-03-31T00:00:00"))
    assert (conf.from_block, conf.to_block) == (10, 50)


def test_resolved_dates_must_be_in_order(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "block_by_date", lambda w3, date: 5)
    monkeypatch.setattr(config_module, "get_web3", lambda: "w3")

    with pytest.raises(ConfigurationError):
        create_conf(write_input(tmp_path, from_block=10, to_date="2021-03-31T00:00:00"))


def test_invalid_window_rejected(tmp_path):
    with pytest.raises(ConfigurationError, match="cannot be larger"):
        create_conf(write_input(tmp_path, from_block=10, to_block=9))


def test_save_and_load_conf(config):
    path = save_conf(config)

    assert Path(path).exists()
    assert load_conf(config.run_dir).model_dump() == config.model_dump()
