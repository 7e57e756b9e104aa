from decimal import Decimal, getcontext
from pathlib import Path

import pytest
from eth_utils import to_checksum_address

from rewards_reporter.config import create_conf
from rewards_reporter.events import parse_event
from rewards_reporter.models import (
    AccountWalletAddressSet,
    AttestationCompleted,
    Config,
    RewardsCalculationState,
    Transfer,
    ZERO_ADDRESS,
)

getcontext().prec = 42

STUBS = Path(__file__).parent / "stubs"

# accounts A, B, C, wallet W and issuers I1, I2, I3
_addresses = [
    to_checksum_address(a)
    for a in [
        "0x1111111111111111111111111111111111111111",
        "0x2222222222222222222222222222222222222222",
        "0x3333333333333333333333333333333333333333",
        "0x4444444444444444444444444444444444444444",
        "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
        "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
        "0xcccccccccccccccccccccccccccccccccccccccc",
    ]
]
A, B, C, W, I1, I2, I3 = _addresses


@pytest.fixture()
def ADDRESSES():
    return _addresses


@pytest.fixture
def config(tmp_path) -> Config:
    """The stub config, writing its reports into a temporary directory"""
    conf = create_conf(str(STUBS / "config.json"))
    return conf.model_copy(update={"output_dir": str(tmp_path / "reports")})


@pytest.fixture
def state() -> RewardsCalculationState:
    return RewardsCalculationState(
        from_block=10, to_block=20, attestation_threshold=2, price=Decimal(1)
    )


def attestation(account: str, issuer: str, block: int) -> AttestationCompleted:
    return parse_event(
        {
            "event": "AttestationCompleted",
            "blockNumber": block,
            "returnValues": {"account": account, "issuer": issuer},
        }
    )


def wallet_set(account: str, wallet: str, block: int) -> AccountWalletAddressSet:
    return parse_event(
        {
            "event": "AccountWalletAddressSet",
            "blockNumber": block,
            "returnValues": {"account": account, "walletAddress": wallet},
        }
    )


def transfer(sender: str, to: str, value: int, block: int) -> Transfer:
    return parse_event(
        {
            "event": "Transfer",
            "blockNumber": block,
            "returnValues": {"from": sender, "to": to, "value": str(value)},
        }
    )


def mint(to: str, value: int, block: int) -> Transfer:
    return transfer(ZERO_ADDRESS, to, value, block)
