from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Optional

import eth_utils as eth
from pydantic import BaseModel, field_validator, model_validator

from rewards_reporter.errors import ConfigurationError
from rewards_reporter.models.types import EthereumAddress


class BaseConfig(BaseModel):
    """
    Settings shared by the user supplied config and the resolved config
    :param `name`: label for the run, used as the report directory name
    :param `price`: price of the reward asset in units of the tracked balance currency
    :param `reward_rate`: fraction of the average balance paid out for the window
    :param `attestation_threshold`: distinct issuers needed before an account is eligible
    :param `attestation_events`: ordered files of AttestationCompleted & AccountWalletAddressSet events
    :param `transfer_events`: ordered files of Transfer events
    :param `verify_against_contract`: MerkleDistributor whose root should match ours
    """

    name: str
    price: Decimal
    reward_rate: Decimal = Decimal(1)
    attestation_threshold: int = 3
    attestation_events: list[str]
    transfer_events: list[str]
    verify_against_contract: Optional[EthereumAddress] = None
    output_dir: str = "reports"

    @field_validator("price")
    @classmethod
    def validate_price(cls, price: Decimal) -> Decimal:
        if not price.is_finite() or price <= 0:
            raise ConfigurationError(f"Price must be a positive number, passed {price}")
        return price

    @field_validator("reward_rate")
    @classmethod
    def validate_reward_rate(cls, rate: Decimal) -> Decimal:
        if not rate.is_finite() or rate < 0:
            raise ConfigurationError(f"Reward rate cannot be negative, passed {rate}")
        return rate

    @field_validator("attestation_threshold")
    @classmethod
    def validate_threshold(cls, threshold: int) -> int:
        if threshold < 1:
            raise ConfigurationError("Attestation threshold must be at least 1")
        return threshold

    @field_validator("attestation_events", "transfer_events")
    @classmethod
    def require_event_files(cls, files: list[str]) -> list[str]:
        if len(files) == 0:
            raise ConfigurationError("Must pass at least one event file per stream")
        return files

    @field_validator("verify_against_contract")
    @classmethod
    def checksum_contract(cls, address: Optional[str]) -> Optional[str]:
        if address is None:
            return None
        return eth.to_checksum_address(address)

    @property
    def run_dir(self) -> str:
        return f"{self.output_dir}/{self.name}"


class InputConfig(BaseConfig):
    """
    Config as written by the user. Each end of the window is given either
    as a block number or as a date that gets resolved against the chain.
    """

    from_block: Optional[int] = None
    to_block: Optional[int] = None
    from_date: Optional[datetime.datetime] = None
    to_date: Optional[datetime.datetime] = None

    @model_validator(mode="after")
    def validate_window(self) -> InputConfig:
        if (self.from_block is None) == (self.from_date is None):
            raise ConfigurationError("Must submit exactly one of from_block or from_date")
        if (self.to_block is None) == (self.to_date is None):
            raise ConfigurationError("Must submit exactly one of to_block or to_date")
        if self.from_block is not None and self.to_block is not None:
            ensure_window(self.from_block, self.to_block)
        if self.from_date is not None and self.to_date is not None:
            if self.to_date < self.from_date:
                raise ConfigurationError("from_date cannot be after to_date")
        return self


class Config(BaseConfig):
    """The config with both ends of the window resolved to block numbers"""

    from_block: int
    to_block: int

    @model_validator(mode="after")
    def validate_window(self) -> Config:
        ensure_window(self.from_block, self.to_block)
        return self


def ensure_window(from_block: int, to_block: int) -> None:
    if from_block < 0:
        raise ConfigurationError(f"Block numbers cannot be negative, passed {from_block}")
    if to_block < from_block:
        raise ConfigurationError(
            "block to start tracking balances cannot be larger than block to finish tracking balances"
        )
