from decimal import Decimal
from typing import Optional

import eth_utils as eth
from pydantic import BaseModel, Field, field_validator

from rewards_reporter.models.types import BigNumber, EthereumAddress, HexString


class RewardEntry(BaseModel):
    """
    Final reward for a single eligible account
    :param `address`: checksummed on read
    :param `reward`: reward in the smallest unit of the reward asset, always positive
    """

    address: EthereumAddress
    reward: int = Field(gt=0)

    @field_validator("address")
    @classmethod
    def checksum_address(cls, address: str) -> str:
        return eth.to_checksum_address(address)


class RewardSummary(BaseModel):
    """
    Headline numbers for a run, written alongside the distribution for readability
    :param `eligible_accounts`: accounts that met the attestation threshold, with or without a balance
    :param `recipients`: accounts that actually receive a reward
    :param `total_rewards`: sum of all rewards in the distribution
    """

    name: str
    from_block: int
    to_block: int
    price: Decimal
    reward_rate: Decimal
    attestation_threshold: int
    eligible_accounts: int
    recipients: int
    total_rewards: BigNumber
    merkle_root: Optional[HexString] = None
