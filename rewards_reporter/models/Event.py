"""
Typed versions of the web3 `EventLog` objects we replay.

Each recognized event name gets its own model carrying only the fields we use.
`ChainEvent` is the tagged union over all of them, discriminated on the `event` key,
so anything that is not one of these shapes is rejected when it is decoded.
"""

from typing import Annotated, Literal, Optional, Union

import eth_utils as eth
from pydantic import BaseModel, ConfigDict, Field, field_validator

from rewards_reporter.models.types import EthereumAddress


class AttestationCompletedValues(BaseModel):
    """
    :param `identifier`: the obfuscated identifier attested to, unused but kept for the audit trail
    :param `account`: the account credited with the completion
    :param `issuer`: the attestation issuer that completed it
    """

    identifier: Optional[str] = None
    account: EthereumAddress
    issuer: EthereumAddress

    @field_validator("account", "issuer")
    @classmethod
    def checksum_address(cls, address: str) -> str:
        return eth.to_checksum_address(address)


class AccountWalletAddressSetValues(BaseModel):
    """
    :param `account`: the identifier address
    :param `walletAddress`: where credit for `account` is redirected from now on
    """

    account: EthereumAddress
    walletAddress: EthereumAddress

    @field_validator("account", "walletAddress")
    @classmethod
    def checksum_address(cls, address: str) -> str:
        return eth.to_checksum_address(address)


class TransferValues(BaseModel):
    """ERC20 Transfer. `from` is a python keyword so the field is `sender`, aliased on read and write"""

    model_config = ConfigDict(populate_by_name=True)

    sender: EthereumAddress = Field(alias="from")
    to: EthereumAddress
    value: int = Field(ge=0)

    @field_validator("sender", "to")
    @classmethod
    def checksum_address(cls, address: str) -> str:
        return eth.to_checksum_address(address)


class BaseEvent(BaseModel):
    blockNumber: int = Field(ge=0)
    transactionHash: Optional[str] = None
    logIndex: Optional[int] = None


class AttestationCompleted(BaseEvent):
    event: Literal["AttestationCompleted"]
    returnValues: AttestationCompletedValues


class AccountWalletAddressSet(BaseEvent):
    event: Literal["AccountWalletAddressSet"]
    returnValues: AccountWalletAddressSetValues


class Transfer(BaseEvent):
    event: Literal["Transfer"]
    returnValues: TransferValues


ChainEvent = Annotated[
    Union[AttestationCompleted, AccountWalletAddressSet, Transfer],
    Field(discriminator="event"),
]
