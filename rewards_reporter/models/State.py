from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, model_validator

from rewards_reporter.errors import InvalidTransferError
from rewards_reporter.models.Config import Config, ensure_window
from rewards_reporter.models.Event import (
    AccountWalletAddressSet,
    AttestationCompleted,
    Transfer,
)
from rewards_reporter.models.types import (
    BalancesByBlock,
    BlockNumber,
    EthereumAddress,
    ZERO_ADDRESS,
)


class RewardsCalculationState(BaseModel):
    """
    Everything we learn while replaying events. There is exactly one of these per run:
    it is only changed through the `apply_*` methods, in event order, and is dumped
    as an audit artifact once the replay is done.

    :param `wallet_associations`: identifier -> wallet that receives its credit, last write wins
    :param `attestation_issuers`: account -> distinct issuers that completed an attestation for it
    :param `balances`: live balance of every account seen in a transfer
    :param `balances_by_block`: account -> {block: balance}, only populated while tracking
    :param `from_block`: first block of the (inclusive) tracking window
    :param `to_block`: last block of the (inclusive) tracking window
    :param `started_tracking`: a transfer at or after `from_block` has been seen
    :param `finished_tracking`: a transfer after `to_block` has been seen, replay is over
    """

    wallet_associations: dict[EthereumAddress, EthereumAddress] = {}
    attestation_issuers: dict[EthereumAddress, list[EthereumAddress]] = {}
    balances: dict[EthereumAddress, int] = {}
    balances_by_block: BalancesByBlock = {}
    from_block: BlockNumber
    to_block: BlockNumber
    started_tracking: bool = False
    finished_tracking: bool = False
    attestation_threshold: int = 3
    price: Decimal

    @model_validator(mode="after")
    def validate_window(self) -> RewardsCalculationState:
        ensure_window(self.from_block, self.to_block)
        return self

    @staticmethod
    def from_config(conf: Config) -> RewardsCalculationState:
        return RewardsCalculationState(
            from_block=conf.from_block,
            to_block=conf.to_block,
            attestation_threshold=conf.attestation_threshold,
            price=conf.price,
        )

    def resolve(self, address: EthereumAddress) -> EthereumAddress:
        """The address that receives credit for `address` right now"""
        return self.wallet_associations.get(address, address)

    # attestations & wallets

    def apply_wallet_address_set(self, event: AccountWalletAddressSet) -> None:
        values = event.returnValues
        self.wallet_associations[values.account] = values.walletAddress

    def apply_attestation_completed(self, event: AttestationCompleted) -> None:
        """
        Credit the completion to whichever address the account resolves to at this point
        of the replay. Associations set later do not move completions already credited.
        """
        account = self.resolve(event.returnValues.account)
        issuers = self.attestation_issuers.setdefault(account, [])
        if event.returnValues.issuer not in issuers:
            issuers.append(event.returnValues.issuer)

    def completions(self, address: EthereumAddress) -> int:
        return len(self.attestation_issuers.get(address, []))

    def is_eligible(self, address: EthereumAddress) -> bool:
        return self.completions(address) >= self.attestation_threshold

    def eligible_accounts(self) -> set[EthereumAddress]:
        return {a for a in self.attestation_issuers if self.is_eligible(a)}

    # transfers & block tracking

    def apply_transfer(self, event: Transfer) -> None:
        """
        Move `value` from sender to receiver. The zero address mints and burns,
        so it is never debited or credited.
        """
        values = event.returnValues
        sender = self.resolve(values.sender)
        receiver = self.resolve(values.to)

        if sender != ZERO_ADDRESS:
            balance = self.balances.get(sender, 0)
            if balance < values.value:
                raise InvalidTransferError(
                    f"Transfer of {values.value} from {sender} at block {event.blockNumber} "
                    f"exceeds its balance of {balance}"
                )
            self.balances[sender] = balance - values.value

        if receiver != ZERO_ADDRESS:
            self.balances[receiver] = self.balances.get(receiver, 0) + values.value

        if self.started_tracking:
            for address in (sender, receiver):
                if address != ZERO_ADDRESS:
                    self.snapshot(address, event.blockNumber)

    def start_tracking(self) -> None:
        """Record every balance accrued before the window as held from its first block"""
        self.started_tracking = True
        for address in self.balances:
            self.snapshot(address, self.from_block)

    def stop_tracking(self) -> None:
        if not self.started_tracking:
            self.start_tracking()
        self.finished_tracking = True

    def snapshot(self, address: EthereumAddress, block: BlockNumber) -> None:
        """Several transfers in one block leave only the balance after the last of them"""
        self.balances_by_block.setdefault(address, {})[block] = self.balances.get(
            address, 0
        )
