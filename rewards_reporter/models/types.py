from typing import Literal

# type aliases for clarity
EthereumAddress = str
BigNumber = str
HexString = str
BlockNumber = int

# balances by block, per account: {address: {block: balance}}
BalancesByBlock = dict[EthereumAddress, dict[BlockNumber, int]]

EventName = Literal["AttestationCompleted", "AccountWalletAddressSet", "Transfer"]

ZERO_ADDRESS: EthereumAddress = "0x0000000000000000000000000000000000000000"
