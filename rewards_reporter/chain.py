import datetime

from eth_utils import encode_hex, to_checksum_address
from web3 import Web3

from rewards_reporter.env import rpc_url
from rewards_reporter.errors import ConfigurationError
from rewards_reporter.models import EthereumAddress, HexString

# only the part of the MerkleDistributor ABI we read from
MERKLE_DISTRIBUTOR_ABI = [
    {
        "inputs": [],
        "name": "merkleRoot",
        "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "token",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def get_web3() -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url()))


def to_timestamp(date: datetime.datetime) -> int:
    """Dates without a timezone are taken to be UTC"""
    if date.tzinfo is None:
        date = date.replace(tzinfo=datetime.timezone.utc)
    return int(date.timestamp())


def block_by_date(w3: Web3, date: datetime.datetime) -> int:
    """
    Binary search for the first block mined at or after `date`.
    :raises ConfigurationError: if the chain has not reached `date` yet
    """
    target = to_timestamp(date)
    latest = w3.eth.get_block("latest")
    if latest["timestamp"] < target:
        raise ConfigurationError(
            f"{date.isoformat()} is after the latest block {latest['number']}"
        )

    lo, hi = 0, latest["number"]
    while lo < hi:
        mid = (lo + hi) // 2
        if w3.eth.get_block(mid)["timestamp"] < target:
            lo = mid + 1
        else:
            hi = mid
    return lo


def get_merkle_root(w3: Web3, contract_address: EthereumAddress) -> HexString:
    """Read the root a deployed MerkleDistributor was initialized with"""
    contract = w3.eth.contract(
        address=to_checksum_address(contract_address), abi=MERKLE_DISTRIBUTOR_ABI
    )
    return encode_hex(contract.functions.merkleRoot().call())
