"""
Merkle tree for the MerkleDistributor claim contract.

The encoding is a wire format shared with the contract, so it is pinned and versioned:

version 1
- leaf: keccak256(abi.encodePacked(uint256 index, address account, uint256 amount))
- leaves stay in the order of the reward list, index = position in that list
- node: keccak256 of both children concatenated, smaller hash first
- a layer with an odd number of nodes pairs its last node with itself
- proof: sibling hashes from the leaf layer up to (not including) the root
"""

from typing import Union

from eth_abi.packed import encode_packed
from eth_utils import decode_hex, encode_hex, keccak

from rewards_reporter.errors import EmptyDistributionError
from rewards_reporter.models import (
    EthereumAddress,
    MerkleClaim,
    MerkleDistribution,
    RewardEntry,
)

MERKLE_TREE_VERSION = 1
LEAF_TYPES = ["uint256", "address", "uint256"]

HashLike = Union[bytes, str]


def encode_leaf(index: int, account: EthereumAddress, amount: int) -> bytes:
    return encode_packed(LEAF_TYPES, [index, account, amount])


def leaf_hash(index: int, account: EthereumAddress, amount: int) -> bytes:
    return keccak(encode_leaf(index, account, amount))


def combined_hash(a: bytes, b: bytes) -> bytes:
    return keccak(b"".join(sorted([a, b])))


def as_bytes(value: HashLike) -> bytes:
    return decode_hex(value) if isinstance(value, str) else bytes(value)


class MerkleTree:
    def __init__(self, leaves: list[bytes]):
        if len(leaves) == 0:
            raise EmptyDistributionError("Cannot build a merkle tree without leaves")
        self.leaves = list(leaves)
        self.layers = MerkleTree.get_layers(self.leaves)

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    def get_proof(self, index: int) -> list[bytes]:
        if index < 0 or index >= len(self.leaves):
            raise IndexError(f"No leaf at index {index}")
        proof = []
        for layer in self.layers[:-1]:
            pair_idx = index + 1 if index % 2 == 0 else index - 1
            # odd layers pair the last node with itself
            proof.append(layer[pair_idx] if pair_idx < len(layer) else layer[index])
            index //= 2
        return proof

    @staticmethod
    def get_layers(elements: list[bytes]) -> list[list[bytes]]:
        layers = [elements]
        while len(layers[-1]) > 1:
            layers.append(MerkleTree.get_next_layer(layers[-1]))
        return layers

    @staticmethod
    def get_next_layer(elements: list[bytes]) -> list[bytes]:
        if len(elements) % 2 == 1:
            elements = elements + [elements[-1]]
        return [combined_hash(a, b) for a, b in zip(elements[::2], elements[1::2])]


def process_proof(leaf: HashLike, proof: list[HashLike]) -> bytes:
    """Fold a proof into the root it implies, the same way the contract does"""
    computed = as_bytes(leaf)
    for sibling in proof:
        computed = combined_hash(computed, as_bytes(sibling))
    return computed


def verify_proof(leaf: HashLike, proof: list[HashLike], root: HashLike) -> bool:
    return process_proof(leaf, proof) == as_bytes(root)


def verify_claim(
    account: EthereumAddress, claim: MerkleClaim, root: HashLike
) -> bool:
    """Rebuild the leaf from the claim data itself, so a tampered amount or index fails"""
    leaf = leaf_hash(claim.index, account, int(claim.amount, 16))
    return verify_proof(leaf, list(claim.proof), root)


def parse_balance_map(rewards: list[RewardEntry]) -> MerkleDistribution:
    """
    Build the distribution consumed by the claim contract from the ordered reward list.
    Identical input always gives an identical root and identical proofs.
    """
    elements = [(index, r.address, r.reward) for index, r in enumerate(rewards)]
    leaves = [leaf_hash(*el) for el in elements]
    tree = MerkleTree(leaves)

    return MerkleDistribution(
        merkleRoot=encode_hex(tree.root),
        tokenTotal=hex(sum(r.reward for r in rewards)),
        version=MERKLE_TREE_VERSION,
        claims={
            account: MerkleClaim(
                index=index,
                amount=hex(amount),
                leaf=encode_hex(leaves[index]),
                proof=[encode_hex(p) for p in tree.get_proof(index)],
            )
            for index, account, amount in elements
        },
    )
