from pydantic import BaseModel

from rewards_reporter.errors import VerificationMismatchError
from rewards_reporter.models.types import EthereumAddress, HexString


class MerkleClaim(BaseModel):
    """
    Everything a recipient needs to claim from the MerkleDistributor
    :param `index`: position of the leaf in the tree, unique within a distribution.
    Used by the MerkleDistributor to efficiently track on-chain claims.
    :param `amount`: reward as 0x-prefixed hex
    :param `leaf`: keccak256(abi.encodePacked(index, account, amount))
    :param `proof`: sibling hashes from the leaf up to the root
    """

    index: int
    amount: HexString
    leaf: HexString
    proof: list[HexString]


class MerkleDistribution(BaseModel):
    """
    The full tree data consumed by the claim contract. Mirrors the output of the
    MerkleDistributor's `parseBalanceMap`, plus the leaf hash and an encoding `version`.
    """

    merkleRoot: HexString
    tokenTotal: HexString
    version: int
    claims: dict[EthereumAddress, MerkleClaim]


class VerificationResult(BaseModel):
    """
    Outcome of comparing our root with one read from somewhere else, usually a deployed contract.
    A mismatch is an expected outcome, so it is reported here rather than raised.
    """

    matches: bool
    computed_root: HexString
    external_root: HexString
    source: str = "external"

    def raise_for_mismatch(self) -> None:
        if not self.matches:
            raise VerificationMismatchError(
                f"Merkle root {self.external_root} from {self.source} does not equal "
                f"generated merkle root {self.computed_root}"
            )
