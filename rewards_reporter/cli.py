from pathlib import Path
from typing import Optional, Union

import fire
from eth_utils import is_address, is_hex, remove_0x_prefix, to_checksum_address

from rewards_reporter.chain import get_merkle_root, get_web3
from rewards_reporter.merkle import verify_claim
from rewards_reporter.models import EthereumAddress, HexString, MerkleDistribution
from rewards_reporter.run import report_verification, run
from rewards_reporter.verify import verify_root

# fire parses 0x-prefixed arguments as python int literals, dropping leading zeros
HexArg = Union[int, str]


def parse_root(root: HexArg) -> HexString:
    """Accept a 32 byte merkle root, whether fire handed it over as a string or an int"""
    if isinstance(root, int) and not isinstance(root, bool):
        if root < 0 or root >= 2**256:
            raise fire.core.FireError(f"Merkle root does not fit in 32 bytes: {root:#x}")
        return f"0x{root:064x}"
    if not isinstance(root, str) or not is_hex(root) or len(remove_0x_prefix(root)) != 64:
        raise fire.core.FireError(f"Expected a 32 byte hex merkle root, passed {root}")
    return root


def parse_address(address: HexArg) -> EthereumAddress:
    """Accept an address, whether fire handed it over as a string or an int"""
    if isinstance(address, int) and not isinstance(address, bool) and address >= 0:
        address = f"0x{address:040x}"
    if not isinstance(address, str) or not is_address(address):
        raise fire.core.FireError(f"Expected an ethereum address, passed {address}")
    return to_checksum_address(address)


def load_distribution(tree_path: str) -> MerkleDistribution:
    return MerkleDistribution.model_validate_json(Path(tree_path).read_text())


def run_command(config: str) -> None:
    """Compute rewards and the merkle tree from a config file"""
    run(config)


def verify_command(
    tree: str,
    contract: Optional[HexArg] = None,
    root: Optional[HexArg] = None,
    strict: bool = False,
) -> bool:
    """
    Compare the root in a written merkleTree.json against a deployed
    MerkleDistributor (`--contract`) or a root passed directly (`--root`).
    With `--strict` a mismatch raises instead of returning False.
    """
    if (contract is None) == (root is None):
        raise fire.core.FireError("Pass exactly one of --contract or --root")

    distribution = load_distribution(tree)
    if contract is not None:
        address = parse_address(contract)
        external_root = get_merkle_root(get_web3(), address)
        source = f"contract {address}"
    else:
        external_root = parse_root(root)
        source = "command line"

    result = verify_root(distribution.merkleRoot, external_root, source=source)
    report_verification(result)
    if strict:
        result.raise_for_mismatch()
    return result.matches


def prove_command(tree: str, address: HexArg) -> bool:
    """Check that the claim for `address` in a merkleTree.json proves against its root"""
    distribution = load_distribution(tree)
    account = parse_address(address)
    claim = distribution.claims.get(account)
    if claim is None:
        print(f"{account} is not included in the distribution")
        return False

    valid = verify_claim(account, claim, distribution.merkleRoot)
    print(
        f"{'✅' if valid else '❌'} claim #{claim.index} of {int(claim.amount, 16)} "
        f"for {account} {'is' if valid else 'is not'} valid"
    )
    return valid


def main() -> None:
    fire.Fire(
        {
            "run": run_command,
            "verify": verify_command,
            "prove": prove_command,
        }
    )


if __name__ == "__main__":
    main()
