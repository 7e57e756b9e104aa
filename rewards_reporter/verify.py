from typing import Union

from eth_utils import encode_hex

from rewards_reporter.merkle import as_bytes
from rewards_reporter.models import VerificationResult


def verify_root(
    computed_root: Union[bytes, str],
    external_root: Union[bytes, str],
    source: str = "external",
) -> VerificationResult:
    """
    Compare our merkle root to one obtained elsewhere, byte for byte.
    Hex strings are compared regardless of case or the 0x prefix. Never raises on a mismatch.
    """
    computed = as_bytes(computed_root)
    external = as_bytes(external_root)
    return VerificationResult(
        matches=computed == external,
        computed_root=encode_hex(computed),
        external_root=encode_hex(external),
        source=source,
    )
