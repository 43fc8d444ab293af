"""Authorization Payload Encoding.

Wire layout expected by the verifying contract, abi.encode of
(uint8 v, bytes32 r, bytes32 s, uint256 deadline): four 32-byte words in
that order, 128 bytes in total.
"""

from typing import Tuple

from eth_abi import decode, encode

from ..errors import SignatureRangeError
from .codec import VConvention, vrs
from .types import SECP256K1_N, UINT256_MAX, Signature

AUTHORIZATION_ABI_TYPES = ["uint8", "bytes32", "bytes32", "uint256"]
AUTHORIZATION_PAYLOAD_SIZE = 128


def encode_authorization(v: int, r: bytes, s: bytes, deadline: int) -> bytes:
    """Encode (v, r, s, deadline) into the 128-byte authorization payload.

    Args:
        v: Recovery id, already in the verifier's convention
        r: 32-byte signature r
        s: 32-byte signature s
        deadline: Unix timestamp the signature was made for

    Returns:
        128-byte payload

    Raises:
        SignatureRangeError: If v, r or s are out of range
        ValueError: If deadline is not a uint256
    """
    if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255:
        raise SignatureRangeError(f"Invalid recovery id v={v}")
    for label, value in (("r", r), ("s", s)):
        if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
            raise SignatureRangeError(f"Signature {label} must be 32 bytes")
        if not 1 <= int.from_bytes(value, "big") < SECP256K1_N:
            raise SignatureRangeError(
                f"Signature {label} outside the valid range [1, n-1]"
            )
    if isinstance(deadline, bool) or not isinstance(deadline, int):
        raise ValueError(f"Invalid deadline: {deadline!r}")
    if not 0 <= deadline <= UINT256_MAX:
        raise ValueError(f"Deadline out of uint256 range: {deadline}")

    return encode(AUTHORIZATION_ABI_TYPES, [v, bytes(r), bytes(s), deadline])


def encode_signature(
    signature: Signature,
    deadline: int,
    convention: VConvention = VConvention.ETHEREUM,
) -> bytes:
    """Encode a split signature plus deadline, normalizing v first."""
    v, r, s = vrs(signature, convention)
    return encode_authorization(v, r, s, deadline)


def decode_authorization(payload: bytes) -> Tuple[int, bytes, bytes, int]:
    """Decode a 128-byte authorization payload back into (v, r, s, deadline)."""
    if len(payload) != AUTHORIZATION_PAYLOAD_SIZE:
        raise ValueError(
            f"Authorization payload must be {AUTHORIZATION_PAYLOAD_SIZE} bytes, "
            f"got {len(payload)}"
        )
    v, r, s, deadline = decode(AUTHORIZATION_ABI_TYPES, bytes(payload))
    return v, r, s, deadline
