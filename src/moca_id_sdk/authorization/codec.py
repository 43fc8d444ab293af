"""Signature Codec.

Splits 65-byte r || s || v signatures and normalizes the recovery id to the
convention the verifying contract expects.
"""

from enum import Enum
from typing import Tuple, Union

from eth_utils import is_hex, to_bytes

from ..errors import SignatureRangeError
from .types import Signature


class VConvention(str, Enum):
    """Recovery id convention of a verifying contract."""

    ETHEREUM = "ethereum"
    """v in {27, 28} (ecrecover, ethers.splitSignature)."""

    PARITY = "parity"
    """v in {0, 1} (raw y-parity)."""


def _raw_signature(raw: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(raw, str):
        if not is_hex(raw):
            raise SignatureRangeError(f"Invalid signature hex: {raw[:10]}...")
        return to_bytes(hexstr=raw)
    return bytes(raw)


def split_signature(raw: Union[str, bytes, bytearray]) -> Signature:
    """Split a 65-byte r || s || v signature.

    v may be 0/1 or 27/28; it is stored as 27/28.

    Args:
        raw: Signature as bytes or 0x-hex string

    Returns:
        Validated Signature

    Raises:
        SignatureRangeError: On a bad length, r/s outside [1, n-1] or unknown v
    """
    data = _raw_signature(raw)
    if len(data) != 65:
        raise SignatureRangeError(f"Signature must be 65 bytes, got {len(data)}")

    v = data[64]
    if v in (0, 1):
        v += 27
    return Signature(v=v, r=data[:32], s=data[32:64])


def join_signature(signature: Signature) -> bytes:
    """Inverse of split_signature (v as 27/28)."""
    return signature.to_bytes()


def normalize_v(v: int, convention: VConvention = VConvention.ETHEREUM) -> int:
    """Convert a recovery id to the given convention.

    Args:
        v: Recovery id as 0/1 or 27/28
        convention: Target convention

    Returns:
        v as 27/28 (ETHEREUM) or 0/1 (PARITY)
    """
    if v in (27, 28):
        parity = v - 27
    elif v in (0, 1):
        parity = v
    else:
        raise SignatureRangeError(f"Invalid recovery id v={v}")

    if VConvention(convention) is VConvention.PARITY:
        return parity
    return parity + 27


def vrs(
    signature: Signature, convention: VConvention = VConvention.ETHEREUM
) -> Tuple[int, bytes, bytes]:
    """(v, r, s) with v normalized to the given convention."""
    return normalize_v(signature.v, convention), signature.r, signature.s
