"""Utility functions and deployment constants for MocaId authorization."""

from typing import Union

from eth_utils import is_hex, keccak, to_bytes

from ..errors import SchemaError

# Polygon Mumbai testnet
MUMBAI_CHAIN_ID = 80001

# PermissionMw middleware (EIP-712 verifying contract) on Mumbai
PERMISSION_MW_MUMBAI = "0x78a4C35cCcC4ecA7D987fDC38811C73ED36c2321"

# MocaId registrar on Mumbai
MOCA_ID_MUMBAI = "0x42fa95CdC898b40d8E9DDAfb4Db90DF560a8d62e"

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

ZERO_NODE = b"\x00" * 32


def namehash(name: str) -> bytes:
    """Compute the hierarchical node hash of a dotted name.

    namehash("") is 32 zero bytes; each label is folded in from the right:
    node = keccak(node || keccak(label)).

    Args:
        name: Dotted name (e.g. "moca" or "alice.moca")

    Returns:
        32-byte node hash
    """
    node = ZERO_NODE
    if name:
        for label in reversed(name.split(".")):
            if not label:
                raise ValueError(f"Invalid name: {name!r} has an empty label")
            node = keccak(node + keccak(text=label))
    return node


def to_bytes32(value: Union[str, bytes, bytearray]) -> bytes:
    """Coerce a bytes32 value given as bytes or 0x-hex string.

    Raises:
        SchemaError: If the value is not exactly 32 bytes
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str) and is_hex(value):
        raw = to_bytes(hexstr=value)
    else:
        raise SchemaError(f"Invalid bytes32 value: {value!r}")
    if len(raw) != 32:
        raise SchemaError(f"Invalid bytes32 value: expected 32 bytes, got {len(raw)}")
    return raw


# Default parent node for the hierarchical ("moca") namespace
MOCA_NODE = "0x" + namehash("moca").hex()
