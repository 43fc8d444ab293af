"""Digest Signing for MocaId authorizations.

Provides signing that works with various wallet types:
- eth_account LocalAccount (in-process key, signs raw digests)
- Any TypedDataSigner (browser or server wallets that only sign typed data)
"""

from typing import Any, Dict, Protocol, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import is_hex, to_bytes

from ..errors import PrivateKeyError, SignatureRangeError
from .codec import split_signature
from .types import SECP256K1_N


def validate_private_key(private_key: Union[str, bytes, int]) -> bytes:
    """Check a secp256k1 private key and return it as 32 bytes.

    Args:
        private_key: Hex string (with or without 0x), 32 raw bytes or an integer

    Returns:
        32-byte private key

    Raises:
        PrivateKeyError: If the key is malformed, zero or >= the curve order
    """
    # Error messages never include the key itself
    if isinstance(private_key, bool):
        raise PrivateKeyError("Private key must be hex, bytes or int")
    if isinstance(private_key, int):
        if not 0 <= private_key < 2**256:
            raise PrivateKeyError("Private key out of range")
        raw = private_key.to_bytes(32, "big")
    elif isinstance(private_key, str):
        hexstr = private_key[2:] if private_key.startswith(("0x", "0X")) else private_key
        if len(hexstr) != 64 or not is_hex(hexstr):
            raise PrivateKeyError("Private key must be 32 bytes of hex")
        raw = to_bytes(hexstr=hexstr)
    elif isinstance(private_key, (bytes, bytearray)):
        raw = bytes(private_key)
        if len(raw) != 32:
            raise PrivateKeyError(f"Private key must be 32 bytes, got {len(raw)}")
    else:
        raise PrivateKeyError("Private key must be hex, bytes or int")

    if not 1 <= int.from_bytes(raw, "big") < SECP256K1_N:
        raise PrivateKeyError("Private key outside the valid range [1, n-1]")
    return raw


class DigestSigner(Protocol):
    """Anything that can produce a recoverable signature over a 32-byte digest."""

    @property
    def address(self) -> str:
        """Checksummed address of the signing key."""
        ...

    def sign_digest(self, digest: bytes) -> bytes:
        """Sign a 32-byte digest.

        Returns:
            65-byte r || s || v signature (v as 27/28)
        """
        ...


class LocalAccountSigner:
    """DigestSigner backed by an eth_account LocalAccount.

    Example:
        ```python
        signer = LocalAccountSigner.from_key(os.environ["PRIVATE_KEY"])
        raw = signer.sign_digest(digest)
        ```
    """

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_key(cls, private_key: Union[str, bytes, int]) -> "LocalAccountSigner":
        """Create a signer from a private key, rejecting zero/out-of-range keys."""
        return cls(Account.from_key(validate_private_key(private_key)))

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def account(self) -> LocalAccount:
        return self._account

    def sign_digest(self, digest: bytes) -> bytes:
        if len(digest) != 32:
            raise ValueError(f"Digest must be 32 bytes, got {len(digest)}")
        signed = self._account.unsafe_sign_hash(digest)
        return bytes(signed.signature)

    def __repr__(self) -> str:
        return f"LocalAccountSigner(address={self.address})"


def sign_digest(digest: bytes, private_key: Union[str, bytes, int]) -> bytes:
    """Sign a 32-byte digest with a private key (deterministic, RFC 6979).

    Args:
        digest: 32-byte EIP-712 digest
        private_key: Private key; held only for the duration of this call

    Returns:
        65-byte r || s || v signature

    Raises:
        PrivateKeyError: If the key is invalid
    """
    return LocalAccountSigner.from_key(private_key).sign_digest(digest)


class TypedDataSigner(Protocol):
    """Protocol for signers that can sign EIP-712 typed data."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_typed_data(self, params: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            params: Dict with domain, types, primaryType, and message

        Returns:
            Signature as hex string
        """
        ...


def recover_signer(digest: bytes, signature: Union[str, bytes]) -> str:
    """Recover the checksummed address that produced `signature` over `digest`.

    Raises:
        SignatureRangeError: If the signature is malformed
    """
    sig = split_signature(signature)
    try:
        key_sig = keys.Signature(
            vrs=(sig.v - 27, int.from_bytes(sig.r, "big"), int.from_bytes(sig.s, "big"))
        )
        public_key = key_sig.recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError) as exc:
        raise SignatureRangeError(f"Unrecoverable signature: {exc}") from exc
    return public_key.to_checksum_address()
