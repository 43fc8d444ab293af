"""Authorization Types for MocaId registration.

Value types shared by the hasher, the signer and the payload encoder.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from eth_utils import is_address, to_checksum_address

from ..errors import SchemaError, SignatureRangeError


# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

UINT256_MAX = 2**256 - 1

SUPPORTED_FIELD_TYPES = frozenset({"string", "address", "bytes32", "uint256"})


@dataclass(frozen=True)
class DomainDescriptor:
    """EIP-712 signing context of one verifying contract."""

    name: str
    """Protocol name, e.g. "PermissionMw"."""

    version: str
    """Protocol version, e.g. "1"."""

    chain_id: int
    """Chain ID (80001 for Mumbai)."""

    verifying_contract: str
    """Address of the contract that verifies the signature."""

    def __post_init__(self):
        for label in ("name", "version"):
            if not isinstance(getattr(self, label), str):
                raise ValueError(f"Invalid {label}: {getattr(self, label)!r}")
        if (
            isinstance(self.chain_id, bool)
            or not isinstance(self.chain_id, int)
            or not 0 <= self.chain_id <= UINT256_MAX
        ):
            raise ValueError(f"Invalid chain_id: {self.chain_id}")
        if not is_address(self.verifying_contract):
            raise ValueError(f"Invalid verifying_contract: {self.verifying_contract}")
        object.__setattr__(
            self, "verifying_contract", to_checksum_address(self.verifying_contract)
        )

    def as_dict(self) -> Dict[str, object]:
        """Domain in the key layout used by EIP-712 JSON and eth_account."""
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


@dataclass(frozen=True)
class FieldSpec:
    """One named, typed field of a message schema."""

    name: str
    type: str

    def __post_init__(self):
        if not self.name or not self.name.isidentifier():
            raise SchemaError(f"Invalid field name: {self.name!r}")
        if self.type not in SUPPORTED_FIELD_TYPES:
            raise SchemaError(
                f"Unsupported field type {self.type!r} for field {self.name!r}. "
                f"Supported: {', '.join(sorted(SUPPORTED_FIELD_TYPES))}"
            )


@dataclass(frozen=True)
class MessageSchema:
    """Named, ordered list of fields. Field order is part of the type."""

    name: str
    fields: Tuple[FieldSpec, ...]

    def __post_init__(self):
        if not self.name or not self.name.isidentifier():
            raise SchemaError(f"Invalid schema name: {self.name!r}")
        object.__setattr__(self, "fields", tuple(self.fields))
        if not self.fields:
            raise SchemaError(f"Schema {self.name!r} has no fields")
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaError(
                f"Schema {self.name!r} has duplicate fields: {', '.join(duplicates)}"
            )

    @classmethod
    def from_types(cls, name: str, entries: List[Dict[str, str]]) -> "MessageSchema":
        """Build a schema from EIP-712 JSON entries ({"name": ..., "type": ...})."""
        try:
            fields = tuple(FieldSpec(e["name"], e["type"]) for e in entries)
        except KeyError as exc:
            raise SchemaError(f"Schema entry missing key {exc}") from exc
        return cls(name, fields)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def as_types(self) -> Dict[str, List[Dict[str, str]]]:
        """Schema in the EIP-712 JSON "types" layout."""
        return {self.name: [{"name": f.name, "type": f.type} for f in self.fields]}


EIP712_DOMAIN_SCHEMA = MessageSchema(
    "EIP712Domain",
    (
        FieldSpec("name", "string"),
        FieldSpec("version", "string"),
        FieldSpec("chainId", "uint256"),
        FieldSpec("verifyingContract", "address"),
    ),
)

# register(string name,address to,uint256 nonce,uint256 deadline)
REGISTER_SCHEMA = MessageSchema(
    "register",
    (
        FieldSpec("name", "string"),
        FieldSpec("to", "address"),
        FieldSpec("nonce", "uint256"),
        FieldSpec("deadline", "uint256"),
    ),
)

# register(string name,bytes32 parentNode,address to,uint256 nonce,uint256 deadline)
REGISTER_WITH_PARENT_SCHEMA = MessageSchema(
    "register",
    (
        FieldSpec("name", "string"),
        FieldSpec("parentNode", "bytes32"),
        FieldSpec("to", "address"),
        FieldSpec("nonce", "uint256"),
        FieldSpec("deadline", "uint256"),
    ),
)


@dataclass(frozen=True)
class AuthorizationRequest:
    """A single registration to be authorized."""

    name: str
    """Name being registered."""

    recipient: str
    """Address the name is registered to (the `to` field)."""

    nonce: int
    """Current on-chain nonce of the recipient."""

    deadline: int
    """Unix timestamp (seconds) after which the authorization is rejected."""

    parent_node: Optional[str] = None
    """bytes32 hex of the parent namespace node (hierarchical variant only)."""


@dataclass(frozen=True)
class Signature:
    """Recoverable secp256k1 signature. v is stored as 27 or 28."""

    v: int
    r: bytes
    s: bytes

    def __post_init__(self):
        if self.v not in (27, 28):
            raise SignatureRangeError(f"Invalid recovery id v={self.v}")
        for label, value in (("r", self.r), ("s", self.s)):
            if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
                raise SignatureRangeError(f"Signature {label} must be 32 bytes")
            if not 1 <= int.from_bytes(value, "big") < SECP256K1_N:
                raise SignatureRangeError(
                    f"Signature {label} outside the valid range [1, n-1]"
                )
        object.__setattr__(self, "r", bytes(self.r))
        object.__setattr__(self, "s", bytes(self.s))

    def to_bytes(self) -> bytes:
        """65-byte r || s || v encoding."""
        return self.r + self.s + bytes([self.v])

    def hex(self) -> str:
        return "0x" + self.to_bytes().hex()


@dataclass(frozen=True)
class SignedAuthorization:
    """Authorization request with its digest, signature and encoded payload."""

    request: AuthorizationRequest
    digest: bytes
    signature: Signature
    payload: bytes = field(repr=False)
    """128-byte (uint8 v, bytes32 r, bytes32 s, uint256 deadline) encoding."""

    @property
    def payload_hex(self) -> str:
        return "0x" + self.payload.hex()
