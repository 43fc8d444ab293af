"""EIP-712 Canonical Hashing for MocaId authorizations.

digest = keccak256(0x19 0x01 || domainSeparator || hashStruct(message))

where hashStruct(s) = keccak256(typeHash(s) || encodeData(s)) and every
field is encoded into exactly one 32-byte word:
- string: keccak256 of its UTF-8 bytes
- address: left-padded to 32 bytes
- bytes32: as is
- uint256: big-endian, left-padded to 32 bytes
"""

import logging
from typing import Any, Dict, Mapping

from eth_abi import encode
from eth_utils import is_address, keccak, to_checksum_address

from ..errors import SchemaError
from .types import (
    EIP712_DOMAIN_SCHEMA,
    UINT256_MAX,
    DomainDescriptor,
    FieldSpec,
    MessageSchema,
)
from .utils import to_bytes32

logger = logging.getLogger(__name__)

EIP712_PREFIX = b"\x19\x01"


def encode_type(schema: MessageSchema) -> str:
    """Build the canonical type string, e.g. "register(string name,address to)".

    No spaces other than the single one between type and field name; fields
    appear in declaration order.
    """
    members = ",".join(f"{f.type} {f.name}" for f in schema.fields)
    return f"{schema.name}({members})"


def type_hash(schema: MessageSchema) -> bytes:
    """keccak256 of the canonical type string."""
    return keccak(text=encode_type(schema))


def encode_field(spec: FieldSpec, value: Any) -> bytes:
    """Encode one field value as a 32-byte word according to its declared type.

    Raises:
        SchemaError: If the value does not fit the declared type
    """
    if spec.type == "string":
        if not isinstance(value, str):
            raise SchemaError(f"Field {spec.name!r} expects a string, got {value!r}")
        return keccak(text=value)

    if spec.type == "address":
        if not isinstance(value, str) or not is_address(value):
            raise SchemaError(f"Invalid address for field {spec.name!r}: {value!r}")
        return encode(["address"], [to_checksum_address(value)])

    if spec.type == "bytes32":
        return to_bytes32(value)

    if spec.type == "uint256":
        # bool is an int subclass; refuse it rather than encoding 0/1
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaError(f"Field {spec.name!r} expects an integer, got {value!r}")
        if not 0 <= value <= UINT256_MAX:
            raise SchemaError(f"Field {spec.name!r} out of uint256 range: {value}")
        return encode(["uint256"], [value])

    # FieldSpec rejects unknown types at construction
    raise SchemaError(f"Unsupported field type: {spec.type!r}")


def check_values(schema: MessageSchema, values: Mapping[str, Any]) -> None:
    """Raise SchemaError unless `values` covers exactly the schema fields."""
    missing = [n for n in schema.field_names if n not in values]
    if missing:
        raise SchemaError(
            f"Missing values for {schema.name!r}: {', '.join(missing)}"
        )
    unexpected = sorted(set(values) - set(schema.field_names))
    if unexpected:
        raise SchemaError(
            f"Unexpected values for {schema.name!r}: {', '.join(unexpected)}"
        )


def hash_struct(schema: MessageSchema, values: Mapping[str, Any]) -> bytes:
    """Compute the struct hash of a message.

    Args:
        schema: Message schema
        values: Mapping of field name to value; must cover exactly the schema fields

    Returns:
        32-byte struct hash

    Raises:
        SchemaError: On missing or unexpected fields, or badly typed values
    """
    check_values(schema, values)
    encoded = b"".join(encode_field(f, values[f.name]) for f in schema.fields)
    return keccak(type_hash(schema) + encoded)


def domain_separator(domain: DomainDescriptor) -> bytes:
    """Compute the domain separator for a signing context."""
    return hash_struct(EIP712_DOMAIN_SCHEMA, domain.as_dict())


def digest(
    domain: DomainDescriptor,
    schema: MessageSchema,
    values: Mapping[str, Any],
) -> bytes:
    """Compute the final 32-byte EIP-712 signing digest.

    Args:
        domain: Signing context
        schema: Message schema
        values: Message field values

    Returns:
        32-byte digest to sign
    """
    separator = domain_separator(domain)
    struct_hash = hash_struct(schema, values)
    result = keccak(EIP712_PREFIX + separator + struct_hash)
    logger.debug("EIP-712 digest for %s: 0x%s", encode_type(schema), result.hex())
    return result


def to_typed_data(
    domain: DomainDescriptor,
    schema: MessageSchema,
    values: Mapping[str, Any],
) -> Dict[str, Any]:
    """Render a message as EIP-712 JSON typed data.

    The output is accepted by eth_account.messages.encode_typed_data
    (full_message=...) and by wallets implementing eth_signTypedData_v4.
    bytes32 values are rendered as 0x-hex strings.

    Raises:
        SchemaError: On missing or unexpected fields
    """
    check_values(schema, values)
    message = {}
    for f in schema.fields:
        value = values[f.name]
        if f.type == "bytes32":
            value = "0x" + to_bytes32(value).hex()
        message[f.name] = value

    return {
        "types": {
            **EIP712_DOMAIN_SCHEMA.as_types(),
            **schema.as_types(),
        },
        "primaryType": schema.name,
        "domain": domain.as_dict(),
        "message": message,
    }
