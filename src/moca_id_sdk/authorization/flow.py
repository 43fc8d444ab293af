"""Registration Authorization Signing for MocaId.

Runs the signing pipeline: build message -> hash -> sign -> split -> encode.
Every check happens before anything is returned, so a failure never yields a
partial signature or payload.
"""

import logging
from typing import Any, Dict, Optional, Union

from eth_utils import is_address, to_checksum_address

from ..errors import MocaIdError, SchemaError, SignatureRangeError
from .codec import VConvention, split_signature
from .hashing import digest, to_typed_data
from .payload import encode_signature
from .policy import check_deadline
from .signing import DigestSigner, TypedDataSigner, recover_signer
from .types import (
    REGISTER_SCHEMA,
    REGISTER_WITH_PARENT_SCHEMA,
    UINT256_MAX,
    AuthorizationRequest,
    DomainDescriptor,
    MessageSchema,
    SignedAuthorization,
)
from .utils import to_bytes32

logger = logging.getLogger(__name__)


def create_authorization_request(
    name: str,
    recipient: str,
    nonce: int,
    deadline: int,
    parent_node: Optional[Union[str, bytes]] = None,
) -> AuthorizationRequest:
    """Create an authorization request.

    Args:
        name: Name to register
        recipient: Address the name is registered to
        nonce: Recipient's current on-chain nonce
        deadline: Unix timestamp after which the authorization expires
        parent_node: bytes32 parent namespace node (hierarchical variant)

    Returns:
        AuthorizationRequest

    Raises:
        ValueError: If the recipient address, nonce or deadline are invalid
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"Invalid name: {name!r}")
    if not is_address(recipient):
        raise ValueError(f"Invalid recipient address: {recipient}")
    for label, value in (("nonce", nonce), ("deadline", deadline)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Invalid {label}: {value!r}")
        if not 0 <= value <= UINT256_MAX:
            raise ValueError(f"Invalid {label}: {value} is not a uint256")

    node = None
    if parent_node is not None:
        node = "0x" + to_bytes32(parent_node).hex()

    return AuthorizationRequest(
        name=name,
        recipient=to_checksum_address(recipient),
        nonce=nonce,
        deadline=deadline,
        parent_node=node,
    )


def schema_for(request: AuthorizationRequest) -> MessageSchema:
    """Default schema: extended when the request carries a parent node."""
    if request.parent_node is not None:
        return REGISTER_WITH_PARENT_SCHEMA
    return REGISTER_SCHEMA


def authorization_values(
    request: AuthorizationRequest, schema: MessageSchema
) -> Dict[str, Any]:
    """Map a request onto the message fields of `schema`.

    Raises:
        SchemaError: If the schema and the request disagree on parentNode
    """
    wants_parent = "parentNode" in schema.field_names
    if wants_parent and request.parent_node is None:
        raise SchemaError(f"Schema {schema.name!r} requires a parent node")
    if not wants_parent and request.parent_node is not None:
        raise SchemaError(f"Schema {schema.name!r} has no parentNode field")

    values: Dict[str, Any] = {
        "name": request.name,
        "to": request.recipient,
        "nonce": request.nonce,
        "deadline": request.deadline,
    }
    if wants_parent:
        values["parentNode"] = request.parent_node
    return values


def sign_authorization(
    signer: DigestSigner,
    domain: DomainDescriptor,
    request: AuthorizationRequest,
    schema: Optional[MessageSchema] = None,
    convention: VConvention = VConvention.ETHEREUM,
    now: Optional[int] = None,
) -> SignedAuthorization:
    """Sign a registration authorization with any DigestSigner.

    Args:
        signer: Signing capability (e.g. LocalAccountSigner)
        domain: EIP-712 domain of the verifying contract
        request: Authorization to sign
        schema: Message schema (default chosen by schema_for)
        convention: v convention of the verifying contract
        now: Current time for the deadline check (defaults to the system clock)

    Returns:
        SignedAuthorization with the 128-byte payload

    Raises:
        ExpiredDeadlineError: If the deadline has already passed
        SchemaError: If the request does not fit the schema
        SignatureRangeError: If the signer returned a corrupt signature
    """
    check_deadline(request.deadline, now)
    schema = schema or schema_for(request)
    values = authorization_values(request, schema)

    message_digest = digest(domain, schema, values)
    signature = split_signature(signer.sign_digest(message_digest))
    payload = encode_signature(signature, request.deadline, convention)

    logger.debug(
        "Signed %s authorization for %s (nonce %d, deadline %d)",
        request.name,
        request.recipient,
        request.nonce,
        request.deadline,
    )
    return SignedAuthorization(
        request=request,
        digest=message_digest,
        signature=signature,
        payload=payload,
    )


async def sign_authorization_with_signer(
    signer: TypedDataSigner,
    domain: DomainDescriptor,
    request: AuthorizationRequest,
    schema: Optional[MessageSchema] = None,
    convention: VConvention = VConvention.ETHEREUM,
    now: Optional[int] = None,
) -> SignedAuthorization:
    """Sign a registration authorization with a typed-data wallet.

    Use this with wallets that only expose eth_signTypedData_v4
    (MetaMask, Privy, ...) or any signer implementing TypedDataSigner.

    Args:
        signer: Signer that implements the TypedDataSigner protocol
        domain: EIP-712 domain of the verifying contract
        request: Authorization to sign
        schema: Message schema (default chosen by schema_for)
        convention: v convention of the verifying contract
        now: Current time for the deadline check

    Returns:
        SignedAuthorization with the 128-byte payload

    Raises:
        ExpiredDeadlineError: If the deadline has already passed
        SignatureRangeError: If the wallet's signature does not recover to
            its own address over the local digest
    """
    check_deadline(request.deadline, now)
    schema = schema or schema_for(request)
    values = authorization_values(request, schema)

    message_digest = digest(domain, schema, values)
    typed_data = to_typed_data(domain, schema, values)
    # Wallet RPCs take uint256 values as decimal strings
    typed_data["message"]["nonce"] = str(request.nonce)
    typed_data["message"]["deadline"] = str(request.deadline)

    raw = await signer.sign_typed_data(
        {
            "domain": typed_data["domain"],
            "types": schema.as_types(),
            "primaryType": typed_data["primaryType"],
            "message": typed_data["message"],
        }
    )
    signature = split_signature(raw)
    # The wallet hashes on its own; its signature must cover the local digest
    recovered = recover_signer(message_digest, signature.to_bytes())
    expected = await signer.get_address()
    if recovered.lower() != expected.lower():
        raise SignatureRangeError(
            f"Wallet signature recovers to {recovered}, expected {expected}"
        )
    payload = encode_signature(signature, request.deadline, convention)

    return SignedAuthorization(
        request=request,
        digest=message_digest,
        signature=signature,
        payload=payload,
    )


def verify_authorization_signature(
    signed: SignedAuthorization,
    domain: DomainDescriptor,
    expected_signer: str,
    schema: Optional[MessageSchema] = None,
) -> bool:
    """Verify an authorization signature locally.

    Recomputes the digest from the request instead of trusting
    `signed.digest`.

    Args:
        signed: Signed authorization
        domain: EIP-712 domain of the verifying contract
        expected_signer: Address expected to have signed
        schema: Message schema (default chosen by schema_for)

    Returns:
        True if the signature is valid and from expected_signer
    """
    schema = schema or schema_for(signed.request)
    try:
        values = authorization_values(signed.request, schema)
        recovered = recover_signer(
            digest(domain, schema, values), signed.signature.to_bytes()
        )
    except MocaIdError:
        return False
    return recovered.lower() == expected_signer.lower()
