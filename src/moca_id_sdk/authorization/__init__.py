"""MocaId Registration Authorization Module.

This module produces the off-chain EIP-712 authorization that the
PermissionMw contract verifies before MocaId registers a name.

Key components:
- Canonical EIP-712 hashing (domain separator, struct hash, digest)
- Digest signing with a local key or any typed-data wallet
- Signature splitting and v normalization
- Encoding of (v, r, s, deadline) into the 128-byte payload

Example usage:
    ```python
    from moca_id_sdk.authorization import (
        DomainDescriptor,
        LocalAccountSigner,
        create_authorization_request,
        sign_authorization,
        PERMISSION_MW_MUMBAI,
        MUMBAI_CHAIN_ID,
    )

    domain = DomainDescriptor(
        name="PermissionMw",
        version="1",
        chain_id=MUMBAI_CHAIN_ID,
        verifying_contract=PERMISSION_MW_MUMBAI,
    )

    request = create_authorization_request(
        name="alice",
        recipient="0x...",
        nonce=0,  # PermissionMw.getNonce(recipient)
        deadline=2000000000,
    )

    signed = sign_authorization(
        LocalAccountSigner.from_key("0x..."),
        domain,
        request,
    )
    signed.payload  # 128 bytes, passed to MocaId.register(...)
    ```
"""

from .types import (
    DomainDescriptor,
    FieldSpec,
    MessageSchema,
    AuthorizationRequest,
    Signature,
    SignedAuthorization,
    EIP712_DOMAIN_SCHEMA,
    REGISTER_SCHEMA,
    REGISTER_WITH_PARENT_SCHEMA,
    SECP256K1_N,
)
from .hashing import (
    encode_type,
    type_hash,
    hash_struct,
    domain_separator,
    digest,
    to_typed_data,
)
from .signing import (
    DigestSigner,
    LocalAccountSigner,
    TypedDataSigner,
    validate_private_key,
    sign_digest,
    recover_signer,
)
from .codec import VConvention, split_signature, join_signature, normalize_v
from .payload import encode_authorization, encode_signature, decode_authorization
from .policy import check_deadline, deadline_from_now, is_expired
from .flow import (
    create_authorization_request,
    authorization_values,
    schema_for,
    sign_authorization,
    sign_authorization_with_signer,
    verify_authorization_signature,
)
from .utils import (
    MUMBAI_CHAIN_ID,
    PERMISSION_MW_MUMBAI,
    MOCA_ID_MUMBAI,
    MOCA_NODE,
    ZERO_ADDRESS,
    namehash,
)

__all__ = [
    # Types
    "DomainDescriptor",
    "FieldSpec",
    "MessageSchema",
    "AuthorizationRequest",
    "Signature",
    "SignedAuthorization",
    "EIP712_DOMAIN_SCHEMA",
    "REGISTER_SCHEMA",
    "REGISTER_WITH_PARENT_SCHEMA",
    "SECP256K1_N",
    # Hashing
    "encode_type",
    "type_hash",
    "hash_struct",
    "domain_separator",
    "digest",
    "to_typed_data",
    # Signing
    "DigestSigner",
    "LocalAccountSigner",
    "TypedDataSigner",
    "validate_private_key",
    "sign_digest",
    "recover_signer",
    # Codec and payload
    "VConvention",
    "split_signature",
    "join_signature",
    "normalize_v",
    "encode_authorization",
    "encode_signature",
    "decode_authorization",
    # Deadline policy
    "check_deadline",
    "deadline_from_now",
    "is_expired",
    # Flow
    "create_authorization_request",
    "authorization_values",
    "schema_for",
    "sign_authorization",
    "sign_authorization_with_signer",
    "verify_authorization_signature",
    # Utils
    "MUMBAI_CHAIN_ID",
    "PERMISSION_MW_MUMBAI",
    "MOCA_ID_MUMBAI",
    "MOCA_NODE",
    "ZERO_ADDRESS",
    "namehash",
]
