"""MocaId Registrar with permission signing.

Registers a name on the MocaId contract, authorizing the call with an
EIP-712 signature checked by the PermissionMw middleware. For each call the
registrar:
1. Reads the recipient's current nonce from PermissionMw
2. Builds and signs the register authorization (EIP-712)
3. Encodes (v, r, s, deadline) into the permission payload
4. Sends MocaId.register(...) and waits for the receipt

The nonce can advance between step 1 and the transaction being mined (another
registration for the same recipient lands first). The registrar does not
serialize requests per recipient; a reverted transaction surfaces as
StaleAuthorizationError and is not retried.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TypedDict

from eth_account.signers.local import LocalAccount
from eth_utils import is_address, to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from ..authorization import (
    MOCA_ID_MUMBAI,
    MUMBAI_CHAIN_ID,
    PERMISSION_MW_MUMBAI,
    REGISTER_SCHEMA,
    REGISTER_WITH_PARENT_SCHEMA,
    DigestSigner,
    DomainDescriptor,
    LocalAccountSigner,
    MessageSchema,
    SignedAuthorization,
    VConvention,
    create_authorization_request,
    check_deadline,
    deadline_from_now,
    sign_authorization,
)
from ..authorization.utils import to_bytes32
from ..errors import NonceFetchError, StaleAuthorizationError, SubmissionError
from .contracts import MOCA_ID_ABI, MOCA_ID_SUBNAME_ABI, PERMISSION_MW_ABI

logger = logging.getLogger(__name__)

FALLBACK_GAS_LIMIT = 500_000
GAS_ESTIMATE_BUFFER = 1.2  # 20% safety margin on gas estimates


@dataclass(frozen=True)
class ContractAddresses:
    """Deployed contract addresses."""

    permission_mw: str = PERMISSION_MW_MUMBAI
    """PermissionMw middleware (EIP-712 verifying contract)."""

    moca_id: str = MOCA_ID_MUMBAI
    """MocaId registrar."""

    def __post_init__(self):
        for label in ("permission_mw", "moca_id"):
            value = getattr(self, label)
            if not is_address(value):
                raise ValueError(f"Invalid {label} address: {value}")
            object.__setattr__(self, label, to_checksum_address(value))


class RegistrarConfig(TypedDict, total=False):
    """Registrar configuration."""

    domain: DomainDescriptor
    """EIP-712 domain. Default: PermissionMw v1 on the configured chain"""

    schema: MessageSchema
    """Message schema. Default: extended schema if moca_node is set, else base"""

    moca_node: str
    """bytes32 parent node; selects the hierarchical register variant"""

    contract_addresses: ContractAddresses
    """Contract addresses. Default: Mumbai deployment"""

    chain_id: int
    """Chain ID used for the default domain. Default: 80001 (Mumbai)"""

    v_convention: VConvention
    """Recovery id convention of PermissionMw. Default: 27/28"""

    deadline_seconds: int
    """Authorization lifetime in seconds. Default: 3600 (1 hour)"""

    timeout: float
    """Seconds to wait for the transaction receipt. Default: 120"""


@dataclass
class ResolvedRegistrarConfig:
    """Registrar configuration with all defaults applied."""

    domain: DomainDescriptor
    schema: MessageSchema
    moca_node: Optional[str]
    contract_addresses: ContractAddresses = field(default_factory=ContractAddresses)
    v_convention: VConvention = VConvention.ETHEREUM
    deadline_seconds: int = 3600
    timeout: float = 120.0


def resolve_config(config: Optional[RegistrarConfig] = None) -> ResolvedRegistrarConfig:
    """Apply defaults to a registrar configuration."""
    config = config or {}
    addresses = config.get("contract_addresses", ContractAddresses())

    moca_node = config.get("moca_node")
    if moca_node is not None:
        moca_node = "0x" + to_bytes32(moca_node).hex()

    domain = config.get("domain") or DomainDescriptor(
        name="PermissionMw",
        version="1",
        chain_id=config.get("chain_id", MUMBAI_CHAIN_ID),
        verifying_contract=addresses.permission_mw,
    )
    default_schema = REGISTER_WITH_PARENT_SCHEMA if moca_node else REGISTER_SCHEMA

    return ResolvedRegistrarConfig(
        domain=domain,
        schema=config.get("schema", default_schema),
        moca_node=moca_node,
        contract_addresses=addresses,
        v_convention=config.get("v_convention", VConvention.ETHEREUM),
        deadline_seconds=config.get("deadline_seconds", 3600),
        timeout=config.get("timeout", 120.0),
    )


class NonceOracle:
    """Reads per-recipient nonces from PermissionMw."""

    def __init__(self, w3: Web3, permission_mw_address: str):
        self._contract = w3.eth.contract(
            address=to_checksum_address(permission_mw_address), abi=PERMISSION_MW_ABI
        )

    def get_nonce(self, address: str) -> int:
        """Current nonce of `address`.

        Raises:
            NonceFetchError: If the RPC call fails
        """
        if not is_address(address):
            raise ValueError(f"Invalid address: {address}")
        try:
            nonce = self._contract.functions.getNonce(to_checksum_address(address)).call()
        except (Web3Exception, OSError) as exc:
            raise NonceFetchError(f"Failed to fetch nonce for {address}: {exc}") from exc
        logger.info("PermissionMw nonce for %s: %d", address, nonce)
        return nonce


class MocaIdRegistrar:
    """Registers MocaId names with a signed PermissionMw authorization.

    Example:
        ```python
        w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 30}))
        account = Account.from_key(private_key)
        registrar = MocaIdRegistrar(w3, account)

        tx_hash = registrar.register(
            "alice", "0x2E0446079705B6Bacc4730fB3EDA5DA68aE5Fe4D", deadline=2000000000
        )
        ```
    """

    def __init__(
        self,
        w3: Web3,
        account: LocalAccount,
        config: Optional[RegistrarConfig] = None,
        signer: Optional[DigestSigner] = None,
    ):
        """Initialize the registrar.

        Args:
            w3: Web3 instance connected to the target chain
            account: Account that sends (and pays for) the register transaction
            config: Optional registrar configuration
            signer: Authorization signer. Default: signs with `account`
        """
        self._w3 = w3
        self._account = account
        self._signer = signer or LocalAccountSigner(account)
        self._config = resolve_config(config)

        addresses = self._config.contract_addresses
        self._nonce_oracle = NonceOracle(w3, addresses.permission_mw)
        abi = MOCA_ID_SUBNAME_ABI if self._config.moca_node else MOCA_ID_ABI
        self._moca_id = w3.eth.contract(address=addresses.moca_id, abi=abi)

    def get_config(self) -> ResolvedRegistrarConfig:
        """Get the registrar configuration."""
        return self._config

    def get_nonce(self, recipient: str) -> int:
        return self._nonce_oracle.get_nonce(recipient)

    def authorize(
        self,
        name: str,
        recipient: str,
        deadline: Optional[int] = None,
        nonce: Optional[int] = None,
        now: Optional[int] = None,
    ) -> SignedAuthorization:
        """Sign a register authorization without submitting it.

        Args:
            name: Name to register
            recipient: Address the name is registered to
            deadline: Absolute deadline. Default: now + deadline_seconds
            nonce: Recipient nonce. Default: read from PermissionMw
            now: Current time for the deadline check

        Returns:
            SignedAuthorization with the permission payload
        """
        if nonce is None:
            nonce = self.get_nonce(recipient)
        if deadline is None:
            deadline = deadline_from_now(self._config.deadline_seconds, now)

        request = create_authorization_request(
            name=name,
            recipient=recipient,
            nonce=nonce,
            deadline=deadline,
            parent_node=self._config.moca_node,
        )
        return sign_authorization(
            self._signer,
            self._config.domain,
            request,
            schema=self._config.schema,
            convention=self._config.v_convention,
            now=now,
        )

    def register(
        self,
        name: str,
        recipient: str,
        deadline: Optional[int] = None,
        extra_data: bytes = b"",
        signed: Optional[SignedAuthorization] = None,
    ) -> str:
        """Register `name` to `recipient` and wait for the receipt.

        Args:
            name: Name to register
            recipient: Address the name is registered to
            deadline: Absolute deadline. Default: now + deadline_seconds
            extra_data: Opaque extra bytes forwarded to the contract
            signed: Authorization from authorize(). Default: fetch the nonce
                and sign a new one

        Returns:
            Transaction hash as 0x-hex

        Raises:
            ValueError: If `signed` was made for another name or recipient
            ExpiredDeadlineError: If the deadline has already passed
            NonceFetchError: If the nonce could not be read
            StaleAuthorizationError: If the contract rejected the authorization
            SubmissionError: If the transaction could not be sent or confirmed
        """
        if signed is None:
            signed = self.authorize(name, recipient, deadline=deadline)
        else:
            check_deadline(signed.request.deadline)
            signed_for = (
                signed.request.name,
                signed.request.recipient,
                signed.request.parent_node,
            )
            if signed_for != (name, to_checksum_address(recipient), self._config.moca_node):
                raise ValueError(
                    f"Authorization is for {signed.request.name!r} to "
                    f"{signed.request.recipient}, not {name!r} to {recipient}"
                )
        request = signed.request
        if self._config.moca_node:
            call = self._moca_id.functions.register(
                request.name,
                to_bytes32(self._config.moca_node),
                request.recipient,
                signed.payload,
                extra_data,
            )
        else:
            call = self._moca_id.functions.register(
                request.name, request.recipient, signed.payload, extra_data
            )

        sender = self._account.address
        try:
            tx_params = {
                "from": sender,
                "nonce": self._w3.eth.get_transaction_count(sender, "pending"),
                "chainId": self._w3.eth.chain_id,
            }
        except (Web3Exception, OSError) as exc:
            raise SubmissionError(f"Failed to prepare transaction: {exc}") from exc

        try:
            gas_estimate = call.estimate_gas({"from": sender})
            tx_params["gas"] = int(gas_estimate * GAS_ESTIMATE_BUFFER)
        except ContractLogicError as exc:
            raise StaleAuthorizationError(
                f"Registration of {request.name!r} rejected: {exc}"
            ) from exc
        except (Web3Exception, OSError):
            logger.warning(
                "Gas estimation failed, using fallback gas limit %d", FALLBACK_GAS_LIMIT
            )
            tx_params["gas"] = FALLBACK_GAS_LIMIT

        try:
            tx = call.build_transaction(tx_params)
            signed_tx = self._account.sign_transaction(tx)
            tx_hash = self._w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except (Web3Exception, OSError) as exc:
            raise SubmissionError(f"Failed to send register transaction: {exc}") from exc

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(
            "Submitted register(%s) for %s: %s", request.name, request.recipient, tx_hash_hex
        )

        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._config.timeout
            )
        except TimeExhausted as exc:
            raise SubmissionError(
                f"Transaction {tx_hash_hex} not mined within {self._config.timeout}s",
                tx_hash=tx_hash_hex,
            ) from exc
        except (Web3Exception, OSError) as exc:
            raise SubmissionError(
                f"Failed to fetch receipt for {tx_hash_hex}: {exc}",
                tx_hash=tx_hash_hex,
            ) from exc

        if receipt["status"] != 1:
            raise StaleAuthorizationError(
                f"Transaction {tx_hash_hex} reverted (stale nonce or expired deadline)",
                tx_hash=tx_hash_hex,
            )

        logger.info("Registered %s in block %s", request.name, receipt["blockNumber"])
        return tx_hash_hex
