"""MocaId SDK.

Off-chain EIP-712 authorization for MocaId name registration, plus a thin
web3.py registrar that submits it.
"""

from .errors import (
    MocaIdError,
    SchemaError,
    PrivateKeyError,
    SignatureRangeError,
    ExpiredDeadlineError,
    ExternalCallError,
    NonceFetchError,
    SubmissionError,
    StaleAuthorizationError,
)
from .authorization import *  # noqa: F401,F403
from .authorization import __all__ as _authorization_all
from .registrar import (
    MocaIdRegistrar,
    NonceOracle,
    RegistrarConfig,
    ResolvedRegistrarConfig,
    ContractAddresses,
)
from .config import load_config, build_registrar_config

__version__ = "0.1.0"

__all__ = [
    # Errors
    "MocaIdError",
    "SchemaError",
    "PrivateKeyError",
    "SignatureRangeError",
    "ExpiredDeadlineError",
    "ExternalCallError",
    "NonceFetchError",
    "SubmissionError",
    "StaleAuthorizationError",
    # Registrar
    "MocaIdRegistrar",
    "NonceOracle",
    "RegistrarConfig",
    "ResolvedRegistrarConfig",
    "ContractAddresses",
    # Config
    "load_config",
    "build_registrar_config",
    *_authorization_all,
]
