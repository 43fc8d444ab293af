"""Registrar modules for the MocaId SDK."""

from .registrar import (
    MocaIdRegistrar,
    NonceOracle,
    RegistrarConfig,
    ResolvedRegistrarConfig,
    ContractAddresses,
    resolve_config,
)
from .contracts import PERMISSION_MW_ABI, MOCA_ID_ABI, MOCA_ID_SUBNAME_ABI

__all__ = [
    "MocaIdRegistrar",
    "NonceOracle",
    "RegistrarConfig",
    "ResolvedRegistrarConfig",
    "ContractAddresses",
    "resolve_config",
    "PERMISSION_MW_ABI",
    "MOCA_ID_ABI",
    "MOCA_ID_SUBNAME_ABI",
]
