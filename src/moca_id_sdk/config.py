"""Environment configuration for MocaId registration scripts.

The signing core takes all configuration as arguments; this module only
turns environment variables (and a .env file, if present) into those
arguments.
"""

import os

from dotenv import load_dotenv

from .authorization import (
    MOCA_ID_MUMBAI,
    MUMBAI_CHAIN_ID,
    PERMISSION_MW_MUMBAI,
    DomainDescriptor,
    VConvention,
)
from .registrar import ContractAddresses, RegistrarConfig

DEFAULTS = {
    "RPC_URL": "",
    "PRIVATE_KEY": "",
    "CHAIN_ID": str(MUMBAI_CHAIN_ID),
    "PERMISSION_MW_ADDRESS": PERMISSION_MW_MUMBAI,
    "MOCA_ID_ADDRESS": MOCA_ID_MUMBAI,
    "DOMAIN_NAME": "PermissionMw",
    "DOMAIN_VERSION": "1",
    "MOCA_NODE": "",
    "V_CONVENTION": VConvention.ETHEREUM.value,
    "DEADLINE_SECONDS": "3600",
    "TX_TIMEOUT": "120",
}


def load_config(dotenv_path=None, override=False):
    """Load configuration from environment variables.

    Args:
        dotenv_path: Optional path of a .env file (default: search upwards)
        override: Let .env values override variables already set

    Returns:
        dict with all configuration values.
    """
    load_dotenv(dotenv_path, override=override)
    config = {}
    for key, default in DEFAULTS.items():
        config[key] = os.environ.get(key, default)
    # Parse numeric values
    config["CHAIN_ID"] = int(config["CHAIN_ID"])
    config["DEADLINE_SECONDS"] = int(config["DEADLINE_SECONDS"])
    config["TX_TIMEOUT"] = float(config["TX_TIMEOUT"])
    return config


def build_registrar_config(config) -> RegistrarConfig:
    """Turn a load_config() dict into a RegistrarConfig."""
    addresses = ContractAddresses(
        permission_mw=config["PERMISSION_MW_ADDRESS"],
        moca_id=config["MOCA_ID_ADDRESS"],
    )
    registrar_config: RegistrarConfig = {
        "domain": DomainDescriptor(
            name=config["DOMAIN_NAME"],
            version=config["DOMAIN_VERSION"],
            chain_id=config["CHAIN_ID"],
            verifying_contract=addresses.permission_mw,
        ),
        "contract_addresses": addresses,
        "v_convention": VConvention(config["V_CONVENTION"]),
        "deadline_seconds": config["DEADLINE_SECONDS"],
        "timeout": config["TX_TIMEOUT"],
    }
    if config["MOCA_NODE"]:
        registrar_config["moca_node"] = config["MOCA_NODE"]
    return registrar_config
