"""Register a MocaId name with a PermissionMw authorization.

Signs the EIP-712 register permission with PRIVATE_KEY, encodes it as
(v, r, s, deadline) and calls MocaId.register(...).

Prerequisites:
1. pip install moca-id-sdk
2. Set RPC_URL and PRIVATE_KEY (environment or .env file)
3. Fund the account with MATIC on the target chain

Usage:
    python register_with_permission.py alice 0x2E0446079705B6Bacc4730fB3EDA5DA68aE5Fe4D
"""

import logging
import sys

from eth_account import Account
from web3 import Web3


def main(name: str, recipient: str):
    from moca_id_sdk import (
        MocaIdRegistrar,
        MocaIdError,
        build_registrar_config,
        load_config,
    )

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    config = load_config()
    missing = [key for key in ("RPC_URL", "PRIVATE_KEY") if not config[key]]
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}")
        return 1

    w3 = Web3(
        Web3.HTTPProvider(config["RPC_URL"], request_kwargs={"timeout": 30})
    )
    account = Account.from_key(config["PRIVATE_KEY"])
    registrar = MocaIdRegistrar(w3, account, build_registrar_config(config))

    print(f"Registering {name!r} to {recipient}")
    try:
        signed = registrar.authorize(name, recipient)
        print(f"    Nonce:     {signed.request.nonce}")
        print(f"    Deadline:  {signed.request.deadline}")
        print(f"    Permission data: {signed.payload_hex}")

        tx_hash = registrar.register(name, recipient, signed=signed)
        print(f"Transaction hash: {tx_hash}")
    except MocaIdError as e:
        print(f"\nError: {e}")
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(main(sys.argv[1], sys.argv[2]))
