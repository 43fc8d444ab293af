"""Minimal ABI fragments for the PermissionMw and MocaId contracts."""

PERMISSION_MW_ABI = [
    {
        "type": "function",
        "name": "getNonce",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
]

# register(name, to, permissionData, extraData)
MOCA_ID_ABI = [
    {
        "type": "function",
        "name": "register",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "to", "type": "address"},
            {"name": "permissionData", "type": "bytes"},
            {"name": "extraData", "type": "bytes"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

# register(name, parentNode, to, permissionData, extraData)
MOCA_ID_SUBNAME_ABI = [
    {
        "type": "function",
        "name": "register",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "parentNode", "type": "bytes32"},
            {"name": "to", "type": "address"},
            {"name": "permissionData", "type": "bytes"},
            {"name": "extraData", "type": "bytes"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]
