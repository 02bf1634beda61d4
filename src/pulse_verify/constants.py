from __future__ import annotations

PULSE_MAINNET_CHAIN_ID = 369
PULSE_TESTNET_V4_CHAIN_ID = 943

PULSE_MAINNET_RPC_URL = "https://rpc.pulsechain.com"
PULSE_TESTNET_V4_RPC_URL = "https://rpc.v4.testnet.pulsechain.com"

PULSESCAN_API_URL = "https://scan.pulsechain.com/api"
PULSESCAN_BROWSER_URL = "https://scan.pulsechain.com/"
PULSESCAN_TESTNET_V4_API_URL = "https://scan.v4.testnet.pulsechain.com/api"
PULSESCAN_TESTNET_V4_BROWSER_URL = "https://scan.v4.testnet.pulsechain.com/"
NINE_MM_API_URL = "https://v2-api.9mm.pro/api"
NINE_MM_BROWSER_URL = "https://scan.9mm.pro/"

# 50 gwei
DEFAULT_GAS_PRICE = 50_000_000_000
DEFAULT_OPTIMIZER_RUNS = 200

# PulseChain explorers accept any key; "0" is what they are registered with.
DEFAULT_EXPLORER_API_KEY = "0"

OUTPUT_SELECTION = (
    "abi",
    "metadata",
    "devdoc",
    "userdoc",
    "storageLayout",
    "evm.legacyAssembly",
    "evm.bytecode",
    "evm.deployedBytecode",
    "evm.methodIdentifiers",
    "evm.gasEstimates",
    "evm.assembly",
)
FILE_OUTPUT_SELECTION = ("ast",)

DEFAULT_ARTIFACTS_DIR = "artifacts/build-info"
DEFAULT_PROFILE = "testnet"
DEFAULT_NETWORK = "pulse"

CODE_FORMAT_STANDARD_JSON = "solidity-standard-json-input"

DEFAULT_POLL_INTERVAL_S = 3.0
DEFAULT_MAX_POLLS = 20

USER_AGENT = "pulse-verify/1.0"
