"""Constants for Soroban transaction helpers."""

from stellar_sdk import Network

# CAIP-2 network identifiers
STELLAR_TESTNET_CAIP2 = "stellar:testnet"
STELLAR_PUBNET_CAIP2 = "stellar:pubnet"
STELLAR_FUTURENET_CAIP2 = "stellar:futurenet"

FUTURENET_NETWORK_PASSPHRASE = "Test SDF Future Network ; October 2022"

STELLAR_NETWORK_TO_PASSPHRASE = {
    STELLAR_TESTNET_CAIP2: Network.TESTNET_NETWORK_PASSPHRASE,
    STELLAR_PUBNET_CAIP2: Network.PUBLIC_NETWORK_PASSPHRASE,
    STELLAR_FUTURENET_CAIP2: FUTURENET_NETWORK_PASSPHRASE,
}

DEFAULT_TESTNET_RPC_URL = "https://soroban-testnet.stellar.org"
DEFAULT_FUTURENET_RPC_URL = "https://rpc-futurenet.stellar.org"

# Fees (in stroops)
DEFAULT_TRANSACTION_FEE = 100
MAX_TRANSACTION_FEE = 2**32 - 1

# A transaction envelope carries at most 20 decorated signatures
MAX_SIGNATURES = 20

# Default number of calls an account may authorize
DEFAULT_AUTHORIZED_CALLS = 32767

# Contracts
CONSTRUCTOR_FUNCTION_NAME = "__constructor"
SC_SYMBOL_LIMIT = 32
SC_SYMBOL_REGEX = r"^[a-zA-Z0-9_]+$"

# Address validation
STELLAR_ACCOUNT_ADDRESS_REGEX = r"^G[A-Z2-7]{55}$"
STELLAR_CONTRACT_ADDRESS_REGEX = r"^C[A-Z2-7]{55}$"

# RPC polling
DEFAULT_POLL_INTERVAL_SECONDS = 2
DEFAULT_POLL_TIMEOUT_SECONDS = 60

# Environment variables
ENV_RPC_URL = "SOROBAN_RPC_URL"
ENV_NETWORK = "SOROBAN_NETWORK"
