"""Utility functions for Soroban networks and addresses."""

import hashlib
import re

from stellar_sdk import Address
from stellar_sdk.xdr import SCAddress

from .constants import (
    DEFAULT_FUTURENET_RPC_URL,
    DEFAULT_TESTNET_RPC_URL,
    STELLAR_ACCOUNT_ADDRESS_REGEX,
    STELLAR_CONTRACT_ADDRESS_REGEX,
    STELLAR_FUTURENET_CAIP2,
    STELLAR_NETWORK_TO_PASSPHRASE,
    STELLAR_PUBNET_CAIP2,
    STELLAR_TESTNET_CAIP2,
)


def get_network_passphrase(network: str) -> str:
    """Get the network passphrase for a CAIP-2 identifier.

    A known passphrase is returned unchanged.
    """
    passphrase = STELLAR_NETWORK_TO_PASSPHRASE.get(network)
    if passphrase:
        return passphrase
    if network in STELLAR_NETWORK_TO_PASSPHRASE.values():
        return network
    raise ValueError(f"Unknown Stellar network: {network}")


def get_rpc_url(network: str, custom_url: str | None = None) -> str:
    """Get the RPC URL for a Stellar network."""
    if custom_url:
        return custom_url
    passphrase = get_network_passphrase(network)
    if passphrase == STELLAR_NETWORK_TO_PASSPHRASE[STELLAR_TESTNET_CAIP2]:
        return DEFAULT_TESTNET_RPC_URL
    if passphrase == STELLAR_NETWORK_TO_PASSPHRASE[STELLAR_FUTURENET_CAIP2]:
        return DEFAULT_FUTURENET_RPC_URL
    if passphrase == STELLAR_NETWORK_TO_PASSPHRASE[STELLAR_PUBNET_CAIP2]:
        raise ValueError("Mainnet RPC URL must be provided via rpc_url config")
    raise ValueError(f"Unknown Stellar network: {network}")


def network_id(network_passphrase: str) -> bytes:
    """Return the network id: SHA-256 of the network passphrase."""
    return hashlib.sha256(network_passphrase.encode()).digest()


def validate_account_address(address: str) -> bool:
    """Validate a Stellar account address (G-account only)."""
    return bool(re.match(STELLAR_ACCOUNT_ADDRESS_REGEX, address))


def validate_contract_address(address: str) -> bool:
    """Validate a Soroban contract address (C-account only)."""
    return bool(re.match(STELLAR_CONTRACT_ADDRESS_REGEX, address))


def address_from_sc_address(sc_address: SCAddress) -> str:
    """Convert an SCAddress XDR object to a Stellar address string."""
    return Address.from_xdr_sc_address(sc_address).address
