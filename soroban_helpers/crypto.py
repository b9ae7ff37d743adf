"""Hashing helpers and deterministic contract id derivation."""

import hashlib
import secrets

from stellar_sdk import Address, StrKey
from stellar_sdk.xdr import (
    ContractIDPreimage,
    ContractIDPreimageFromAddress,
    ContractIDPreimageType,
    EnvelopeType,
    Hash,
    HashIDPreimage,
    HashIDPreimageContractID,
    Uint256,
)

from .errors import EncodingFailed
from .utils import network_id

SALT_SIZE = 32


def sha256_hash(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def generate_salt() -> bytes:
    """Return 32 random bytes for contract id derivation."""
    return secrets.token_bytes(SALT_SIZE)


def contract_id_preimage(account_id: str, salt: bytes) -> ContractIDPreimage:
    """Build the from-address preimage for a contract created by ``account_id``."""
    if len(salt) != SALT_SIZE:
        raise EncodingFailed(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")
    try:
        address = Address(account_id).to_xdr_sc_address()
    except ValueError as e:
        raise EncodingFailed(f"Invalid deployer address {account_id}: {e}") from e
    return ContractIDPreimage(
        type=ContractIDPreimageType.CONTRACT_ID_PREIMAGE_FROM_ADDRESS,
        from_address=ContractIDPreimageFromAddress(
            address=address,
            salt=Uint256(salt),
        ),
    )


def calculate_contract_id(account_id: str, salt: bytes, network_passphrase: str) -> str:
    """Derive the C... id of a contract before it is created.

    The id is the SHA-256 of the XDR-encoded contract id preimage scoped to
    the network, so it can be computed off-chain and matches the id the
    network assigns.
    """
    preimage = HashIDPreimage(
        type=EnvelopeType.ENVELOPE_TYPE_CONTRACT_ID,
        contract_id=HashIDPreimageContractID(
            network_id=Hash(network_id(network_passphrase)),
            contract_id_preimage=contract_id_preimage(account_id, salt),
        ),
    )
    try:
        encoded = preimage.to_xdr_bytes()
    except Exception as e:
        raise EncodingFailed(f"Failed to encode contract id preimage: {e}") from e
    return StrKey.encode_contract(sha256_hash(encoded))
