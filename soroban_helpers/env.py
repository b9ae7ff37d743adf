"""
Network environment: which network to talk to and how.

EnvConfigs holds the network identity; Env bundles it with a transport.
Configuration can be loaded from the process environment or a .env file.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from stellar_sdk import TransactionEnvelope
from stellar_sdk.exceptions import SdkError

from .constants import ENV_NETWORK, ENV_RPC_URL, STELLAR_TESTNET_CAIP2
from .errors import InvalidArgument, NetworkRequestFailed
from .response import TransactionResponse
from .signer import Signer
from .transport import AccountInfo, Simulation, SorobanRpcTransport, Transport
from .utils import get_network_passphrase, get_rpc_url, network_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvConfigs:
    """RPC endpoint and network passphrase."""

    rpc_url: str
    network_passphrase: str

    @classmethod
    def for_network(cls, network: str, rpc_url: str | None = None) -> "EnvConfigs":
        """Build configs for a CAIP-2 network id or a known passphrase."""
        return cls(
            rpc_url=get_rpc_url(network, rpc_url),
            network_passphrase=get_network_passphrase(network),
        )

    @classmethod
    def from_environ(cls, dotenv_path: str | None = None) -> "EnvConfigs":
        """Load configs from SOROBAN_NETWORK and SOROBAN_RPC_URL.

        Values in ``dotenv_path`` (or a ``.env`` file found from the
        working directory) are loaded first; existing environment
        variables win.
        """
        load_dotenv(dotenv_path)
        network = os.getenv(ENV_NETWORK, STELLAR_TESTNET_CAIP2)
        try:
            return cls.for_network(network, os.getenv(ENV_RPC_URL) or None)
        except ValueError as e:
            raise InvalidArgument(f"Invalid {ENV_NETWORK} configuration: {e}") from e


def signer_from_environ(var: str, dotenv_path: str | None = None) -> Signer:
    """Build a signer from the secret seed stored in environment variable ``var``."""
    load_dotenv(dotenv_path)
    secret = os.getenv(var, "")
    if not secret:
        raise InvalidArgument(f"Missing required environment variable: {var}")
    try:
        return Signer.from_secret(secret)
    except (SdkError, ValueError) as e:
        raise InvalidArgument(f"Environment variable {var} is not a valid secret seed") from e


class Env:
    """A network environment: configs plus the transport that reaches it."""

    def __init__(self, configs: EnvConfigs, transport: Transport | None = None):
        self.configs = configs
        self.transport = transport or SorobanRpcTransport(configs.rpc_url)

    @property
    def network_passphrase(self) -> str:
        return self.configs.network_passphrase

    def network_id(self) -> bytes:
        return network_id(self.configs.network_passphrase)

    def get_account(self, account_id: str) -> AccountInfo:
        return self._call("get_account", self.transport.get_account, account_id)

    def simulate_transaction(self, envelope: TransactionEnvelope) -> Simulation:
        return self._call("simulate", self.transport.simulate, envelope)

    def send_transaction(self, envelope: TransactionEnvelope) -> TransactionResponse:
        return self._call("submit_and_wait", self.transport.submit_and_wait, envelope)

    def _call(self, name, method, *args):
        try:
            return method(*args)
        except SdkError as e:
            logger.debug("Transport call %s failed: %s", name, e)
            raise NetworkRequestFailed(f"Transport call {name} failed: {e}") from e

    def __repr__(self) -> str:
        return (
            f"Env(rpc_url={self.configs.rpc_url!r}, "
            f"network_passphrase={self.configs.network_passphrase!r})"
        )
