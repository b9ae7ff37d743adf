"""
Contract deployment and invocation.

A Contract starts either from bytecode (undeployed) or from the configs of
an already deployed instance. ``deploy`` uploads the bytecode, derives the
contract id locally and creates the instance; ``invoke`` calls a function
on the deployed instance. Each entry point makes a single attempt.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from stellar_sdk.xdr import SCVal, SorobanAuthorizationEntry

from .account import Account
from .constants import CONSTRUCTOR_FUNCTION_NAME
from .crypto import calculate_contract_id, contract_id_preimage, generate_salt, sha256_hash
from .env import Env
from .errors import (
    ContractCodeAlreadyExists,
    ContractIdMismatch,
    InvalidArgument,
    NotConfigured,
    SorobanHelperError,
)
from .fs import read_wasm
from .operation import Operations
from .parser import Parser, ParserType
from .response import TransactionResponse
from .transaction import TransactionBuilder
from .utils import validate_contract_address

logger = logging.getLogger(__name__)


@dataclass
class ClientContractConfigs:
    """Where a deployed contract lives and which account talks to it."""

    contract_id: str
    env: Env
    account: Account

    def __post_init__(self) -> None:
        if not validate_contract_address(self.contract_id):
            raise InvalidArgument(f"Invalid contract id: {self.contract_id}")


class Contract:
    """Handle to a Soroban contract, deployed or not."""

    def __init__(
        self,
        wasm_bytes: bytes | None = None,
        client_configs: ClientContractConfigs | None = None,
    ):
        if wasm_bytes is None and client_configs is None:
            raise InvalidArgument("A contract needs bytecode or deployed configs")
        self._wasm_bytes = wasm_bytes
        self._wasm_hash = sha256_hash(wasm_bytes) if wasm_bytes is not None else None
        self._client_configs = client_configs

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        client_configs: ClientContractConfigs | None = None,
        reader: Callable[[str | Path], bytes] = read_wasm,
    ) -> "Contract":
        """Load contract bytecode with ``reader`` (defaults to reading from disk)."""
        return cls(reader(path), client_configs)

    @classmethod
    def from_deployed(cls, configs: ClientContractConfigs) -> "Contract":
        return cls(client_configs=configs)

    @property
    def wasm_bytes(self) -> bytes | None:
        return self._wasm_bytes

    @property
    def wasm_hash(self) -> bytes | None:
        """SHA-256 of the bytecode, the key it is installed under."""
        return self._wasm_hash

    @property
    def client_configs(self) -> ClientContractConfigs | None:
        return self._client_configs

    @property
    def contract_id(self) -> str | None:
        return self._client_configs.contract_id if self._client_configs else None

    @property
    def is_deployed(self) -> bool:
        return self._client_configs is not None

    @property
    def has_constructor(self) -> bool:
        if self._wasm_bytes is None:
            return False
        return CONSTRUCTOR_FUNCTION_NAME.encode() in self._wasm_bytes

    def _require_wasm(self) -> bytes:
        if self._wasm_bytes is None:
            raise InvalidArgument("Contract has no bytecode")
        return self._wasm_bytes

    def upload_wasm(self, env: Env, account: Account) -> str:
        """Install the bytecode; already installed code counts as success.

        Returns the hex wasm hash.
        """
        upload_op = Operations.upload_wasm(self._require_wasm())
        tx = (
            TransactionBuilder(account, env)
            .add_operation(upload_op)
            .simulate_and_build()
        )
        envelope = account.sign_transaction(tx, env.network_passphrase)
        wasm_hash = self._wasm_hash.hex()
        try:
            env.send_transaction(envelope)
        except ContractCodeAlreadyExists:
            logger.info("Contract code %s already installed", wasm_hash)
        else:
            logger.info("Uploaded contract code %s", wasm_hash)
        return wasm_hash

    def deploy(
        self,
        env: Env,
        account: Account,
        constructor_args: list[SCVal] | None = None,
    ) -> "Contract":
        """Upload the bytecode and create a new contract instance from it.

        The contract id is derived locally before the creation transaction is
        sent, and checked against the id the network reports.

        Errors from upload and creation carry the ``wasm_hash`` (and, once
        derived, the ``contract_id``) in their ``context``.

        Raises:
            InvalidArgument: If the contract is already deployed or has no
                bytecode.
            ContractIdMismatch: If the network reports a different id.
        """
        if self.is_deployed:
            raise InvalidArgument(f"Contract is already deployed as {self.contract_id}")
        self._require_wasm()

        if constructor_args is not None and not self.has_constructor:
            logger.warning(
                "Contract has no %s, ignoring constructor arguments",
                CONSTRUCTOR_FUNCTION_NAME,
            )
            constructor_args = None

        context = {"wasm_hash": self._wasm_hash.hex()}
        try:
            self.upload_wasm(env, account)

            salt = generate_salt()
            contract_id = calculate_contract_id(
                account.account_id, salt, env.network_passphrase
            )
            context["contract_id"] = contract_id

            create_op = Operations.create_contract(
                contract_id_preimage(account.account_id, salt),
                self._wasm_hash,
                constructor_args,
            )
            tx = (
                TransactionBuilder(account, env)
                .add_operation(create_op)
                .simulate_and_build()
            )
            envelope = account.sign_transaction(tx, env.network_passphrase)
            response = env.send_transaction(envelope)
            deployed_id = Parser(ParserType.DEPLOY).parse(response).value
        except SorobanHelperError as e:
            e.with_context(**context)
            raise

        if deployed_id is None:
            logger.warning(
                "Deploy response carries no contract id, using derived id %s",
                contract_id,
            )
        elif deployed_id != contract_id:
            raise ContractIdMismatch(expected=contract_id, actual=deployed_id)

        self._client_configs = ClientContractConfigs(
            contract_id=contract_id, env=env, account=account
        )
        logger.info("Deployed contract %s", contract_id)
        return self

    def invoke(
        self,
        function_name: str,
        args: list[SCVal] | None = None,
        auth: list[SorobanAuthorizationEntry] | None = None,
    ) -> TransactionResponse:
        """Call ``function_name`` on the deployed contract.

        ``auth`` entries are attached to the invocation as given; they are
        what a ``ContractCallBudget`` guard counts.

        Returns the raw response; use ``Parser(ParserType.INVOKE_FUNCTION)``
        to extract the return value.

        Any error raised after the call starts carries ``contract_id`` and
        ``function_name`` in its ``context``.

        Raises:
            NotConfigured: If the contract has no deployed configs.
        """
        if self._client_configs is None:
            raise NotConfigured("Contract is not deployed, client configs are not set")
        configs = self._client_configs

        logger.info("Invoking %s on contract %s", function_name, configs.contract_id)
        try:
            invoke_op = Operations.invoke_contract(
                configs.contract_id, function_name, args, auth
            )
            tx = (
                TransactionBuilder(configs.account, configs.env)
                .add_operation(invoke_op)
                .simulate_and_build()
            )
            envelope = configs.account.sign_transaction(
                tx, configs.env.network_passphrase
            )
            return configs.env.send_transaction(envelope)
        except SorobanHelperError as e:
            e.with_context(contract_id=configs.contract_id, function_name=function_name)
            raise

    def __repr__(self) -> str:
        return f"Contract(contract_id={self.contract_id!r}, deployed={self.is_deployed})"
