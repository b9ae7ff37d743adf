"""soroban_helpers - build, sign, simulate and submit Soroban transactions.

Deploy a contract and call it:
    ```python
    from stellar_sdk import scval
    from soroban_helpers import Account, Contract, Env, EnvConfigs, Parser, ParserType
    from soroban_helpers import signer_from_environ

    env = Env(EnvConfigs.from_environ())
    account = Account.single(signer_from_environ("SOROBAN_PRIVATE_KEY"))

    contract = Contract.from_file("hello.wasm").deploy(env, account)
    response = contract.invoke("hello", [scval.to_symbol("world")])
    value = Parser(ParserType.INVOKE_FUNCTION).parse(response).value
    ```
"""

from .account import Account, AccountConfig, AccountKind
from .contract import ClientContractConfigs, Contract
from .crypto import calculate_contract_id, generate_salt, sha256_hash
from .env import Env, EnvConfigs, signer_from_environ
from .errors import (
    AuthorizationDenied,
    ContractCodeAlreadyExists,
    ContractIdMismatch,
    EncodingFailed,
    FileReadError,
    InvalidArgument,
    NetworkRequestFailed,
    NotConfigured,
    NotSupported,
    SequenceUnavailable,
    SimulationFailed,
    SorobanHelperError,
    TransactionFailed,
)
from .fs import read_wasm
from .guard import CallBudget, ContractCallBudget, Guard
from .operation import Operations
from .parser import ParseResult, Parser, ParserType
from .response import TransactionResponse
from .signer import Signer
from .transaction import TransactionBuilder
from .transport import AccountInfo, Simulation, SorobanRpcTransport, Transport

__all__ = [
    # Accounts
    "Account",
    "AccountConfig",
    "AccountKind",
    "Signer",
    "CallBudget",
    "ContractCallBudget",
    "Guard",
    # Transactions
    "TransactionBuilder",
    "Operations",
    # Contracts
    "Contract",
    "ClientContractConfigs",
    "calculate_contract_id",
    "generate_salt",
    "sha256_hash",
    "read_wasm",
    # Results
    "Parser",
    "ParserType",
    "ParseResult",
    "TransactionResponse",
    # Network
    "Env",
    "EnvConfigs",
    "signer_from_environ",
    "Transport",
    "SorobanRpcTransport",
    "AccountInfo",
    "Simulation",
    # Errors
    "SorobanHelperError",
    "AuthorizationDenied",
    "NetworkRequestFailed",
    "SequenceUnavailable",
    "SimulationFailed",
    "TransactionFailed",
    "ContractCodeAlreadyExists",
    "ContractIdMismatch",
    "EncodingFailed",
    "NotConfigured",
    "NotSupported",
    "InvalidArgument",
    "FileReadError",
]
