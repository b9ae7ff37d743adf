"""Shared fixtures: a scripted in-memory transport and XDR builders."""

from types import SimpleNamespace

import pytest
from stellar_sdk import Address, Keypair, Network, StrKey, Transaction
from stellar_sdk.xdr import (
    Int64,
    InvokeContractArgs,
    InvokeHostFunctionResult,
    InvokeHostFunctionResultCode,
    OperationResult,
    OperationResultCode,
    OperationResultTr,
    OperationType,
    SCSymbol,
    SorobanAuthorizationEntry,
    SorobanAuthorizedFunction,
    SorobanAuthorizedFunctionType,
    SorobanAuthorizedInvocation,
    SorobanCredentials,
    SorobanCredentialsType,
    TransactionResult,
    TransactionResultCode,
    TransactionResultExt,
    TransactionResultResult,
)

from soroban_helpers.account import Account
from soroban_helpers.env import Env, EnvConfigs
from soroban_helpers.operation import Operations
from soroban_helpers.response import TransactionResponse
from soroban_helpers.signer import Signer
from soroban_helpers.transport import AccountInfo, Simulation

NETWORK_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE
CONTRACT_A = StrKey.encode_contract(b"\x01" * 32)
CONTRACT_B = StrKey.encode_contract(b"\x02" * 32)


class FakeTransport:
    """Transport double that records calls and replays scripted results.

    ``submit_results`` items are returned in order; an exception instance
    is raised instead, and a callable is called with the envelope.
    """

    def __init__(self, sequence: int = 100):
        self.sequences: dict[str, int] = {}
        self.default_sequence = sequence
        self.account_error: Exception | None = None
        self.simulation = Simulation(min_resource_fee=0)
        self.submit_results: list = []
        self.get_account_calls: list[str] = []
        self.simulated = []
        self.submitted = []

    def get_account(self, account_id: str) -> AccountInfo:
        self.get_account_calls.append(account_id)
        if self.account_error is not None:
            raise self.account_error
        return AccountInfo(
            account_id=account_id,
            sequence=self.sequences.get(account_id, self.default_sequence),
        )

    def simulate(self, envelope) -> Simulation:
        self.simulated.append(envelope)
        return self.simulation

    def submit_and_wait(self, envelope) -> TransactionResponse:
        self.submitted.append(envelope)
        result = self.submit_results.pop(0) if self.submit_results else success_response()
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(envelope)
        return result


def success_response(return_value=None, op_results=None, meta=None) -> TransactionResponse:
    """A successful response; ``return_value`` lands in v3 Soroban meta."""
    if meta is None and return_value is not None:
        meta = soroban_meta_v3(return_value)
    return TransactionResponse(
        status="SUCCESS",
        tx_hash="ab" * 32,
        ledger=1234,
        result=tx_result(TransactionResultCode.txSUCCESS, op_results or []),
        result_meta=meta,
    )


def tx_result(code, op_results=None) -> TransactionResult:
    return TransactionResult(
        fee_charged=Int64(100),
        result=TransactionResultResult(code=code, results=op_results or []),
        ext=TransactionResultExt(0),
    )


def host_function_failure(
    code=InvokeHostFunctionResultCode.INVOKE_HOST_FUNCTION_TRAPPED,
) -> OperationResult:
    return OperationResult(
        code=OperationResultCode.opINNER,
        tr=OperationResultTr(
            type=OperationType.INVOKE_HOST_FUNCTION,
            invoke_host_function_result=InvokeHostFunctionResult(code=code),
        ),
    )


def soroban_meta_v3(return_value, operations=None, events=None):
    return SimpleNamespace(
        v=3,
        v3=SimpleNamespace(
            soroban_meta=SimpleNamespace(return_value=return_value, events=events or []),
            operations=operations or [],
        ),
    )


def invocation(contract_id: str, *children, function_name: str = "transfer"):
    return SorobanAuthorizedInvocation(
        function=SorobanAuthorizedFunction(
            type=SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN,
            contract_fn=InvokeContractArgs(
                contract_address=Address(contract_id).to_xdr_sc_address(),
                function_name=SCSymbol(function_name.encode()),
                args=[],
            ),
        ),
        sub_invocations=list(children),
    )


def auth_entry(root: SorobanAuthorizedInvocation) -> SorobanAuthorizationEntry:
    return SorobanAuthorizationEntry(
        credentials=SorobanCredentials(
            type=SorobanCredentialsType.SOROBAN_CREDENTIALS_SOURCE_ACCOUNT
        ),
        root_invocation=root,
    )


def make_transaction(source: str, *auth_roots, contract_id: str = CONTRACT_A) -> Transaction:
    """A one-operation invoke transaction authorizing ``auth_roots``."""
    operation = Operations.invoke_contract(
        contract_id,
        "transfer",
        [],
        auth=[auth_entry(root) for root in auth_roots],
    )
    return Transaction(source=source, sequence=1, fee=100, operations=[operation])


@pytest.fixture
def signer():
    return Signer(Keypair.random())


@pytest.fixture
def account(signer):
    return Account.single(signer)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def env(transport):
    return Env(
        EnvConfigs(rpc_url="http://localhost:8000", network_passphrase=NETWORK_PASSPHRASE),
        transport=transport,
    )
