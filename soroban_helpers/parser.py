"""
Result parser.

Turns a finalized TransactionResponse into the typed value the producing
operation is expected to yield:

    DEPLOY               contract id (C...) of the created contract
    INVOKE_FUNCTION      SCVal returned by the contract function
    ACCOUNT_SET_OPTIONS  updated AccountEntry of the reconfigured account

A successful transaction that carries no such value parses to a result
whose ``value`` is None. Failed transactions raise TransactionFailed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from stellar_sdk import scval
from stellar_sdk.xdr import (
    AccountEntry,
    InvokeHostFunctionResultCode,
    LedgerEntryChangeType,
    LedgerEntryType,
    OperationResult,
    OperationResultCode,
    OperationType,
    SCAddressType,
    SCVal,
    SCValType,
    TransactionMeta,
    TransactionResultCode,
)

from .errors import TransactionFailed
from .response import (
    TransactionResponse,
    describe_transaction_result,
    failure_detail,
    operation_metas_of,
    soroban_meta_of,
)
from .utils import address_from_sc_address


class ParserType(Enum):
    DEPLOY = "deploy"
    INVOKE_FUNCTION = "invoke_function"
    ACCOUNT_SET_OPTIONS = "account_set_options"


@dataclass(frozen=True)
class ParseResult:
    parser_type: ParserType
    value: Any = None

    @property
    def has_value(self) -> bool:
        return self.value is not None


def _return_value(meta: TransactionMeta | None) -> SCVal | None:
    if meta is None:
        return None
    soroban_meta = soroban_meta_of(meta)
    if soroban_meta is None:
        return None
    return soroban_meta.return_value


def _operation_payload(op_result: OperationResult) -> SCVal | None:
    # A successful host function reports the hash of its return value.
    if op_result.code != OperationResultCode.opINNER:
        return None
    tr = op_result.tr
    if tr.type != OperationType.INVOKE_HOST_FUNCTION:
        return None
    result = tr.invoke_host_function_result
    if result.code != InvokeHostFunctionResultCode.INVOKE_HOST_FUNCTION_SUCCESS:
        return None
    return scval.to_bytes(result.success.hash)


def _contract_id(value: SCVal) -> str | None:
    if value.type != SCValType.SCV_ADDRESS:
        return None
    if value.address.type != SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
        return None
    return address_from_sc_address(value.address)


def _updated_account_entry(meta: TransactionMeta | None) -> AccountEntry | None:
    if meta is None:
        return None
    op_metas = operation_metas_of(meta)
    if not op_metas:
        return None
    for change in reversed(op_metas[-1].changes.ledger_entry_changes):
        if change.type != LedgerEntryChangeType.LEDGER_ENTRY_UPDATED:
            continue
        data = change.updated.data
        if data.type == LedgerEntryType.ACCOUNT:
            return data.account
    return None


class Parser:
    """Extracts typed results from transaction responses."""

    def __init__(self, parser_type: ParserType):
        self.parser_type = parser_type

    def parse(self, response: TransactionResponse) -> ParseResult:
        """Parse ``response``; never modifies it.

        Raises:
            TransactionFailed: If the transaction did not succeed or the
                response carries no transaction result.
        """
        op_results = self._check_success(response)

        if self.parser_type == ParserType.ACCOUNT_SET_OPTIONS:
            return ParseResult(self.parser_type, _updated_account_entry(response.result_meta))

        value = _return_value(response.result_meta)
        if value is None and op_results:
            value = _operation_payload(op_results[0])

        if self.parser_type == ParserType.DEPLOY:
            contract_id = _contract_id(value) if value is not None else None
            return ParseResult(self.parser_type, contract_id)
        return ParseResult(self.parser_type, value)

    def _check_success(self, response: TransactionResponse) -> list[OperationResult]:
        tx_result = response.result
        if tx_result is None:
            raise TransactionFailed(
                "No transaction result available", tx_hash=response.tx_hash
            )
        code = tx_result.result.code
        if code != TransactionResultCode.txSUCCESS:
            raise TransactionFailed(
                f"Transaction failed: {describe_transaction_result(tx_result)}",
                detail=failure_detail(tx_result),
                tx_hash=response.tx_hash,
            )
        return list(tx_result.result.results or [])
