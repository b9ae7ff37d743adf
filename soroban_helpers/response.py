"""Finalized transaction responses."""

from dataclasses import dataclass
from typing import Any

from stellar_sdk.soroban_rpc import GetTransactionResponse, GetTransactionStatus
from stellar_sdk.xdr import (
    ContractEvent,
    OperationResult,
    OperationResultCode,
    SCVal,
    TransactionMeta,
    TransactionResult,
)

from .errors import InvalidArgument


def soroban_meta_of(meta: TransactionMeta) -> Any | None:
    """Return the Soroban section of a v3 or v4 transaction meta, if any."""
    if meta.v == 3:
        return meta.v3.soroban_meta
    if meta.v == 4:
        return meta.v4.soroban_meta
    return None


def operation_metas_of(meta: TransactionMeta) -> list[Any]:
    """Return the per-operation metas of a transaction meta."""
    if meta.v == 3:
        return list(meta.v3.operations)
    if meta.v == 4:
        return list(meta.v4.operations)
    if meta.v == 2:
        return list(meta.v2.operations)
    if meta.v == 1:
        return list(meta.v1.operations)
    return list(meta.operations or [])


def operation_result_code(op_result: OperationResult) -> str:
    """Name of the most specific result code of one operation."""
    if op_result.code != OperationResultCode.opINNER or op_result.tr is None:
        return op_result.code.name
    for name, inner in vars(op_result.tr).items():
        if name != "type" and inner is not None:
            return inner.code.name
    return op_result.code.name


def describe_transaction_result(result: TransactionResult) -> str:
    """Summarize a transaction result by code names.

    The transaction code comes first, followed by the result code of every
    operation, e.g. ``txFAILED [op 0: INVOKE_HOST_FUNCTION_TRAPPED]``. Fee bump
    results are described by their inner transaction.
    """
    outcome = result.result
    summary = outcome.code.name
    if outcome.inner_result_pair is not None:
        inner = outcome.inner_result_pair.result.result
        summary = f"{summary} / {inner.code.name}"
        op_results = inner.results or []
    else:
        op_results = outcome.results or []
    if op_results:
        ops = ", ".join(
            f"op {index}: {operation_result_code(op_result)}"
            for index, op_result in enumerate(op_results)
        )
        summary = f"{summary} [{ops}]"
    return summary


def failure_detail(result: TransactionResult) -> str:
    """Readable summary of a failed result followed by its raw XDR."""
    return f"{describe_transaction_result(result)}; result XDR {result.to_xdr()}"


@dataclass
class TransactionResponse:
    """A finalized transaction as returned by the network.

    ``result`` and ``result_meta`` are decoded XDR records; either may be
    missing if the server did not return it.
    """

    status: str
    tx_hash: str | None = None
    ledger: int | None = None
    result: TransactionResult | None = None
    result_meta: TransactionMeta | None = None
    envelope_xdr: str | None = None

    @classmethod
    def from_rpc(
        cls,
        response: GetTransactionResponse,
        tx_hash: str | None = None,
    ) -> "TransactionResponse":
        """Decode a ``getTransaction`` RPC response."""
        return cls(
            status=GetTransactionStatus(response.status).value,
            tx_hash=tx_hash,
            ledger=response.ledger,
            result=(
                TransactionResult.from_xdr(response.result_xdr)
                if response.result_xdr
                else None
            ),
            result_meta=(
                TransactionMeta.from_xdr(response.result_meta_xdr)
                if response.result_meta_xdr
                else None
            ),
            envelope_xdr=response.envelope_xdr,
        )

    def _require_soroban_meta(self) -> Any:
        if self.result_meta is None:
            raise InvalidArgument("Transaction metadata not available")
        soroban_meta = soroban_meta_of(self.result_meta)
        if soroban_meta is None:
            raise InvalidArgument(
                "Soroban metadata not available (not a Soroban transaction)"
            )
        return soroban_meta

    def get_soroban_meta(self) -> Any:
        """Return the Soroban section of the transaction meta."""
        return self._require_soroban_meta()

    def get_return_value(self) -> SCVal:
        """Return the value returned by the invoked contract function."""
        return_value = self._require_soroban_meta().return_value
        if return_value is None:
            raise InvalidArgument("Transaction has no return value")
        return return_value

    def get_events(self) -> list[ContractEvent]:
        """Return the contract events emitted by the transaction."""
        soroban_meta = self._require_soroban_meta()
        if self.result_meta.v == 3:
            return list(soroban_meta.events)
        events: list[ContractEvent] = []
        for op_meta in operation_metas_of(self.result_meta):
            events.extend(op_meta.events or [])
        return events
