"""
Transport protocol: the network boundary.

Defines the interface the transaction pipeline depends on, plus
SorobanRpcTransport, the implementation backed by stellar_sdk's
SorobanServer. Tests use a fake transport with the same three methods.

The pipeline never retries; SorobanRpcTransport only polls for the
outcome of a submitted transaction.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from stellar_sdk import SorobanServer, TransactionEnvelope
from stellar_sdk.exceptions import SdkError
from stellar_sdk.soroban_rpc import (
    GetTransactionStatus,
    SendTransactionStatus,
    SimulateTransactionResponse,
)
from stellar_sdk.xdr import (
    DiagnosticEvent,
    SorobanAuthorizationEntry,
    SorobanTransactionData,
    TransactionResult,
)

from .constants import DEFAULT_POLL_INTERVAL_SECONDS, DEFAULT_POLL_TIMEOUT_SECONDS
from .errors import (
    ContractCodeAlreadyExists,
    NetworkRequestFailed,
    SequenceUnavailable,
    TransactionFailed,
)
from .response import TransactionResponse, failure_detail

logger = logging.getLogger(__name__)

_CODE_ALREADY_EXISTS_MARKERS = ("contract code already exists", "code already exists")


@dataclass(frozen=True)
class AccountInfo:
    """On-chain state of an account needed to build transactions."""

    account_id: str
    sequence: int


@dataclass
class Simulation:
    """Decoded result of a transaction simulation.

    Attributes:
        min_resource_fee: Resource fee the network requires, in stroops.
        transaction_data: Resource footprint to attach to the transaction.
        auth: Authorization entries the invocation requires.
        events: Diagnostic events (base64 XDR) reported by the network.
        error: Error string if the network rejected the transaction.
    """

    min_resource_fee: int = 0
    transaction_data: SorobanTransactionData | None = None
    auth: list[SorobanAuthorizationEntry] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_rpc(cls, response: SimulateTransactionResponse) -> "Simulation":
        auth: list[SorobanAuthorizationEntry] = []
        for result in response.results or []:
            auth.extend(
                SorobanAuthorizationEntry.from_xdr(entry) for entry in result.auth or []
            )

        return cls(
            min_resource_fee=int(response.min_resource_fee or 0),
            transaction_data=(
                SorobanTransactionData.from_xdr(response.transaction_data)
                if response.transaction_data
                else None
            ),
            auth=auth,
            events=list(response.events or []),
            error=response.error,
        )


@runtime_checkable
class Transport(Protocol):
    """Interface for Soroban RPC operations."""

    def get_account(self, account_id: str) -> AccountInfo:
        """Fetch the current sequence number of an account.

        Raises:
            SequenceUnavailable: If the account cannot be loaded.
        """
        ...

    def simulate(self, envelope: TransactionEnvelope) -> Simulation:
        """Simulate a signed transaction without submitting it.

        Raises:
            NetworkRequestFailed: If the request itself fails.
        """
        ...

    def submit_and_wait(self, envelope: TransactionEnvelope) -> TransactionResponse:
        """Submit a transaction and wait until it is final.

        Raises:
            ContractCodeAlreadyExists: If uploaded code is already installed.
            TransactionFailed: If the network rejected the transaction.
            NetworkRequestFailed: On connection failures and timeouts.
        """
        ...


def _describe_failure(
    result_xdr: str | None,
    diagnostic_events_xdr: list[str] | None,
) -> str:
    parts = []
    if result_xdr:
        try:
            result = TransactionResult.from_xdr(result_xdr)
        except Exception:
            parts.append(result_xdr)
        else:
            parts.append(failure_detail(result))
    for event_xdr in diagnostic_events_xdr or []:
        try:
            parts.append(str(DiagnosticEvent.from_xdr(event_xdr)))
        except Exception:
            parts.append(event_xdr)
    return "; ".join(parts)


def _raise_for_failure(message: str, detail: str, tx_hash: str | None) -> None:
    lowered = detail.lower()
    if any(marker in lowered for marker in _CODE_ALREADY_EXISTS_MARKERS):
        raise ContractCodeAlreadyExists(detail=detail, tx_hash=tx_hash)
    raise TransactionFailed(message, detail=detail, tx_hash=tx_hash)


class SorobanRpcTransport:
    """Transport backed by a Soroban RPC server."""

    def __init__(
        self,
        server: SorobanServer | str,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timeout: float = DEFAULT_POLL_TIMEOUT_SECONDS,
    ):
        self._server = SorobanServer(server) if isinstance(server, str) else server
        self._poll_interval = poll_interval
        self._timeout = timeout

    @property
    def server(self) -> SorobanServer:
        return self._server

    def get_account(self, account_id: str) -> AccountInfo:
        logger.debug("Loading account %s", account_id)
        try:
            account = self._server.load_account(account_id)
        except SdkError as e:
            raise SequenceUnavailable(
                f"Failed to get account {account_id}: {e}", account_id=account_id
            ) from e
        return AccountInfo(account_id=account_id, sequence=account.sequence)

    def simulate(self, envelope: TransactionEnvelope) -> Simulation:
        logger.debug("Simulating transaction %s", envelope.hash_hex())
        try:
            response = self._server.simulate_transaction(envelope)
        except SdkError as e:
            raise NetworkRequestFailed(f"Failed to simulate transaction: {e}") from e
        return Simulation.from_rpc(response)

    def submit_and_wait(self, envelope: TransactionEnvelope) -> TransactionResponse:
        try:
            send_result = self._server.send_transaction(envelope)
        except SdkError as e:
            raise NetworkRequestFailed(f"Failed to send transaction: {e}") from e

        tx_hash = send_result.hash
        status = SendTransactionStatus(send_result.status)
        logger.debug("Submitted transaction %s with status %s", tx_hash, status.value)

        if status == SendTransactionStatus.ERROR:
            detail = _describe_failure(
                send_result.error_result_xdr, send_result.diagnostic_events_xdr
            )
            logger.warning("Transaction %s rejected: %s", tx_hash, detail)
            _raise_for_failure(f"Submission failed: {detail}", detail, tx_hash)
        if status == SendTransactionStatus.TRY_AGAIN_LATER:
            raise NetworkRequestFailed(
                f"Server asked to try transaction {tx_hash} again later"
            )

        return self._wait_for_transaction(tx_hash)

    def _wait_for_transaction(self, tx_hash: str) -> TransactionResponse:
        deadline = time.monotonic() + self._timeout
        while True:
            try:
                result = self._server.get_transaction(tx_hash)
            except SdkError as e:
                raise NetworkRequestFailed(
                    f"Failed to get transaction {tx_hash}: {e}"
                ) from e

            status = GetTransactionStatus(result.status)
            if status == GetTransactionStatus.SUCCESS:
                return TransactionResponse.from_rpc(result, tx_hash=tx_hash)
            if status == GetTransactionStatus.FAILED:
                detail = _describe_failure(result.result_xdr, None)
                logger.warning("Transaction %s failed on-chain: %s", tx_hash, detail)
                _raise_for_failure(
                    f"Transaction failed on-chain: {detail}", detail, tx_hash
                )

            if time.monotonic() >= deadline:
                raise NetworkRequestFailed(
                    f"Timed out waiting for transaction {tx_hash}"
                )
            logger.debug("Transaction %s not found yet, polling", tx_hash)
            time.sleep(self._poll_interval)
