"""
Transaction builder.

TransactionBuilder is an immutable value: every ``add_*``/``set_*`` call
returns a new builder. Two terminal steps turn it into a transaction:

    build()               fresh sequence number, unsimulated fee
    simulate_and_build()  build(), dry-run simulation, then the fee and
                          resource data the network asked for

The dry-run envelope is signed through the account's unsafe path, so
simulation never consumes guard state. The real, guarded signature happens
afterwards with ``Account.sign_transaction``.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from stellar_sdk import (
    ExtendFootprintTTL,
    InvokeHostFunction,
    Memo,
    NoneMemo,
    Preconditions,
    RestoreFootprint,
    TextMemo,
    TimeBounds,
    Transaction,
)
from stellar_sdk.exceptions import MemoInvalidException
from stellar_sdk.operation import Operation
from stellar_sdk.xdr import SorobanCredentialsType

from .constants import DEFAULT_TRANSACTION_FEE, MAX_TRANSACTION_FEE
from .errors import (
    EncodingFailed,
    InvalidArgument,
    NotConfigured,
    NotSupported,
    SimulationFailed,
)
from .transport import Simulation

if TYPE_CHECKING:
    from .account import Account
    from .env import Env

logger = logging.getLogger(__name__)

_SOROBAN_OPERATIONS = (InvokeHostFunction, ExtendFootprintTTL, RestoreFootprint)


def simulated_fee(base_fee: int, operation_count: int, min_resource_fee: int) -> int:
    """Fee for a simulated transaction; never lower than ``base_fee``."""
    fee = max(base_fee, operation_count * base_fee + min_resource_fee)
    if fee > MAX_TRANSACTION_FEE:
        raise EncodingFailed(
            f"Transaction fee {fee} exceeds the maximum of {MAX_TRANSACTION_FEE}"
        )
    return fee


def _check_auth_support(simulation: Simulation) -> None:
    for entry in simulation.auth:
        if entry.credentials.type == SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS:
            raise NotSupported(
                "Transaction requires address credentials for authorization, "
                "only source account authorization is supported"
            )


@dataclass(frozen=True)
class TransactionBuilder:
    """Assembles operations and metadata into a transaction for ``source_account``."""

    source_account: "Account"
    env: "Env | None" = None
    operations: tuple[Operation, ...] = ()
    fee: int = DEFAULT_TRANSACTION_FEE
    memo: Memo = field(default_factory=NoneMemo)
    preconditions: Preconditions | None = None

    def add_operation(self, operation: Operation) -> "TransactionBuilder":
        return replace(self, operations=self.operations + (operation,))

    def set_memo(self, memo: Memo) -> "TransactionBuilder":
        return replace(self, memo=memo)

    def set_text_memo(self, text: str) -> "TransactionBuilder":
        try:
            memo = TextMemo(text)
        except MemoInvalidException as e:
            raise EncodingFailed(f"Invalid text memo: {e}") from e
        return replace(self, memo=memo)

    def set_preconditions(self, preconditions: Preconditions) -> "TransactionBuilder":
        return replace(self, preconditions=preconditions)

    def set_time_bounds(self, min_time: int, max_time: int) -> "TransactionBuilder":
        """Limit the transaction to a validity window (unix seconds, 0 = open)."""
        if min_time < 0 or max_time < 0 or (max_time and max_time < min_time):
            raise InvalidArgument(f"Invalid time bounds: {min_time}..{max_time}")
        return replace(
            self, preconditions=Preconditions(time_bounds=TimeBounds(min_time, max_time))
        )

    def set_fee(self, fee: int) -> "TransactionBuilder":
        if not 0 < fee <= MAX_TRANSACTION_FEE:
            raise InvalidArgument(f"Fee must be between 1 and {MAX_TRANSACTION_FEE}, got {fee}")
        return replace(self, fee=fee)

    def set_env(self, env: "Env") -> "TransactionBuilder":
        return replace(self, env=env)

    def _require_env(self) -> "Env":
        if self.env is None:
            raise NotConfigured("Transaction builder has no environment set")
        return self.env

    def build(self) -> Transaction:
        """Assemble the transaction with the next sequence number of the source.

        The sequence is fetched from the network on every call.

        Raises:
            SequenceUnavailable: If the account cannot be loaded.
            EncodingFailed: If the transaction cannot be encoded.
        """
        env = self._require_env()
        if not self.operations:
            raise InvalidArgument("Transaction has no operations")

        sequence = self.source_account.next_sequence(env)
        tx = Transaction(
            source=self.source_account.account_id,
            sequence=sequence,
            fee=self.fee,
            operations=list(self.operations),
            memo=self.memo,
            preconditions=self.preconditions,
        )
        try:
            tx.to_xdr_object()
        except Exception as e:
            raise EncodingFailed(f"Failed to encode transaction: {e}") from e

        logger.debug(
            "Built transaction for %s: sequence=%d fee=%d operations=%d",
            self.source_account.account_id,
            sequence,
            self.fee,
            len(self.operations),
        )
        return tx

    def simulate(self, tx: Transaction) -> Simulation:
        """Simulate ``tx`` using a throwaway, unguarded signature."""
        env = self._require_env()
        dry_run = self.source_account.sign_transaction_unsafe(tx, env.network_passphrase)
        simulation = env.simulate_transaction(dry_run)

        if simulation.error:
            logger.warning("Simulation failed: %s", simulation.error)
            raise SimulationFailed(
                f"Simulation failed: {simulation.error}", detail=simulation.error
            )
        for event in simulation.events:
            logger.warning("Simulation diagnostic event: %s", event)
        return simulation

    def simulate_and_build(self) -> Transaction:
        """Build, simulate and apply the simulated fee and resource data.

        The result differs from ``build()`` only in its fee and Soroban
        resource data. Transactions without Soroban operations have nothing
        to simulate and only get the per-operation base fee.

        Raises:
            SimulationFailed: If the network rejects the dry run.
            NotSupported: If any invocation needs address credentials.
        """
        tx = self.build()
        if any(isinstance(op, _SOROBAN_OPERATIONS) for op in tx.operations):
            simulation = self.simulate(tx)
            _check_auth_support(simulation)
        else:
            logger.debug("No Soroban operations, skipping simulation")
            simulation = Simulation()

        fee = simulated_fee(self.fee, len(tx.operations), simulation.min_resource_fee)
        logger.debug(
            "Simulated fee %d (resource fee %d)", fee, simulation.min_resource_fee
        )
        return Transaction(
            source=tx.source,
            sequence=tx.sequence,
            fee=fee,
            operations=tx.operations,
            memo=tx.memo,
            preconditions=tx.preconditions,
            soroban_data=simulation.transaction_data,
        )
