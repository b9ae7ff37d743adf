"""Authorization guards attached to accounts.

A guard decides whether an account may sign a given transaction. Guards
are only consumed through ``Account`` signing, which checks every guard
before any signer runs and consumes them only after all signatures were
produced.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from stellar_sdk import InvokeHostFunction, Transaction
from stellar_sdk.xdr import (
    SorobanAuthorizationEntry,
    SorobanAuthorizedFunctionType,
    SorobanAuthorizedInvocation,
)

from .errors import InvalidArgument
from .utils import address_from_sc_address, validate_contract_address


def iter_auth_entries(tx: Transaction) -> Iterator[SorobanAuthorizationEntry]:
    """Yield the authorization entries of every host function operation."""
    for operation in tx.operations:
        if isinstance(operation, InvokeHostFunction):
            yield from operation.auth or []


def _invocation_target(invocation: SorobanAuthorizedInvocation) -> str | None:
    function = invocation.function
    if function.type != SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CONTRACT_FN:
        return None
    return address_from_sc_address(function.contract_fn.contract_address)


def count_contract_invocations(tx: Transaction, contract_id: str) -> int:
    """Count authorized invocations addressed to ``contract_id``.

    Walks every authorization entry's invocation tree, including nested
    sub-invocations.
    """
    count = 0
    stack = [entry.root_invocation for entry in iter_auth_entries(tx)]
    while stack:
        invocation = stack.pop()
        if _invocation_target(invocation) == contract_id:
            count += 1
        stack.extend(invocation.sub_invocations or [])
    return count


@dataclass
class CallBudget:
    """Allows signing while calls remain; each signature uses one call."""

    remaining: int

    def __post_init__(self) -> None:
        if self.remaining < 0:
            raise InvalidArgument(f"Call budget cannot be negative, got {self.remaining}")

    def check(self, tx: Transaction) -> bool:
        return self.remaining > 0

    def describe(self) -> str:
        return f"CallBudget(remaining={self.remaining})"

    def _consume(self, tx: Transaction) -> None:
        self.remaining -= 1


@dataclass
class ContractCallBudget:
    """Limits how many authorized invocations of one contract may be signed.

    A transaction passes when it authorizes between one and ``remaining``
    invocations of ``contract_id``. Transactions that do not touch the
    contract at all are rejected.
    """

    contract_id: str
    remaining: int

    def __post_init__(self) -> None:
        if not validate_contract_address(self.contract_id):
            raise InvalidArgument(f"Invalid contract id: {self.contract_id}")
        if self.remaining < 0:
            raise InvalidArgument(f"Call budget cannot be negative, got {self.remaining}")

    def check(self, tx: Transaction) -> bool:
        calls = count_contract_invocations(tx, self.contract_id)
        return 1 <= calls <= self.remaining

    def describe(self) -> str:
        return (
            f"ContractCallBudget(contract_id={self.contract_id}, "
            f"remaining={self.remaining})"
        )

    def _consume(self, tx: Transaction) -> None:
        self.remaining -= count_contract_invocations(tx, self.contract_id)


Guard = CallBudget | ContractCallBudget
