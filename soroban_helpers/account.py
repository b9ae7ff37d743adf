"""
Accounts: the unit that signs transactions.

An account owns one signer (single) or several signers sharing one
on-chain account (multisig), plus the guards that decide whether it may
sign a given transaction.

Accounts are not safe for concurrent use. Two threads signing with the
same account can both pass a budget check before either consumes it;
serialize access externally if an account is shared.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from stellar_sdk import DecoratedSignature, Transaction, TransactionEnvelope

from .constants import DEFAULT_AUTHORIZED_CALLS, MAX_SIGNATURES
from .errors import AuthorizationDenied, EncodingFailed, InvalidArgument
from .guard import CallBudget, Guard
from .operation import Operations
from .signer import Signer
from .transaction import TransactionBuilder
from .transport import AccountInfo
from .utils import validate_account_address

if TYPE_CHECKING:
    from .env import Env

logger = logging.getLogger(__name__)


class AccountKind(Enum):
    SINGLE = "single"
    MULTISIG = "multisig"


@dataclass
class AccountConfig:
    """Signing policy changes to apply with ``Account.configure``."""

    master_weight: int | None = None
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None
    signers: list[tuple[str, int]] = field(default_factory=list)

    def with_master_weight(self, weight: int) -> "AccountConfig":
        self.master_weight = weight
        return self

    def with_thresholds(self, low: int, med: int, high: int) -> "AccountConfig":
        self.low_threshold = low
        self.med_threshold = med
        self.high_threshold = high
        return self

    def add_signer(self, public_key: str, weight: int) -> "AccountConfig":
        self.signers.append((public_key, weight))
        return self

    @property
    def has_thresholds(self) -> bool:
        return any(
            value is not None
            for value in (
                self.master_weight,
                self.low_threshold,
                self.med_threshold,
                self.high_threshold,
            )
        )

    def is_empty(self) -> bool:
        return not self.signers and not self.has_thresholds


class Account:
    """A Stellar account able to sign transactions.

    Use ``Account.single`` or ``Account.multisig`` to construct one. When
    no guards are given, the account gets a ``CallBudget`` of
    ``DEFAULT_AUTHORIZED_CALLS``.
    """

    def __init__(
        self,
        kind: AccountKind,
        account_id: str,
        signers: list[Signer],
        guards: list[Guard] | None = None,
    ):
        if not signers:
            raise InvalidArgument("An account needs at least one signer")
        if kind == AccountKind.SINGLE and len(signers) != 1:
            raise InvalidArgument("A single account has exactly one signer")
        if not validate_account_address(account_id):
            raise InvalidArgument(f"Invalid account id: {account_id}")

        self.kind = kind
        self.account_id = account_id
        self._signers = tuple(signers)
        self._guards: list[Guard] = (
            list(guards) if guards is not None else [CallBudget(DEFAULT_AUTHORIZED_CALLS)]
        )

    @classmethod
    def single(cls, signer: Signer, guards: list[Guard] | None = None) -> "Account":
        return cls(AccountKind.SINGLE, signer.account_id, [signer], guards)

    @classmethod
    def multisig(
        cls,
        account_id: str,
        signers: list[Signer],
        guards: list[Guard] | None = None,
    ) -> "Account":
        """An account whose transactions are signed by every one of ``signers``."""
        return cls(AccountKind.MULTISIG, account_id, list(signers), guards)

    @property
    def signers(self) -> tuple[Signer, ...]:
        return self._signers

    @property
    def guards(self) -> tuple[Guard, ...]:
        return tuple(self._guards)

    def add_guard(self, guard: Guard) -> None:
        self._guards.append(guard)

    # Network state

    def load(self, env: "Env") -> AccountInfo:
        return env.get_account(self.account_id)

    def get_sequence(self, env: "Env") -> int:
        sequence = self.load(env).sequence
        logger.debug("Account %s is at sequence %d", self.account_id, sequence)
        return sequence

    def next_sequence(self, env: "Env") -> int:
        return self.get_sequence(env) + 1

    # Signing

    def _signatures(
        self, tx: Transaction, network_passphrase: str
    ) -> list[DecoratedSignature]:
        return [
            signer.sign_transaction(tx, network_passphrase) for signer in self._signers
        ]

    def _assemble(
        self,
        tx: Transaction,
        network_passphrase: str,
        existing: list[DecoratedSignature],
        new: list[DecoratedSignature],
    ) -> TransactionEnvelope:
        signatures = list(existing) + new
        if len(signatures) > MAX_SIGNATURES:
            raise EncodingFailed(
                f"Envelope would carry {len(signatures)} signatures, "
                f"at most {MAX_SIGNATURES} are allowed"
            )
        return TransactionEnvelope(tx, network_passphrase, signatures=signatures)

    def _try_sign(
        self,
        tx: Transaction,
        network_passphrase: str,
        existing: list[DecoratedSignature],
    ) -> TransactionEnvelope:
        # Nothing is consumed unless every guard passes and the envelope is complete.
        for guard in self._guards:
            if not guard.check(tx):
                description = guard.describe()
                raise AuthorizationDenied(
                    f"Account {self.account_id} is not authorized to sign: "
                    f"{description} rejected the transaction",
                    guard=description,
                )

        envelope = self._assemble(
            tx, network_passphrase, existing, self._signatures(tx, network_passphrase)
        )

        for guard in self._guards:
            guard._consume(tx)
        logger.debug(
            "Account %s signed transaction with %d signer(s)",
            self.account_id,
            len(self._signers),
        )
        return envelope

    def sign_transaction(
        self, tx: Transaction, network_passphrase: str
    ) -> TransactionEnvelope:
        """Check the guards, sign with every signer, then consume the guards.

        Raises:
            AuthorizationDenied: If a guard rejects ``tx`` or a signer fails.
                No guard state changes in that case.
        """
        return self._try_sign(tx, network_passphrase, [])

    def sign_transaction_envelope(
        self, envelope: TransactionEnvelope
    ) -> TransactionEnvelope:
        """Add this account's signatures to an already signed envelope.

        Returns a new envelope carrying the existing signatures followed by
        this account's; ``envelope`` itself is left untouched.
        """
        return self._try_sign(
            envelope.transaction,
            envelope.network_passphrase,
            list(envelope.signatures),
        )

    def sign_transaction_unsafe(
        self, tx: Transaction, network_passphrase: str
    ) -> TransactionEnvelope:
        """Sign ``tx`` WITHOUT checking or consuming any guard.

        This bypasses authorization entirely. It exists for simulation
        dry-runs, whose envelopes are never submitted.
        """
        return self._assemble(
            tx, network_passphrase, [], self._signatures(tx, network_passphrase)
        )

    # Reconfiguration

    def configure(self, env: "Env", config: AccountConfig) -> TransactionEnvelope:
        """Build and sign a transaction applying ``config`` to this account.

        Adds one SetOptions operation per signer, then one carrying the
        master weight and thresholds if any are set. The returned envelope
        is ready to submit with ``env.send_transaction``.
        """
        if config.is_empty():
            raise InvalidArgument("Account configuration has no changes")

        builder = TransactionBuilder(self, env)
        for public_key, weight in config.signers:
            builder = builder.add_operation(Operations.add_signer(public_key, weight))
        if config.has_thresholds:
            builder = builder.add_operation(
                Operations.set_options(
                    master_weight=config.master_weight,
                    low_threshold=config.low_threshold,
                    med_threshold=config.med_threshold,
                    high_threshold=config.high_threshold,
                )
            )

        tx = builder.simulate_and_build()
        logger.info("Configuring account %s", self.account_id)
        return self.sign_transaction(tx, env.network_passphrase)

    def __repr__(self) -> str:
        return (
            f"Account(kind={self.kind.value}, account_id={self.account_id!r}, "
            f"signers={len(self._signers)}, guards={list(self._guards)!r})"
        )
