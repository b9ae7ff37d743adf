"""Unit tests for TransactionBuilder."""

from types import SimpleNamespace

import pytest
from stellar_sdk import NoneMemo, SorobanDataBuilder, TextMemo
from stellar_sdk.xdr import SorobanCredentialsType

from soroban_helpers.account import Account
from soroban_helpers.constants import DEFAULT_TRANSACTION_FEE, MAX_TRANSACTION_FEE
from soroban_helpers.errors import (
    AuthorizationDenied,
    EncodingFailed,
    InvalidArgument,
    NotConfigured,
    NotSupported,
    SequenceUnavailable,
    SimulationFailed,
)
from soroban_helpers.guard import CallBudget
from soroban_helpers.operation import Operations
from soroban_helpers.transaction import TransactionBuilder, simulated_fee
from soroban_helpers.transport import Simulation

from conftest import CONTRACT_A


def invoke_op():
    return Operations.invoke_contract(CONTRACT_A, "hello", [])


def builder(account, env, *ops):
    result = TransactionBuilder(account, env)
    for op in ops or (invoke_op(),):
        result = result.add_operation(op)
    return result


class TestBuilderValue:
    def test_defaults(self, account):
        b = TransactionBuilder(account)
        assert b.fee == DEFAULT_TRANSACTION_FEE
        assert isinstance(b.memo, NoneMemo)
        assert b.preconditions is None
        assert b.operations == ()

    def test_methods_return_new_builders(self, account, env):
        base = TransactionBuilder(account)
        with_op = base.add_operation(invoke_op())
        assert base.operations == ()
        assert len(with_op.operations) == 1
        assert base.set_env(env).env is env
        assert base.env is None

    def test_text_memo(self, account):
        b = TransactionBuilder(account).set_text_memo("hi")
        assert isinstance(b.memo, TextMemo)
        assert b.memo.memo_text == b"hi"

    def test_text_memo_too_long(self, account):
        with pytest.raises(EncodingFailed):
            TransactionBuilder(account).set_text_memo("x" * 29)

    def test_time_bounds(self, account):
        b = TransactionBuilder(account).set_time_bounds(10, 20)
        assert b.preconditions.time_bounds.min_time == 10
        assert b.preconditions.time_bounds.max_time == 20

    def test_invalid_time_bounds(self, account):
        with pytest.raises(InvalidArgument):
            TransactionBuilder(account).set_time_bounds(20, 10)

    @pytest.mark.parametrize("fee", [0, -1, MAX_TRANSACTION_FEE + 1])
    def test_invalid_fee(self, account, fee):
        with pytest.raises(InvalidArgument):
            TransactionBuilder(account).set_fee(fee)


class TestBuild:
    def test_sequence_is_current_plus_one(self, account, env, transport):
        transport.sequences[account.account_id] = 7
        tx = builder(account, env).build()
        assert tx.sequence == 8
        assert tx.fee == DEFAULT_TRANSACTION_FEE
        assert tx.source.account_id == account.account_id

    def test_sequence_requeried_every_build(self, account, env, transport):
        b = builder(account, env)
        transport.sequences[account.account_id] = 1
        assert b.build().sequence == 2
        transport.sequences[account.account_id] = 5
        assert b.build().sequence == 6
        assert len(transport.get_account_calls) == 2

    def test_carries_memo_and_preconditions(self, account, env):
        tx = builder(account, env).set_text_memo("memo").set_time_bounds(0, 100).build()
        assert tx.memo.memo_text == b"memo"
        assert tx.preconditions.time_bounds.max_time == 100

    def test_requires_env(self, account):
        with pytest.raises(NotConfigured):
            TransactionBuilder(account).add_operation(invoke_op()).build()

    def test_requires_operations(self, account, env):
        with pytest.raises(InvalidArgument):
            TransactionBuilder(account, env).build()

    def test_sequence_failure_propagates(self, account, env, transport):
        transport.account_error = SequenceUnavailable("down", account.account_id)
        with pytest.raises(SequenceUnavailable):
            builder(account, env).build()


class TestSimulatedFee:
    def test_formula(self):
        assert simulated_fee(100, 1, 5000) == 5100
        assert simulated_fee(100, 3, 0) == 300

    def test_never_below_base(self):
        assert simulated_fee(100, 0, 0) == 100

    def test_overflow(self):
        with pytest.raises(EncodingFailed):
            simulated_fee(100, 1, MAX_TRANSACTION_FEE)


class TestSimulateAndBuild:
    def test_applies_fee_and_resource_data(self, account, env, transport):
        data = SorobanDataBuilder().set_resource_fee(5000).build()
        transport.simulation = Simulation(min_resource_fee=5000, transaction_data=data)
        b = builder(account, env)

        built = b.build()
        simulated = b.simulate_and_build()

        assert simulated.fee == 5100
        assert simulated.fee >= built.fee
        assert simulated.soroban_data == data
        assert simulated.sequence == built.sequence
        assert simulated.operations == built.operations
        assert simulated.memo == built.memo

    def test_dry_run_does_not_consume_guards(self, signer, env, transport):
        budget = CallBudget(1)
        account = Account.single(signer, guards=[budget])
        tx = builder(account, env).simulate_and_build()

        assert budget.remaining == 1
        assert len(transport.simulated) == 1
        assert len(transport.simulated[0].signatures) == 1

        account.sign_transaction(tx, env.network_passphrase)
        assert budget.remaining == 0

    def test_dry_run_works_with_exhausted_budget_but_signing_does_not(
        self, signer, env
    ):
        account = Account.single(signer, guards=[CallBudget(0)])
        tx = builder(account, env).simulate_and_build()
        with pytest.raises(AuthorizationDenied):
            account.sign_transaction(tx, env.network_passphrase)

    def test_simulation_error(self, account, env, transport):
        transport.simulation = Simulation(error="HostError: Error(Contract, #1)")
        with pytest.raises(SimulationFailed) as exc_info:
            builder(account, env).simulate_and_build()
        assert exc_info.value.detail == "HostError: Error(Contract, #1)"

    def test_diagnostic_events_are_not_fatal(self, account, env, transport, caplog):
        transport.simulation = Simulation(min_resource_fee=10, events=["AAAAAQ=="])
        with caplog.at_level("WARNING", logger="soroban_helpers.transaction"):
            tx = builder(account, env).simulate_and_build()
        assert tx.fee == 110
        assert "AAAAAQ==" in caplog.text

    def test_address_credentials_not_supported(self, account, env, transport):
        entry = SimpleNamespace(
            credentials=SimpleNamespace(
                type=SorobanCredentialsType.SOROBAN_CREDENTIALS_ADDRESS
            )
        )
        transport.simulation = Simulation(auth=[entry])
        with pytest.raises(NotSupported):
            builder(account, env).simulate_and_build()

    def test_source_account_credentials_allowed(self, account, env, transport):
        entry = SimpleNamespace(
            credentials=SimpleNamespace(
                type=SorobanCredentialsType.SOROBAN_CREDENTIALS_SOURCE_ACCOUNT
            )
        )
        transport.simulation = Simulation(auth=[entry], min_resource_fee=1)
        assert builder(account, env).simulate_and_build().fee == 101

    def test_classic_operations_skip_simulation(self, account, env, transport):
        ops = [Operations.add_signer(account.account_id, 0), Operations.set_options(master_weight=1)]
        tx = builder(account, env, *ops).simulate_and_build()
        assert transport.simulated == []
        assert tx.fee == 200
        assert tx.soroban_data is None
