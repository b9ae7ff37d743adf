"""
Operation constructors.

Operations returns stellar_sdk operation objects ready to be added to a
TransactionBuilder: contract upload, creation and invocation, plus the
classic operations used to reconfigure and fund accounts.
"""

import re
from decimal import Decimal

from stellar_sdk import (
    Address,
    Asset,
    InvokeHostFunction,
    Payment,
    SetOptions,
)
from stellar_sdk import Signer as AccountSigner
from stellar_sdk.xdr import (
    ContractExecutable,
    ContractExecutableType,
    ContractIDPreimage,
    CreateContractArgs,
    CreateContractArgsV2,
    Hash,
    HostFunction,
    HostFunctionType,
    InvokeContractArgs,
    SCSymbol,
    SCVal,
    SorobanAuthorizationEntry,
    SorobanAuthorizedFunction,
    SorobanAuthorizedFunctionType,
    SorobanAuthorizedInvocation,
    SorobanCredentials,
    SorobanCredentialsType,
)

from .constants import SC_SYMBOL_LIMIT, SC_SYMBOL_REGEX
from .errors import EncodingFailed, InvalidArgument
from .utils import validate_account_address, validate_contract_address

MAX_SIGNER_WEIGHT = 255


def _check_weight(name: str, value: int | None) -> None:
    if value is not None and not 0 <= value <= MAX_SIGNER_WEIGHT:
        raise InvalidArgument(f"{name} must be between 0 and {MAX_SIGNER_WEIGHT}, got {value}")


def _function_symbol(function_name: str) -> SCSymbol:
    if len(function_name) > SC_SYMBOL_LIMIT:
        raise EncodingFailed(
            f"Function name {function_name!r} exceeds {SC_SYMBOL_LIMIT} characters"
        )
    if not re.match(SC_SYMBOL_REGEX, function_name):
        raise EncodingFailed(f"Function name {function_name!r} is not a valid symbol")
    return SCSymbol(function_name.encode())


def _source_account_auth(function: SorobanAuthorizedFunction) -> SorobanAuthorizationEntry:
    return SorobanAuthorizationEntry(
        credentials=SorobanCredentials(
            type=SorobanCredentialsType.SOROBAN_CREDENTIALS_SOURCE_ACCOUNT
        ),
        root_invocation=SorobanAuthorizedInvocation(
            function=function,
            sub_invocations=[],
        ),
    )


class Operations:
    """Factory for the operations this package submits."""

    @staticmethod
    def upload_wasm(wasm_bytes: bytes) -> InvokeHostFunction:
        """Install contract bytecode on the network."""
        if not wasm_bytes:
            raise EncodingFailed("Contract bytecode is empty")
        host_function = HostFunction(
            type=HostFunctionType.HOST_FUNCTION_TYPE_UPLOAD_CONTRACT_WASM,
            wasm=bytes(wasm_bytes),
        )
        return InvokeHostFunction(host_function=host_function, auth=[])

    @staticmethod
    def create_contract(
        preimage: ContractIDPreimage,
        wasm_hash: bytes,
        constructor_args: list[SCVal] | None = None,
    ) -> InvokeHostFunction:
        """Create a contract instance from installed bytecode.

        With ``constructor_args`` the contract is created with the V2 host
        function, which runs the contract's constructor. Both forms carry a
        source-account authorization for the creation itself.
        """
        if len(wasm_hash) != 32:
            raise EncodingFailed(f"Wasm hash must be 32 bytes, got {len(wasm_hash)}")
        executable = ContractExecutable(
            type=ContractExecutableType.CONTRACT_EXECUTABLE_WASM,
            wasm_hash=Hash(wasm_hash),
        )

        if constructor_args is None:
            args = CreateContractArgs(
                contract_id_preimage=preimage,
                executable=executable,
            )
            host_function = HostFunction(
                type=HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT,
                create_contract=args,
            )
            authorized = SorobanAuthorizedFunction(
                type=SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_HOST_FN,
                create_contract_host_fn=args,
            )
        else:
            args_v2 = CreateContractArgsV2(
                contract_id_preimage=preimage,
                executable=executable,
                constructor_args=list(constructor_args),
            )
            host_function = HostFunction(
                type=HostFunctionType.HOST_FUNCTION_TYPE_CREATE_CONTRACT_V2,
                create_contract_v2=args_v2,
            )
            authorized = SorobanAuthorizedFunction(
                type=SorobanAuthorizedFunctionType.SOROBAN_AUTHORIZED_FUNCTION_TYPE_CREATE_CONTRACT_V2_HOST_FN,
                create_contract_v2_host_fn=args_v2,
            )

        return InvokeHostFunction(
            host_function=host_function,
            auth=[_source_account_auth(authorized)],
        )

    @staticmethod
    def invoke_contract(
        contract_id: str,
        function_name: str,
        args: list[SCVal] | None = None,
        auth: list[SorobanAuthorizationEntry] | None = None,
    ) -> InvokeHostFunction:
        """Call ``function_name`` on a deployed contract."""
        if not validate_contract_address(contract_id):
            raise InvalidArgument(f"Invalid contract id: {contract_id}")
        host_function = HostFunction(
            type=HostFunctionType.HOST_FUNCTION_TYPE_INVOKE_CONTRACT,
            invoke_contract=InvokeContractArgs(
                contract_address=Address(contract_id).to_xdr_sc_address(),
                function_name=_function_symbol(function_name),
                args=list(args or []),
            ),
        )
        return InvokeHostFunction(host_function=host_function, auth=list(auth or []))

    @staticmethod
    def set_options(
        master_weight: int | None = None,
        low_threshold: int | None = None,
        med_threshold: int | None = None,
        high_threshold: int | None = None,
        signer: AccountSigner | None = None,
    ) -> SetOptions:
        _check_weight("master_weight", master_weight)
        _check_weight("low_threshold", low_threshold)
        _check_weight("med_threshold", med_threshold)
        _check_weight("high_threshold", high_threshold)
        return SetOptions(
            master_weight=master_weight,
            low_threshold=low_threshold,
            med_threshold=med_threshold,
            high_threshold=high_threshold,
            signer=signer,
        )

    @staticmethod
    def add_signer(public_key: str, weight: int) -> SetOptions:
        """Add (or reweight) an ed25519 signer on the source account.

        A weight of 0 removes the signer.
        """
        if not validate_account_address(public_key):
            raise InvalidArgument(f"Invalid signer public key: {public_key}")
        _check_weight("weight", weight)
        return SetOptions(signer=AccountSigner.ed25519_public_key(public_key, weight))

    @staticmethod
    def send_payment(
        destination: str,
        amount: str | Decimal,
        asset: Asset | None = None,
    ) -> Payment:
        if not validate_account_address(destination):
            raise InvalidArgument(f"Invalid payment destination: {destination}")
        return Payment(
            destination=destination,
            asset=asset or Asset.native(),
            amount=amount,
        )
