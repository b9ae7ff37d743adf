"""Call a function on an already deployed contract.

Usage: python examples/invoke_contract.py CONTRACT_ID FUNCTION [SYMBOL_ARG ...]

The account may sign at most three transactions.
"""

import logging
import sys

from stellar_sdk import scval

from soroban_helpers import (
    Account,
    CallBudget,
    ClientContractConfigs,
    Contract,
    Env,
    EnvConfigs,
    Parser,
    ParserType,
    SorobanHelperError,
    signer_from_environ,
)

DOTENV_PATH = "examples/.env"


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)

    if len(argv) < 3:
        print(__doc__)
        return 1
    contract_id, function_name = argv[1], argv[2]
    args = [scval.to_symbol(arg) for arg in argv[3:]]

    try:
        env = Env(EnvConfigs.from_environ(DOTENV_PATH))
        signer = signer_from_environ("SOROBAN_PRIVATE_KEY_1", DOTENV_PATH)
        account = Account.single(signer, guards=[CallBudget(3)])

        contract = Contract.from_deployed(ClientContractConfigs(contract_id, env, account))
        response = contract.invoke(function_name, args)
        result = Parser(ParserType.INVOKE_FUNCTION).parse(response)
    except SorobanHelperError as e:
        print(f"Error: {e}")
        return 1

    if result.value is None:
        print(f"{function_name} returned nothing")
    else:
        print(f"{function_name} returned {result.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
