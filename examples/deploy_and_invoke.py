"""Deploy a contract and call one of its functions.

Usage: python examples/deploy_and_invoke.py path/to/contract.wasm [function] [name]

The deployer's secret seed is read from SOROBAN_PRIVATE_KEY_1 in
examples/.env. The default call is ``hello("world")``.
"""

import logging
import sys

from stellar_sdk import scval

from soroban_helpers import (
    Account,
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

    if len(argv) < 2:
        print(__doc__)
        return 1
    wasm_path = argv[1]
    function_name = argv[2] if len(argv) > 2 else "hello"
    argument = argv[3] if len(argv) > 3 else "world"

    try:
        env = Env(EnvConfigs.from_environ(DOTENV_PATH))
        account = Account.single(signer_from_environ("SOROBAN_PRIVATE_KEY_1", DOTENV_PATH))

        contract = Contract.from_file(wasm_path).deploy(env, account)
        print(f"Contract deployed at {contract.contract_id}")

        response = contract.invoke(function_name, [scval.to_symbol(argument)])
        result = Parser(ParserType.INVOKE_FUNCTION).parse(response)
    except SorobanHelperError as e:
        print(f"Error: {e}")
        return 1

    print(f"{function_name}({argument!r}) returned {result.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
