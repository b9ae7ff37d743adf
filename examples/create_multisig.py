"""Turn an account into a 2-of-3 multisig account.

Reads SOROBAN_PRIVATE_KEY_1..3 from examples/.env (or the environment).
Key 3 owns the account; keys 1 and 2 are added as signers and every
threshold is set to 1.
"""

import logging
import sys

from soroban_helpers import (
    Account,
    AccountConfig,
    Env,
    EnvConfigs,
    InvalidArgument,
    Parser,
    ParserType,
    SorobanHelperError,
    signer_from_environ,
)

DOTENV_PATH = "examples/.env"


def main() -> int:
    logging.basicConfig(level=logging.INFO)

    try:
        signer_1 = signer_from_environ("SOROBAN_PRIVATE_KEY_1", DOTENV_PATH)
        signer_2 = signer_from_environ("SOROBAN_PRIVATE_KEY_2", DOTENV_PATH)
        signer_3 = signer_from_environ("SOROBAN_PRIVATE_KEY_3", DOTENV_PATH)
    except InvalidArgument as e:
        print(f"Configuration error: {e}")
        return 1

    env = Env(EnvConfigs.from_environ(DOTENV_PATH))
    target = Account.single(signer_3)

    config = (
        AccountConfig()
        .with_master_weight(1)
        .with_thresholds(1, 1, 1)
        .add_signer(signer_1.public_key, 1)
        .add_signer(signer_2.public_key, 1)
    )

    try:
        envelope = target.configure(env, config)
        response = env.send_transaction(envelope)
        result = Parser(ParserType.ACCOUNT_SET_OPTIONS).parse(response)
    except SorobanHelperError as e:
        print(f"Failed to configure account: {e}")
        return 1

    print(f"Transaction {response.tx_hash} confirmed in ledger {response.ledger}")
    if result.value is not None:
        print(f"Account now has {len(result.value.signers)} additional signer(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
