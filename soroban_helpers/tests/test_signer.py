"""Unit tests for Signer."""

import pytest
from stellar_sdk import Keypair, Network

from soroban_helpers.errors import AuthorizationDenied
from soroban_helpers.signer import Signer

from conftest import NETWORK_PASSPHRASE, make_transaction


class TestSignerKeys:
    def test_from_secret(self):
        kp = Keypair.random()
        signer = Signer.from_secret(kp.secret)
        assert signer.public_key == kp.public_key
        assert signer.account_id == kp.public_key

    def test_hint_is_last_four_bytes(self, signer):
        assert signer.hint == signer.raw_public_key[-4:]
        assert len(signer.raw_public_key) == 32

    def test_equality_by_public_key(self):
        kp = Keypair.random()
        assert Signer(kp) == Signer.from_secret(kp.secret)
        assert Signer(kp) != Signer.random()
        assert len({Signer(kp), Signer.from_secret(kp.secret)}) == 1


class TestSignTransaction:
    def test_signature_verifies(self, signer):
        tx = make_transaction(signer.public_key)
        signature = signer.sign_transaction(tx, NETWORK_PASSPHRASE)
        assert signature.signature_hint == signer.hint
        assert signer.verify_signature(tx, NETWORK_PASSPHRASE, signature) is True

    def test_signature_is_network_scoped(self, signer):
        tx = make_transaction(signer.public_key)
        signature = signer.sign_transaction(tx, NETWORK_PASSPHRASE)
        assert signer.verify_signature(
            tx, Network.PUBLIC_NETWORK_PASSPHRASE, signature
        ) is False

    def test_other_signer_rejects_signature(self, signer):
        tx = make_transaction(signer.public_key)
        signature = signer.sign_transaction(tx, NETWORK_PASSPHRASE)
        assert Signer.random().verify_signature(tx, NETWORK_PASSPHRASE, signature) is False

    def test_public_key_only_cannot_sign(self):
        kp = Keypair.random()
        signer = Signer(Keypair.from_public_key(kp.public_key))
        tx = make_transaction(kp.public_key)
        with pytest.raises(AuthorizationDenied, match="cannot sign"):
            signer.sign_transaction(tx, NETWORK_PASSPHRASE)
