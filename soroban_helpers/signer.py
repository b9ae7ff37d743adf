"""Ed25519 transaction signer for Soroban accounts."""

from stellar_sdk import DecoratedSignature, Keypair, Transaction, TransactionEnvelope
from stellar_sdk.exceptions import BadSignatureError

from .errors import AuthorizationDenied


class Signer:
    """Holds one keypair and produces network-scoped transaction signatures.

    Signers are immutable; sharing one between several accounts is safe.
    """

    __slots__ = ("_keypair",)

    def __init__(self, keypair: Keypair):
        self._keypair = keypair

    @classmethod
    def from_secret(cls, secret: str) -> "Signer":
        """Create a signer from an S... secret seed."""
        return cls(Keypair.from_secret(secret))

    @classmethod
    def random(cls) -> "Signer":
        return cls(Keypair.random())

    @property
    def keypair(self) -> Keypair:
        return self._keypair

    @property
    def public_key(self) -> str:
        """The signer's public key (G-account)."""
        return self._keypair.public_key

    @property
    def account_id(self) -> str:
        """The account id controlled by this key."""
        return self._keypair.public_key

    @property
    def raw_public_key(self) -> bytes:
        return self._keypair.raw_public_key()

    @property
    def hint(self) -> bytes:
        """Signature hint: the last 4 bytes of the raw public key."""
        return self._keypair.signature_hint()

    def sign_transaction(
        self,
        tx: Transaction,
        network_passphrase: str,
    ) -> DecoratedSignature:
        """Sign a transaction for the given network.

        The signed payload is the hash of the transaction's signature base,
        which includes the network id, so signatures cannot be replayed on
        another network.

        Raises:
            AuthorizationDenied: If the key cannot sign.
        """
        if not self._keypair.can_sign():
            raise AuthorizationDenied(
                f"Signer {self.public_key} has no secret key and cannot sign"
            )
        tx_hash = TransactionEnvelope(tx, network_passphrase).hash()
        try:
            return self._keypair.sign_decorated(tx_hash)
        except Exception as e:
            raise AuthorizationDenied(
                f"Signer {self.public_key} failed to sign transaction: {e}"
            ) from e

    def verify_signature(
        self,
        tx: Transaction,
        network_passphrase: str,
        signature: DecoratedSignature,
    ) -> bool:
        """Check that ``signature`` is this signer's signature over ``tx``."""
        if signature.signature_hint != self.hint:
            return False
        tx_hash = TransactionEnvelope(tx, network_passphrase).hash()
        try:
            self._keypair.verify(tx_hash, signature.signature)
        except BadSignatureError:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signer):
            return NotImplemented
        return self.public_key == other.public_key

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        return f"Signer(public_key={self.public_key!r})"
