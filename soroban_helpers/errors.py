"""
Exceptions raised by the Soroban helpers.

Every error raised by this package derives from SorobanHelperError.
"""
from typing import Optional


class SorobanHelperError(Exception):
    """Base exception for all Soroban helper errors.

    ``context`` maps names to the values that locate a failure, such as the
    contract id and function of a failed call. Callers add to it with
    ``with_context`` as the error propagates; it is appended to the message.
    """

    def __init__(self, *args):
        super().__init__(*args)
        self.context: dict[str, str] = {}

    def with_context(self, **context: str) -> "SorobanHelperError":
        """Record ``context`` on this error and return it for re-raising."""
        self.context.update(context)
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if not self.context:
            return message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{message} ({details})"


class AuthorizationDenied(SorobanHelperError):
    """Raised when a guard rejects a transaction or a signer fails to sign.

    ``guard`` holds the description of the rejecting guard, if any.
    """

    def __init__(self, message: str, guard: Optional[str] = None):
        self.guard = guard
        super().__init__(message)


class NetworkRequestFailed(SorobanHelperError):
    """Raised when a request to the RPC server fails or times out."""
    pass


class SequenceUnavailable(NetworkRequestFailed):
    """Raised when the sequence number of an account cannot be fetched."""

    def __init__(self, message: str, account_id: Optional[str] = None):
        self.account_id = account_id
        super().__init__(message)


class SimulationFailed(SorobanHelperError):
    """Raised when the network rejects a transaction during simulation."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(message)


class TransactionFailed(SorobanHelperError):
    """Raised when a submitted transaction did not succeed."""

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ):
        self.detail = detail
        self.tx_hash = tx_hash
        super().__init__(message)


class ContractCodeAlreadyExists(TransactionFailed):
    """Raised when uploaded contract code is already installed on the network."""

    def __init__(self, detail: Optional[str] = None, tx_hash: Optional[str] = None):
        super().__init__("Contract code already exists", detail=detail, tx_hash=tx_hash)


class EncodingFailed(SorobanHelperError):
    """Raised when a value cannot be encoded to XDR."""
    pass


class NotConfigured(SorobanHelperError):
    """Raised when a contract is invoked before it has deployment configs."""
    pass


class NotSupported(SorobanHelperError):
    """Raised for transactions needing features this package does not implement."""
    pass


class ContractIdMismatch(SorobanHelperError):
    """Raised when the network reports a different contract id than expected."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Deployed contract id {actual} does not match derived id {expected}"
        )


class InvalidArgument(SorobanHelperError, ValueError):
    """Raised when a caller passes an invalid argument."""
    pass


class FileReadError(InvalidArgument):
    """Raised when contract bytecode cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
