"""Error types for the MocaId SDK.

Local errors (schema, key, signature range, deadline) are raised before any
digest, signature or payload is returned. External errors wrap failures of the
nonce oracle or the registration call and are never retried here.
"""


class MocaIdError(Exception):
    """Base class for all SDK errors."""


class SchemaError(MocaIdError, ValueError):
    """Malformed schema or message values that do not match the schema."""


class PrivateKeyError(MocaIdError, ValueError):
    """Zero, out-of-range or malformed private key."""


class SignatureRangeError(MocaIdError, ValueError):
    """Signature with a bad length, an out-of-range r/s or an unknown v."""


class ExpiredDeadlineError(MocaIdError, ValueError):
    """Authorization deadline already in the past at signing time."""


class ExternalCallError(MocaIdError):
    """Failure of an on-chain read or write."""


class NonceFetchError(ExternalCallError):
    """The nonce oracle could not be queried."""


class SubmissionError(ExternalCallError):
    """The registration transaction could not be submitted or confirmed.

    `tx_hash` is set once the transaction has been broadcast.
    """

    def __init__(self, message: str, tx_hash: str = ""):
        super().__init__(message)
        self.tx_hash = tx_hash


class StaleAuthorizationError(SubmissionError):
    """The registration transaction reverted on-chain.

    Usually the nonce advanced between signing and submission, or the
    deadline passed before the transaction was mined.
    """
