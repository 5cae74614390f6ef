"""Exceptions raised by the web authentication engine."""


class Sep10Error(Exception):
    """Base class for all web authentication errors."""


class InvalidRequestData(Sep10Error):
    """Malformed or unsupported client input.

    Attributes:
        status_code: HTTP status to answer with (400, or 403 for disallowed
            client domains).
        reason: Stable machine-readable rejection code.
    """

    def __init__(self, message: str, status_code: int = 400, reason: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.reason = reason


class ClientDomainSigningKeyNotFound(InvalidRequestData):
    """The client domain publishes no usable SIGNING_KEY."""


class InvalidConfig(Sep10Error):
    """Server misconfiguration, detected at construction time."""


class AccountLookupFailure(Sep10Error):
    """The ledger query service could not be reached or returned an error."""

    def __init__(self, account_id: str, message: str):
        super().__init__(message)
        self.account_id = account_id


class TokenInvalid(Sep10Error):
    """A presented session token has a missing or malformed claim set."""
