"""Types for Stellar web authentication."""

from dataclasses import dataclass, field
from typing import Any

from stellar_sdk import TransactionEnvelope

from .constants import (
    AUTH_KEY_SUFFIX,
    CLIENT_DOMAIN_KEY,
    ERR_INVALID_PARAMETER,
    ERR_MISSING_ACCOUNT,
    ERR_MISSING_TRANSACTION,
    SIGNER_TYPE_ED25519,
    WEB_AUTH_DOMAIN_KEY,
)
from .errors import InvalidRequestData


# --- Requests ---


@dataclass
class ChallengeRequest:
    """Query parameters of a challenge (GET) request."""

    account: str
    memo: str | None = None
    home_domain: str | None = None
    client_domain: str | None = None

    @classmethod
    def from_query_params(cls, params: dict[str, Any]) -> "ChallengeRequest":
        account = params.get("account")
        if account is None:
            raise InvalidRequestData("Account is not set", reason=ERR_MISSING_ACCOUNT)
        if not isinstance(account, str):
            raise InvalidRequestData(
                "Invalid account. Must be string.", reason=ERR_INVALID_PARAMETER
            )

        optional: dict[str, str | None] = {}
        for name in ("memo", "home_domain", "client_domain"):
            value = params.get(name)
            if value is not None and not isinstance(value, str):
                raise InvalidRequestData(
                    f"Invalid {name} value. Must be string.",
                    reason=ERR_INVALID_PARAMETER,
                )
            optional[name] = value or None

        return cls(account=account, **optional)


@dataclass
class ValidationRequest:
    """Body of a challenge submission (POST) request."""

    url: str
    transaction: str

    @classmethod
    def from_dict(cls, url: str, data: dict[str, Any]) -> "ValidationRequest":
        transaction = data.get("transaction")
        if transaction is None:
            raise InvalidRequestData(
                "Transaction is not set", reason=ERR_MISSING_TRANSACTION
            )
        if not isinstance(transaction, str):
            raise InvalidRequestData(
                "Invalid transaction. Must be string.", reason=ERR_INVALID_PARAMETER
            )
        return cls(url=url, transaction=transaction)


# --- Challenge entries ---


@dataclass(frozen=True)
class DomainAuthEntry:
    """First entry: ``"<home domain> auth"`` carrying the nonce, sourced by the client."""

    home_domain: str
    nonce: str
    source: str

    @property
    def key(self) -> str:
        return self.home_domain + AUTH_KEY_SUFFIX

    @property
    def value(self) -> str:
        return self.nonce


@dataclass(frozen=True)
class WebAuthDomainEntry:
    """Second entry: the web auth domain, sourced by the server."""

    web_auth_domain: str
    source: str

    key = WEB_AUTH_DOMAIN_KEY

    @property
    def value(self) -> str:
        return self.web_auth_domain


@dataclass(frozen=True)
class ClientDomainEntry:
    """Optional third entry: the client domain, sourced by its signing key."""

    client_domain: str
    source: str

    key = CLIENT_DOMAIN_KEY

    @property
    def value(self) -> str:
        return self.client_domain


ChallengeEntry = DomainAuthEntry | WebAuthDomainEntry | ClientDomainEntry


@dataclass
class ChallengeArtifact:
    """An unsigned challenge, before it is encoded into a transaction.

    The sequence number is always zero and is therefore not a field.
    """

    server_account_id: str
    entries: tuple[ChallengeEntry, ...]
    min_time: int
    max_time: int
    memo_id: int | None = None

    def validate(self) -> None:
        if len(self.entries) not in (2, 3):
            raise ValueError(f"Expected 2 or 3 entries, got {len(self.entries)}")
        if not isinstance(self.entries[0], DomainAuthEntry):
            raise ValueError("First entry must be the domain auth entry")
        if not isinstance(self.entries[1], WebAuthDomainEntry):
            raise ValueError("Second entry must be the web_auth_domain entry")
        if self.entries[1].source != self.server_account_id:
            raise ValueError("web_auth_domain entry must be sourced by the server")
        if len(self.entries) == 3 and not isinstance(self.entries[2], ClientDomainEntry):
            raise ValueError("Third entry must be the client_domain entry")
        if self.max_time <= 0 or self.max_time <= self.min_time:
            raise ValueError(
                f"Invalid time window [{self.min_time}, {self.max_time}]"
            )

    @property
    def client_account_id(self) -> str:
        return self.entries[0].source


@dataclass
class ClientDomainData:
    client_domain: str
    client_domain_account_id: str


@dataclass
class ParsedChallenge:
    """A client-returned challenge that passed structural validation."""

    envelope: TransactionEnvelope
    client_account_id: str
    matched_home_domain: str
    client_domain_data: ClientDomainData | None = None
    entries: list[ChallengeEntry] = field(default_factory=list)

    @property
    def memo_id(self) -> int | None:
        return getattr(self.envelope.transaction.memo, "memo_id", None)

    @property
    def min_time(self) -> int:
        return self.envelope.transaction.preconditions.time_bounds.min_time

    @property
    def max_time(self) -> int:
        return self.envelope.transaction.preconditions.time_bounds.max_time

    @property
    def tx_hash_hex(self) -> str:
        return self.envelope.hash_hex()


# --- Ledger data ---


@dataclass
class SignerInfo:
    account_id: str
    weight: int
    type: str = SIGNER_TYPE_ED25519


@dataclass
class AccountInfo:
    """Signers and medium threshold of an account that exists on the ledger."""

    account_id: str
    signers: list[SignerInfo] = field(default_factory=list)
    med_threshold: int = 0

    def ed25519_signers(self) -> list[SignerInfo]:
        return [s for s in self.signers if s.type == SIGNER_TYPE_ED25519]

    @classmethod
    def from_horizon(cls, data: dict[str, Any]) -> "AccountInfo":
        signers = [
            SignerInfo(
                account_id=s["key"],
                weight=int(s["weight"]),
                type=s.get("type", SIGNER_TYPE_ED25519),
            )
            for s in data.get("signers", [])
        ]
        thresholds = data.get("thresholds", {})
        return cls(
            account_id=data.get("account_id") or data["id"],
            signers=signers,
            med_threshold=int(thresholds.get("med_threshold", 0)),
        )


# --- Responses ---


@dataclass
class ChallengeResponse:
    transaction: str
    network_passphrase: str

    status_code = 200

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction": self.transaction,
            "network_passphrase": self.network_passphrase,
        }


@dataclass
class TokenResponse:
    token: str

    status_code = 200

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token}


@dataclass
class ErrorResponse:
    error: str
    status_code: int = 400
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


Sep10Response = ChallengeResponse | TokenResponse | ErrorResponse
