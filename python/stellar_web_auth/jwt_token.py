"""Session tokens issued after a successful challenge."""

import logging
from dataclasses import dataclass, field
from typing import Any

import jwt
from stellar_sdk import MuxedAccount

from .constants import (
    DEFAULT_JWT_TIMEOUT_SECONDS,
    JWT_ALGORITHM,
    MUXED_ACCOUNT_PREFIX,
    REQUIRED_JWT_CLAIMS,
)
from .errors import TokenInvalid
from .types import ParsedChallenge
from .utils import is_muxed_account, validate_stellar_account_address

logger = logging.getLogger(__name__)


@dataclass
class Sep10Jwt:
    """Claims of a web authentication session token.

    ``sub`` holds the client account in one of three shapes: ``G...``,
    ``G...:<memo>`` or a muxed ``M...`` address. The identity fields
    (``account_id``, ``account_memo``, ``muxed_account_id``, ``muxed_id``)
    are derived from it; unrecognized shapes leave them unset.

    Timestamps are unix seconds encoded as strings.
    """

    iss: str
    sub: str
    iat: str
    exp: str
    jti: str
    home_domain: str | None = None
    client_domain: str | None = None

    account_id: str | None = field(default=None, init=False)
    account_memo: str | None = field(default=None, init=False)
    muxed_account_id: str | None = field(default=None, init=False)
    muxed_id: int | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        parts = self.sub.split(":")
        if len(parts) == 2:
            self.account_id, self.account_memo = parts
        elif self.sub.startswith(MUXED_ACCOUNT_PREFIX):
            try:
                muxed = MuxedAccount.from_account(self.sub)
            except ValueError:
                return
            self.muxed_account_id = self.sub
            self.account_id = muxed.account_id
            self.muxed_id = muxed.account_muxed_id
        elif validate_stellar_account_address(self.sub):
            self.account_id = self.sub

    @classmethod
    def from_challenge(
        cls,
        url: str,
        challenge: ParsedChallenge,
        jwt_timeout: int = DEFAULT_JWT_TIMEOUT_SECONDS,
        home_domain: str | None = None,
    ) -> "Sep10Jwt":
        """Build the claims for a verified challenge.

        ``iat`` is the challenge's min time, so the token lifetime is counted
        from when the challenge was issued.
        """
        issued_at = challenge.min_time
        sub = challenge.client_account_id
        memo_id = challenge.memo_id
        if memo_id is not None and not is_muxed_account(sub):
            sub = f"{sub}:{memo_id}"

        client_domain_data = challenge.client_domain_data
        return cls(
            iss=url,
            sub=sub,
            iat=str(issued_at),
            exp=str(issued_at + jwt_timeout),
            jti=challenge.tx_hash_hex,
            home_domain=home_domain,
            client_domain=client_domain_data.client_domain if client_domain_data else None,
        )

    def payload(self) -> dict[str, str]:
        payload = {
            "jti": self.jti,
            "iss": self.iss,
            "sub": self.sub,
            "iat": self.iat,
            "exp": self.exp,
        }
        if self.client_domain is not None:
            payload["client_domain"] = self.client_domain
        if self.home_domain is not None:
            payload["home_domain"] = self.home_domain
        return payload

    def sign(self, key: str) -> str:
        return jwt.encode(self.payload(), key, algorithm=JWT_ALGORITHM)

    def validated_account_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.account_id is not None:
            data["account_id"] = self.account_id
        if self.account_memo is not None:
            data["account_memo"] = self.account_memo
        if self.muxed_account_id is not None:
            data["muxed_account_id"] = self.muxed_account_id
            data["muxed_id"] = self.muxed_id
        return data

    @classmethod
    def validate(
        cls,
        token: str,
        key: str,
        issuer: str | None = None,
        leeway: int = 0,
    ) -> "Sep10Jwt":
        """Decode and verify a session token.

        PyJWT errors (``ExpiredSignatureError``, ``ImmatureSignatureError``,
        ``InvalidSignatureError``, ``InvalidIssuerError``, ``DecodeError``,
        ``MissingRequiredClaimError``) propagate unchanged; callers treat
        all of them as unauthenticated.

        Raises:
            TokenInvalid: A required claim is not a string.
        """
        payload = jwt.decode(
            token,
            key,
            algorithms=[JWT_ALGORITHM],
            issuer=issuer,
            leeway=leeway,
            options={"require": list(REQUIRED_JWT_CLAIMS)},
        )

        for claim in REQUIRED_JWT_CLAIMS:
            if not isinstance(payload.get(claim), str):
                logger.debug("Rejecting token: claim %s is not a string", claim)
                raise TokenInvalid(f"Invalid jwt claim {claim}: must be a string")

        home_domain = payload.get("home_domain")
        client_domain = payload.get("client_domain")
        return cls(
            iss=payload["iss"],
            sub=payload["sub"],
            iat=payload["iat"],
            exp=payload["exp"],
            jti=payload["jti"],
            home_domain=home_domain if isinstance(home_domain, str) else None,
            client_domain=client_domain if isinstance(client_domain, str) else None,
        )


def token_from_authorization_header(header: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise TokenInvalid("Missing authorization header")
    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise TokenInvalid("Authorization header must use the Bearer scheme")
    return token
