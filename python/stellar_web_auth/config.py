"""Configuration for the web authentication service."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv
from stellar_sdk import Keypair

from .constants import (
    DEFAULT_AUTH_TIMEOUT_SECONDS,
    DEFAULT_JWT_TIMEOUT_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from .errors import InvalidConfig
from .utils import get_horizon_url, get_network_passphrase


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Sep10Config:
    """Settings consumed by the challenge builder, validator and token issuer.

    Attributes:
        network: Network passphrase, or a CAIP-2 id such as ``stellar:testnet``.
        signing_seed: Secret seed (S...) the server signs challenges with.
        jwt_secret: HS256 key for session tokens.
        home_domains: Recognized home domains; the first one is the default.
        web_auth_domain: Host serving the auth endpoint. Defaults to the
            first home domain.
        horizon_url: Ledger query endpoint. Defaults per network.
        auth_timeout: Seconds a client has to sign and return a challenge.
        jwt_timeout: Lifetime of issued session tokens in seconds.
        client_attribution_required: Require a client domain for
            noncustodial accounts.
        allowed_client_domains: Client domains accepted when attribution is
            required.
        known_custodial_accounts: Accounts that must not send a client domain.
        request_timeout: Timeout for outbound HTTP and Horizon calls.
    """

    network: str
    signing_seed: str
    jwt_secret: str
    home_domains: list[str]
    web_auth_domain: str | None = None
    horizon_url: str | None = None
    auth_timeout: int = DEFAULT_AUTH_TIMEOUT_SECONDS
    jwt_timeout: int = DEFAULT_JWT_TIMEOUT_SECONDS
    client_attribution_required: bool = False
    allowed_client_domains: list[str] = field(default_factory=list)
    known_custodial_accounts: list[str] = field(default_factory=list)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    def validate(self) -> None:
        if not self.home_domains:
            raise InvalidConfig("Invalid sep 10 config: list of home domains is empty")
        if not self.signing_seed:
            raise InvalidConfig("Invalid secret config: SEP-10 signing seed is not set")
        try:
            Keypair.from_secret(self.signing_seed)
        except (ValueError, TypeError) as e:
            raise InvalidConfig(
                "Invalid secret config: SEP-10 signing seed is not a valid secret seed"
            ) from e
        if not self.jwt_secret:
            raise InvalidConfig("Invalid secret config: JWT signing key is not set")
        try:
            get_network_passphrase(self.network)
        except ValueError as e:
            raise InvalidConfig(f"Invalid app config: {e}") from e
        if self.auth_timeout <= 0:
            raise InvalidConfig(f"auth_timeout must be positive, got {self.auth_timeout}")
        if self.jwt_timeout <= 0:
            raise InvalidConfig(f"jwt_timeout must be positive, got {self.jwt_timeout}")

    @property
    def network_passphrase(self) -> str:
        return get_network_passphrase(self.network)

    @property
    def server_keypair(self) -> Keypair:
        return Keypair.from_secret(self.signing_seed)

    @property
    def server_account_id(self) -> str:
        return self.server_keypair.public_key

    @property
    def effective_web_auth_domain(self) -> str:
        return self.web_auth_domain or self.home_domains[0]

    @property
    def effective_horizon_url(self) -> str:
        return get_horizon_url(self.network, self.horizon_url)

    @classmethod
    def from_env(
        cls,
        prefix: str = "SEP10_",
        dotenv_path: str | None = None,
    ) -> "Sep10Config":
        """Build a config from environment variables (and an optional .env file).

        Lists are comma separated. Missing required variables raise
        InvalidConfig.
        """
        load_dotenv(dotenv_path)

        def env(name: str) -> str | None:
            return os.getenv(prefix + name)

        missing = [
            prefix + name
            for name in ("NETWORK", "SIGNING_SEED", "JWT_SECRET", "HOME_DOMAINS")
            if not env(name)
        ]
        if missing:
            raise InvalidConfig(f"Missing required settings: {', '.join(missing)}")

        try:
            auth_timeout = int(env("AUTH_TIMEOUT") or DEFAULT_AUTH_TIMEOUT_SECONDS)
            jwt_timeout = int(env("JWT_TIMEOUT") or DEFAULT_JWT_TIMEOUT_SECONDS)
            request_timeout = float(
                env("REQUEST_TIMEOUT") or DEFAULT_REQUEST_TIMEOUT_SECONDS
            )
        except ValueError as e:
            raise InvalidConfig(f"Invalid timeout setting: {e}") from e

        return cls(
            network=env("NETWORK"),
            signing_seed=env("SIGNING_SEED"),
            jwt_secret=env("JWT_SECRET"),
            home_domains=_split_list(env("HOME_DOMAINS")),
            web_auth_domain=env("WEB_AUTH_DOMAIN") or None,
            horizon_url=env("HORIZON_URL") or None,
            auth_timeout=auth_timeout,
            jwt_timeout=jwt_timeout,
            client_attribution_required=_parse_bool(env("CLIENT_ATTRIBUTION_REQUIRED")),
            allowed_client_domains=_split_list(env("ALLOWED_CLIENT_DOMAINS")),
            known_custodial_accounts=_split_list(env("KNOWN_CUSTODIAL_ACCOUNTS")),
            request_timeout=request_timeout,
        )
