"""Challenge construction for the GET side of web authentication."""

import base64
import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import replace

from stellar_sdk import Keypair

from ..constants import (
    DEFAULT_AUTH_TIMEOUT_SECONDS,
    ERR_CLIENT_DOMAIN_NOT_ALLOWED,
    ERR_CLIENT_DOMAIN_REQUIRED,
    ERR_CLIENT_SIGNING_KEY_NOT_FOUND,
    ERR_CUSTODIAL_CLIENT_DOMAIN,
    ERR_INVALID_ACCOUNT,
    ERR_INVALID_MEMO,
    ERR_MEMO_WITH_MUXED_ACCOUNT,
    ERR_UNSUPPORTED_HOME_DOMAIN,
    NONCE_RAW_LENGTH,
)
from ..errors import ClientDomainSigningKeyNotFound, InvalidRequestData
from ..signer import DomainKeyResolver
from ..types import (
    ChallengeArtifact,
    ChallengeEntry,
    ChallengeRequest,
    ChallengeResponse,
    ClientDomainEntry,
    DomainAuthEntry,
    ErrorResponse,
    WebAuthDomainEntry,
)
from ..utils import (
    is_muxed_account,
    parse_memo_id,
    validate_stellar_account_address,
)
from .codec import ChallengeCodec


def generate_nonce() -> str:
    """48 random bytes, base64 encoded to 64 characters."""
    return base64.b64encode(secrets.token_bytes(NONCE_RAW_LENGTH)).decode()


class ChallengeBuilder:
    """Builds and signs challenge transactions bound to a client account.

    Only the optional client domain lookup performs I/O; everything else is
    local and stateless.
    """

    def __init__(
        self,
        codec: ChallengeCodec,
        server_keypair: Keypair,
        home_domains: list[str],
        web_auth_domain: str,
        domain_key_resolver: DomainKeyResolver | None = None,
        auth_timeout: int = DEFAULT_AUTH_TIMEOUT_SECONDS,
        client_attribution_required: bool = False,
        allowed_client_domains: list[str] | None = None,
        known_custodial_accounts: list[str] | None = None,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ):
        self._codec = codec
        self._server_keypair = server_keypair
        self._home_domains = list(home_domains)
        self._web_auth_domain = web_auth_domain
        self._domain_key_resolver = domain_key_resolver
        self._auth_timeout = auth_timeout
        self._client_attribution_required = client_attribution_required
        self._allowed_client_domains = list(allowed_client_domains or [])
        self._known_custodial_accounts = list(known_custodial_accounts or [])
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    @property
    def server_account_id(self) -> str:
        return self._server_keypair.public_key

    def validate_request_format(self, request: ChallengeRequest) -> ChallengeRequest:
        """Check the request against the configured domains and lists.

        Returns a copy of the request with ``home_domain`` defaulted.
        """
        if request.home_domain is None:
            request = replace(request, home_domain=self._home_domains[0])
        elif request.home_domain not in self._home_domains:
            raise InvalidRequestData(
                f"home_domain {request.home_domain} not supported",
                reason=ERR_UNSUPPORTED_HOME_DOMAIN,
            )

        if not validate_stellar_account_address(request.account):
            raise InvalidRequestData(
                f"client wallet account {request.account} is invalid",
                reason=ERR_INVALID_ACCOUNT,
            )

        custodial = request.account in self._known_custodial_accounts
        if custodial and request.client_domain is not None:
            raise InvalidRequestData(
                "client_domain must not be specified if the account is an "
                "custodial-wallet account",
                reason=ERR_CUSTODIAL_CLIENT_DOMAIN,
            )

        if not custodial and self._client_attribution_required:
            if request.client_domain is None:
                raise InvalidRequestData(
                    "client_domain is required", reason=ERR_CLIENT_DOMAIN_REQUIRED
                )
            if request.client_domain not in self._allowed_client_domains:
                raise InvalidRequestData(
                    "unable to process",
                    status_code=403,
                    reason=ERR_CLIENT_DOMAIN_NOT_ALLOWED,
                )

        return request

    def validate_request_memo(self, request: ChallengeRequest) -> int | None:
        if request.memo is None:
            return None
        if is_muxed_account(request.account):
            raise InvalidRequestData(
                "memo not allowed for muxed accounts", reason=ERR_MEMO_WITH_MUXED_ACCOUNT
            )
        try:
            return parse_memo_id(request.memo)
        except ValueError as e:
            raise InvalidRequestData(str(e), reason=ERR_INVALID_MEMO) from e

    def resolve_client_signing_key(self, client_domain: str) -> str:
        if self._domain_key_resolver is None:
            raise ClientDomainSigningKeyNotFound(
                f"client signing key not found for domain {client_domain}",
                reason=ERR_CLIENT_SIGNING_KEY_NOT_FOUND,
            )
        signing_key = self._domain_key_resolver.resolve_signing_key(client_domain)
        if signing_key is None:
            raise ClientDomainSigningKeyNotFound(
                f"client signing key not found for domain {client_domain}",
                reason=ERR_CLIENT_SIGNING_KEY_NOT_FOUND,
            )
        if not validate_stellar_account_address(signing_key) or is_muxed_account(
            signing_key
        ):
            raise ClientDomainSigningKeyNotFound(
                f"client signing key for domain {client_domain} is invalid: {signing_key}",
                reason=ERR_CLIENT_SIGNING_KEY_NOT_FOUND,
            )
        return signing_key

    def build(self, request: ChallengeRequest, memo_id: int | None = None) -> ChallengeArtifact:
        """Compose an unsigned challenge for an already validated request."""
        entries: list[ChallengeEntry] = [
            DomainAuthEntry(
                home_domain=request.home_domain or self._home_domains[0],
                nonce=generate_nonce(),
                source=request.account,
            ),
            WebAuthDomainEntry(
                web_auth_domain=self._web_auth_domain,
                source=self.server_account_id,
            ),
        ]
        if request.client_domain is not None:
            signing_key = self.resolve_client_signing_key(request.client_domain)
            entries.append(
                ClientDomainEntry(client_domain=request.client_domain, source=signing_key)
            )

        now = int(self._clock())
        return ChallengeArtifact(
            server_account_id=self.server_account_id,
            entries=tuple(entries),
            min_time=now,
            max_time=now + self._auth_timeout,
            memo_id=memo_id,
        )

    def create_challenge(self, request: ChallengeRequest) -> ChallengeResponse | ErrorResponse:
        """Validate the request, build and sign a challenge."""
        try:
            request = self.validate_request_format(request)
            memo_id = self.validate_request_memo(request)
            artifact = self.build(request, memo_id)
        except InvalidRequestData as e:
            self._logger.debug("Challenge request rejected (%s): %s", e.reason, e.message)
            return ErrorResponse(error=e.message, status_code=e.status_code, reason=e.reason)

        try:
            transaction = self._codec.encode(artifact, self._server_keypair)
        except Exception as e:
            self._logger.exception("Failed to sign challenge for %s", request.account)
            return ErrorResponse(
                error=f"Failed to create the sep-10 challenge. {e}", status_code=500
            )

        self._logger.info(
            "Issued challenge for %s (home_domain=%s, client_domain=%s)",
            request.account,
            request.home_domain,
            request.client_domain,
        )
        return ChallengeResponse(
            transaction=transaction,
            network_passphrase=self._codec.network_passphrase,
        )
