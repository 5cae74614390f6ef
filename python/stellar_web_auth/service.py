"""Web authentication service: challenge issuance and token exchange."""

import json
import logging
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import httpx

from .challenge import ChallengeBuilder, ChallengeCodec, ChallengeValidator
from .config import Sep10Config
from .constants import ERR_INVALID_BODY, ERR_UNSUPPORTED_CONTENT_TYPE
from .errors import AccountLookupFailure, InvalidConfig, InvalidRequestData
from .horizon import HorizonAccountDirectory
from .jwt_token import Sep10Jwt
from .signer import AccountDirectory, DomainKeyResolver
from .stellar_toml import HttpDomainKeyResolver
from .types import (
    ChallengeRequest,
    ChallengeResponse,
    ErrorResponse,
    Sep10Response,
    TokenResponse,
    ValidationRequest,
)
from .verifier import SignatureVerifier

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _parse_body(body: Any, content_type: str | None) -> dict[str, Any]:
    media_type = (content_type or "").split(";")[0].strip().lower()
    if isinstance(body, dict):
        if media_type not in (JSON_CONTENT_TYPE, FORM_CONTENT_TYPE):
            raise InvalidRequestData(
                f"Invalid request type {content_type}", reason=ERR_UNSUPPORTED_CONTENT_TYPE
            )
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if media_type == JSON_CONTENT_TYPE:
        try:
            data = json.loads(body or "")
        except json.JSONDecodeError as e:
            raise InvalidRequestData("Invalid body.", reason=ERR_INVALID_BODY) from e
        if not isinstance(data, dict):
            raise InvalidRequestData("Invalid body.", reason=ERR_INVALID_BODY)
        return data
    if media_type == FORM_CONTENT_TYPE:
        return {key: values[0] for key, values in parse_qs(body or "").items()}

    raise InvalidRequestData(
        f"Invalid request type {content_type}", reason=ERR_UNSUPPORTED_CONTENT_TYPE
    )


class Sep10Service:
    """Issues challenges (GET) and exchanges signed challenges for tokens (POST).

    The service is stateless: nothing about an issued challenge is stored,
    so any instance sharing the same configuration can complete it.
    """

    def __init__(
        self,
        config: Sep10Config,
        account_directory: AccountDirectory | None = None,
        domain_key_resolver: DomainKeyResolver | None = None,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ):
        config.validate()
        self._config = config
        self._logger = logger or logging.getLogger(__name__)

        server_keypair = config.server_keypair
        self.server_account_id = server_keypair.public_key
        # collaborators created here are closed by close()
        self._owned: list[HorizonAccountDirectory | HttpDomainKeyResolver] = []

        if account_directory is None:
            try:
                horizon_url = config.effective_horizon_url
            except ValueError as e:
                raise InvalidConfig(f"Invalid app config: {e}") from e
            account_directory = HorizonAccountDirectory(
                horizon_url,
                request_timeout=config.request_timeout,
                logger=self._logger,
            )
            self._owned.append(account_directory)
        if domain_key_resolver is None:
            domain_key_resolver = HttpDomainKeyResolver(
                client=http_client,
                request_timeout=config.request_timeout,
                logger=self._logger,
            )
            self._owned.append(domain_key_resolver)

        self.codec = ChallengeCodec(config.network_passphrase)
        self.builder = ChallengeBuilder(
            codec=self.codec,
            server_keypair=server_keypair,
            home_domains=config.home_domains,
            web_auth_domain=config.effective_web_auth_domain,
            domain_key_resolver=domain_key_resolver,
            auth_timeout=config.auth_timeout,
            client_attribution_required=config.client_attribution_required,
            allowed_client_domains=config.allowed_client_domains,
            known_custodial_accounts=config.known_custodial_accounts,
            clock=clock,
            logger=self._logger,
        )
        self.validator = ChallengeValidator(
            codec=self.codec,
            server_account_id=self.server_account_id,
            home_domains=config.home_domains,
            web_auth_domain=config.effective_web_auth_domain,
            clock=clock,
            logger=self._logger,
        )
        self.verifier = SignatureVerifier(
            server_account_id=self.server_account_id,
            account_directory=account_directory,
            logger=self._logger,
        )

    def close(self) -> None:
        for collaborator in self._owned:
            collaborator.close()

    def __enter__(self) -> "Sep10Service":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def network_passphrase(self) -> str:
        return self.codec.network_passphrase

    def begin_authentication(
        self, request: ChallengeRequest
    ) -> ChallengeResponse | ErrorResponse:
        return self.builder.create_challenge(request)

    def complete_authentication(self, request: ValidationRequest) -> str:
        """Validate a signed challenge and return a signed session token.

        Raises:
            InvalidRequestData: The challenge or its signatures are invalid.
            AccountLookupFailure: The client account could not be looked up.
        """
        challenge = self.validator.validate(request.transaction)
        self.verifier.verify(challenge)

        token = Sep10Jwt.from_challenge(
            request.url,
            challenge,
            jwt_timeout=self._config.jwt_timeout,
            home_domain=challenge.matched_home_domain,
        )
        self._logger.info("Issued session token for %s", token.sub)
        return token.sign(self._config.jwt_secret)

    def validate_token(self, token: str, issuer: str | None = None) -> Sep10Jwt:
        return Sep10Jwt.validate(token, self._config.jwt_secret, issuer=issuer)

    def handle_request(
        self,
        method: str,
        url: str,
        query_params: dict[str, Any] | None = None,
        body: Any = None,
        content_type: str | None = None,
    ) -> Sep10Response:
        """Dispatch a framework-neutral HTTP request to the GET or POST flow."""
        method = method.upper()
        if method == "GET":
            try:
                request = ChallengeRequest.from_query_params(query_params or {})
            except InvalidRequestData as e:
                return ErrorResponse(
                    error=f"Invalid request. {e.message}",
                    status_code=e.status_code,
                    reason=e.reason,
                )
            try:
                return self.begin_authentication(request)
            except Exception as e:
                self._logger.exception("Failed to create challenge")
                return ErrorResponse(
                    error=f"Failed to create the sep-10 challenge. {e}", status_code=500
                )

        if method == "POST":
            try:
                data = _parse_body(body, content_type)
                validation_request = ValidationRequest.from_dict(url, data)
                return TokenResponse(token=self.complete_authentication(validation_request))
            except InvalidRequestData as e:
                return ErrorResponse(
                    error=f"Invalid request. {e.message}",
                    status_code=e.status_code,
                    reason=e.reason,
                )
            except AccountLookupFailure as e:
                return ErrorResponse(error=str(e), status_code=400)
            except Exception as e:
                self._logger.exception("Failed to validate challenge")
                return ErrorResponse(
                    error=f"Failed to validate the sep-10 challenge. {e}", status_code=500
                )

        return ErrorResponse(error="Not implemented", status_code=501)
