"""Stellar web authentication (SEP-10).

Issues challenge transactions to clients that want to prove control of a
Stellar account, validates the signed challenges they return and exchanges
them for HS256 session tokens.
"""

from stellar_web_auth.config import Sep10Config
from stellar_web_auth.errors import (
    AccountLookupFailure,
    ClientDomainSigningKeyNotFound,
    InvalidConfig,
    InvalidRequestData,
    Sep10Error,
    TokenInvalid,
)
from stellar_web_auth.horizon import HorizonAccountDirectory
from stellar_web_auth.jwt_token import Sep10Jwt, token_from_authorization_header
from stellar_web_auth.register import create_sep10_service, create_sep10_service_from_env
from stellar_web_auth.service import Sep10Service
from stellar_web_auth.stellar_toml import HttpDomainKeyResolver
from stellar_web_auth.types import (
    ChallengeRequest,
    ChallengeResponse,
    ErrorResponse,
    Sep10Response,
    TokenResponse,
    ValidationRequest,
)

__all__ = [
    # Config
    "Sep10Config",
    # Service
    "Sep10Service",
    "Sep10Jwt",
    "token_from_authorization_header",
    # Collaborators
    "HorizonAccountDirectory",
    "HttpDomainKeyResolver",
    # Requests and responses
    "ChallengeRequest",
    "ValidationRequest",
    "ChallengeResponse",
    "TokenResponse",
    "ErrorResponse",
    "Sep10Response",
    # Errors
    "Sep10Error",
    "InvalidRequestData",
    "ClientDomainSigningKeyNotFound",
    "InvalidConfig",
    "AccountLookupFailure",
    "TokenInvalid",
    # Registration
    "create_sep10_service",
    "create_sep10_service_from_env",
]
