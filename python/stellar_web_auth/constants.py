"""Constants for Stellar web authentication (SEP-10)."""

from stellar_sdk import Network

# CAIP-2 network identifiers
STELLAR_PUBNET_CAIP2 = "stellar:pubnet"
STELLAR_TESTNET_CAIP2 = "stellar:testnet"

STELLAR_NETWORK_TO_PASSPHRASE = {
    STELLAR_PUBNET_CAIP2: Network.PUBLIC_NETWORK_PASSPHRASE,
    STELLAR_TESTNET_CAIP2: Network.TESTNET_NETWORK_PASSPHRASE,
}

DEFAULT_TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"
DEFAULT_PUBNET_HORIZON_URL = "https://horizon.stellar.org"

# Address formats: G... (ed25519) and M... (muxed ed25519)
STELLAR_ACCOUNT_ADDRESS_REGEX = r"^G[A-Z2-7]{55}$"
STELLAR_MUXED_ADDRESS_REGEX = r"^M[A-Z2-7]{68}$"
MUXED_ACCOUNT_PREFIX = "M"

# Timeouts (seconds)
DEFAULT_AUTH_TIMEOUT_SECONDS = 300
DEFAULT_JWT_TIMEOUT_SECONDS = 86400
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10
GRACE_PERIOD_SECONDS = 300

# Challenge transaction layout
CHALLENGE_BASE_FEE = 100
NONCE_RAW_LENGTH = 48
NONCE_ENCODED_LENGTH = 64
AUTH_KEY_SUFFIX = " auth"
WEB_AUTH_DOMAIN_KEY = "web_auth_domain"
CLIENT_DOMAIN_KEY = "client_domain"
MAX_MEMO_ID = 2**64 - 1

# Session token
JWT_ALGORITHM = "HS256"
REQUIRED_JWT_CLAIMS = ("jti", "iss", "sub", "iat", "exp")

STELLAR_TOML_PATH = "/.well-known/stellar.toml"
SIGNER_TYPE_ED25519 = "ed25519_public_key"

# Rejection reasons: request format
ERR_MISSING_ACCOUNT = "invalid_request_missing_account"
ERR_MISSING_TRANSACTION = "invalid_request_missing_transaction"
ERR_INVALID_PARAMETER = "invalid_request_parameter"
ERR_INVALID_BODY = "invalid_request_body"
ERR_UNSUPPORTED_CONTENT_TYPE = "invalid_request_content_type"
ERR_UNSUPPORTED_HOME_DOMAIN = "invalid_request_home_domain"
ERR_INVALID_ACCOUNT = "invalid_request_account"
ERR_CUSTODIAL_CLIENT_DOMAIN = "invalid_request_custodial_client_domain"
ERR_CLIENT_DOMAIN_REQUIRED = "invalid_request_client_domain_required"
ERR_CLIENT_DOMAIN_NOT_ALLOWED = "invalid_request_client_domain_not_allowed"
ERR_MEMO_WITH_MUXED_ACCOUNT = "invalid_request_memo_with_muxed_account"
ERR_INVALID_MEMO = "invalid_request_memo"
ERR_CLIENT_SIGNING_KEY_NOT_FOUND = "invalid_request_client_signing_key_not_found"

# Rejection reasons: challenge structure
ERR_MALFORMED_CHALLENGE = "invalid_challenge_malformed"
ERR_FEE_BUMP_CHALLENGE = "invalid_challenge_fee_bump"
ERR_WRONG_SOURCE_ACCOUNT = "invalid_challenge_source_account"
ERR_NONZERO_SEQUENCE = "invalid_challenge_sequence"
ERR_UNSUPPORTED_MEMO = "invalid_challenge_memo_type"
ERR_MISSING_TIME_BOUNDS = "invalid_challenge_missing_time_bounds"
ERR_INFINITE_TIME_BOUNDS = "invalid_challenge_infinite_time_bounds"
ERR_OUTSIDE_TIME_BOUNDS = "invalid_challenge_outside_time_bounds"
ERR_NO_OPERATIONS = "invalid_challenge_no_operations"
ERR_WRONG_OPERATION_TYPE = "invalid_challenge_operation_type"
ERR_MISSING_OPERATION_SOURCE = "invalid_challenge_operation_source"
ERR_UNKNOWN_HOME_DOMAIN = "invalid_challenge_home_domain"
ERR_INVALID_NONCE = "invalid_challenge_nonce"
ERR_UNRECOGNIZED_OPERATION = "invalid_challenge_unrecognized_operation"
ERR_WEB_AUTH_DOMAIN_MISMATCH = "invalid_challenge_web_auth_domain"
ERR_MISSING_CLIENT_DOMAIN_VALUE = "invalid_challenge_client_domain_value"
ERR_NO_SIGNATURES = "invalid_challenge_no_signatures"
ERR_MISSING_SERVER_SIGNATURE = "invalid_challenge_server_signature"

# Rejection reasons: signatures
ERR_SIGNATURE_COUNT = "invalid_signatures_count"
ERR_CLIENT_SIGNATURE_COUNT = "invalid_signatures_client_count"
ERR_SERVER_SIGNATURE_COUNT = "invalid_signatures_server_count"
ERR_CLIENT_DOMAIN_SIGNATURE_COUNT = "invalid_signatures_client_domain_count"
ERR_UNRECOGNIZED_SIGNATURES = "invalid_signatures_unrecognized"
ERR_NO_ED25519_SIGNERS = "invalid_signatures_no_ed25519_signers"
ERR_THRESHOLD_NOT_MET = "invalid_signatures_threshold_not_met"
ERR_NO_CLIENT_SIGNATURE = "invalid_signatures_no_client_signature"
