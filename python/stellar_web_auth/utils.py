"""Utility functions for Stellar web authentication."""

import re

from stellar_sdk import MuxedAccount, Server
from stellar_sdk.client.requests_client import RequestsClient

from .constants import (
    DEFAULT_PUBNET_HORIZON_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TESTNET_HORIZON_URL,
    MAX_MEMO_ID,
    MUXED_ACCOUNT_PREFIX,
    STELLAR_ACCOUNT_ADDRESS_REGEX,
    STELLAR_MUXED_ADDRESS_REGEX,
    STELLAR_NETWORK_TO_PASSPHRASE,
    STELLAR_PUBNET_CAIP2,
    STELLAR_TESTNET_CAIP2,
)


def is_stellar_network(network: str) -> bool:
    """Check if a CAIP-2 identifier is a Stellar network."""
    return network in STELLAR_NETWORK_TO_PASSPHRASE


def get_network_passphrase(network: str) -> str:
    """Resolve a CAIP-2 identifier or a raw passphrase to a network passphrase."""
    passphrase = STELLAR_NETWORK_TO_PASSPHRASE.get(network)
    if passphrase:
        return passphrase
    if network in STELLAR_NETWORK_TO_PASSPHRASE.values():
        return network
    if network.startswith("stellar:"):
        raise ValueError(f"Unknown Stellar network: {network}")
    if not network:
        raise ValueError("Network passphrase must not be empty")
    # custom (standalone/futurenet) passphrase
    return network


def get_horizon_url(network: str, custom_url: str | None = None) -> str:
    """Get the Horizon URL for a Stellar network."""
    if custom_url:
        return custom_url
    passphrase = get_network_passphrase(network)
    if passphrase == STELLAR_NETWORK_TO_PASSPHRASE[STELLAR_TESTNET_CAIP2]:
        return DEFAULT_TESTNET_HORIZON_URL
    if passphrase == STELLAR_NETWORK_TO_PASSPHRASE[STELLAR_PUBNET_CAIP2]:
        return DEFAULT_PUBNET_HORIZON_URL
    raise ValueError(f"Horizon URL must be provided for network: {network}")


def get_horizon_client(
    horizon_url: str,
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
) -> Server:
    """Create a Horizon client with a bounded request timeout."""
    client = RequestsClient(num_retries=0, request_timeout=request_timeout)
    return Server(horizon_url=horizon_url, client=client)


def validate_stellar_account_address(address: str) -> bool:
    """Validate a client account address (G or M-account), checksum included."""
    if not isinstance(address, str):
        return False
    if not (
        re.match(STELLAR_ACCOUNT_ADDRESS_REGEX, address)
        or re.match(STELLAR_MUXED_ADDRESS_REGEX, address)
    ):
        return False
    try:
        MuxedAccount.from_account(address)
    except ValueError:
        return False
    return True


def is_muxed_account(address: str) -> bool:
    return address.startswith(MUXED_ACCOUNT_PREFIX)


def to_ed25519_account_id(address: str) -> str:
    """Return the G-address behind a G or M-address."""
    return MuxedAccount.from_account(address).account_id


def parse_memo_id(memo: str) -> int:
    """Parse an id memo, which must be a decimal uint64."""
    if not isinstance(memo, str) or not re.fullmatch(r"[0-9]+", memo):
        raise ValueError(f"invalid memo value: {memo}")
    value = int(memo)
    if value > MAX_MEMO_ID:
        raise ValueError(f"invalid memo value: {memo}")
    return value
