"""Client domain signing key lookup via stellar.toml."""

import logging

import httpx
import toml

from .constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ERR_CLIENT_SIGNING_KEY_NOT_FOUND,
    STELLAR_TOML_PATH,
)
from .errors import ClientDomainSigningKeyNotFound


def stellar_toml_url(domain: str, use_http: bool = False) -> str:
    scheme = "http" if use_http else "https"
    return f"{scheme}://{domain}{STELLAR_TOML_PATH}"


class HttpDomainKeyResolver:
    """Fetches ``SIGNING_KEY`` from ``https://<domain>/.well-known/stellar.toml``."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        use_http: bool = False,
        logger: logging.Logger | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=request_timeout)
        self._use_http = use_http
        self._logger = logger or logging.getLogger(__name__)

    def fetch_stellar_toml(self, domain: str) -> dict:
        url = stellar_toml_url(domain, self._use_http)
        self._logger.debug("Fetching %s", url)
        msg = f"client signing key not found for domain {domain}"
        # malformed or non-IDNA hosts raise ValueError before any request
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise ClientDomainSigningKeyNotFound(
                f"{msg} : {e}", reason=ERR_CLIENT_SIGNING_KEY_NOT_FOUND
            ) from e

        try:
            return toml.loads(resp.text)
        except toml.TomlDecodeError as e:
            raise ClientDomainSigningKeyNotFound(
                f"{msg} : {e}", reason=ERR_CLIENT_SIGNING_KEY_NOT_FOUND
            ) from e

    def resolve_signing_key(self, domain: str) -> str | None:
        signing_key = self.fetch_stellar_toml(domain).get("SIGNING_KEY")
        if not isinstance(signing_key, str) or not signing_key:
            return None
        return signing_key

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpDomainKeyResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
