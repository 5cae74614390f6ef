"""Horizon-backed account directory."""

import logging

from stellar_sdk import Server
from stellar_sdk.exceptions import NotFoundError, SdkError

from .constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from .errors import AccountLookupFailure
from .types import AccountInfo
from .utils import get_horizon_client, to_ed25519_account_id


class HorizonAccountDirectory:
    """Resolves accounts through a Horizon server.

    Muxed (M...) ids are looked up by their underlying G-address.
    """

    def __init__(
        self,
        horizon_url: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        server: Server | None = None,
        logger: logging.Logger | None = None,
    ):
        self._horizon_url = horizon_url
        self._owns_server = server is None
        self._server = server or get_horizon_client(horizon_url, request_timeout)
        self._logger = logger or logging.getLogger(__name__)

    def fetch_account(self, account_id: str) -> AccountInfo | None:
        ed25519_id = to_ed25519_account_id(account_id)
        try:
            data = self._server.accounts().account_id(ed25519_id).call()
        except NotFoundError:
            self._logger.debug("Account %s not found on %s", ed25519_id, self._horizon_url)
            return None
        except SdkError as e:
            self._logger.warning(
                "Could not fetch account %s from %s: %s", ed25519_id, self._horizon_url, e
            )
            raise AccountLookupFailure(
                ed25519_id,
                f"Could not fetch account from horizon {self._horizon_url} Error: {e}",
            ) from e

        return AccountInfo.from_horizon(data)

    def close(self) -> None:
        if self._owns_server:
            self._server.close()
