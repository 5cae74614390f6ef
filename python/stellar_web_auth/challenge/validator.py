"""Structural and temporal validation of returned challenges."""

import base64
import binascii
import logging
import time
from collections.abc import Callable
from typing import NoReturn

from stellar_sdk import IdMemo, ManageData, NoneMemo, TransactionEnvelope

from ..constants import (
    AUTH_KEY_SUFFIX,
    CLIENT_DOMAIN_KEY,
    ERR_INFINITE_TIME_BOUNDS,
    ERR_INVALID_NONCE,
    ERR_MISSING_CLIENT_DOMAIN_VALUE,
    ERR_MISSING_OPERATION_SOURCE,
    ERR_MISSING_SERVER_SIGNATURE,
    ERR_MISSING_TIME_BOUNDS,
    ERR_NO_OPERATIONS,
    ERR_NO_SIGNATURES,
    ERR_NONZERO_SEQUENCE,
    ERR_OUTSIDE_TIME_BOUNDS,
    ERR_UNKNOWN_HOME_DOMAIN,
    ERR_UNRECOGNIZED_OPERATION,
    ERR_UNSUPPORTED_MEMO,
    ERR_WEB_AUTH_DOMAIN_MISMATCH,
    ERR_WRONG_OPERATION_TYPE,
    ERR_WRONG_SOURCE_ACCOUNT,
    GRACE_PERIOD_SECONDS,
    NONCE_ENCODED_LENGTH,
    NONCE_RAW_LENGTH,
    WEB_AUTH_DOMAIN_KEY,
)
from ..errors import InvalidRequestData
from ..shared import verify_signature
from ..types import (
    ChallengeEntry,
    ClientDomainData,
    ClientDomainEntry,
    DomainAuthEntry,
    ParsedChallenge,
    WebAuthDomainEntry,
)
from .codec import ChallengeCodec


def _data_value(op: ManageData) -> str | None:
    if op.data_value is None:
        return None
    try:
        return op.data_value.decode()
    except UnicodeDecodeError:
        return None


class ChallengeValidator:
    """Validates a client-returned challenge before its signatures are checked.

    Rules are applied in a fixed order and the first violation is reported
    as an InvalidRequestData carrying a distinct reason code.
    """

    def __init__(
        self,
        codec: ChallengeCodec,
        server_account_id: str,
        home_domains: list[str],
        web_auth_domain: str,
        clock: Callable[[], float] = time.time,
        grace_period: int = GRACE_PERIOD_SECONDS,
        logger: logging.Logger | None = None,
    ):
        self._codec = codec
        self._server_account_id = server_account_id
        self._home_domains = list(home_domains)
        self._web_auth_domain = web_auth_domain
        self._clock = clock
        self._grace_period = grace_period
        self._logger = logger or logging.getLogger(__name__)

    def _reject(self, message: str, reason: str) -> NoReturn:
        self._logger.debug("Challenge rejected (%s): %s", reason, message)
        raise InvalidRequestData(message, reason=reason)

    def validate(self, xdr: str) -> ParsedChallenge:
        try:
            envelope = self._codec.decode(xdr)
        except InvalidRequestData as e:
            self._logger.debug("Challenge rejected (%s): %s", e.reason, e.message)
            raise

        tx = envelope.transaction

        # 1. Source account must be the server
        if tx.source.universal_account_id != self._server_account_id:
            self._reject(
                "Transaction source account is not equal to server account.",
                ERR_WRONG_SOURCE_ACCOUNT,
            )

        # 2. Sequence number zero
        if tx.sequence != 0:
            self._reject(
                "The transaction sequence number should be zero.", ERR_NONZERO_SEQUENCE
            )

        # 3. Memo type none or id
        if not isinstance(tx.memo, (NoneMemo, IdMemo)):
            self._reject("Only memo type `id` is supported", ERR_UNSUPPORTED_MEMO)

        # 4. Finite time bounds
        time_bounds = tx.preconditions.time_bounds if tx.preconditions else None
        if time_bounds is None:
            self._reject("Transaction requires timebounds", ERR_MISSING_TIME_BOUNDS)
        if time_bounds.max_time == 0:
            self._reject(
                "Transaction requires non-infinite timebounds.", ERR_INFINITE_TIME_BOUNDS
            )

        # 5. Within the window, allowing for clock skew
        now = round(self._clock())
        if (
            now < time_bounds.min_time - self._grace_period
            or now > time_bounds.max_time + self._grace_period
        ):
            self._reject(
                "Transaction is not within range of the specified timebounds.",
                ERR_OUTSIDE_TIME_BOUNDS,
            )

        # 6. First operation: "<home domain> auth", sourced by the client
        if not tx.operations:
            self._reject(
                "Transaction requires at least one ManageData operation.",
                ERR_NO_OPERATIONS,
            )
        first_op = tx.operations[0]
        if not isinstance(first_op, ManageData):
            self._reject("Operation type should be ManageData.", ERR_WRONG_OPERATION_TYPE)
        if first_op.source is None:
            self._reject(
                "Operation must have a source account.", ERR_MISSING_OPERATION_SOURCE
            )
        client_account_id = first_op.source.universal_account_id

        matched_home_domain = None
        for home_domain in self._home_domains:
            if home_domain + AUTH_KEY_SUFFIX == first_op.data_name:
                matched_home_domain = home_domain
        if matched_home_domain is None:
            self._reject(
                "The transaction operation key name does not include one of the "
                "expected home domains.",
                ERR_UNKNOWN_HOME_DOMAIN,
            )

        # 7. Nonce: 64 base64 characters encoding 48 bytes
        nonce = self._validate_nonce(first_op)
        entries: list[ChallengeEntry] = [
            DomainAuthEntry(
                home_domain=matched_home_domain, nonce=nonce, source=client_account_id
            )
        ]

        # 8. Subsequent operations
        client_domain_data = None
        for op in tx.operations[1:]:
            if not isinstance(op, ManageData):
                self._reject(
                    "Operation type should be ManageData.", ERR_WRONG_OPERATION_TYPE
                )
            if op.source is None:
                self._reject(
                    "Operation should have a source account.",
                    ERR_MISSING_OPERATION_SOURCE,
                )
            source_id = op.source.universal_account_id
            if op.data_name != CLIENT_DOMAIN_KEY and source_id != self._server_account_id:
                self._reject(
                    "Subsequent operations are unrecognized.", ERR_UNRECOGNIZED_OPERATION
                )

            if op.data_name == WEB_AUTH_DOMAIN_KEY:
                value = _data_value(op)
                if value is None:
                    self._reject(
                        "web_auth_domain operation value should not be null.",
                        ERR_WEB_AUTH_DOMAIN_MISMATCH,
                    )
                if value != self._web_auth_domain:
                    self._reject(
                        "web_auth_domain operation value does not match "
                        + self._web_auth_domain,
                        ERR_WEB_AUTH_DOMAIN_MISMATCH,
                    )
                entries.append(WebAuthDomainEntry(web_auth_domain=value, source=source_id))

            elif op.data_name == CLIENT_DOMAIN_KEY:
                value = _data_value(op)
                if value is None:
                    self._reject(
                        "client_domain operation value should not be null.",
                        ERR_MISSING_CLIENT_DOMAIN_VALUE,
                    )
                client_domain_data = ClientDomainData(
                    client_domain=value,
                    client_domain_account_id=op.source.account_id,
                )
                entries.append(
                    ClientDomainEntry(client_domain=value, source=op.source.account_id)
                )

        # 9. The server must have signed what it issued
        self._verify_server_signature(envelope)

        return ParsedChallenge(
            envelope=envelope,
            client_account_id=client_account_id,
            matched_home_domain=matched_home_domain,
            client_domain_data=client_domain_data,
            entries=entries,
        )

    def _validate_nonce(self, op: ManageData) -> str:
        value = _data_value(op)
        if value is None:
            self._reject(
                "The transaction operation value should not be null.", ERR_INVALID_NONCE
            )
        if len(value) != NONCE_ENCODED_LENGTH:
            self._reject(
                "Random nonce encoded as base64 should be 64 bytes long.",
                ERR_INVALID_NONCE,
            )
        try:
            raw = base64.b64decode(value, validate=True)
        except binascii.Error:
            self._reject("Random nonce is not valid base64.", ERR_INVALID_NONCE)
        if len(raw) != NONCE_RAW_LENGTH:
            self._reject(
                "Random nonce before encoding as base64 should be 48 bytes long.",
                ERR_INVALID_NONCE,
            )
        return value

    def _verify_server_signature(self, envelope: TransactionEnvelope) -> None:
        if not envelope.signatures:
            self._reject("Transaction has no signatures.", ERR_NO_SIGNATURES)
        if not verify_signature(
            self._server_account_id, envelope.hash(), envelope.signatures[0]
        ):
            self._reject(
                f"Transaction not signed by server: {self._server_account_id}",
                ERR_MISSING_SERVER_SIGNATURE,
            )
