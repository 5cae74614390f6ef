"""Signature verification for returned challenges."""

import logging
from typing import NoReturn

from stellar_sdk import TransactionEnvelope

from .constants import (
    ERR_CLIENT_DOMAIN_SIGNATURE_COUNT,
    ERR_CLIENT_SIGNATURE_COUNT,
    ERR_NO_CLIENT_SIGNATURE,
    ERR_NO_ED25519_SIGNERS,
    ERR_SERVER_SIGNATURE_COUNT,
    ERR_SIGNATURE_COUNT,
    ERR_THRESHOLD_NOT_MET,
    ERR_UNRECOGNIZED_SIGNATURES,
)
from .errors import InvalidRequestData
from .shared import SignatureTally, first_matching_signer, verify_signature
from .signer import AccountDirectory
from .types import AccountInfo, ClientDomainData, ParsedChallenge
from .utils import to_ed25519_account_id


class SignatureVerifier:
    """Checks that a challenge carries the signatures the protocol requires.

    Accounts missing from the ledger must be signed by their master key only,
    with no other signatures present. Existing accounts must reach their
    medium threshold; signatures from unrelated keys are ignored for them.
    """

    def __init__(
        self,
        server_account_id: str,
        account_directory: AccountDirectory,
        logger: logging.Logger | None = None,
    ):
        self._server_account_id = server_account_id
        self._account_directory = account_directory
        self._logger = logger or logging.getLogger(__name__)

    def _reject(self, message: str, reason: str) -> NoReturn:
        self._logger.debug("Signatures rejected (%s): %s", reason, message)
        raise InvalidRequestData(message, reason=reason)

    def verify(self, challenge: ParsedChallenge) -> SignatureTally:
        """Verify the challenge signatures.

        Raises:
            InvalidRequestData: The signature set does not satisfy the rules.
            AccountLookupFailure: The ledger could not be queried.
        """
        account_id = to_ed25519_account_id(challenge.client_account_id)
        account = self._account_directory.fetch_account(account_id)
        if account is None:
            return self.verify_nonexistent_account(
                challenge.envelope, account_id, challenge.client_domain_data
            )
        return self.verify_existing_account(
            challenge.envelope, account, challenge.client_domain_data
        )

    def verify_nonexistent_account(
        self,
        envelope: TransactionEnvelope,
        client_account_id: str,
        client_domain_data: ClientDomainData | None = None,
    ) -> SignatureTally:
        signatures = envelope.signatures
        expected = 3 if client_domain_data is not None else 2
        if len(signatures) != expected:
            self._reject("Invalid number of signatures.", ERR_SIGNATURE_COUNT)

        tx_hash = envelope.hash()
        tally = SignatureTally()
        for signature in signatures:
            if verify_signature(client_account_id, tx_hash, signature):
                tally.client += 1
            elif verify_signature(self._server_account_id, tx_hash, signature):
                tally.server += 1
            elif client_domain_data is not None and verify_signature(
                client_domain_data.client_domain_account_id, tx_hash, signature
            ):
                tally.client_domain += 1
            else:
                tally.unmatched += 1

        if tally.client != 1:
            self._reject(
                f"Invalid number of valid client account signatures: {tally.client}",
                ERR_CLIENT_SIGNATURE_COUNT,
            )
        if tally.server != 1:
            self._reject(
                f"Invalid number of valid server signatures: {tally.server}",
                ERR_SERVER_SIGNATURE_COUNT,
            )
        if client_domain_data is not None and tally.client_domain != 1:
            self._reject(
                "Invalid number of valid client domain account signatures: "
                f"{tally.client_domain}",
                ERR_CLIENT_DOMAIN_SIGNATURE_COUNT,
            )
        if tally.matched != len(signatures):
            self._reject(
                f"Invalid number of signatures: {len(signatures)}",
                ERR_UNRECOGNIZED_SIGNATURES,
            )
        return tally

    def verify_existing_account(
        self,
        envelope: TransactionEnvelope,
        account: AccountInfo,
        client_domain_data: ClientDomainData | None = None,
    ) -> SignatureTally:
        signers = account.ed25519_signers()
        if not signers:
            self._reject(
                "No verifiable signers provided, at least one G... address must be "
                "provided.",
                ERR_NO_ED25519_SIGNERS,
            )
        weights = {signer.account_id: signer.weight for signer in signers}

        tx_hash = envelope.hash()
        tally = SignatureTally()
        for signature in envelope.signatures:
            if verify_signature(self._server_account_id, tx_hash, signature):
                tally.server += 1
                continue
            if client_domain_data is not None and verify_signature(
                client_domain_data.client_domain_account_id, tx_hash, signature
            ):
                tally.client_domain += 1
                continue
            # a signer contributes its weight once, however often it signed
            remaining = [s for s in weights if s not in tally.matched_signers]
            signer_id = first_matching_signer(remaining, tx_hash, signature)
            if signer_id is None:
                tally.unmatched += 1
                continue
            tally.client += 1
            tally.signer_weight += weights[signer_id]
            tally.matched_signers.append(signer_id)

        if tally.signer_weight < account.med_threshold:
            self._reject(
                f"Signers with weight {tally.signer_weight} do not meet threshold "
                f"{account.med_threshold}",
                ERR_THRESHOLD_NOT_MET,
            )
        if tally.client == 0:
            self._reject("No valid client signature found", ERR_NO_CLIENT_SIGNATURE)
        if tally.server != 1:
            self._reject(
                f"Invalid number of server signatures: {tally.server}",
                ERR_SERVER_SIGNATURE_COUNT,
            )
        if client_domain_data is not None and tally.client_domain != 1:
            self._reject(
                "Invalid number of client domain account signatures: "
                f"{tally.client_domain}",
                ERR_CLIENT_DOMAIN_SIGNATURE_COUNT,
            )
        if tally.unmatched:
            self._logger.debug(
                "Ignoring %d unrecognized signature(s) for %s",
                tally.unmatched,
                account.account_id,
            )
        return tally
