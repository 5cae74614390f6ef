"""Challenge transaction encoding and decoding."""

from stellar_sdk import (
    Account,
    FeeBumpTransactionEnvelope,
    Keypair,
    TransactionBuilder,
    TransactionEnvelope,
)

from ..constants import (
    CHALLENGE_BASE_FEE,
    ERR_FEE_BUMP_CHALLENGE,
    ERR_MALFORMED_CHALLENGE,
)
from ..errors import InvalidRequestData
from ..types import ChallengeArtifact


class ChallengeCodec:
    """Converts challenges to and from base64 XDR transaction envelopes.

    The encoded transaction uses sequence number 0 so that it can never be
    valid on the ledger.
    """

    def __init__(self, network_passphrase: str):
        self._network_passphrase = network_passphrase

    @property
    def network_passphrase(self) -> str:
        return self._network_passphrase

    def to_envelope(self, artifact: ChallengeArtifact) -> TransactionEnvelope:
        artifact.validate()

        # build() increments the sequence, so -1 yields 0
        source = Account(artifact.server_account_id, -1)
        builder = TransactionBuilder(
            source_account=source,
            network_passphrase=self._network_passphrase,
            base_fee=CHALLENGE_BASE_FEE,
        )
        for entry in artifact.entries:
            builder.append_manage_data_op(
                data_name=entry.key,
                data_value=entry.value,
                source=entry.source,
            )
        if artifact.memo_id is not None:
            builder.add_id_memo(artifact.memo_id)
        builder.add_time_bounds(artifact.min_time, artifact.max_time)
        return builder.build()

    def encode(self, artifact: ChallengeArtifact, keypair: Keypair) -> str:
        """Build the challenge transaction, sign it and return base64 XDR."""
        if keypair.public_key != artifact.server_account_id:
            raise ValueError("Challenge must be signed by its source account")
        envelope = self.to_envelope(artifact)
        envelope.sign(keypair)
        return envelope.to_xdr()

    def decode(self, xdr: str) -> TransactionEnvelope:
        """Parse a returned challenge. Fee bump envelopes are rejected."""
        try:
            is_fee_bump = FeeBumpTransactionEnvelope.is_fee_bump_transaction_envelope(xdr)
        except Exception as e:
            raise InvalidRequestData(
                "Transaction could not be parsed", reason=ERR_MALFORMED_CHALLENGE
            ) from e
        if is_fee_bump:
            raise InvalidRequestData(
                "Transaction cannot be a fee bump transaction",
                reason=ERR_FEE_BUMP_CHALLENGE,
            )

        try:
            return TransactionEnvelope.from_xdr(xdr, self._network_passphrase)
        except Exception as e:
            raise InvalidRequestData(
                "Transaction could not be parsed", reason=ERR_MALFORMED_CHALLENGE
            ) from e
