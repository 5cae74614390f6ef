"""Shared signature helpers for challenge verification."""

from dataclasses import dataclass, field

from stellar_sdk import DecoratedSignature, Keypair
from stellar_sdk.exceptions import BadSignatureError


@dataclass
class SignatureTally:
    """Count of challenge signatures attributed to each party."""

    client: int = 0
    server: int = 0
    client_domain: int = 0
    unmatched: int = 0
    signer_weight: int = 0
    matched_signers: list[str] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return self.client + self.server + self.client_domain


def verify_signature(
    account_id: str,
    tx_hash: bytes,
    signature: DecoratedSignature,
) -> bool:
    """Check whether a decorated signature was produced by ``account_id``."""
    try:
        keypair = Keypair.from_public_key(account_id)
    except ValueError:
        return False
    try:
        keypair.verify(tx_hash, signature.signature)
    except (BadSignatureError, ValueError):
        return False
    return True


def first_matching_signer(
    candidates: list[str],
    tx_hash: bytes,
    signature: DecoratedSignature,
) -> str | None:
    """Return the first candidate account that produced ``signature``."""
    for account_id in candidates:
        if verify_signature(account_id, tx_hash, signature):
            return account_id
    return None
