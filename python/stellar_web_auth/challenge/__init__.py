"""Challenge transaction building, encoding and validation."""

from stellar_web_auth.challenge.builder import ChallengeBuilder, generate_nonce
from stellar_web_auth.challenge.codec import ChallengeCodec
from stellar_web_auth.challenge.validator import ChallengeValidator

__all__ = [
    "ChallengeBuilder",
    "ChallengeCodec",
    "ChallengeValidator",
    "generate_nonce",
]
