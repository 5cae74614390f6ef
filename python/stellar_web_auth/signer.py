"""Collaborator protocols for Stellar web authentication."""

from typing import Protocol

from .types import AccountInfo


class AccountDirectory(Protocol):
    """Protocol for resolving an account's signers and thresholds."""

    def fetch_account(self, account_id: str) -> AccountInfo | None:
        """Load an account from the ledger.

        Args:
            account_id: The ed25519 (G...) account id.

        Returns:
            The account's signers and medium threshold, or None if the
            account does not exist on the ledger.

        Raises:
            AccountLookupFailure: The ledger could not be queried.
        """
        ...


class DomainKeyResolver(Protocol):
    """Protocol for resolving a domain's published signing key."""

    def resolve_signing_key(self, domain: str) -> str | None:
        """Fetch the SIGNING_KEY a domain publishes in its stellar.toml.

        Args:
            domain: Host name, optionally with a port.

        Returns:
            The signing key, or None if the document declares none.

        Raises:
            ClientDomainSigningKeyNotFound: The document could not be
                fetched or parsed.
        """
        ...
