"""Constants, fakes and signing helpers shared by the test modules."""

from stellar_sdk import Network, TransactionEnvelope

HOME_DOMAIN = "example.com"
OTHER_HOME_DOMAIN = "other.example.com"
WEB_AUTH_DOMAIN = "auth.example.com"
CLIENT_DOMAIN = "wallet.example"
JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes"
AUTH_URL = "https://auth.example.com/auth"
NETWORK_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE


class FakeAccountDirectory:
    """In-memory ledger keyed by G-address."""

    def __init__(self, accounts=None, error=None):
        self.accounts = dict(accounts or {})
        self.error = error
        self.requested = []

    def fetch_account(self, account_id):
        self.requested.append(account_id)
        if self.error is not None:
            raise self.error
        return self.accounts.get(account_id)


class FakeDomainKeyResolver:
    def __init__(self, keys=None):
        self.keys = dict(keys or {})

    def resolve_signing_key(self, domain):
        return self.keys.get(domain)


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def sign_challenge(xdr, *keypairs):
    """Add signatures from ``keypairs`` to a challenge and return the new XDR."""
    envelope = TransactionEnvelope.from_xdr(xdr, NETWORK_PASSPHRASE)
    for keypair in keypairs:
        envelope.signatures.append(keypair.sign_decorated(envelope.hash()))
    return envelope.to_xdr()
