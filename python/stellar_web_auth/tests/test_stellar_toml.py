"""Tests for client domain signing key resolution."""

import httpx
import pytest
from stellar_sdk import Keypair

from stellar_web_auth.constants import ERR_CLIENT_SIGNING_KEY_NOT_FOUND
from stellar_web_auth.errors import ClientDomainSigningKeyNotFound
from stellar_web_auth.stellar_toml import HttpDomainKeyResolver, stellar_toml_url


def make_resolver(handler, use_http=False):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpDomainKeyResolver(client=client, use_http=use_http)


class TestStellarTomlUrl:
    def test_https(self):
        assert stellar_toml_url("wallet.example") == (
            "https://wallet.example/.well-known/stellar.toml"
        )

    def test_http(self):
        assert stellar_toml_url("localhost:8000", use_http=True) == (
            "http://localhost:8000/.well-known/stellar.toml"
        )


class TestHttpDomainKeyResolver:
    def test_resolves_signing_key(self):
        signing_key = Keypair.random().public_key
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(
                200, text=f'VERSION="2.0.0"\nSIGNING_KEY="{signing_key}"\n'
            )

        resolver = make_resolver(handler)

        assert resolver.resolve_signing_key("wallet.example") == signing_key
        assert requested == ["https://wallet.example/.well-known/stellar.toml"]

    def test_missing_signing_key(self):
        resolver = make_resolver(lambda request: httpx.Response(200, text='VERSION="2.0.0"\n'))
        assert resolver.resolve_signing_key("wallet.example") is None

    def test_non_string_signing_key(self):
        resolver = make_resolver(lambda request: httpx.Response(200, text="SIGNING_KEY=5\n"))
        assert resolver.resolve_signing_key("wallet.example") is None

    def test_http_error(self):
        resolver = make_resolver(lambda request: httpx.Response(404, text="not found"))
        with pytest.raises(ClientDomainSigningKeyNotFound) as exc:
            resolver.resolve_signing_key("wallet.example")
        assert exc.value.reason == ERR_CLIENT_SIGNING_KEY_NOT_FOUND
        assert exc.value.status_code == 400
        assert "wallet.example" in exc.value.message

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        resolver = make_resolver(handler)
        with pytest.raises(ClientDomainSigningKeyNotFound, match="connection refused"):
            resolver.resolve_signing_key("wallet.example")

    def test_invalid_toml(self):
        resolver = make_resolver(lambda request: httpx.Response(200, text='SIGNING_KEY = "abc'))
        with pytest.raises(ClientDomainSigningKeyNotFound):
            resolver.resolve_signing_key("wallet.example")

    @pytest.mark.parametrize("domain", ["@@", "xn--a.com"])
    def test_malformed_domain(self, domain):
        resolver = make_resolver(lambda request: httpx.Response(404))
        with pytest.raises(ClientDomainSigningKeyNotFound) as exc:
            resolver.resolve_signing_key(domain)
        assert exc.value.reason == ERR_CLIENT_SIGNING_KEY_NOT_FOUND


class TestResolverClose:
    def test_closes_own_client(self):
        with HttpDomainKeyResolver() as resolver:
            assert not resolver._client.is_closed
        assert resolver._client.is_closed

    def test_leaves_injected_client_open(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
        with HttpDomainKeyResolver(client=client):
            pass
        assert not client.is_closed
        client.close()
