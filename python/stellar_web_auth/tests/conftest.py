"""Shared fixtures for web authentication tests."""

import time

import pytest
from stellar_sdk import Keypair

from stellar_web_auth.challenge import ChallengeBuilder, ChallengeCodec, ChallengeValidator
from stellar_web_auth.config import Sep10Config
from stellar_web_auth.service import Sep10Service
from stellar_web_auth.tests.helpers import (
    CLIENT_DOMAIN,
    HOME_DOMAIN,
    JWT_SECRET,
    NETWORK_PASSPHRASE,
    OTHER_HOME_DOMAIN,
    WEB_AUTH_DOMAIN,
    FakeAccountDirectory,
    FakeDomainKeyResolver,
    FixedClock,
)
from stellar_web_auth.types import ChallengeRequest
from stellar_web_auth.verifier import SignatureVerifier


@pytest.fixture
def server_keypair():
    return Keypair.random()


@pytest.fixture
def client_keypair():
    return Keypair.random()


@pytest.fixture
def domain_keypair():
    return Keypair.random()


@pytest.fixture
def clock():
    return FixedClock(int(time.time()))


@pytest.fixture
def config(server_keypair):
    return Sep10Config(
        network="stellar:testnet",
        signing_seed=server_keypair.secret,
        jwt_secret=JWT_SECRET,
        home_domains=[HOME_DOMAIN, OTHER_HOME_DOMAIN],
        web_auth_domain=WEB_AUTH_DOMAIN,
    )


@pytest.fixture
def accounts():
    return FakeAccountDirectory()


@pytest.fixture
def domain_keys(domain_keypair):
    return FakeDomainKeyResolver({CLIENT_DOMAIN: domain_keypair.public_key})


@pytest.fixture
def codec():
    return ChallengeCodec(NETWORK_PASSPHRASE)


@pytest.fixture
def builder(codec, server_keypair, domain_keys, clock):
    return ChallengeBuilder(
        codec=codec,
        server_keypair=server_keypair,
        home_domains=[HOME_DOMAIN, OTHER_HOME_DOMAIN],
        web_auth_domain=WEB_AUTH_DOMAIN,
        domain_key_resolver=domain_keys,
        clock=clock,
    )


@pytest.fixture
def validator(codec, server_keypair, clock):
    return ChallengeValidator(
        codec=codec,
        server_account_id=server_keypair.public_key,
        home_domains=[HOME_DOMAIN, OTHER_HOME_DOMAIN],
        web_auth_domain=WEB_AUTH_DOMAIN,
        clock=clock,
    )


@pytest.fixture
def verifier(server_keypair, accounts):
    return SignatureVerifier(
        server_account_id=server_keypair.public_key,
        account_directory=accounts,
    )


@pytest.fixture
def issue_challenge(builder):
    """Issue a server-signed challenge and return its XDR."""

    def issue(account, memo=None, home_domain=None, client_domain=None):
        response = builder.create_challenge(
            ChallengeRequest(
                account=account,
                memo=memo,
                home_domain=home_domain,
                client_domain=client_domain,
            )
        )
        assert response.status_code == 200, response
        return response.transaction

    return issue


@pytest.fixture
def service(config, accounts, domain_keys, clock):
    return Sep10Service(
        config,
        account_directory=accounts,
        domain_key_resolver=domain_keys,
        clock=clock,
    )
