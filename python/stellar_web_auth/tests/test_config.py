"""Tests for service configuration."""

import os

import pytest
from stellar_sdk import Keypair, Network

from stellar_web_auth.config import Sep10Config
from stellar_web_auth.constants import DEFAULT_TESTNET_HORIZON_URL
from stellar_web_auth.errors import InvalidConfig


def make_config(**overrides):
    settings = {
        "network": "stellar:testnet",
        "signing_seed": Keypair.random().secret,
        "jwt_secret": "secret",
        "home_domains": ["example.com"],
    }
    settings.update(overrides)
    return Sep10Config(**settings)


@pytest.fixture
def environ(monkeypatch):
    env = {k: v for k, v in os.environ.items() if not k.startswith("SEP10_")}
    monkeypatch.setattr(os, "environ", env)
    return env


class TestSep10Config:
    def test_valid(self):
        config = make_config()
        config.validate()
        assert config.network_passphrase == Network.TESTNET_NETWORK_PASSPHRASE
        assert config.effective_horizon_url == DEFAULT_TESTNET_HORIZON_URL

    def test_web_auth_domain_defaults_to_first_home_domain(self):
        config = make_config(home_domains=["a.example", "b.example"])
        assert config.effective_web_auth_domain == "a.example"
        config.web_auth_domain = "auth.a.example"
        assert config.effective_web_auth_domain == "auth.a.example"

    def test_server_account_id(self):
        keypair = Keypair.random()
        config = make_config(signing_seed=keypair.secret)
        assert config.server_account_id == keypair.public_key

    def test_empty_home_domains(self):
        with pytest.raises(InvalidConfig, match="home domains is empty"):
            make_config(home_domains=[]).validate()

    def test_missing_signing_seed(self):
        with pytest.raises(InvalidConfig, match="signing seed is not set"):
            make_config(signing_seed="").validate()

    def test_invalid_signing_seed(self):
        with pytest.raises(InvalidConfig, match="not a valid secret seed"):
            make_config(signing_seed=Keypair.random().public_key).validate()

    def test_missing_jwt_secret(self):
        with pytest.raises(InvalidConfig, match="JWT signing key"):
            make_config(jwt_secret="").validate()

    def test_unknown_network(self):
        with pytest.raises(InvalidConfig, match="Unknown Stellar network"):
            make_config(network="stellar:devnet").validate()

    def test_non_positive_timeouts(self):
        with pytest.raises(InvalidConfig, match="auth_timeout"):
            make_config(auth_timeout=0).validate()
        with pytest.raises(InvalidConfig, match="jwt_timeout"):
            make_config(jwt_timeout=-1).validate()


class TestSep10ConfigFromEnv:
    def test_from_env(self, environ, tmp_path):
        seed = Keypair.random().secret
        environ.update(
            {
                "SEP10_NETWORK": "stellar:testnet",
                "SEP10_SIGNING_SEED": seed,
                "SEP10_JWT_SECRET": "secret",
                "SEP10_HOME_DOMAINS": "example.com, other.example.com",
                "SEP10_AUTH_TIMEOUT": "600",
                "SEP10_CLIENT_ATTRIBUTION_REQUIRED": "true",
                "SEP10_ALLOWED_CLIENT_DOMAINS": "wallet.example",
            }
        )
        config = Sep10Config.from_env(dotenv_path=str(tmp_path / "missing.env"))

        assert config.signing_seed == seed
        assert config.home_domains == ["example.com", "other.example.com"]
        assert config.auth_timeout == 600
        assert config.jwt_timeout == 86400
        assert config.client_attribution_required is True
        assert config.allowed_client_domains == ["wallet.example"]
        assert config.known_custodial_accounts == []
        assert config.web_auth_domain is None

    def test_from_dotenv_file(self, environ, tmp_path):
        seed = Keypair.random().secret
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text(
            "SEP10_NETWORK=stellar:pubnet\n"
            f"SEP10_SIGNING_SEED={seed}\n"
            "SEP10_JWT_SECRET=from-file\n"
            "SEP10_HOME_DOMAINS=example.com\n"
        )
        config = Sep10Config.from_env(dotenv_path=str(dotenv_file))

        assert config.network == "stellar:pubnet"
        assert config.jwt_secret == "from-file"
        config.validate()

    def test_custom_prefix(self, environ, tmp_path):
        environ.update(
            {
                "AUTH_NETWORK": "stellar:testnet",
                "AUTH_SIGNING_SEED": Keypair.random().secret,
                "AUTH_JWT_SECRET": "secret",
                "AUTH_HOME_DOMAINS": "example.com",
            }
        )
        config = Sep10Config.from_env(
            prefix="AUTH_", dotenv_path=str(tmp_path / "missing.env")
        )
        assert config.home_domains == ["example.com"]

    def test_missing_required(self, environ, tmp_path):
        environ["SEP10_NETWORK"] = "stellar:testnet"
        with pytest.raises(InvalidConfig, match="SEP10_SIGNING_SEED"):
            Sep10Config.from_env(dotenv_path=str(tmp_path / "missing.env"))

    def test_invalid_timeout(self, environ, tmp_path):
        environ.update(
            {
                "SEP10_NETWORK": "stellar:testnet",
                "SEP10_SIGNING_SEED": Keypair.random().secret,
                "SEP10_JWT_SECRET": "secret",
                "SEP10_HOME_DOMAINS": "example.com",
                "SEP10_JWT_TIMEOUT": "forever",
            }
        )
        with pytest.raises(InvalidConfig, match="Invalid timeout setting"):
            Sep10Config.from_env(dotenv_path=str(tmp_path / "missing.env"))
