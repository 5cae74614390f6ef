"""Construction helpers for the web authentication service."""

import logging

from .config import Sep10Config
from .service import Sep10Service
from .signer import AccountDirectory, DomainKeyResolver


def create_sep10_service(
    config: Sep10Config,
    account_directory: AccountDirectory | None = None,
    domain_key_resolver: DomainKeyResolver | None = None,
    logger: logging.Logger | None = None,
) -> Sep10Service:
    """Create and return a web authentication service."""
    return Sep10Service(
        config,
        account_directory=account_directory,
        domain_key_resolver=domain_key_resolver,
        logger=logger,
    )


def create_sep10_service_from_env(
    prefix: str = "SEP10_",
    dotenv_path: str | None = None,
    logger: logging.Logger | None = None,
) -> Sep10Service:
    """Create a service configured from ``<prefix>*`` environment variables."""
    config = Sep10Config.from_env(prefix=prefix, dotenv_path=dotenv_path)
    return create_sep10_service(config, logger=logger)
