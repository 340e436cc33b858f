"""Resolve database credentials from Vault or from a directly supplied password."""
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Optional, Union

from dbexport.config import ExportOptions
from dbexport.errors import SecretResolutionError, VaultError
from dbexport.models.args import Credentials
from dbexport.services.password_reader import PasswordReader
from dbexport.services.vault_connector import DEFAULT_TIMEOUT, ConnectorCache, default_cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecretStoreSource:
    """Credentials stored as ``username``/``password`` entries at a Vault path."""
    url: str
    path: str
    cert: Optional[str] = None
    role: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    cache: ConnectorCache = field(default=default_cache, repr=False, compare=False)

    def resolve(self) -> Credentials:
        logger.info("Using vault authentication.")
        try:
            connector = self.cache.get(self.url, self.cert, self.role, timeout=self.timeout)
            values = connector.get_values(self.path)
        except VaultError as e:
            logger.error("Issues with vault configuration. %s", e)
            raise SecretResolutionError(f"Could not resolve credentials from vault: {e}") from e

        missing = [key for key in ("username", "password") if key not in values]
        if missing:
            raise SecretResolutionError(
                f"Vault secret '{self.path}' is missing required keys: {', '.join(missing)}"
            )
        if not values["username"]:
            raise SecretResolutionError(f"Vault secret '{self.path}' has an empty username")

        return Credentials(username=values["username"], password=values["password"])


@dataclass(frozen=True)
class DirectSource:
    """A configured username plus a password obtained on demand."""
    username: Optional[str]
    read_password: Callable[[], Optional[str]] = field(repr=False, compare=False)

    def resolve(self) -> Credentials:
        logger.info("Using password authentication.")
        return Credentials(username=self.username, password=self.read_password())


CredentialSource = Union[SecretStoreSource, DirectSource]


def credential_source_from_options(
    options: ExportOptions,
    cache: Optional[ConnectorCache] = None,
    password_reader: Optional[PasswordReader] = None,
) -> CredentialSource:
    """Pick Vault when a vault URL is configured, the direct password path otherwise."""
    if options.uses_vault:
        return SecretStoreSource(
            url=options.vault_url,
            path=options.vault_path,
            cert=options.vault_cert,
            role=options.vault_role,
            timeout=options.vault_timeout,
            cache=cache if cache is not None else default_cache,
        )

    reader = password_reader or PasswordReader()
    return DirectSource(username=options.username, read_password=partial(reader.read_password, options))


def resolve_credentials(
    options: ExportOptions,
    cache: Optional[ConnectorCache] = None,
    password_reader: Optional[PasswordReader] = None,
) -> Credentials:
    return credential_source_from_options(options, cache, password_reader).resolve()
