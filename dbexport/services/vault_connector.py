"""Vault client used to look up database credentials."""
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import hvac
import requests
from hvac.exceptions import VaultError as HvacVaultError

from dbexport.errors import VaultError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class VaultConnector:
    """Reads key/value secrets from Vault.

    When a role is given the connector logs in with the Kubernetes auth method
    using the pod's service account token; otherwise hvac picks up a token from
    ``VAULT_TOKEN`` or ``~/.vault-token``.
    """

    def __init__(
        self,
        url: str,
        cert: Optional[str] = None,
        role: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_path: str = SERVICE_ACCOUNT_TOKEN_PATH,
    ):
        self.url = url
        self.cert = cert
        self.role = role
        self.timeout = timeout
        self.token_path = token_path
        self._client = None

    @property
    def client(self) -> hvac.Client:
        """Lazy initialization of the authenticated Vault client."""
        if self._client is None:
            client = hvac.Client(url=self.url, verify=self.cert or True, timeout=self.timeout)
            if self.role:
                jwt = Path(self.token_path).read_text().strip()
                client.auth.kubernetes.login(role=self.role, jwt=jwt)
                logger.debug("Logged in to %s with role %s", self.url, self.role)
            self._client = client
        return self._client

    def get_values(self, path: str) -> Dict[str, str]:
        """Return the key/value pairs stored at ``path`` (KV v1 or KV v2 layout)."""
        try:
            response = self.client.read(path)
        except (HvacVaultError, requests.exceptions.RequestException, OSError) as e:
            raise VaultError(f"Failed to read secret '{path}' from {self.url}: {e}") from e

        if not response or not isinstance(response.get("data"), dict):
            raise VaultError(f"No secret found at '{path}' in {self.url}")

        data = response["data"]
        # KV v2 nests the values under data.data next to a metadata block
        if "metadata" in data and isinstance(data.get("data"), dict):
            data = data["data"]

        return {str(key): str(value) for key, value in data.items() if value is not None}


def connect(url: str, cert: Optional[str] = None, role: Optional[str] = None,
            timeout: float = DEFAULT_TIMEOUT) -> VaultConnector:
    return VaultConnector(url, cert=cert, role=role, timeout=timeout)


class ConnectorCache:
    """Connectors keyed by (url, cert, role), created on first use."""

    def __init__(self, factory: Callable[..., VaultConnector] = connect):
        self._factory = factory
        self._connectors: Dict[Tuple[str, Optional[str], Optional[str]], VaultConnector] = {}

    def get(self, url: str, cert: Optional[str] = None, role: Optional[str] = None,
            timeout: float = DEFAULT_TIMEOUT) -> VaultConnector:
        key = (url, cert, role)
        if key not in self._connectors:
            self._connectors[key] = self._factory(url, cert=cert, role=role, timeout=timeout)
        return self._connectors[key]

    def __len__(self):
        return len(self._connectors)


# Shared by every lookup in this process
default_cache = ConnectorCache()
