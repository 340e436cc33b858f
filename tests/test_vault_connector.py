from unittest.mock import MagicMock, patch

import pytest
import requests
from hvac.exceptions import Forbidden, InvalidPath

from dbexport.errors import VaultError
from dbexport.services.vault_connector import ConnectorCache, VaultConnector, connect


@pytest.fixture
def hvac_client():
    with patch("dbexport.services.vault_connector.hvac.Client") as client_class:
        yield client_class


def test_kv_v1_secret(hvac_client):
    hvac_client.return_value.read.return_value = {"data": {"username": "u", "password": "p"}}

    values = VaultConnector("https://vault:8200").get_values("secret/dbexport")

    assert values == {"username": "u", "password": "p"}
    hvac_client.assert_called_once_with(url="https://vault:8200", verify=True, timeout=30)


def test_kv_v2_secret(hvac_client):
    hvac_client.return_value.read.return_value = {
        "data": {"data": {"username": "u", "password": "p"}, "metadata": {"version": 3}},
    }

    values = VaultConnector("https://vault:8200").get_values("secret/data/dbexport")

    assert values == {"username": "u", "password": "p"}


def test_cert_is_used_to_verify(hvac_client):
    hvac_client.return_value.read.return_value = {"data": {"username": "u"}}

    VaultConnector("https://vault:8200", cert="/etc/ssl/ca.pem", timeout=5).get_values("secret/x")

    hvac_client.assert_called_once_with(url="https://vault:8200", verify="/etc/ssl/ca.pem", timeout=5)


def test_role_logs_in_with_service_account_token(hvac_client, tmp_path):
    token = tmp_path / "token"
    token.write_text("jwt-token\n")
    hvac_client.return_value.read.return_value = {"data": {"username": "u"}}

    connector = VaultConnector("https://vault:8200", role="dbexport", token_path=str(token))
    connector.get_values("secret/x")
    connector.get_values("secret/y")

    hvac_client.return_value.auth.kubernetes.login.assert_called_once_with(role="dbexport", jwt="jwt-token")
    assert hvac_client.call_count == 1


def test_missing_token_file(hvac_client, tmp_path):
    connector = VaultConnector("https://vault:8200", role="dbexport", token_path=str(tmp_path / "missing"))

    with pytest.raises(VaultError):
        connector.get_values("secret/x")


@pytest.mark.parametrize("error", [
    Forbidden("permission denied"),
    InvalidPath("no handler for route"),
    requests.exceptions.ConnectionError("connection refused"),
])
def test_client_errors_become_vault_errors(hvac_client, error):
    hvac_client.return_value.read.side_effect = error

    with pytest.raises(VaultError) as exc:
        VaultConnector("https://vault:8200").get_values("secret/x")
    assert exc.value.__cause__ is error
    assert "secret/x" in str(exc.value)


@pytest.mark.parametrize("response", [None, {}, {"data": None}])
def test_missing_secret(hvac_client, response):
    hvac_client.return_value.read.return_value = response

    with pytest.raises(VaultError) as exc:
        VaultConnector("https://vault:8200").get_values("secret/missing")
    assert "secret/missing" in str(exc.value)


def test_connect_builds_connector():
    connector = connect("https://vault:8200", cert="/ca.pem", role="dbexport", timeout=10)

    assert isinstance(connector, VaultConnector)
    assert (connector.url, connector.cert, connector.role, connector.timeout) == (
        "https://vault:8200", "/ca.pem", "dbexport", 10,
    )


def test_cache_is_keyed_by_url_cert_and_role():
    factory = MagicMock(side_effect=lambda url, **kwargs: MagicMock(url=url))
    cache = ConnectorCache(factory=factory)

    first = cache.get("https://vault:8200", "/ca.pem", "a")
    assert cache.get("https://vault:8200", "/ca.pem", "a") is first
    assert cache.get("https://vault:8200", "/ca.pem", "b") is not first
    assert cache.get("https://other:8200", "/ca.pem", "a") is not first

    assert len(cache) == 3
    assert factory.call_count == 3
