"""End-to-end calls against a local HTTPS server signed by a private CA."""

import json

import pytest

from rancher_client.core.exceptions import RequestExecutionError
from rancher_client.http.client import RancherHttpClient
from rancher_client.http.request import RancherHttpRequest
from tests.fixtures.tls_server import HTTPSServer


pytestmark = pytest.mark.integration


async def test_insecure_client_accepts_untrusted_certificate(https_server: HTTPSServer) -> None:
    client = RancherHttpClient(api_url=https_server.url, insecure=True, timeout=10)

    body = await client.read(
        RancherHttpRequest(method="GET", endpoint=client.url_for("/v3/clusters"))
    )

    assert json.loads(body)["path"] == "/v3/clusters"


async def test_system_store_does_not_trust_private_ca(https_server: HTTPSServer) -> None:
    client = RancherHttpClient(api_url=https_server.url, timeout=10)

    with pytest.raises(RequestExecutionError) as exc_info:
        await client.read(RancherHttpRequest(method="GET", endpoint=https_server.url))

    assert exc_info.value.error_type == "transport_error"


async def test_empty_trust_store_rejects_server(https_server: HTTPSServer) -> None:
    client = RancherHttpClient(api_url=https_server.url, ignore_system_ca=True, timeout=10)

    with pytest.raises(RequestExecutionError):
        await client.read(RancherHttpRequest(method="GET", endpoint=https_server.url))


async def test_private_ca_is_trusted_when_supplied(
    https_server: HTTPSServer, ca_cert_pem: str
) -> None:
    client = RancherHttpClient(
        api_url=https_server.url,
        ca_cert=ca_cert_pem,
        ignore_system_ca=True,
        token="token-abc:s3cr3t",
        timeout=10,
    )

    response = await client.execute(
        RancherHttpRequest(
            method="POST",
            endpoint=client.url_for("/v3/tokens"),
            body={"ttl": 3600},
            headers={"X-Request-Id": "it-1"},
        )
    )

    echoed = response.json()
    assert response.status_code == 200
    assert echoed["method"] == "POST"
    assert echoed["body"] == '{"ttl":3600}'
    assert echoed["headers"]["authorization"] == "Bearer token-abc:s3cr3t"
    assert echoed["headers"]["content-type"] == "application/json"
    assert echoed["headers"]["x-request-id"] == "it-1"


@pytest.fixture
def system_trusts_private_ca(tmp_path, monkeypatch, ca_cert_pem: str) -> None:
    """Point OpenSSL's default verify file at the private CA."""
    ca_file = tmp_path / "system-ca.pem"
    ca_file.write_text(ca_cert_pem, encoding="ascii")
    monkeypatch.setenv("SSL_CERT_FILE", str(ca_file))


@pytest.mark.usefixtures("system_trusts_private_ca")
async def test_system_trusted_server_is_accepted_by_default(
    https_server: HTTPSServer,
) -> None:
    client = RancherHttpClient(api_url=https_server.url, timeout=10)

    response = await client.execute(
        RancherHttpRequest(method="GET", endpoint=https_server.url)
    )

    assert response.status_code == 200


@pytest.mark.usefixtures("system_trusts_private_ca")
async def test_ignore_system_ca_rejects_system_trusted_server(
    https_server: HTTPSServer,
) -> None:
    client = RancherHttpClient(api_url=https_server.url, ignore_system_ca=True, timeout=10)

    with pytest.raises(RequestExecutionError) as exc_info:
        await client.read(RancherHttpRequest(method="GET", endpoint=https_server.url))

    assert exc_info.value.error_type == "transport_error"
