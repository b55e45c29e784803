"""Shared test fixtures and configuration for rancher_client tests."""

import os
from collections.abc import Iterator

import pytest

from rancher_client.core.logging import setup_logging
from rancher_client.http.client import RancherHttpClient
from tests.helpers.recording import RecordingTransport, respond


ENVIRONMENT_VARIABLES = {
    "SSL_CERT_FILE",
    "SSL_CERT_DIR",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "NO_PROXY",
    "RANCHER_CONFIG_FILE",
    "FORCE_COLOR",
}


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    # Reuse the application logging pipeline so processors behave as in production
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.fixture(autouse=True)
def clean_environ(tmp_path, monkeypatch) -> Iterator[None]:
    """Keep proxy, CA and RANCHER_* variables out of every test."""
    for key in list(os.environ):
        if key.upper() in ENVIRONMENT_VARIABLES or key.upper().startswith("RANCHER_"):
            monkeypatch.delenv(key, raising=False)
    # no stray .env or .rancher-client.toml from the working tree
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    yield


@pytest.fixture
def recorder() -> RecordingTransport:
    """Transport recorder answering 200 with an empty body by default."""
    return RecordingTransport(handler=respond(200))


@pytest.fixture
def client_factory(recorder: RecordingTransport):
    """Build clients wired to the ``recorder`` transport."""

    def _factory(**kwargs) -> RancherHttpClient:
        kwargs.setdefault("api_url", "https://rancher.example.com")
        kwargs.setdefault("transport_factory", recorder.factory)
        return RancherHttpClient(**kwargs)

    return _factory
