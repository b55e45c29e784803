"""Tests for trust store construction."""

import ssl

import pytest
from structlog.testing import capture_logs

from rancher_client.http.tls import build_ssl_context, ca_cert_count


@pytest.mark.unit
def test_default_context_verifies_peers() -> None:
    context = build_ssl_context()

    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


@pytest.mark.unit
def test_ignore_system_ca_starts_empty() -> None:
    context = build_ssl_context(ignore_system_ca=True)

    assert ca_cert_count(context) == 0
    assert context.verify_mode == ssl.CERT_REQUIRED


@pytest.mark.unit
def test_ca_cert_is_the_only_anchor_when_system_ignored(ca_cert_pem: str) -> None:
    context = build_ssl_context(ca_cert=ca_cert_pem, ignore_system_ca=True)

    assert ca_cert_count(context) == 1


@pytest.mark.unit
def test_ca_cert_is_added_on_top_of_system_store(ca_cert_pem: str) -> None:
    baseline = ca_cert_count(build_ssl_context())
    context = build_ssl_context(ca_cert=ca_cert_pem)

    assert ca_cert_count(context) == baseline + 1


@pytest.mark.unit
def test_unparseable_ca_cert_is_logged_not_raised() -> None:
    with capture_logs() as logs:
        context = build_ssl_context(ca_cert="not a certificate", ignore_system_ca=True)

    assert ca_cert_count(context) == 0
    [warning] = [entry for entry in logs if entry["event"] == "ca_cert_append_failed"]
    assert warning["log_level"] == "warning"
    assert "No certs appended" in warning["detail"]


@pytest.mark.unit
def test_insecure_disables_verification_whatever_the_store(ca_cert_pem: str) -> None:
    context = build_ssl_context(ca_cert=ca_cert_pem, ignore_system_ca=True, insecure=True)

    assert context.verify_mode == ssl.CERT_NONE
    assert context.check_hostname is False
    assert ca_cert_count(context) == 1


@pytest.mark.unit
def test_every_build_returns_a_fresh_context() -> None:
    assert build_ssl_context() is not build_ssl_context()


@pytest.mark.unit
def test_trust_store_build_is_logged(ca_cert_pem: str) -> None:
    with capture_logs() as logs:
        build_ssl_context(ca_cert=ca_cert_pem, ignore_system_ca=True)

    [entry] = [entry for entry in logs if entry["event"] == "trust_store_built"]
    assert entry["ca_count"] == 1
    assert entry["ca_cert_appended"] is True
    assert entry["insecure"] is False
