"""Trust store and TLS context construction."""

import ssl

import certifi

from rancher_client.core.logging import get_logger


logger = get_logger(__name__)


def _load_system_store(context: ssl.SSLContext) -> None:
    """Load the platform trust store and the certifi bundle into ``context``.

    Either source may be missing; a failure leaves whatever was already
    loaded in place and never aborts the caller.
    """
    try:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)
    except (ssl.SSLError, OSError) as e:
        logger.debug(
            "system_ca_load_failed",
            source="platform",
            error=str(e),
            category="tls",
        )

    try:
        context.load_verify_locations(cafile=certifi.where())
    except (ssl.SSLError, OSError) as e:
        logger.debug(
            "system_ca_load_failed",
            source="certifi",
            error=str(e),
            category="tls",
        )


def _append_ca_cert(context: ssl.SSLContext, ca_cert: str) -> bool:
    try:
        context.load_verify_locations(cadata=ca_cert)
    except (ssl.SSLError, ValueError, TypeError) as e:
        logger.warning(
            "ca_cert_append_failed",
            error=str(e),
            detail="No certs appended, using the existing trust store only",
            category="tls",
        )
        return False
    return True


def ca_cert_count(context: ssl.SSLContext) -> int:
    """Number of CA certificates currently loaded in ``context``.

    Certificates from a hashed capath directory are loaded lazily by OpenSSL
    and only show up here once they have been used.
    """
    return int(context.cert_store_stats().get("x509_ca", 0))


def build_ssl_context(
    ca_cert: str = "",
    ignore_system_ca: bool = False,
    insecure: bool = False,
) -> ssl.SSLContext:
    """Build the TLS client context for one call.

    Args:
        ca_cert: PEM bundle appended to the trust store (may be empty)
        ignore_system_ca: Start from an empty trust store
        insecure: Skip server certificate and hostname verification

    Returns:
        A client-side ``ssl.SSLContext``; never ``None``
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    if not ignore_system_ca:
        _load_system_store(context)

    ca_appended = False
    if ca_cert:
        ca_appended = _append_ca_cert(context, ca_cert)

    if insecure:
        # order matters: hostname checks must be off before CERT_NONE
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    logger.debug(
        "trust_store_built",
        ca_count=ca_cert_count(context),
        ignore_system_ca=ignore_system_ca,
        ca_cert_appended=ca_appended,
        insecure=insecure,
        category="tls",
    )
    return context
