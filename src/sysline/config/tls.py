"""Build ``ssl.SSLContext`` trust configurations from files on disk."""

from __future__ import annotations

import ssl

from .schema import TLSConfig

__all__ = ["build_tls_context", "load_cert_path"]


def build_tls_context(config: TLSConfig) -> ssl.SSLContext:
    """Return a client context that verifies servers against ``config``.

    Without ``ca_file``/``ca_path`` the system trust store is used.
    """

    context = ssl.create_default_context(
        ssl.Purpose.SERVER_AUTH,
        cafile=config.ca_file,
        capath=config.ca_path,
    )
    if config.cert_file:
        context.load_cert_chain(config.cert_file, keyfile=config.key_file)
    return context


def load_cert_path(cert_path: str) -> ssl.SSLContext:
    """Return a context trusting only the PEM certificate(s) at ``cert_path``."""

    if not cert_path:
        raise ValueError("A certificate path is required for TLS")
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_verify_locations(cafile=cert_path)
    return context
