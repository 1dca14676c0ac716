from __future__ import annotations

import ipaddress
import socket
import ssl
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from conftest import StreamCollector
from sysline import api
from sysline.core.errors import DialError
from sysline.core.priority import Facility, Severity, make_priority

USER_INFO = make_priority(Facility.USER, Severity.INFO)


@dataclass
class TLSMaterial:
    ca_path: Path
    cert_path: Path
    key_path: Path

    def server_context(self) -> ssl.SSLContext:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(str(self.cert_path), str(self.key_path))
        return context


def _key_usage(*, ca: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=ca,
        crl_sign=ca,
        encipher_only=False,
        decipher_only=False,
    )


@pytest.fixture(scope="module")
def tls_material(tmp_path_factory: pytest.TempPathFactory) -> TLSMaterial:
    directory = tmp_path_factory.mktemp("tls")
    now = datetime.now(timezone.utc)

    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "sysline test CA")])
    ca_cert = (
        x509.CertificateBuilder()
        .subject_name(ca_name)
        .issuer_name(ca_name)
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(hours=1))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(_key_usage(ca=True), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(ca_key.public_key()), critical=False)
        .sign(ca_key, hashes.SHA256())
    )

    server_key = ec.generate_private_key(ec.SECP256R1())
    server_cert = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")]))
        .issuer_name(ca_name)
        .public_key(server_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(hours=1))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(_key_usage(ca=False), critical=True)
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False)
        .add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName("localhost"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(server_key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key()), critical=False
        )
        .sign(ca_key, hashes.SHA256())
    )

    material = TLSMaterial(
        ca_path=directory / "ca.pem",
        cert_path=directory / "server.pem",
        key_path=directory / "server.key",
    )
    material.ca_path.write_bytes(ca_cert.public_bytes(serialization.Encoding.PEM))
    material.cert_path.write_bytes(server_cert.public_bytes(serialization.Encoding.PEM))
    material.key_path.write_bytes(
        server_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return material


@pytest.fixture
def tls_collector(tls_material: TLSMaterial) -> Iterator[StreamCollector]:
    collector = StreamCollector(socket.AF_INET, ("127.0.0.1", 0), tls_context=tls_material.server_context())
    host, port = collector.sock.getsockname()[:2]
    collector.address = f"{host}:{port}"  # type: ignore[attr-defined]
    yield collector
    collector.stop()


def test_error_arrives_over_tls_newline_terminated(tls_material: TLSMaterial, tls_collector) -> None:
    context = ssl.create_default_context(cafile=str(tls_material.ca_path))
    with api.dial_with_tls_config("tcp", tls_collector.address, USER_INFO, "t", context) as writer:
        writer.error("x")

    frame = tls_collector.wait_for(1)[0]
    assert frame.startswith(b"<11>")
    assert frame.endswith(b"]: x\n")


def test_dial_with_cert_path(tls_material: TLSMaterial, tls_collector) -> None:
    with api.dial_with_tls_cert_path("tcp", tls_collector.address, USER_INFO, "t", str(tls_material.ca_path)) as writer:
        writer.info("pinned")

    assert tls_collector.wait_for(1)[0].endswith(b"]: pinned\n")


def test_untrusted_server_fails_to_dial(tls_collector) -> None:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    # no trust anchors loaded: the server certificate cannot verify
    with pytest.raises(DialError):
        api.dial_with_tls_config("tcp", tls_collector.address, USER_INFO, "t", context)


def test_missing_cert_path_fails_to_dial(tmp_path: Path) -> None:
    with pytest.raises(DialError):
        api.dial_with_tls_cert_path("tcp", "127.0.0.1:6514", USER_INFO, "t", str(tmp_path / "absent.pem"))
    with pytest.raises(DialError):
        api.dial_with_tls_cert_path("tcp", "127.0.0.1:6514", USER_INFO, "t", "")
