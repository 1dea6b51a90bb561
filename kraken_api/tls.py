"""Hostname verification that survives disabled peer verification.

With ``verify=False`` urllib3 skips both certificate trust and hostname checks.
For non-production endpoints (e.g. a beta host with a self-signed certificate)
we only want to relax trust: the certificate presented must still be issued for
the host we connected to. ``HostnameCheckingAdapter`` re-checks the peer
certificate's subjectAltName (or commonName when no SAN is present) after
every TLS handshake.
"""
import ipaddress
import ssl
from typing import List

from cryptography import x509
from cryptography.x509.oid import ExtensionOID, NameOID
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPSConnection
from urllib3.connectionpool import HTTPSConnectionPool


def _dns_matches(pattern: str, hostname: str) -> bool:
    pattern = pattern.lower().rstrip(".")
    hostname = hostname.lower().rstrip(".")
    if not pattern.startswith("*."):
        return pattern == hostname
    # wildcard covers exactly one leftmost label
    suffix = pattern[1:]
    head, dot, rest = hostname.partition(".")
    return bool(head) and bool(dot) and "." + rest == suffix


def certificate_names(cert: x509.Certificate) -> List[str]:
    """DNS names and IP addresses the certificate is valid for."""
    try:
        san = cert.extensions.get_extension_for_oid(ExtensionOID.SUBJECT_ALTERNATIVE_NAME).value
    except x509.ExtensionNotFound:
        return [attr.value for attr in cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)]
    names = list(san.get_values_for_type(x509.DNSName))
    names.extend(str(ip) for ip in san.get_values_for_type(x509.IPAddress))
    return names


def hostname_matches(der_cert: bytes, hostname: str) -> bool:
    cert = x509.load_der_x509_certificate(der_cert)
    names = certificate_names(cert)
    try:
        ip = ipaddress.ip_address(hostname.strip("[]"))
    except ValueError:
        return any(_dns_matches(name, hostname) for name in names)
    return any(name == str(ip) for name in names)


def verify_certificate_hostname(der_cert: bytes, hostname: str) -> None:
    if not der_cert:
        raise ssl.CertificateError(f"No peer certificate presented by {hostname}")
    if not hostname_matches(der_cert, hostname):
        raise ssl.CertificateError(f"Peer certificate does not match hostname {hostname!r}")


class HostnameCheckingHTTPSConnection(HTTPSConnection):
    def connect(self):
        super().connect()
        hostname = getattr(self, "_tunnel_host", None) or self.host
        try:
            verify_certificate_hostname(self.sock.getpeercert(binary_form=True), hostname)
        except ssl.CertificateError:
            self.close()
            raise


class HostnameCheckingHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = HostnameCheckingHTTPSConnection


class HostnameCheckingAdapter(HTTPAdapter):
    """HTTPAdapter whose HTTPS pools always verify the certificate hostname."""

    @staticmethod
    def _install(manager):
        manager.pool_classes_by_scheme = dict(manager.pool_classes_by_scheme, https=HostnameCheckingHTTPSConnectionPool)
        return manager

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self._install(self.poolmanager)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        return self._install(super().proxy_manager_for(proxy, **proxy_kwargs))
