# Path and File Name : /home/kutt/kutt-installer/kutt_installer/crypto/certificate_inspector.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Loads an issued PEM certificate and checks it covers the domain and is currently valid

"""
Certificate Inspector: verifies the certificate certbot left on disk before
the HTTPS site config is allowed to reference it.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from ..errors import CertificateError


@dataclass
class CertificateInfo:
    """Subset of certificate fields the installer reports on."""
    subject_cn: Optional[str]
    dns_names: List[str]
    not_before: datetime
    not_after: datetime
    issuer: str

    def covers(self, domain: str) -> bool:
        """True if domain matches a SAN entry (or the CN when there are no SANs)."""
        domain = domain.lower()
        names = [n.lower() for n in self.dns_names] or ([self.subject_cn.lower()] if self.subject_cn else [])
        for name in names:
            if name == domain:
                return True
            if name.startswith("*.") and domain.count(".") == name.count(".") and domain.endswith(name[1:]):
                return True
        return False

    def is_current(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.not_before <= now <= self.not_after


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def load_certificate_info(cert_path: Path) -> CertificateInfo:
    """
    Parse the leaf certificate of a PEM chain.

    Raises:
        CertificateError: If the file is missing or not a PEM certificate
    """
    cert_path = Path(cert_path)
    if not cert_path.exists():
        raise CertificateError(f"Certificate not found: {cert_path}")

    try:
        # First PEM block in fullchain.pem is the leaf
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
    except ValueError as e:
        raise CertificateError(f"Certificate {cert_path} is not a valid PEM certificate: {e}")

    cn_attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    subject_cn = cn_attrs[0].value if cn_attrs else None

    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        dns_names = san.value.get_values_for_type(x509.DNSName)
    except x509.ExtensionNotFound:
        dns_names = []

    # not_valid_*_utc exists on cryptography >= 42
    not_before = getattr(cert, 'not_valid_before_utc', None) or _utc(cert.not_valid_before)
    not_after = getattr(cert, 'not_valid_after_utc', None) or _utc(cert.not_valid_after)

    return CertificateInfo(
        subject_cn=subject_cn,
        dns_names=list(dns_names),
        not_before=not_before,
        not_after=not_after,
        issuer=cert.issuer.rfc4514_string(),
    )


def inspect_certificate(cert_path: Path, domain: str, now: Optional[datetime] = None) -> CertificateInfo:
    """
    Load cert_path and require that it covers domain and is currently valid.

    Returns:
        CertificateInfo

    Raises:
        CertificateError: If missing, unparsable, for another name or outside its validity window
    """
    info = load_certificate_info(cert_path)
    if not info.covers(domain):
        names = ", ".join(info.dns_names) or str(info.subject_cn)
        raise CertificateError(f"Certificate {cert_path} does not cover {domain} (names: {names})")
    if not info.is_current(now):
        raise CertificateError(
            f"Certificate {cert_path} is not currently valid "
            f"({info.not_before.isoformat()} .. {info.not_after.isoformat()})"
        )
    return info
