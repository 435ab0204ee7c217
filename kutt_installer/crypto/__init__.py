# Path and File Name : /home/kutt/kutt-installer/kutt_installer/crypto/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Crypto package initialization - secret generation and certificate inspection

"""
Installer crypto helpers: per-run secrets and issued-certificate checks.
"""

from .secret_generator import generate_secrets
from .certificate_inspector import CertificateInfo, inspect_certificate

__all__ = ['generate_secrets', 'CertificateInfo', 'inspect_certificate']
