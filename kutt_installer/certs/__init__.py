# Path and File Name : /home/kutt/kutt-installer/kutt_installer/certs/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Certs package initialization - certbot client and certificate provisioner

from .certbot import CertbotClient
from .provisioner import CertificateProvisioner

__all__ = ['CertbotClient', 'CertificateProvisioner']
