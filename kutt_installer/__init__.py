# Path and File Name : /home/kutt/kutt-installer/kutt_installer/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Package initialization - Kutt server installer, uninstaller and OIDC configurator

"""
Kutt server installer: install, uninstall and OIDC configuration for the
Kutt URL shortener on Ubuntu/Debian hosts.
"""

__version__ = "1.0.0"
