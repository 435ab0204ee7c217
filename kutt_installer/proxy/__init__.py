# Path and File Name : /home/kutt/kutt-installer/kutt_installer/proxy/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Proxy package initialization - Nginx site templates and controller

from .nginx import NginxController
from .site_config import parse_server_name, render_http_site, render_https_site

__all__ = ['NginxController', 'parse_server_name', 'render_http_site', 'render_https_site']
