# Path and File Name : /home/kutt/kutt-installer/kutt_installer/proxy/site_config.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Renders the Nginx site for Kutt - HTTP-only (ACME challenge) and full HTTPS reverse proxy

"""
Reverse proxy site templates.

Phase 1 serves only the ACME challenge and redirects everything else, so
certbot can complete before any certificate exists. Phase 2 adds the TLS
server block that proxies to the application port.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

SSL_CIPHERS = ":".join([
    "ECDHE-ECDSA-AES128-GCM-SHA256",
    "ECDHE-RSA-AES128-GCM-SHA256",
    "ECDHE-ECDSA-AES256-GCM-SHA384",
    "ECDHE-RSA-AES256-GCM-SHA384",
    "ECDHE-ECDSA-CHACHA20-POLY1305",
    "ECDHE-RSA-CHACHA20-POLY1305",
    "DHE-RSA-AES128-GCM-SHA256",
    "DHE-RSA-AES256-GCM-SHA384",
])


def _http_server_block(domain: str, acme_webroot: Path) -> str:
    return f"""server {{
    listen 80;
    listen [::]:80;
    server_name {domain};

    location /.well-known/acme-challenge/ {{
        root {acme_webroot};
    }}

    location / {{
        return 301 https://$host$request_uri;
    }}
}}
"""


def render_http_site(domain: str, acme_webroot: Path) -> str:
    """
    Phase 1 site: ACME challenge plus HTTPS redirect.

    Args:
        domain: server_name
        acme_webroot: Directory served under /.well-known/acme-challenge/

    Returns:
        Site config text
    """
    return _http_server_block(domain, acme_webroot)


def render_https_site(domain: str, acme_webroot: Path, fullchain: Path, privkey: Path,
                      app_name: str, app_port: int, generated_at: Optional[datetime] = None) -> str:
    """
    Phase 2 site: HTTP redirect block plus TLS reverse proxy to 127.0.0.1:app_port.

    Args:
        domain: server_name
        acme_webroot: Directory served under /.well-known/acme-challenge/
        fullchain: ssl_certificate path
        privkey: ssl_certificate_key path
        app_name: Used in the header comment
        app_port: Upstream port on loopback
        generated_at: Timestamp for the header comment (defaults to now)

    Returns:
        Site config text
    """
    stamp = (generated_at or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
    return f"""# {app_name} - Nginx reverse proxy with SSL
# Generated by installer on {stamp}

# Redirect HTTP -> HTTPS
{_http_server_block(domain, acme_webroot)}
# HTTPS server
server {{
    listen 443 ssl http2;
    listen [::]:443 ssl http2;
    server_name {domain};

    # SSL certificates (managed by Certbot)
    ssl_certificate     {fullchain};
    ssl_certificate_key {privkey};

    # SSL hardening
    ssl_protocols TLSv1.2 TLSv1.3;
    ssl_ciphers {SSL_CIPHERS};
    ssl_prefer_server_ciphers off;
    ssl_session_cache shared:SSL:10m;
    ssl_session_timeout 1d;
    ssl_session_tickets off;

    # HSTS
    add_header Strict-Transport-Security "max-age=63072000; includeSubDomains; preload" always;

    # Security headers
    add_header X-Frame-Options DENY always;
    add_header X-Content-Type-Options nosniff always;
    add_header Referrer-Policy strict-origin-when-cross-origin always;

    # Proxy to {app_name}
    location / {{
        proxy_pass http://127.0.0.1:{app_port};
        proxy_http_version 1.1;
        proxy_set_header Host $host;
        proxy_set_header X-Real-IP $remote_addr;
        proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;
        proxy_set_header X-Forwarded-Proto $scheme;
        proxy_set_header Upgrade $http_upgrade;
        proxy_set_header Connection "upgrade";
        proxy_read_timeout 90s;
        proxy_buffering off;
    }}
}}
"""


def parse_server_name(site_text: str) -> Optional[str]:
    """First server_name value in a site config, or None."""
    for line in site_text.splitlines():
        parts = line.strip().split()
        if len(parts) >= 2 and parts[0] == "server_name":
            return parts[1].rstrip(";")
    return None
