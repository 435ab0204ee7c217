# Path and File Name : /home/kutt/kutt-installer/kutt_installer/config/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Config package initialization - application .env rendering, parsing and writing

"""
Application environment file handling.
"""

from .env_file import (
    EnvFileWriter,
    parse_env,
    read_env_file,
    read_existing_config,
    render_install_env,
    render_oidc_block,
)

__all__ = [
    'EnvFileWriter',
    'parse_env',
    'read_env_file',
    'read_existing_config',
    'render_install_env',
    'render_oidc_block',
]
