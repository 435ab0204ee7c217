# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/os_check.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Pre-flight checks - root privilege (fatal) and Ubuntu/Debian detection (warn only)

"""
OS Check: pre-flight checks run before any prompt.
"""

import os
from pathlib import Path
from typing import Dict, Tuple

from ..errors import PreconditionError

SUPPORTED_IDS = ('ubuntu', 'debian')


def require_root() -> None:
    """
    Raises:
        PreconditionError: If not running with euid 0
    """
    if os.geteuid() != 0:
        raise PreconditionError("This script must be run as root (use sudo).")


def read_os_release(path: Path) -> Dict[str, str]:
    """Parse /etc/os-release; missing file yields an empty mapping."""
    values: Dict[str, str] = {}
    try:
        text = Path(path).read_text()
    except OSError:
        return values
    for line in text.splitlines():
        if "=" not in line or line.startswith("#"):
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


class OSCheck:
    """Checks the host distribution."""

    def __init__(self, os_release: Path = Path("/etc/os-release")):
        self.os_release = Path(os_release)

    def is_supported(self) -> Tuple[bool, str]:
        """
        Returns:
            Tuple of (is_supported, reason)
        """
        info = read_os_release(self.os_release)
        os_id = info.get('ID', '').lower()
        id_like = info.get('ID_LIKE', '').lower().split()
        name = info.get('PRETTY_NAME') or os_id or 'unknown OS'

        if os_id in SUPPORTED_IDS or any(i in SUPPORTED_IDS for i in id_like):
            return True, f"Supported OS: {name}"
        return False, f"This script is designed for Ubuntu/Debian (found {name}). Proceed at your own risk."
