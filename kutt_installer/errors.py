# Path and File Name : /home/kutt/kutt-installer/kutt_installer/errors.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Exception hierarchy shared by installer, uninstaller and OIDC configurator

"""
Installer exceptions.

Components raise these; only the CLI entry points turn them into exit codes.
"""

from typing import List, Optional


class InstallerError(Exception):
    """Base class for every fatal installer failure."""
    pass


class PreconditionError(InstallerError):
    """Raised when the host is not in a state the procedure can start from."""
    pass


class InputValidationError(InstallerError):
    """Raised when a required operator input is empty or invalid."""
    pass


class ProvisioningError(InstallerError):
    """Raised when a dependency or application build step fails."""
    pass


class ConfigValidationError(InstallerError):
    """Raised when the reverse proxy rejects a rendered site config."""
    pass


class CertificateError(InstallerError):
    """Raised when certificate issuance or inspection fails."""
    pass


class SecretGenerationError(InstallerError):
    """Raised when the OS random source cannot produce secrets."""
    pass


class ProfileError(InstallerError):
    """Raised when the installer profile cannot be loaded or is invalid."""
    pass


class CommandError(InstallerError):
    """Raised when an external command exits non-zero."""

    def __init__(self, args: List[str], returncode: int, output: Optional[str] = None):
        self.cmd = list(args)
        self.returncode = returncode
        self.output = (output or "").strip()
        message = f"Command failed ({returncode}): {' '.join(self.cmd)}"
        if self.output:
            message += f"\n  {self.output.splitlines()[-1]}"
        super().__init__(message)


class OperationCancelled(Exception):
    """
    Raised when the operator declines a top-level confirmation.

    Not an InstallerError: declining is not a failure of the procedure.
    exit_code is 0 when declining leaves an existing setup untouched and 1
    when the operator cancels a run they started.
    """

    def __init__(self, message: str, exit_code: int = 1):
        self.exit_code = exit_code
        super().__init__(message)
