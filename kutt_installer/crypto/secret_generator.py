# Path and File Name : /home/kutt/kutt-installer/kutt_installer/crypto/secret_generator.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Generates the per-install JWT signing secret and database password from the OS CSPRNG

"""
Secret Generator.

Both values come from the OS random source through the secrets module and
are never derived from operator input. There is no weaker fallback.
"""

import base64
import secrets

from ..errors import SecretGenerationError
from ..models import Secrets

JWT_SECRET_BYTES = 48
DB_PASSWORD_BYTES = 24


def _random_base64(num_bytes: int) -> str:
    try:
        raw = secrets.token_bytes(num_bytes)
    except (OSError, NotImplementedError) as e:
        raise SecretGenerationError(f"OS random source unavailable: {e}")
    return base64.b64encode(raw).decode('ascii')


def generate_secrets() -> Secrets:
    """
    Generate a fresh JWT secret and database password.

    Returns:
        Secrets

    Raises:
        SecretGenerationError: If the OS random source fails
    """
    return Secrets(
        jwt_secret=_random_base64(JWT_SECRET_BYTES),
        db_password=_random_base64(DB_PASSWORD_BYTES),
    )
