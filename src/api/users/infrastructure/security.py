"""Password hashing for stored user secrets.

Uses bcrypt with automatic salt generation. bcrypt only reads the first 72
bytes of a secret, so passwords are first reduced to a fixed-length SHA-256
digest.
"""

import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    # 44 bytes of base64, well within bcrypt's 72-byte input limit
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def hash_password(password: str) -> str:
    """Hash a user password using bcrypt.

    The work factor is determined by bcrypt's gensalt().

    Args:
        password: The plaintext password to hash, of any length

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode()
