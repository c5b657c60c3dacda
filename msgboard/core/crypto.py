"""
MsgBoard Cryptography Module

Password hashing with PBKDF2-HMAC-SHA512. Stored hashes are
``iterations:salt:derivedKeyHex`` strings; the salt is stored as hex and
fed to the KDF as its UTF-8 text.
"""

import secrets
import logging

from cryptography.hazmat.primitives import constant_time, hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Salted, iterated password hashing with constant-time verification.

    Verification uses the iteration count stored in the hash, so raising
    ``iterations`` later does not invalidate existing accounts.
    """

    DEFAULT_ITERATIONS = 100_000
    SALT_LENGTH = 16
    KEY_LENGTH = 64  # SHA-512 output size

    # Refuse to run the KDF for absurd counts read from storage
    MAX_ITERATIONS = 10_000_000

    def __init__(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        salt_length: int = SALT_LENGTH,
        key_length: int = KEY_LENGTH
    ):
        """
        Initialize password hasher.

        Args:
            iterations: PBKDF2 iteration count for new hashes
            salt_length: Random salt size in bytes
            key_length: Derived key size in bytes
        """
        if iterations <= 0:
            raise ValueError("iterations must be positive")

        self.iterations = iterations
        self.salt_length = salt_length
        self.key_length = key_length

        logger.debug(
            f"PasswordHasher initialized: iterations={iterations}, "
            f"salt={salt_length}B, key={key_length}B"
        )

    def generate_salt(self) -> str:
        """Generate a hex-encoded random salt."""
        return secrets.token_hex(self.salt_length)

    def hash_password(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        salt = self.generate_salt()
        derived = self._derive(password, salt, self.iterations)
        return f"{self.iterations}:{salt}:{derived.hex()}"

    def verify_password(self, password: str, stored_hash: str) -> bool:
        """
        Verify a password against a stored hash.

        Returns False for any malformed stored hash instead of raising.
        """
        if not stored_hash or not isinstance(stored_hash, str):
            return False

        parts = stored_hash.split(":")
        if len(parts) != 3:
            return False

        iteration_part, salt, expected_hex = parts
        if not (iteration_part.isascii() and iteration_part.isdigit()):
            return False

        if not salt or not salt.isascii() or not expected_hex:
            return False

        iterations = int(iteration_part)
        if iterations <= 0 or iterations > self.MAX_ITERATIONS:
            return False

        try:
            expected = bytes.fromhex(expected_hex)
        except ValueError:
            return False

        if len(expected) != self.key_length:
            return False

        try:
            actual = self._derive(password, salt, iterations)
        except UnicodeEncodeError:
            return False
        return constant_time.bytes_eq(actual, expected)

    def _derive(self, password: str, salt: str, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA512(),
            length=self.key_length,
            salt=salt.encode("utf-8"),
            iterations=iterations
        )
        return kdf.derive(password.encode("utf-8"))
