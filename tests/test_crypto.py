"""
Tests for MsgBoard Crypto Module
"""

import pytest
from msgboard.core.crypto import PasswordHasher


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def setup_method(self):
        """Set up test fixtures."""
        # Low iteration count for faster tests
        self.hasher = PasswordHasher(iterations=1000)

    def test_generate_salt(self):
        """Test salt generation."""
        salt1 = self.hasher.generate_salt()
        salt2 = self.hasher.generate_salt()

        assert len(bytes.fromhex(salt1)) == 16
        assert salt1 != salt2

    def test_hash_format(self):
        """Test stored hash is iterations:salt:key."""
        stored = self.hasher.hash_password("secret1")
        iterations, salt, key = stored.split(":")

        assert iterations == "1000"
        assert len(salt) == 32
        assert len(bytes.fromhex(key)) == 64

    def test_default_parameters(self):
        """Test defaults meet the minimum work factor."""
        hasher = PasswordHasher()
        assert hasher.iterations >= 100_000
        assert hasher.key_length >= 64
        assert hasher.salt_length >= 16

    def test_hash_password(self):
        """Test password hashing is salted."""
        password = "test_password_123"
        hash1 = self.hasher.hash_password(password)
        hash2 = self.hasher.hash_password(password)

        # Hashes should be different (different salts)
        assert hash1 != hash2

        # Both should verify
        assert self.hasher.verify_password(password, hash1)
        assert self.hasher.verify_password(password, hash2)

    def test_verify_password_wrong(self):
        """Test password verification with wrong password."""
        hash_str = self.hasher.hash_password("correct_password")

        assert self.hasher.verify_password("correct_password", hash_str) is True
        assert self.hasher.verify_password("wrong_password", hash_str) is False

    def test_verify_uses_stored_iterations(self):
        """Test hashes made with another work factor still verify."""
        old = PasswordHasher(iterations=500).hash_password("secret1")
        assert self.hasher.verify_password("secret1", old)

    @pytest.mark.parametrize("stored", [
        "",
        "1000",
        "1000:abcd",
        "1000:abcd:ef:00",
        "abc:salt:00",
        "0:salt:" + "00" * 64,
        "-5:salt:" + "00" * 64,
        "1000::" + "00" * 64,
        "1000:salt:",
        "1000:salt:not-hex",
        "1000:salt:abcd",
        "99999999999:salt:" + "00" * 64,
        "\u00b2:abcd:" + "00" * 64,
        "\u0663:abcd:" + "00" * 64,
        "1000:\ud800:" + "00" * 64,
    ])
    def test_verify_malformed_returns_false(self, stored):
        """Test malformed stored hashes fail closed."""
        assert self.hasher.verify_password("anything", stored) is False

    def test_verify_none_returns_false(self):
        assert self.hasher.verify_password("anything", None) is False

    def test_verify_unencodable_password_returns_false(self):
        hash_str = self.hasher.hash_password("secret1")
        assert self.hasher.verify_password("\ud800secret1", hash_str) is False

    def test_known_vector(self):
        """Test compatibility with hashes using a hex salt as KDF input."""
        import hashlib

        salt = "00112233445566778899aabbccddeeff"
        key = hashlib.pbkdf2_hmac("sha512", b"secret1", salt.encode(), 1000, 64).hex()

        assert self.hasher.verify_password("secret1", f"1000:{salt}:{key}")
        assert not self.hasher.verify_password("secret2", f"1000:{salt}:{key}")

    def test_invalid_iterations_rejected(self):
        with pytest.raises(ValueError):
            PasswordHasher(iterations=0)
