# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities."""

import pytest

from coursesched.domains.auth.password import PasswordHasher


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Test that hashing returns a bcrypt hash string."""
        hasher = PasswordHasher(rounds=4)

        hashed = hasher.hash("test_password_123")

        assert isinstance(hashed, str)
        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_default_cost_factor_is_ten(self) -> None:
        """Test that the default hasher uses 10 rounds."""
        hashed = PasswordHasher().hash("pw")

        assert hashed.startswith("$2b$10$")

    def test_hash_produces_different_hashes_for_same_password(self) -> None:
        """Test that hashing the same password twice gives two valid hashes."""
        hasher = PasswordHasher(rounds=4)

        hash1 = hasher.hash("test_password_123")
        hash2 = hasher.hash("test_password_123")

        assert hash1 != hash2
        assert hasher.verify("test_password_123", hash1)
        assert hasher.verify("test_password_123", hash2)

    def test_verify_correct_password(self) -> None:
        """Test that verification succeeds with correct password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("correct_password")

        assert hasher.verify("correct_password", hashed) is True

    def test_verify_incorrect_password(self) -> None:
        """Test that verification fails with incorrect password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("correct_password")

        assert hasher.verify("wrong_password", hashed) is False

    def test_verify_empty_password_returns_false(self) -> None:
        """Test that verification fails with empty password."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("valid_password")

        assert hasher.verify("", hashed) is False

    def test_verify_empty_hash_returns_false(self) -> None:
        """Test that verification fails with empty hash."""
        assert PasswordHasher(rounds=4).verify("password", "") is False

    def test_verify_malformed_hash_returns_false(self) -> None:
        """Test that a hash bcrypt cannot parse yields False instead of raising."""
        assert PasswordHasher(rounds=4).verify("password", "not-a-bcrypt-hash") is False

    def test_hash_empty_password_raises(self) -> None:
        """Test that hashing an empty password raises ValueError."""
        with pytest.raises(ValueError, match="empty"):
            PasswordHasher(rounds=4).hash("")

    def test_unicode_password(self) -> None:
        """Test that non-ASCII passwords hash and verify."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("pässwörd-密码")

        assert hasher.verify("pässwörd-密码", hashed) is True
        assert hasher.verify("passwort-密码", hashed) is False

    def test_password_longer_than_bcrypt_limit(self) -> None:
        """Test that passwords beyond 72 bytes hash without error."""
        hasher = PasswordHasher(rounds=4)
        long_password = "x" * 100
        hashed = hasher.hash(long_password)

        assert hasher.verify(long_password, hashed) is True
