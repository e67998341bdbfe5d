"""
RecipeBox Backend: Credential Service Unit Tests
==================================================

What we test:
    ✅ Hashes are salted (same input, different hash) and verify round-trip
    ✅ Wrong password, empty input and malformed stored hash all fail closed
    ✅ Default cost factor is 10
"""

import pytest

from recipebox.services.credential_service import BCRYPT_ROUNDS, CredentialService


class TestCredentialService:
    def setup_method(self):
        # Minimum bcrypt cost keeps the suite fast
        self.service = CredentialService(rounds=4)

    def test_hash_verifies(self):
        hashed = self.service.hash("password123")
        assert hashed.startswith("$2")
        assert self.service.verify("password123", hashed) is True

    def test_hash_is_salted(self):
        assert self.service.hash("password123") != self.service.hash("password123")

    def test_hash_never_contains_plaintext(self):
        assert "password123" not in self.service.hash("password123")

    def test_wrong_password_rejected(self):
        hashed = self.service.hash("password123")
        assert self.service.verify("password124", hashed) is False

    def test_empty_inputs_rejected(self):
        hashed = self.service.hash("password123")
        assert self.service.verify("", hashed) is False
        assert self.service.verify("password123", "") is False

    def test_malformed_hash_fails_closed(self):
        assert self.service.verify("password123", "not-a-bcrypt-hash") is False

    def test_hash_empty_password_raises(self):
        with pytest.raises(ValueError):
            self.service.hash("")

    def test_default_cost_factor(self):
        assert BCRYPT_ROUNDS == 10
        assert CredentialService().hash("password123").startswith("$2b$10$")
