"""
RecipeBox Backend: Credential Service
=======================================

What:  Password hashing and verification with bcrypt.
How:   `hash()` salts and hashes with a fixed cost factor of 10;
       `verify()` delegates to `bcrypt.checkpw`, which re-derives the hash
       from the stored salt and compares in constant time.
Who:   AuthService (signup/login) and seed.py (sample users).

Concurrency:
    Both operations are CPU-bound (~50-100ms at cost 10) and hold no shared
    state, so they are safe to call from several threads at once. Request
    handlers run them through `run_in_threadpool` to keep the event loop free.

Failure modes:
    - hash(): never fails for a non-empty string
    - verify(): a malformed or empty stored hash returns False instead of
      raising, so a corrupt row behaves like a wrong password
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


class CredentialService:
    """Stateless bcrypt wrapper."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt hash string (e.g. `$2b$10$...`)."""
        password = (plaintext or "").encode("utf-8")
        if not password:
            raise ValueError("Password is empty.")
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True only if `plaintext` matches `hashed`. Fails closed."""
        password = (plaintext or "").encode("utf-8")
        stored = (hashed or "").encode("utf-8")
        if not password or not stored:
            return False
        try:
            return bcrypt.checkpw(password, stored)
        except ValueError:
            # "Invalid salt": the stored value is not a bcrypt hash
            logger.warning("Stored password hash is malformed; treating as mismatch")
            return False


credential_service = CredentialService()
