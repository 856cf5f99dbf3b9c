"""Salted one-way hashing and constant-time verification of passwords."""

import secrets

from werkzeug.security import generate_password_hash, check_password_hash

import logging

from .settings import AuthSettings, DEFAULT_HASH_METHOD

logger = logging.getLogger(__name__)


class PasswordHasher(object):
    """
    Hashes and verifies account passwords.

    Hashes are produced by :func:`werkzeug.security.generate_password_hash`,
    so a stored value looks like ``method$salt$hash``. Comparison happens in
    :func:`hmac.compare_digest` (via werkzeug), so verification takes the same
    time no matter where a mismatch occurs.
    """

    def __init__(self, method: str = DEFAULT_HASH_METHOD,
                 salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length
        # Verified against when an account does not exist, so that a miss
        # costs the same as a wrong password.
        self._decoy = self.hash(secrets.token_urlsafe(16))

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> 'PasswordHasher':
        """Build a hasher from frozen :class:`.AuthSettings`."""
        return cls(settings.hash_method, settings.salt_length)

    def hash(self, plaintext: str) -> str:
        """Generate a salted hash of ``plaintext``."""
        return generate_password_hash(plaintext, method=self._method,
                                      salt_length=self._salt_length)

    def verify(self, plaintext: str, credential_hash: str) -> bool:
        """
        Check ``plaintext`` against a stored hash.

        Returns ``False``, rather than raising, for empty or malformed hashes.
        """
        if not isinstance(plaintext, str) or not credential_hash:
            return False
        try:
            return bool(check_password_hash(credential_hash, plaintext))
        except (ValueError, TypeError) as e:
            logger.debug('Unusable credential hash: %s', type(e).__name__)
            return False

    def verify_decoy(self, plaintext: str) -> bool:
        """Spend the cost of one verification; always ``False``."""
        self.verify(plaintext, self._decoy)
        return False
