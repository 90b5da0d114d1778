"""Password hashing service using bcrypt.

Provides secure password hashing and verification together with the
complexity rule applied to new passwords.
"""

import re
from typing import Protocol

import bcrypt

from storefront_auth.exceptions import WeakPasswordError

# At least 8 characters with a lowercase letter, an uppercase letter,
# a digit and one of @$!%*?&, and nothing outside that alphabet.
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$",
)


class HasPasswordHash(Protocol):
    @property
    def password_hash(self) -> str: ...


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> hash = service.hash("Secure@Pass1")
    >>> service.verify("Secure@Pass1", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # bcrypt only accepts up to 72 bytes of input
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        No complexity check happens here: OAuth users get random
        passwords and registration applies its own rules.
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    def is_valid_password(self, password: str, user: HasPasswordHash) -> bool:
        """Check a plaintext candidate against a stored user record."""
        return self.verify(password, user.password_hash)

    @staticmethod
    def is_strong(password: str) -> bool:
        return bool(password) and PASSWORD_PATTERN.match(password) is not None

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets the complexity requirements.

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if len((password or "").encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

        if not self.is_strong(password):
            raise WeakPasswordError
