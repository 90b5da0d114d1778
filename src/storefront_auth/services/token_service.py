"""Signed token service.

Provides JWT creation and validation for identity and password reset
tokens. Tokens are stateless: nothing is persisted server-side and a
token stays valid until it expires.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from storefront_auth.exceptions import InvalidTokenError
from storefront_auth.schemas import TokenPayload

# Claims managed by the service itself
_RESERVED_CLAIMS = frozenset({"iat", "exp"})


class TokenService:
    """Service for signed token creation and verification.

    Examples
    --------
    >>> service = TokenService(secret_key="your-secret-key")
    >>> token = service.generate_token({"email": "user@example.com"})
    >>> service.validate_token(token)["email"]
    'user@example.com'
    >>> service.validate_token("tampered") is None
    True
    """

    DEFAULT_EXPIRE_HOURS = 24
    DEFAULT_ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        expire_hours: int = DEFAULT_EXPIRE_HOURS,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        """Initialize the token service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        expire_hours
            Default lifetime of a token in hours (default 24)
        algorithm
            JWT signing algorithm (default HS256)
        """
        if not secret_key:
            msg = "Token secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expire = timedelta(hours=expire_hours)
        self._algorithm = algorithm

    def generate_token(
        self,
        claims: Mapping[str, Any],
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign ``claims`` into a token.

        Parameters
        ----------
        claims
            JSON-serialisable claims to embed. Must contain ``email``.
        expires_delta
            Custom lifetime (optional, defaults to the service lifetime)

        Returns
        -------
        The encoded token string
        """
        if not claims.get("email"):
            msg = "Token claims must include an email"
            raise ValueError(msg)

        now = datetime.now(tz=timezone.utc)
        payload = {k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS}
        payload["iat"] = now
        payload["exp"] = now + (expires_delta or self._expire)

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, tampered with, or malformed
        """
        if not token:
            msg = "No token was provided"
            raise InvalidTokenError(msg)

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
            email = payload["email"]
            exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        claims = {k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS}
        return TokenPayload(email=email, exp=exp, claims=claims)

    def validate_token(self, token: str | None) -> dict[str, Any] | None:
        """Decode a token, returning its claims or ``None`` when invalid."""
        try:
            return self.verify_token(token or "").claims
        except InvalidTokenError:
            return None
