"""Signed cookie values.

The session cookie carries the identity token signed a second time with
the cookie secret, so a cookie minted with another secret is rejected
before the token is even decoded.
"""

from itsdangerous import BadSignature, Signer

from storefront_auth.exceptions import InvalidTokenError


class CookieSigner:
    """HMAC-sign and unsign cookie values."""

    SALT = "storefront.session-cookie"

    def __init__(self, secret_key: str):
        if not secret_key:
            msg = "Cookie secret cannot be empty"
            raise ValueError(msg)
        self._signer = Signer(secret_key, salt=self.SALT)

    def sign(self, value: str) -> str:
        return self._signer.sign(value).decode("utf-8")

    def unsign(self, signed_value: str) -> str:
        """Return the original value.

        Raises
        ------
        InvalidTokenError
            If the signature does not match
        """
        try:
            return self._signer.unsign(signed_value).decode("utf-8")
        except BadSignature as e:
            msg = "Invalid cookie signature"
            raise InvalidTokenError(msg) from e
