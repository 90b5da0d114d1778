"""Auth schemas and data structures.

These are simple data classes used for transferring token data
between components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token payload.

    Attributes
    ----------
    email
        The email address the token was issued for
    exp
        Token expiration timestamp
    claims
        Every other claim carried by the token (``sub``, ``role``, ...)
    """

    email: str
    exp: datetime
    claims: dict[str, Any] = field(default_factory=dict)
