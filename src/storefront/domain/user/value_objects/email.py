"""Email value object.

Provides validated, normalized email addresses for user identification.
"""

import re
from dataclasses import dataclass

from storefront.domain.user.exceptions import InvalidEmailError, MissingFieldError

# Anything@anything.anything without whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise MissingFieldError("email")

        if not EMAIL_PATTERN.match(self.value):
            raise InvalidEmailError

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
