"""Per-request session context passed explicitly to handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, MutableMapping

from storefront.domain.user import PublicUser


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Prefix every record with the request it belongs to."""

    def process(
        self,
        msg: Any,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['method']} {self.extra['path']}] {msg}", kwargs


@dataclass(frozen=True)
class SessionContext:
    """
    Immutable context for the current request.

    Carries the user resolved from the session cookie (if any) and the
    request-scoped logger. Created once per request by the API layer.
    """

    logger: logging.LoggerAdapter
    user: PublicUser | None = field(default=None)

    @classmethod
    def for_request(
        cls,
        method: str,
        path: str,
        user: PublicUser | None = None,
        logger_name: str = "storefront.requests",
    ) -> SessionContext:
        adapter = RequestLoggerAdapter(
            logging.getLogger(logger_name),
            {"method": method, "path": path},
        )
        return cls(logger=adapter, user=user)

    def __repr__(self) -> str:
        email = self.user.email if self.user else None
        return f"SessionContext(user={email!r})"
