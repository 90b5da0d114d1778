"""Shared domain utilities."""

from storefront.domain.shared.time import utc_now

__all__ = ["utc_now"]
