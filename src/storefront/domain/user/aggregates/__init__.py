from storefront.domain.user.aggregates.user import PublicUser, User

__all__ = ["PublicUser", "User"]
