from storefront.infrastructure.oauth.github_client import (
    GitHubOAuthClient,
    GitHubOAuthError,
    GitHubProfile,
)

__all__ = [
    "GitHubOAuthClient",
    "GitHubOAuthError",
    "GitHubProfile",
]
