"""GitHub OAuth client.

Builds the authorize URL, exchanges the callback code for an access
token and reads the profile (and primary email) of the GitHub account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from storefront_auth.exceptions import AuthError

logger = logging.getLogger(__name__)

_GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
_GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
_GITHUB_API_URL = "https://api.github.com"
_SCOPES = ["user:email"]


class GitHubOAuthError(AuthError):
    """Raised when the GitHub code exchange or profile lookup fails."""

    def __init__(self, message: str = "GitHub authentication failed"):
        super().__init__(message)


@dataclass(frozen=True)
class GitHubProfile:
    login: str
    email: str
    name: str = ""

    @property
    def first_name(self) -> str:
        return (self.name or self.login).split(" ", 1)[0]

    @property
    def last_name(self) -> str:
        parts = self.name.split(" ", 1) if self.name else []
        return parts[1] if len(parts) > 1 else ""


class GitHubOAuthClient:
    """Thin httpx wrapper around GitHub's OAuth web flow."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not client_id or not client_secret:
            msg = "GitHub client id and client secret are required"
            raise ValueError(msg)
        self._client_id = client_id
        self._client_secret = client_secret
        self._callback_url = callback_url
        self._timeout = timeout
        self._transport = transport

    def build_authorization_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._callback_url,
            "scope": " ".join(_SCOPES),
        }
        if state:
            params["state"] = state
        return f"{_GITHUB_AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> GitHubProfile:
        """Exchange ``code`` and return the account's profile.

        Raises
        ------
        GitHubOAuthError
            If GitHub rejects the code or the account exposes no email
        """
        if not code:
            msg = "Missing GitHub authorization code"
            raise GitHubOAuthError(msg)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            try:
                access_token = await self._exchange_code(client, code)
                auth = {"Authorization": f"Bearer {access_token}"}

                user_resp = await client.get(f"{_GITHUB_API_URL}/user", headers=auth)
                user_resp.raise_for_status()
                user_data = user_resp.json()

                email = user_data.get("email") or await self._primary_email(
                    client,
                    auth,
                )
            except httpx.HTTPError as e:
                logger.warning("GitHub OAuth request failed: %s", e)
                raise GitHubOAuthError from e

        if not email:
            msg = "The GitHub account has no verified email"
            raise GitHubOAuthError(msg)

        return GitHubProfile(
            login=user_data.get("login", ""),
            email=email,
            name=user_data.get("name") or "",
        )

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        token_resp = await client.post(
            _GITHUB_TOKEN_URL,
            data={
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "code": code,
                "redirect_uri": self._callback_url,
            },
        )
        token_resp.raise_for_status()
        token_data = token_resp.json()

        # GitHub answers 200 with an "error" field for bad codes
        access_token = token_data.get("access_token")
        if not access_token:
            msg = token_data.get("error_description") or "Invalid GitHub code"
            raise GitHubOAuthError(msg)
        return access_token

    async def _primary_email(
        self,
        client: httpx.AsyncClient,
        auth: dict[str, str],
    ) -> str | None:
        resp = await client.get(f"{_GITHUB_API_URL}/user/emails", headers=auth)
        resp.raise_for_status()
        for entry in resp.json():
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None
