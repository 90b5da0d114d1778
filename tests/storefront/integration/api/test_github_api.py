"""API tests for the GitHub login flow."""

from unittest.mock import AsyncMock, Mock

import pytest

from storefront.infrastructure.oauth import GitHubOAuthClient, GitHubOAuthError, GitHubProfile
from storefront.presentation.api.dependencies import get_github_client

pytestmark = pytest.mark.integration

AUTHORIZE_URL = "https://github.com/login/oauth/authorize?client_id=test"


@pytest.fixture
def github_client(test_client) -> Mock:
    client = Mock(spec=GitHubOAuthClient)
    client.build_authorization_url.return_value = AUTHORIZE_URL
    client.fetch_profile = AsyncMock(
        return_value=GitHubProfile(
            login="grace",
            email="grace@example.com",
            name="Grace Hopper",
        ),
    )
    test_client.app.dependency_overrides[get_github_client] = lambda: client
    return client


class TestGitHubNotConfigured:
    def test_github_login_disabled(self, test_client, sessions_url):
        response = test_client.get(f"{sessions_url}/github", follow_redirects=False)

        assert response.status_code == 400
        assert response.json() == {
            "status": "error",
            "error": "GitHub login is not configured",
        }


class TestGitHubLogin:
    def test_redirects_to_github(self, test_client, sessions_url, github_client):
        response = test_client.get(f"{sessions_url}/github", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == AUTHORIZE_URL

    def test_callback_creates_user_and_session(
        self,
        test_client,
        sessions_url,
        github_client,
    ):
        response = test_client.get(
            f"{sessions_url}/githubcallback",
            params={"code": "code-123"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/products"
        github_client.fetch_profile.assert_awaited_once_with("code-123")

        current = test_client.get(f"{sessions_url}/current").json()["payload"]
        assert current["email"] == "grace@example.com"
        assert current["first_name"] == "Grace"
        assert current["last_name"] == "Hopper"
        assert current["role"] == "user"

    def test_second_callback_reuses_user(self, test_client, sessions_url, github_client):
        test_client.get(
            f"{sessions_url}/githubcallback",
            params={"code": "a"},
            follow_redirects=False,
        )
        first_id = test_client.get(f"{sessions_url}/current").json()["payload"]["id"]

        test_client.get(
            f"{sessions_url}/githubcallback",
            params={"code": "b"},
            follow_redirects=False,
        )
        second_id = test_client.get(f"{sessions_url}/current").json()["payload"]["id"]

        assert first_id == second_id

    def test_rejected_code(self, test_client, sessions_url, github_client):
        github_client.fetch_profile.side_effect = GitHubOAuthError("Invalid GitHub code")

        response = test_client.get(
            f"{sessions_url}/githubcallback",
            params={"code": "stale"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid GitHub code"
        assert "token" not in test_client.cookies
