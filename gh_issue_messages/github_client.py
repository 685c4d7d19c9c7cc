"""
GitHub operations wrapper.

Implements the identity and issue ports on top of PyGithub. Blocking
PyGithub calls run in a worker thread so the delivery core can await them.
Retries and timeouts are left to PyGithub's own transport settings.
"""

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests
from github import Auth, Github, GithubException, GithubIntegration

from .models import AppIdentity, Comment, Issue


logger = logging.getLogger(__name__)

T = TypeVar("T")

# GitHub caps list pages at 100 items
MAX_PAGE_SIZE = 100


class TransportError(Exception):
    """Raised when a GitHub operation or authentication fails."""

    pass


def _to_issue(gh_issue: Any) -> Issue:
    """Convert a PyGithub issue into the core model."""
    return Issue(
        number=gh_issue.number,
        body=gh_issue.body or "",
        locked=bool(gh_issue.locked),
        updated_at=gh_issue.updated_at,
        state=gh_issue.state,
    )


class GitHubClient:
    """
    Wrapper for GitHub operations.

    Supports two authentication modes:
    - GitHub App (app id, private key, installation id): messages are
      posted as the App
    - Token (explicit, or taken from the gh CLI): messages are posted as
      the authenticated user
    """

    def __init__(
        self,
        token: Optional[str] = None,
        app_id: Optional[int] = None,
        private_key: Optional[str] = None,
        installation_id: Optional[int] = None,
        retry_attempts: int = 3,
        timeout_seconds: int = 30,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Personal or installation access token (optional)
            app_id: GitHub App ID (App mode)
            private_key: GitHub App private key in PEM format (App mode)
            installation_id: Installation of the App to act as (App mode)
            retry_attempts: Number of retries PyGithub performs on failures
            timeout_seconds: HTTP timeout for API calls

        Raises:
            TransportError: If no usable credentials are found
        """
        self.retry_attempts = retry_attempts
        self.timeout_seconds = timeout_seconds

        self._integration: Optional[GithubIntegration] = None

        if app_id and private_key:
            if not installation_id:
                raise TransportError("GitHub App authentication requires an installation_id")
            app_auth = Auth.AppAuth(app_id, private_key)
            self._integration = GithubIntegration(auth=app_auth)
            auth: Auth.Auth = app_auth.get_installation_auth(int(installation_id))
        else:
            auth = Auth.Token(token or self._get_gh_cli_token())

        self.github = Github(
            auth=auth,
            timeout=timeout_seconds,
            retry=retry_attempts,
            per_page=MAX_PAGE_SIZE,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "GitHubClient":
        """
        Build a client from a configuration dictionary.

        Args:
            config: Configuration as returned by ``load_config``

        Returns:
            Configured client

        Raises:
            TransportError: If the App private key cannot be read
        """
        private_key = None
        key_path = config.get("private_key_path")
        if config.get("app_id") and key_path:
            try:
                private_key = Path(key_path).read_text()
            except OSError as e:
                raise TransportError(f"Failed to read private key '{key_path}': {e}") from e

        return cls(
            token=config.get("github_token") or None,
            app_id=config.get("app_id"),
            private_key=private_key,
            installation_id=config.get("installation_id"),
            retry_attempts=config.get("retry_attempts", 3),
            timeout_seconds=config.get("github_api_timeout_seconds", 30),
        )

    @staticmethod
    def _get_gh_cli_token() -> str:
        """
        Get a token from the gh CLI.

        Returns:
            Access token

        Raises:
            TransportError: If the gh CLI is missing or not authenticated
        """
        try:
            result = subprocess.run(
                ["gh", "auth", "token"],
                capture_output=True,
                text=True,
                timeout=10,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise TransportError(
                f"Failed to get GitHub token. Is 'gh' CLI authenticated?\n{e.stderr}"
            ) from e
        except FileNotFoundError as e:
            raise TransportError(
                "No GitHub token configured and 'gh' CLI not found."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise TransportError("Timed out waiting for 'gh auth token'") from e

        return result.stdout.strip()

    async def _call(self, action: str, func: Callable[..., T], *args: Any) -> T:
        """
        Run a blocking PyGithub call in a worker thread.

        Args:
            action: Description used in error messages
            func: Callable performing the request
            *args: Arguments for ``func``

        Returns:
            Result of ``func``

        Raises:
            TransportError: If GitHub reports an error or the request fails
        """
        try:
            return await asyncio.to_thread(func, *args)
        except (GithubException, requests.RequestException) as e:
            raise TransportError(f"Failed to {action}: {e}") from e

    def _fetch_identity(self) -> AppIdentity:
        if self._integration is not None:
            app = self._integration.get_app()
            return AppIdentity(name=app.name, url=app.html_url, login=f"app/{app.slug}")

        user = self.github.get_user()
        return AppIdentity(name=user.name or user.login, url=user.html_url, login=user.login)

    def _fetch_open_issues(
        self, owner: str, repo: str, creator: str, per_page: int
    ) -> List[Issue]:
        issues = self.github.get_repo(f"{owner}/{repo}").get_issues(
            state="open", creator=creator
        )
        # First page only; pages are fetched at MAX_PAGE_SIZE and trimmed here
        return [_to_issue(issue) for issue in issues.get_page(0)[:per_page]]

    def _create_issue(self, owner: str, repo: str, title: str, body: str) -> Issue:
        gh_issue = self.github.get_repo(f"{owner}/{repo}").create_issue(title=title, body=body)
        return _to_issue(gh_issue)

    def _create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Comment:
        gh_issue = self.github.get_repo(f"{owner}/{repo}").get_issue(issue_number)
        return Comment(id=gh_issue.create_comment(body).id)

    async def get_authenticated_identity(self) -> AppIdentity:
        """
        Resolve the identity messages are posted as.

        Returns:
            Identity with display name, profile URL and creator login
        """
        identity = await self._call("resolve authenticated identity", self._fetch_identity)
        logger.debug(f"Authenticated as {identity.login}")
        return identity

    async def list_open_issues(
        self, owner: str, repo: str, creator: str, per_page: int
    ) -> List[Issue]:
        """
        List open issues created by ``creator`` (first page only).

        Args:
            owner: Repository owner
            repo: Repository name
            creator: Login of the issue author
            per_page: Maximum number of issues to return (at most MAX_PAGE_SIZE)

        Returns:
            Issues in the order returned by GitHub
        """
        return await self._call(
            f"list issues in {owner}/{repo}",
            self._fetch_open_issues,
            owner,
            repo,
            creator,
            per_page,
        )

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> Issue:
        """
        Create a GitHub issue.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Issue title
            body: Issue body

        Returns:
            Created issue
        """
        issue = await self._call(
            f"create issue in {owner}/{repo}", self._create_issue, owner, repo, title, body
        )
        logger.debug(f"Created issue #{issue.number}: {title}")
        return issue

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> Comment:
        """
        Comment on an existing issue.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue to comment on
            body: Comment text

        Returns:
            Created comment
        """
        return await self._call(
            f"comment on {owner}/{repo}#{issue_number}",
            self._create_comment,
            owner,
            repo,
            issue_number,
            body,
        )
