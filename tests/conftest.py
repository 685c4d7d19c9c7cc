"""Pytest configuration and fixtures for gh-issue-messages tests."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import pytest

from gh_issue_messages.github_client import TransportError
from gh_issue_messages.models import AppIdentity, Comment, Issue


FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeApp:
    """Identity resolver returning a fixed identity."""

    def __init__(self, identity: AppIdentity):
        self.identity = identity
        self.calls = 0
        self.fail = False

    async def get_authenticated_identity(self) -> AppIdentity:
        self.calls += 1
        if self.fail:
            raise TransportError("identity lookup failed")
        return self.identity


class FakeContext:
    """Repository resolver with a fixed default repository."""

    def __init__(self, owner: str = "octo", repo: str = "widgets"):
        self.owner = owner
        self.repo = repo

    def default_repo(self) -> Tuple[str, str]:
        return self.owner, self.repo


class FakeIssueStore:
    """
    In-memory issue store.

    Issues are listed most-recent-first, like GitHub does by default.
    Every call is recorded in ``calls`` for assertions.
    """

    def __init__(self, creator: str = "app/notify-bot"):
        self.creator = creator
        # (author login, issue), most recent first
        self.entries: List[Tuple[str, Issue]] = []
        self.comments: List[Tuple[int, str]] = []
        self.calls: List[Tuple] = []
        self.fail_on: Optional[str] = None
        self._next_issue = 1
        self._next_comment = 1000

    @property
    def issues(self) -> List[Issue]:
        return [issue for _, issue in self.entries]

    def add_issue(self, body: str, creator: Optional[str] = None, **kwargs) -> Issue:
        issue = Issue(number=self._next_issue, body=body, **kwargs)
        self._next_issue += 1
        self.entries.insert(0, (creator or self.creator, issue))
        return issue

    def close_issue(self, number: int) -> None:
        self.entries = [
            (author, replace(issue, state="closed") if issue.number == number else issue)
            for author, issue in self.entries
        ]

    def _check_failure(self, operation: str) -> None:
        if self.fail_on == operation:
            raise TransportError(f"{operation} failed")

    async def list_open_issues(
        self, owner: str, repo: str, creator: str, per_page: int
    ) -> List[Issue]:
        self.calls.append(("list", owner, repo, creator, per_page))
        self._check_failure("list")
        matching = [
            issue
            for author, issue in self.entries
            if issue.state == "open" and author == creator
        ]
        return matching[:per_page]

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> Issue:
        self.calls.append(("create_issue", owner, repo, title, body))
        self._check_failure("create_issue")
        return self.add_issue(body, updated_at=FIXED_NOW)

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> Comment:
        self.calls.append(("create_comment", owner, repo, issue_number, body))
        self._check_failure("create_comment")
        comment = Comment(id=self._next_comment)
        self._next_comment += 1
        self.comments.append((issue_number, body))
        return comment

    def mutations(self) -> List[Tuple]:
        return [call for call in self.calls if call[0] != "list"]


@pytest.fixture
def identity():
    """Identity of the posting GitHub App."""
    return AppIdentity(name="Notify Bot", url="https://github.com/apps/notify-bot", login="app/notify-bot")


@pytest.fixture
def app(identity):
    return FakeApp(identity)


@pytest.fixture
def context():
    return FakeContext()


@pytest.fixture
def store():
    return FakeIssueStore()


@pytest.fixture
def now():
    return FIXED_NOW
