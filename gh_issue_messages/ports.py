"""Ports (interfaces) required by the delivery core.

The core only talks to GitHub through these contracts, so tests and other
hosting processes can supply their own implementations.
"""

from typing import List, Protocol, Tuple

from .models import AppIdentity, Comment, Issue


class IdentityResolver(Protocol):
    """Resolves the identity messages are posted as."""

    async def get_authenticated_identity(self) -> AppIdentity:
        ...


class RepositoryResolver(Protocol):
    """Supplies the repository used when no override is given."""

    def default_repo(self) -> Tuple[str, str]:
        ...


class IssueStore(Protocol):
    """Issue operations required by the delivery core."""

    async def list_open_issues(
        self, owner: str, repo: str, creator: str, per_page: int
    ) -> List[Issue]:
        ...

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> Issue:
        ...

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> Comment:
        ...
