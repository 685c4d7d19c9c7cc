"""
Data models shared by the delivery core and its adapters.

These dataclasses keep the core independent of PyGithub types.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


DEFAULT_UPDATE_AFTER_DAYS = 7


@dataclass(frozen=True)
class AppIdentity:
    """Identity the messages are posted as."""

    name: str
    url: str
    # Value for the issue listing ``creator`` filter
    login: str


@dataclass(frozen=True)
class Issue:
    """Issue attributes consumed by the delivery core."""

    number: int
    body: str = ""
    locked: bool = False
    updated_at: Optional[datetime] = None
    state: str = "open"


@dataclass(frozen=True)
class Comment:
    """Comment posted on an existing issue."""

    id: int


@dataclass
class MessageOptions:
    """
    Optional delivery settings.

    Attributes:
        update: Comment to post on an existing issue; empty disables updates
        update_after_days: Only post the update if the issue had no
            activity in this many days
        owner: Repository owner override (used only together with ``repo``)
        repo: Repository name override (used only together with ``owner``)
    """

    update: str = ""
    update_after_days: float = DEFAULT_UPDATE_AFTER_DAYS
    owner: Optional[str] = None
    repo: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """Details of a delivered message."""

    owner: str
    repo: str
    issue_number: int
    comment_id: Optional[int]
    is_new: bool


@dataclass(frozen=True)
class MessagePreview:
    """Outcome a delivery would have, computed without any mutation."""

    owner: str
    repo: str
    fingerprint: str
    issue_number: Optional[int]
    would_create: bool
    would_update: bool
