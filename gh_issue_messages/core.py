"""
Main delivery logic for issue-based messages.

Ensures at most one open issue exists per distinct message, reusing a
matching issue instead of creating a duplicate and optionally posting a
throttled update comment on it.

Known limitations:
- Only the first page of open issues (up to 100) is scanned; older
  matching issues of very prolific creators are not found.
- Two concurrent deliveries of the same message can both miss each other
  and create two issues, as GitHub offers no compare-and-swap for issue
  creation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from numbers import Real
from typing import Iterable, Optional, Tuple

from .fingerprint import append_marker, generate_fingerprint, has_fingerprint
from .models import AppIdentity, Issue, Message, MessageOptions, MessagePreview
from .ports import IdentityResolver, IssueStore, RepositoryResolver
from .utils import ensure_aware, parse_repository, substitute_placeholders, utc_now


logger = logging.getLogger(__name__)

# Single listing page; pagination beyond it is intentionally not done
ISSUE_PAGE_SIZE = 100


class InvalidInputError(Exception):
    """Raised when a delivery is requested with missing or invalid input."""

    pass


class RepositoryContext:
    """
    Default repository resolver backed by an ``owner/repo`` string.

    The string is only parsed when the default is actually needed, so an
    explicit owner/repo override works without a configured default.
    """

    def __init__(self, repository: Optional[str]):
        self.repository = repository or ""

    def default_repo(self) -> Tuple[str, str]:
        try:
            return parse_repository(self.repository)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e


@dataclass(frozen=True)
class _Reconciliation:
    owner: str
    repo: str
    identity: AppIdentity
    fingerprint: str
    body: str
    match: Optional[Issue]


def find_matching_issue(issues: Iterable[Issue], fingerprint: str) -> Optional[Issue]:
    """
    Return the first issue whose body carries the fingerprint marker.

    Issues are scanned in the order given and scanning stops at the
    first match.
    """
    return next((issue for issue in issues if has_fingerprint(issue.body, fingerprint)), None)


def should_post_update(
    issue: Issue,
    update: str,
    update_after_days: float,
    now: Optional[datetime] = None,
) -> bool:
    """
    Decide whether an update comment should be posted on an issue.

    Args:
        issue: Matching open issue
        update: Update template (empty disables updates)
        update_after_days: Minimum days since the last activity (inclusive)
        now: Current time (defaults to UTC now)

    Returns:
        True if the update is due
    """
    if not update or issue.locked:
        return False

    if issue.updated_at is None:
        # No activity timestamp, treat as stale
        return True

    now = ensure_aware(now or utc_now())
    elapsed = now - ensure_aware(issue.updated_at)
    return elapsed >= timedelta(days=update_after_days)


def _validate_request(
    app: Optional[IdentityResolver],
    context: Optional[RepositoryResolver],
    store: Optional[IssueStore],
    title: str,
    message: str,
    options: MessageOptions,
) -> None:
    if not app or not context or not store or not title or not message:
        raise InvalidInputError("Required parameter missing")

    days = options.update_after_days
    if isinstance(days, bool) or not isinstance(days, Real) or days < 0:
        raise InvalidInputError(
            f"update_after_days must be a non-negative number, got {days!r}"
        )


def _resolve_repository(
    context: RepositoryResolver, options: MessageOptions
) -> Tuple[str, str]:
    """Explicit overrides win only when both owner and repo are given."""
    if options.owner and options.repo:
        return options.owner, options.repo

    owner, repo = context.default_repo()
    if not owner or not repo:
        raise InvalidInputError("Could not determine the target repository")
    return owner, repo


async def _reconcile(
    app: IdentityResolver,
    context: RepositoryResolver,
    store: IssueStore,
    message: str,
    options: MessageOptions,
) -> _Reconciliation:
    owner, repo = _resolve_repository(context, options)

    identity = await app.get_authenticated_identity()

    body = substitute_placeholders(message, identity.name, identity.url)
    fingerprint = generate_fingerprint(body)

    issues = await store.list_open_issues(
        owner, repo, creator=identity.login, per_page=ISSUE_PAGE_SIZE
    )
    logger.debug(
        f"Scanning {len(issues)} open issues in {owner}/{repo} for {fingerprint[:12]}"
    )

    match = find_matching_issue(issues, fingerprint)

    return _Reconciliation(owner, repo, identity, fingerprint, body, match)


async def send_message(
    app: IdentityResolver,
    context: RepositoryResolver,
    store: IssueStore,
    title: str,
    message: str,
    options: Optional[MessageOptions] = None,
    now: Optional[datetime] = None,
) -> Message:
    """
    Message repository maintainers by submitting an issue.

    Args:
        app: Resolver for the identity the message is posted as
        context: Resolver for the default repository
        store: Issue store (GitHub in production)
        title: Issue title, ``{appName}`` and ``{appUrl}`` are optional
            placeholders
        message: Issue content, ``{appName}`` and ``{appUrl}`` are optional
            placeholders
        options: Update and repository settings
        now: Current time used for the update threshold (defaults to UTC now)

    Returns:
        Message describing the created or reused issue

    Raises:
        InvalidInputError: If a required parameter is missing or invalid
    """
    options = options or MessageOptions()
    _validate_request(app, context, store, title, message, options)

    state = await _reconcile(app, context, store, message, options)
    owner, repo, identity = state.owner, state.repo, state.identity

    if state.match is not None:
        issue = state.match
        comment_id = None

        if should_post_update(issue, options.update, options.update_after_days, now):
            update = substitute_placeholders(options.update, identity.name, identity.url)
            comment = await store.create_comment(owner, repo, issue.number, update)
            comment_id = comment.id
            logger.info(f"Posted update {comment_id} on {owner}/{repo}#{issue.number}")
        else:
            logger.info(f"Reusing {owner}/{repo}#{issue.number} without update")

        return Message(owner, repo, issue.number, comment_id, False)

    title = substitute_placeholders(title, identity.name, identity.url)

    created = await store.create_issue(
        owner, repo, title, append_marker(state.body, state.fingerprint)
    )
    logger.info(f"Created issue {owner}/{repo}#{created.number}: {title}")

    return Message(owner, repo, created.number, None, True)


async def preview_message(
    app: IdentityResolver,
    context: RepositoryResolver,
    store: IssueStore,
    title: str,
    message: str,
    options: Optional[MessageOptions] = None,
    now: Optional[datetime] = None,
) -> MessagePreview:
    """
    Work out what ``send_message`` would do without creating anything.

    Performs the same lookups (identity and issue listing) but never
    creates an issue or a comment.
    """
    options = options or MessageOptions()
    _validate_request(app, context, store, title, message, options)

    state = await _reconcile(app, context, store, message, options)

    if state.match is None:
        return MessagePreview(state.owner, state.repo, state.fingerprint, None, True, False)

    would_update = should_post_update(
        state.match, options.update, options.update_after_days, now
    )
    return MessagePreview(
        state.owner, state.repo, state.fingerprint, state.match.number, False, would_update
    )
