"""
GitHub Issue Messages.

Idempotent, content-addressed delivery of messages as GitHub issues.
"""

from .core import InvalidInputError, RepositoryContext, preview_message, send_message
from .fingerprint import generate_fingerprint
from .models import AppIdentity, Comment, Issue, Message, MessageOptions, MessagePreview

__version__ = "1.0.0"

__all__ = [
    "AppIdentity",
    "Comment",
    "InvalidInputError",
    "Issue",
    "Message",
    "MessageOptions",
    "MessagePreview",
    "RepositoryContext",
    "generate_fingerprint",
    "preview_message",
    "send_message",
]
