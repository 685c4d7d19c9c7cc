"""
Fingerprint generation for message deduplication.

Creates SHA256 hashes from the final message text and embeds them
in issue bodies as hidden HTML comments, so an existing issue can be
found again on the next delivery.
"""

import hashlib
import re
from typing import Optional, Pattern


MARKER_TEMPLATE = "<!--{fingerprint}-->"


def generate_fingerprint(message: str) -> str:
    """
    Generate a fingerprint for a message to detect duplicates.

    The message must already have its placeholders substituted; no
    other normalization is applied, so any change to the text yields
    a different fingerprint.

    Args:
        message: Final message text

    Returns:
        Hexadecimal SHA256 hash string (64 characters)

    Example:
        >>> fingerprint = generate_fingerprint("Something failed")
        >>> len(fingerprint)
        64
    """
    hash_object = hashlib.sha256(message.encode('utf-8'))

    return hash_object.hexdigest()


def fingerprint_marker(fingerprint: str) -> str:
    """Return the hidden marker embedded in issue bodies."""
    return MARKER_TEMPLATE.format(fingerprint=fingerprint)


def marker_pattern(fingerprint: str) -> Pattern[str]:
    """Compile a regex matching the marker for ``fingerprint``."""
    return re.compile(re.escape(fingerprint_marker(fingerprint)))


def has_fingerprint(body: Optional[str], fingerprint: str) -> bool:
    """
    Check whether an issue body carries the marker for a fingerprint.

    Anything else in the body is ignored, so text appended later by
    other actors does not break the match.

    Args:
        body: Issue body (None for issues without a description)
        fingerprint: Fingerprint to look for

    Returns:
        True if the marker is present
    """
    if not body:
        return False

    return marker_pattern(fingerprint).search(body) is not None


def append_marker(message: str, fingerprint: str) -> str:
    """Append the fingerprint marker on its own line."""
    return f"{message}\n{fingerprint_marker(fingerprint)}"
