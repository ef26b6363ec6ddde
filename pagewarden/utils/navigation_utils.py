"""
Navigation Utilities

URL comparison helpers used to decide whether a navigation is needed and
whether a failed navigation still reached its target host.
"""

import logging
from urllib.parse import urlparse
from typing import Optional

logger = logging.getLogger(__name__)

BLANK_URL = 'about:blank'


def strip_query(url: str) -> str:
    """Drop everything from the first '?' on."""
    return (url or '').split('?', 1)[0]


def is_same_location(current_url: str, target_url: str) -> bool:
    """Check whether two URLs point at the same page, ignoring the query string."""
    return strip_query(current_url) == strip_query(target_url)


def get_hostname(url: str) -> Optional[str]:
    """Extract hostname from URL."""
    try:
        return urlparse(url).hostname
    except ValueError as e:
        logger.debug(f"Error parsing URL {url}: {e}")
        return None


def is_partial_success(current_url: str, target_url: str) -> bool:
    """
    Check if a page that errored during navigation already sits on the target host.

    Args:
        current_url: URL the page reports after the failure
        target_url: URL that was requested

    Returns:
        True when the page left the blank placeholder and sits on the target
        host or one of its subdomains (e.g. a redirect to www.)
    """
    if not current_url or current_url == BLANK_URL:
        return False

    target_host = get_hostname(target_url)
    current_host = get_hostname(current_url)
    if not target_host or not current_host:
        return False
    return current_host == target_host or current_host.endswith(f".{target_host}")
