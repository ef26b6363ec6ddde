"""
Tab Registry

Maps session-scoped tab identifiers to live pages and tracks the "current"
page used when no identifier is given.
"""

import logging
import random
import string
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from playwright.async_api import Page

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def generate_tab_id() -> str:
    """Build a ``tab-<millis>-<random>`` identifier; unique in practice, not guaranteed."""
    suffix = ''.join(random.choice(_SUFFIX_ALPHABET) for _ in range(7))
    return f"tab-{int(time.time() * 1000)}-{suffix}"


@dataclass
class Tab:
    """A registered tab."""
    tab_id: str
    page: Page
    label: str


class TabRegistry:
    """
    Non-owning lookup table over the pages of one browser context.

    Pages belong to the session; closing them is the caller's job. The
    registry only keeps references for resolution by id or URL keyword.
    """

    def __init__(self, pages_source: Callable[[], List[Page]]):
        """
        Args:
            pages_source: Returns the context's open pages in context order
        """
        self._pages_source = pages_source
        self._tabs: Dict[str, Tab] = {}
        self.current: Optional[Page] = None

    def register(self, page: Page, label: str) -> str:
        """Register a page and make it current."""
        tab_id = generate_tab_id()
        self._tabs[tab_id] = Tab(tab_id=tab_id, page=page, label=label)
        self.current = page
        logger.info(f"📌 Registered tab: {tab_id} ({label})")
        return tab_id

    def unregister(self, tab_id: str) -> None:
        """Remove a tab; the current page pointer is left alone."""
        tab = self._tabs.pop(tab_id, None)
        if tab:
            logger.info(f"🗑️ Unregistered tab: {tab_id} ({tab.label})")

    def forget_page(self, page: Page) -> List[str]:
        """Drop every tab bound to a page that has been closed."""
        stale = [tab_id for tab_id, tab in self._tabs.items() if tab.page is page]
        for tab_id in stale:
            self.unregister(tab_id)
        return stale

    def get(self, tab_id: str) -> Optional[Tab]:
        return self._tabs.get(tab_id)

    def find_by_keyword(self, keyword: str) -> Optional[Page]:
        """First open page whose URL contains the keyword."""
        if not keyword:
            return None

        for page in self._pages():
            url = page.url
            if url and keyword in url:
                return page
        return None

    def resolve(self, key: Optional[str] = None) -> Optional[Page]:
        """
        Resolve a page from a URL keyword or a tab identifier.

        Keyword matching is tried before identifier lookup, so an identifier
        that happens to be a substring of an unrelated URL resolves to that
        URL's page.

        Args:
            key: URL keyword or tab identifier; None selects the current page

        Returns:
            The matching page, or None
        """
        if not key:
            return self.current

        page = self.find_by_keyword(key)
        if page is not None:
            return page

        tab = self._tabs.get(key)
        return tab.page if tab else None

    def clear(self) -> None:
        """Forget every tab and the current page."""
        self._tabs.clear()
        self.current = None

    def _pages(self) -> List[Page]:
        try:
            return list(self._pages_source())
        except Exception as e:
            logger.debug(f"Page list unavailable: {e}")
            return []

    def __len__(self) -> int:
        return len(self._tabs)

    def __contains__(self, tab_id: str) -> bool:
        return tab_id in self._tabs
