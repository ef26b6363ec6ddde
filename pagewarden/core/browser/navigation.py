"""
Navigation Engine

URL navigation with a same-page short-circuit, bounded timeouts, recovery
from closed pages, and same-host partial success.
"""

import asyncio
import logging
from typing import Optional, Tuple

from playwright.async_api import Page

from ...utils.navigation_utils import is_partial_success, is_same_location, strip_query
from .events import TAB_REGISTERED
from .results import NavigationResult
from .supervisor import BrowserSession

logger = logging.getLogger(__name__)

DEFAULT_TAB_LABEL = 'unknown'


class NavigationEngine:
    """Navigates the current page or a freshly opened tab."""

    def __init__(self, session: BrowserSession):
        self.session = session

    @property
    def timeouts(self):
        return self.session.config.timeouts

    async def navigate(self, url: str, is_new: bool = False,
                       label: Optional[str] = None) -> NavigationResult:
        """
        Navigate to a URL.

        Args:
            url: Target URL
            is_new: Open and register a new tab instead of reusing the current page
            label: Descriptive label stored with a new tab

        Returns:
            NavigationResult, with the new tab's id when one was created
        """
        if not url:
            raise ValueError("navigate() requires a url")

        label = label or DEFAULT_TAB_LABEL
        await self.session.start()

        page, tab_id = await self._target_page(is_new, label)

        try:
            current_url = page.url
            if is_same_location(current_url, url):
                logger.info(f"✅ Page already at target: {strip_query(current_url)}")
                return NavigationResult(success=True, tab_id=tab_id)

            logger.info(f"🧭 Navigating from {strip_query(current_url)} to {url}")
            await page.goto(url, wait_until='domcontentloaded',
                            timeout=self.timeouts.navigation_timeout)
            await self._settle()
            logger.info(f"✅ Navigation completed: {page.url}")
            return NavigationResult(success=True, tab_id=tab_id)

        except Exception as e:
            logger.warning(f"⚠️ Navigation failed: {e}")

            if page.is_closed():
                return await self._recover_closed_page(url, is_new, label, tab_id)

            if is_partial_success(page.url, url):
                logger.warning(f"⚠️ Partially loaded: {page.url}")
                return NavigationResult(success=True, tab_id=tab_id)

            raise

    async def _target_page(self, is_new: bool, label: str) -> Tuple[Page, Optional[str]]:
        if is_new:
            page = await self.session.new_page()
            tab_id = self.session.tabs.register(page, label)
            await self.session.events.emit(TAB_REGISTERED, tab_id=tab_id, label=label)
            return page, tab_id

        page = self.session.page
        if page is None or page.is_closed():
            page = self.session.first_open_page()
            if page is None:
                page = await self.session.new_page()
            self.session.page = page
        return page, None

    async def _recover_closed_page(self, url: str, is_new: bool, label: str,
                                   tab_id: Optional[str]) -> NavigationResult:
        logger.info("🔄 Page closed during navigation, opening a replacement...")
        page = await self.session.new_page()
        self.session.page = page

        if is_new:
            if tab_id:
                self.session.tabs.unregister(tab_id)
            tab_id = self.session.tabs.register(page, label)
            await self.session.events.emit(TAB_REGISTERED, tab_id=tab_id, label=label)

        await page.goto(url, wait_until='domcontentloaded',
                        timeout=self.timeouts.navigation_recovery_timeout)
        await self._settle()
        logger.info(f"✅ Navigation completed on replacement page: {page.url}")
        return NavigationResult(success=True, tab_id=tab_id)

    async def _settle(self) -> None:
        await asyncio.sleep(self.timeouts.settle_delay / 1000)
