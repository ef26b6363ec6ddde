"""
Page Operations

Click, type, reload, snapshot, tab management, content extraction and
screenshots against a page resolved through the tab registry.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from playwright.async_api import Page

from ..errors import ElementNotFoundError, PageNotInitializedError
from .events import TAB_CLOSED
from .results import (
    ActionResult, ContentElement, ContentResult, ScreenshotResult,
    SnapshotResult, TabCloseResult, TabInfo, TabsResult,
)
from .supervisor import BrowserSession

logger = logging.getLogger(__name__)

DEFAULT_TYPE_TARGET = 'textarea:visible'


class TabAction(Enum):
    LIST = "list"
    CLOSE = "close"


def target_selector(selector: Optional[str] = None, ref: Optional[str] = None,
                    element: Optional[str] = None) -> Optional[str]:
    """
    Pick the selector for an element from the supported targeting styles.

    Precedence is selector, then ref, then element. A ref starting with '#'
    is used as an id selector; any other ref is looked up through the
    ``data-refid`` attribute.
    """
    if selector:
        return selector
    if ref:
        return ref if ref.startswith('#') else f'[data-refid="{ref}"]'
    if element:
        return element
    return None


def normalize_snapshot(snapshot: Any) -> List[Dict[str, Any]]:
    """Flatten the shapes an accessibility snapshot can take into a node list."""
    if not snapshot:
        return []
    if isinstance(snapshot, list):
        return snapshot
    if isinstance(snapshot, dict):
        if isinstance(snapshot.get('children'), list):
            return snapshot['children']
        if isinstance(snapshot.get('nodes'), list):
            return snapshot['nodes']
        if snapshot.get('role') and snapshot.get('name'):
            return [snapshot]
    return []


class PageOperations:
    """
    Page-level actions for one browser session.

    Every operation takes an optional ``tab_id`` that is resolved as a URL
    keyword first and as a tab identifier second; without it the session's
    current page is used.
    """

    def __init__(self, session: BrowserSession):
        self.session = session

    @property
    def timeouts(self):
        return self.session.config.timeouts

    def resolve_page(self, tab_id: Optional[str] = None) -> Page:
        """Resolve an open page or raise PageNotInitializedError."""
        page = self.session.tabs.resolve(tab_id)
        if page is None or page.is_closed():
            raise PageNotInitializedError(details={'tab_id': tab_id})
        return page

    async def click(self, selector: Optional[str] = None, ref: Optional[str] = None,
                    element: Optional[str] = None, tab_id: Optional[str] = None) -> ActionResult:
        page = self.resolve_page(tab_id)

        target = target_selector(selector, ref, element)
        if target is None:
            raise ValueError("click requires a selector, ref or element")

        logger.info(f"🎯 Clicking {target}")
        await page.click(target, timeout=self.timeouts.action_timeout)
        return ActionResult(success=True)

    async def type(self, selector: Optional[str] = None, ref: Optional[str] = None,
                   element: Optional[str] = None, text: Optional[str] = None,
                   tab_id: Optional[str] = None) -> ActionResult:
        """
        Fill a field; without a target the first visible textarea is used.

        Unlike click, a ref is used verbatim as a selector.
        """
        page = self.resolve_page(tab_id)
        text = text or ''

        target = selector or ref or element or None
        if target is None:
            logger.info(f"⌨️ Typing {len(text)} chars into {DEFAULT_TYPE_TARGET}")
            await page.locator(DEFAULT_TYPE_TARGET).first.fill(
                text, timeout=self.timeouts.action_timeout
            )
        else:
            logger.info(f"⌨️ Typing {len(text)} chars into {target}")
            await page.fill(target, text, timeout=self.timeouts.action_timeout)
        return ActionResult(success=True)

    async def reload(self, tab_id: Optional[str] = None) -> ActionResult:
        page = self.resolve_page(tab_id)

        logger.info(f"🔄 Reloading page: {page.url}")
        await page.reload(wait_until='domcontentloaded',
                          timeout=self.timeouts.navigation_timeout)
        await asyncio.sleep(self.timeouts.settle_delay / 1000)
        logger.info(f"✅ Reload completed: {page.url}")
        return ActionResult(success=True)

    async def snapshot(self, tab_id: Optional[str] = None) -> SnapshotResult:
        """
        Capture the accessibility tree as a flat node list.

        Snapshots are advisory: a missing page or a failed capture yields an
        empty node list instead of an error.
        """
        logger.info("📸 Capturing page snapshot...")

        try:
            page = self.session.tabs.resolve(tab_id)
            if page is None or page.is_closed():
                page = self.session.first_open_page()
                if page is None:
                    logger.error("❌ No page available for snapshot")
                    return SnapshotResult()
                self.session.page = page

            raw = await self._accessibility_tree(page)
        except Exception as e:
            logger.warning(f"⚠️ Snapshot failed: {e}")
            return SnapshotResult()

        nodes = normalize_snapshot(raw)
        logger.info(f"✅ Snapshot captured, {len(nodes)} node(s)")
        return SnapshotResult(nodes=nodes)

    async def _accessibility_tree(self, page: Page) -> Any:
        accessibility = getattr(page, 'accessibility', None)
        if accessibility is not None:
            return await accessibility.snapshot()

        # Playwright builds without page.accessibility: ask the DevTools protocol
        cdp = await page.context.new_cdp_session(page)
        try:
            return await cdp.send('Accessibility.getFullAXTree')
        finally:
            await cdp.detach()

    async def get_tabs(self, action: Union[TabAction, str] = TabAction.LIST,
                       index: Optional[int] = None) -> TabsResult:
        """List open pages, or close the page at ``index``."""
        action = TabAction(action)
        context = self.session.context
        if context is None:
            return TabsResult(tabs=[])

        if action is TabAction.LIST:
            return TabsResult(tabs=[
                TabInfo(index=i, url=page.url) for i, page in enumerate(context.pages)
            ])

        pages = context.pages
        if index is not None and 0 <= index < len(pages):
            page = pages[index]
            logger.info(f"🔄 Closing tab #{index}: {page.url}")
            await page.close()
            closed_ids = self.session.tabs.forget_page(page)

            if self.session.page is page:
                remaining = self.session.open_pages()
                self.session.page = remaining[0] if remaining else None

            await self.session.events.emit(TAB_CLOSED, index=index, tab_ids=closed_ids)
        return TabsResult(success=True)

    async def close_current_tab(self, tab_id: Optional[str] = None) -> TabCloseResult:
        page = self.session.tabs.resolve(tab_id)
        if page is None or page.is_closed():
            logger.info("⚠️ No active tab to close")
            return TabCloseResult(success=False, message='No active tab')

        try:
            logger.info(f"🔄 Closing tab: {page.url}")
            await page.close()

            if tab_id:
                self.session.tabs.unregister(tab_id)
            closed_ids = self.session.tabs.forget_page(page)

            remaining = self.session.open_pages()
            if remaining:
                self.session.page = remaining[0]
                logger.info(f"✅ Switched to tab: {self.session.page.url}")
            else:
                self.session.page = None
                logger.info("⚠️ No tabs left open")

            await self.session.events.emit(TAB_CLOSED, tab_id=tab_id, tab_ids=closed_ids)
            return TabCloseResult(success=True)

        except Exception as e:
            logger.error(f"❌ Failed to close tab: {e}")
            return TabCloseResult(success=False, message=str(e))

    async def get_content(self, selector: str) -> ContentResult:
        """
        Collect inner HTML and text of every element matching ``selector``.

        Always reads the session's current page, never a tab-resolved one.
        Failures are logged and reported as an unsuccessful, empty result.
        """
        page = self.session.page
        if page is None or page.is_closed():
            logger.warning("⚠️ Content extraction skipped: page not initialized or closed")
            return ContentResult(success=False)

        try:
            await page.wait_for_selector(selector, timeout=self.timeouts.content_wait_timeout)

            elements = []
            for handle in await page.query_selector_all(selector):
                elements.append(ContentElement(
                    inner_html=await handle.inner_html(),
                    text=await handle.text_content(),
                ))
            return ContentResult(success=True, elements=elements)

        except Exception as e:
            logger.warning(f"⚠️ Content extraction failed for {selector}: {e}")
            return ContentResult(success=False)

    async def screenshot(self, path: str, selector: Optional[str] = None,
                         full_page: Optional[bool] = True,
                         tab_id: Optional[str] = None) -> ScreenshotResult:
        """Screenshot an element or the page (full page unless full_page is False)."""
        page = self.resolve_page(tab_id)

        if selector:
            element = await page.query_selector(selector)
            if element is None:
                raise ElementNotFoundError(selector)
            data = await element.screenshot(path=path)
        else:
            data = await page.screenshot(full_page=full_page is not False, path=path)

        logger.info(f"📸 Screenshot saved: {path}")
        return ScreenshotResult(success=True, image_path=path, screenshot=data)
