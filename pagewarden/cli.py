#!/usr/bin/env python3
"""
pagewarden command line

Opens a URL in a supervised browser tab, extracts the text of a selector and
optionally captures a screenshot, then closes the tab and the browser.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import BrowserConfig
from .core.errors import BrowserSessionError
from .core.session import Operation, SessionManager
from .utils.navigation_utils import get_hostname

logger = logging.getLogger(__name__)


async def fetch_page(url: str, selector: str = 'body', screenshot: Optional[str] = None,
                     list_tabs: bool = False,
                     config: Optional[BrowserConfig] = None,
                     manager: Optional[SessionManager] = None) -> Dict[str, Any]:
    """
    Scrape one page the way a request handler drives the session manager.

    Args:
        url: Page to open in a new tab
        selector: Elements whose text and HTML are extracted
        screenshot: Optional path for a full-page screenshot
        list_tabs: Include the open tabs in the result
        config: Browser configuration, read from the environment if omitted
        manager: Existing manager to use instead of creating one

    Returns:
        Dictionary with navigation, content, screenshot and tab details
    """
    manager = manager or SessionManager(config or BrowserConfig.from_env())
    result: Dict[str, Any] = {'url': url, 'selector': selector}

    try:
        await manager.ensure_started()

        navigation = await manager.invoke(
            Operation.NAVIGATE,
            {'url': url, 'is_new': True, 'label': get_hostname(url) or 'unknown'},
        )
        result['tab_id'] = navigation.tab_id

        content = await manager.extract_content(selector)
        result['success'] = content.success
        result['elements'] = [element.to_dict() for element in content.elements]

        if screenshot:
            shot = await manager.invoke(Operation.SCREENSHOT, {'path': screenshot},
                                        tab_id=navigation.tab_id)
            result['screenshot'] = shot.image_path

        if list_tabs:
            tabs = await manager.invoke(Operation.TABS, {'action': 'list'})
            result['tabs'] = [tab.to_dict() for tab in tabs.tabs]

        await manager.close_current_tab(navigation.tab_id)
    finally:
        await manager.stop()

    return result


def render(result: Dict[str, Any], console: Console, max_chars: int) -> None:
    elements: List[Dict[str, Any]] = result.get('elements', [])
    text = '\n\n'.join((element.get('text') or '').strip() for element in elements)
    if len(text) > max_chars:
        text = text[:max_chars] + ' ...'

    title = f"{result['url']} [{result['selector']}] - {len(elements)} element(s)"
    console.print(Panel(Text(text or '(no content)'), title=escape(title)))

    if result.get('screenshot'):
        console.print(f"📸 Screenshot saved to {result['screenshot']}")

    if result.get('tabs'):
        table = Table(title="Open tabs")
        table.add_column("Index", justify="right")
        table.add_column("URL")
        for tab in result['tabs']:
            table.add_row(str(tab['index']), escape(tab['url']))
        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pagewarden-fetch',
        description='Fetch page content through a supervised browser session'
    )
    parser.add_argument('url', help='URL to open')
    parser.add_argument('--selector', default='body', help='CSS selector to extract (default: body)')
    parser.add_argument('--screenshot', metavar='PATH', help='Save a full-page screenshot')
    parser.add_argument('--list-tabs', action='store_true', help='Show open tabs before closing')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--max-chars', type=int, default=2000,
                        help='Truncate displayed text (default: 2000)')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    config = BrowserConfig.from_env()
    if args.headed:
        config.headless = False

    console = Console()
    try:
        result = asyncio.run(fetch_page(
            args.url,
            selector=args.selector,
            screenshot=args.screenshot,
            list_tabs=args.list_tabs,
            config=config,
        ))
    except BrowserSessionError as e:
        logger.error(f"💥 Fetch failed: {e}")
        console.print(f"[red]Fetch failed:[/red] {escape(str(e))}")
        return 2

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        render(result, console, args.max_chars)

    return 0 if result.get('success') else 1


if __name__ == "__main__":
    sys.exit(main())
