"""Tests for page-level operations."""

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagewarden.core.browser import PageOperations, TabAction
from pagewarden.core.browser.operations import normalize_snapshot, target_selector
from pagewarden.core.errors import ElementNotFoundError, PageClosedError, PageNotInitializedError

from fakes import FakeElement


@pytest.fixture
def ops(session):
    return PageOperations(session)


class TestTargetSelector:

    def test_selector_wins(self):
        assert target_selector('#a', 'b', 'c') == '#a'

    def test_hash_ref_is_id_selector(self):
        assert target_selector(ref='#submit') == '#submit'

    def test_plain_ref_uses_data_refid(self):
        assert target_selector(ref='e12') == '[data-refid="e12"]'

    def test_element_is_raw_selector(self):
        assert target_selector(element='button.primary') == 'button.primary'

    def test_nothing_given(self):
        assert target_selector() is None


class TestNormalizeSnapshot:

    def test_list_is_kept(self):
        nodes = [{'role': 'button', 'name': 'OK'}]
        assert normalize_snapshot(nodes) == nodes

    def test_children_are_used(self):
        assert normalize_snapshot({'role': 'WebArea', 'children': [{'role': 'link'}]}) == [
            {'role': 'link'}
        ]

    def test_nodes_field_is_used(self):
        assert normalize_snapshot({'nodes': [{'nodeId': '1'}]}) == [{'nodeId': '1'}]

    def test_single_root_is_wrapped(self):
        root = {'role': 'WebArea', 'name': 'Home'}
        assert normalize_snapshot(root) == [root]

    @pytest.mark.parametrize('raw', [None, {}, {'role': 'WebArea'}, 'text'])
    def test_unrecognized_shapes(self, raw):
        assert normalize_snapshot(raw) == []


@pytest.mark.asyncio
async def test_operations_require_a_page(ops):
    for call in (ops.click(selector='#a'), ops.type(text='x'), ops.reload(),
                 ops.screenshot('shot.png')):
        with pytest.raises(PageNotInitializedError):
            await call


@pytest.mark.asyncio
async def test_unknown_tab_is_page_closed_class(ops, session):
    await session.start()

    with pytest.raises(PageClosedError):
        await ops.click(selector='#a', tab_id='tab-missing')


@pytest.mark.asyncio
async def test_click_targets(ops, session):
    await session.start()
    page = session.page

    await ops.click(selector='#go', ref='ignored')
    await ops.click(ref='#submit')
    await ops.click(ref='e7')
    await ops.click(element='a.next')

    assert page.calls_named('click') == [
        ('click', '#go', 10000),
        ('click', '#submit', 10000),
        ('click', '[data-refid="e7"]', 10000),
        ('click', 'a.next', 10000),
    ]


@pytest.mark.asyncio
async def test_click_without_target_fails(ops, session):
    await session.start()

    with pytest.raises(ValueError):
        await ops.click()


@pytest.mark.asyncio
async def test_click_on_keyword_resolved_tab(ops, session):
    await session.start()
    shop = await session.new_page()
    shop.url = 'https://shop.test/'

    await ops.click(selector='#buy', tab_id='shop')

    assert shop.calls_named('click') == [('click', '#buy', 10000)]
    assert session.page.calls_named('click') == []


@pytest.mark.asyncio
async def test_type_defaults_to_first_visible_textarea(ops, session):
    await session.start()

    await ops.type(text='hello')

    assert session.page.calls_named('fill') == [('fill', 'textarea:visible', 'hello', 10000)]


@pytest.mark.asyncio
async def test_type_uses_ref_verbatim_and_empty_text(ops, session):
    await session.start()

    await ops.type(ref='input[name=q]')

    assert session.page.calls_named('fill') == [('fill', 'input[name=q]', '', 10000)]


@pytest.mark.asyncio
async def test_type_target_precedence(ops, session):
    await session.start()

    await ops.type(selector='#search', ref='e3', element='input', text='a')
    await ops.type(ref='e3', element='input', text='b')
    await ops.type(element='input', text='c')

    assert session.page.calls_named('fill') == [
        ('fill', '#search', 'a', 10000),
        ('fill', 'e3', 'b', 10000),
        ('fill', 'input', 'c', 10000),
    ]


@pytest.mark.asyncio
async def test_reload(ops, session):
    await session.start()

    result = await ops.reload()

    assert result.success is True
    assert session.page.calls_named('reload') == [('reload', 'domcontentloaded', 30000)]


@pytest.mark.asyncio
async def test_snapshot_returns_children(ops, session):
    await session.start()

    result = await ops.snapshot()

    assert [node['name'] for node in result.nodes] == ['Welcome', 'Continue']


@pytest.mark.asyncio
async def test_snapshot_falls_back_to_first_page(ops, session):
    await session.start()
    first = session.page
    session.page = None

    result = await ops.snapshot()

    assert result.nodes
    assert session.page is first


@pytest.mark.asyncio
async def test_snapshot_without_pages_is_empty(ops, session):
    assert (await ops.snapshot()).nodes == []

    await session.start()
    await session.page.close()
    assert (await ops.snapshot()).nodes == []


@pytest.mark.asyncio
async def test_snapshot_error_is_empty(ops, session):
    await session.start()
    session.page.accessibility.error = RuntimeError("protocol error")

    assert (await ops.snapshot()).nodes == []


@pytest.mark.asyncio
async def test_snapshot_uses_cdp_without_accessibility_api(ops, session):
    await session.start()
    session.page.accessibility = None

    result = await ops.snapshot()

    assert result.nodes == [{'role': {'value': 'RootWebArea'}}]
    cdp = session.context.cdp_sessions[0]
    assert cdp.sent == ['Accessibility.getFullAXTree']
    assert cdp.detached


@pytest.mark.asyncio
async def test_list_tabs(ops, session):
    assert (await ops.get_tabs('list')).tabs == []

    await session.start()
    second = await session.new_page()
    second.url = 'https://b.test/'

    result = await ops.get_tabs(TabAction.LIST)

    assert [(tab.index, tab.url) for tab in result.tabs] == [
        (0, 'about:blank'), (1, 'https://b.test/')
    ]


@pytest.mark.asyncio
async def test_close_tab_by_index_reassigns_current(ops, session, recorder):
    await session.start()
    first = session.page
    second = await session.new_page()
    tab_id = session.tabs.register(second, 'b')

    result = await ops.get_tabs('close', index=1)

    assert result.success is True
    assert second.is_closed()
    assert tab_id not in session.tabs
    assert session.page is first
    assert recorder.named('tab_closed') == [{'index': 1, 'tab_ids': [tab_id]}]


@pytest.mark.asyncio
async def test_close_last_tab_by_index_clears_current(ops, session):
    await session.start()

    await ops.get_tabs('close', index=0)

    assert session.page is None


@pytest.mark.asyncio
async def test_close_tab_out_of_range_is_ignored(ops, session):
    await session.start()

    result = await ops.get_tabs('close', index=5)

    assert result.success is True
    assert not session.page.is_closed()


@pytest.mark.asyncio
async def test_close_current_tab_with_id(ops, session):
    await session.start()
    first = session.page
    tab_page = await session.new_page()
    tab_id = session.tabs.register(tab_page, 'site')

    result = await ops.close_current_tab(tab_id)

    assert result.success is True
    assert tab_page.is_closed()
    assert tab_id not in session.tabs
    assert session.page is first


@pytest.mark.asyncio
async def test_close_current_tab_without_pages(ops, session):
    result = await ops.close_current_tab()

    assert result.success is False
    assert result.message == 'No active tab'


@pytest.mark.asyncio
async def test_close_last_tab_clears_current(ops, session):
    await session.start()

    result = await ops.close_current_tab()

    assert result.success is True
    assert session.page is None


@pytest.mark.asyncio
async def test_get_content_collects_matches(ops, session):
    await session.start()
    session.page.elements['li'] = [
        FakeElement('<b>one</b>', 'one'),
        FakeElement('two', 'two'),
    ]

    result = await ops.get_content('li')

    assert result.success is True
    assert [(e.inner_html, e.text) for e in result.elements] == [('<b>one</b>', 'one'), ('two', 'two')]
    assert session.page.calls_named('wait_for_selector') == [('wait_for_selector', 'li', 10000)]


@pytest.mark.asyncio
async def test_get_content_failure_is_empty(ops, session):
    await session.start()

    result = await ops.get_content('.missing')

    assert result.success is False
    assert result.elements == []


@pytest.mark.asyncio
async def test_get_content_without_page_is_empty(ops):
    result = await ops.get_content('body')

    assert result.success is False
    assert result.elements == []


@pytest.mark.asyncio
async def test_get_content_reads_current_page_only(ops, session):
    await session.start()
    other = await session.new_page()
    other.url = 'https://other.test/'
    other.elements['h1'] = [FakeElement('Other', 'Other')]

    result = await ops.get_content('h1')

    assert result.success is False


@pytest.mark.asyncio
async def test_full_page_screenshot_by_default(ops, session, tmp_path):
    await session.start()
    path = str(tmp_path / 'page.png')

    result = await ops.screenshot(path)

    assert result.success is True
    assert result.image_path == path
    assert result.screenshot == b'page-png'
    assert session.page.calls_named('screenshot') == [('screenshot', True, path)]


@pytest.mark.asyncio
async def test_viewport_screenshot_when_disabled(ops, session):
    await session.start()

    await ops.screenshot('view.png', full_page=False)

    assert session.page.calls_named('screenshot') == [('screenshot', False, 'view.png')]


@pytest.mark.asyncio
async def test_element_screenshot(ops, session):
    await session.start()
    element = FakeElement('<div></div>', '')
    session.page.elements['#chart'] = [element]

    result = await ops.screenshot('chart.png', selector='#chart')

    assert result.screenshot == b'element-png'
    assert element.screenshots == ['chart.png']


@pytest.mark.asyncio
async def test_element_screenshot_missing_element(ops, session):
    await session.start()

    with pytest.raises(ElementNotFoundError):
        await ops.screenshot('chart.png', selector='#chart')


@pytest.mark.asyncio
async def test_timeouts_surface_as_playwright_errors(ops, session):
    await session.start()
    session.page.action_errors.append(PlaywrightTimeoutError("Timeout 10000ms exceeded."))

    with pytest.raises(PlaywrightTimeoutError):
        await ops.click(selector='#slow')
