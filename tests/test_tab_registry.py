"""Tests for the tab registry."""

import re

import pytest

from pagewarden.core.browser import tabs as tabs_module
from pagewarden.core.browser.tabs import TabRegistry, generate_tab_id

from fakes import FakePage


def make_registry(pages):
    return TabRegistry(lambda: pages)


def test_generated_ids_follow_format():
    tab_id = generate_tab_id()
    assert re.match(r'^tab-\d+-[0-9a-z]{7}$', tab_id)
    assert generate_tab_id() != tab_id


def test_register_resolve_unregister_round_trip():
    page = FakePage(url='https://site.test/')
    registry = make_registry([page])

    tab_id = registry.register(page, 'site')
    assert registry.resolve(tab_id) is page
    assert registry.get(tab_id).label == 'site'
    assert tab_id in registry

    registry.unregister(tab_id)
    assert registry.resolve(tab_id) is None
    assert len(registry) == 0


def test_register_makes_page_current():
    first, second = FakePage(url='https://one.test/'), FakePage(url='https://two.test/')
    registry = make_registry([first, second])

    registry.register(first, 'one')
    registry.register(second, 'two')

    assert registry.current is second
    assert registry.resolve() is second


def test_unregister_leaves_current_alone():
    page = FakePage(url='https://site.test/')
    registry = make_registry([page])
    tab_id = registry.register(page, 'site')

    registry.unregister(tab_id)

    assert registry.current is page


def test_keyword_match_wins_over_identifier(monkeypatch):
    shop = FakePage(url='https://shop.test/cart')
    blog = FakePage(url='https://blog.test/post/1')
    registry = make_registry([shop, blog])

    monkeypatch.setattr(tabs_module, 'generate_tab_id', lambda: 'tab-blog-1')
    tab_id = registry.register(shop, 'shop')
    assert tab_id == 'tab-blog-1'

    assert registry.resolve('blog') is blog
    assert registry.resolve('tab-blog-1') is shop


def test_keyword_first_match_in_page_order():
    first = FakePage(url='https://a.test/docs')
    second = FakePage(url='https://b.test/docs')
    registry = make_registry([first, second])

    assert registry.resolve('docs') is first


def test_unknown_key_resolves_to_none():
    registry = make_registry([FakePage(url='https://a.test/')])
    assert registry.resolve('missing') is None


def test_identifier_lookup_survives_broken_page_source():
    page = FakePage(url='https://a.test/')

    def broken():
        raise RuntimeError("context gone")

    registry = TabRegistry(broken)
    tab_id = registry.register(page, 'a')

    assert registry.resolve(tab_id) is page


def test_forget_page_drops_every_entry_for_page():
    page = FakePage(url='https://a.test/')
    other = FakePage(url='https://b.test/')
    registry = make_registry([page, other])
    first = registry.register(page, 'a')
    second = registry.register(page, 'a-again')
    kept = registry.register(other, 'b')

    forgotten = registry.forget_page(page)

    assert sorted(forgotten) == sorted([first, second])
    assert kept in registry
    assert len(registry) == 1


def test_clear_resets_current():
    page = FakePage(url='https://a.test/')
    registry = make_registry([page])
    registry.register(page, 'a')

    registry.clear()

    assert registry.current is None
    assert len(registry) == 0


@pytest.mark.parametrize('key', [None, ''])
def test_empty_key_selects_current(key):
    page = FakePage(url='https://a.test/')
    registry = make_registry([page])
    registry.current = page

    assert registry.resolve(key) is page
