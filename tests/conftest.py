"""pytest fixtures: zero-delay configuration and a fake Playwright driver."""

import pytest

from pagewarden.config import BrowserConfig
from pagewarden.core.browser import BrowserSession, SessionEvents
from pagewarden.core.session import SessionManager

from fakes import FakeDriver


class EventRecorder:
    """Collects every event emitted by a SessionEvents dispatcher."""

    def __init__(self, events: SessionEvents):
        self.seen = []
        for name in ('session_started', 'session_stopped', 'session_restarted',
                     'health_check', 'attempt', 'succeeded', 'failed',
                     'tab_registered', 'tab_closed'):
            events.add_handler(name, self)

    def __call__(self, event, **payload):
        self.seen.append((event, payload))

    def named(self, event):
        return [payload for name, payload in self.seen if name == event]


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def config(tmp_path):
    return BrowserConfig.without_delays(user_data_dir=str(tmp_path / 'profile'))


@pytest.fixture
def events():
    return SessionEvents()


@pytest.fixture
def recorder(events):
    return EventRecorder(events)


@pytest.fixture
def session(config, events, driver):
    return BrowserSession(config, events, playwright_factory=driver)


@pytest.fixture
def manager(config, events, driver):
    return SessionManager(config, events, playwright_factory=driver)
