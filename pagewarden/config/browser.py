"""
Browser Session Configuration

Configuration classes for the browser process, its timeouts and the retry
policy wrapped around every page operation.
"""

import os
import tempfile
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any

from dotenv import load_dotenv

ENV_PREFIX = "PAGEWARDEN_"
DEFAULT_USER_DATA_DIR = os.path.join(tempfile.gettempdir(), "playwright-automation-user-data")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ProxyConfig:
    """HTTP proxy applied when the browser process is launched."""
    server: str
    username: Optional[str] = None
    password: Optional[str] = None

    def to_playwright(self) -> Dict[str, Any]:
        """Build the ``proxy`` launch option Playwright expects."""
        server = self.server
        if "://" not in server:
            server = f"http://{server}"

        proxy = {"server": server}
        if self.username:
            proxy["username"] = self.username
        if self.password:
            proxy["password"] = self.password
        return proxy


@dataclass
class TimeoutConfig:
    """Per-operation timeouts, in milliseconds."""
    action_timeout: int = 10000
    navigation_timeout: int = 30000
    navigation_recovery_timeout: int = 60000
    content_wait_timeout: int = 10000
    settle_delay: int = 1000


@dataclass
class RetryConfig:
    """Bounded fixed-delay retry policy."""
    max_attempts: int = 3
    retry_delay: int = 5000  # milliseconds between attempts
    restart_delay: int = 2000  # milliseconds between stop and start


@dataclass
class BrowserConfig:
    """Main browser session configuration."""
    user_data_dir: str = DEFAULT_USER_DATA_DIR
    browser_id: Optional[str] = None
    proxy: Optional[ProxyConfig] = None
    channel: Optional[str] = "chrome"
    headless: bool = True
    grant_clipboard: bool = True
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)

    @property
    def log_prefix(self) -> str:
        return f"[Browser #{self.browser_id}] " if self.browser_id else ""

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'BrowserConfig':
        """
        Build configuration from ``PAGEWARDEN_*`` environment variables.

        A ``.env`` file is loaded first; variables already present in the
        environment take precedence over it.

        Args:
            dotenv_path: Explicit .env file, otherwise the default lookup is used

        Returns:
            BrowserConfig populated from the environment
        """
        load_dotenv(dotenv_path)

        proxy = None
        proxy_server = _env("PROXY_SERVER")
        if proxy_server:
            proxy = ProxyConfig(
                server=proxy_server,
                username=_env("PROXY_USERNAME"),
                password=_env("PROXY_PASSWORD"),
            )

        channel = os.getenv(f"{ENV_PREFIX}BROWSER_CHANNEL")
        if channel is None:
            channel = "chrome"

        return cls(
            user_data_dir=_env("USER_DATA_DIR", DEFAULT_USER_DATA_DIR),
            browser_id=_env("BROWSER_ID"),
            proxy=proxy,
            channel=channel.strip() or None,
            headless=_env_bool("HEADLESS", True),
        )

    @classmethod
    def without_delays(cls, **overrides) -> 'BrowserConfig':
        """Create config with every fixed delay set to zero; unknown fields raise TypeError."""
        config = cls(
            timeouts=TimeoutConfig(settle_delay=0),
            retry=RetryConfig(retry_delay=0, restart_delay=0),
        )
        return replace(config, **overrides)
