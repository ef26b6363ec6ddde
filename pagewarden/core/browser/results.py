"""
Operation result types.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


class _Result:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class NavigationResult(_Result):
    """Result of a navigation; tab_id is set only when a tab was created."""
    success: bool
    tab_id: Optional[str] = None


@dataclass
class ActionResult(_Result):
    """Result of click, type and reload."""
    success: bool


@dataclass
class SnapshotResult(_Result):
    """Flat list of accessibility nodes; empty when no snapshot was available."""
    nodes: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class TabInfo(_Result):
    index: int
    url: str


@dataclass
class TabsResult(_Result):
    success: bool = True
    tabs: List[TabInfo] = field(default_factory=list)


@dataclass
class TabCloseResult(_Result):
    success: bool
    message: Optional[str] = None


@dataclass
class ContentElement(_Result):
    inner_html: str
    text: Optional[str]


@dataclass
class ContentResult(_Result):
    success: bool
    elements: List[ContentElement] = field(default_factory=list)


@dataclass
class ScreenshotResult(_Result):
    success: bool
    image_path: str
    screenshot: Optional[bytes] = field(default=None, repr=False)
