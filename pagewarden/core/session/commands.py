"""
Operation kinds and their typed parameter records.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..browser.operations import TabAction


class Operation(Enum):
    """Operations the session manager can dispatch."""
    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE = "type"
    SNAPSHOT = "snapshot"
    TABS = "tabs"
    CLOSE_CURRENT_TAB = "close_current_tab"
    RELOAD = "reload"
    SCREENSHOT = "screenshot"
    GET_CONTENT = "get_content"

    @property
    def params_type(self) -> type:
        return PARAMS_TYPES[self]


@dataclass
class NavigateParams:
    url: str
    is_new: bool = False
    label: Optional[str] = None


@dataclass
class ClickParams:
    selector: Optional[str] = None
    ref: Optional[str] = None
    element: Optional[str] = None


@dataclass
class TypeParams:
    selector: Optional[str] = None
    ref: Optional[str] = None
    element: Optional[str] = None
    text: str = ''


@dataclass
class SnapshotParams:
    pass


@dataclass
class TabsParams:
    action: TabAction = TabAction.LIST
    index: Optional[int] = None

    def __post_init__(self):
        self.action = TabAction(self.action)


@dataclass
class CloseTabParams:
    pass


@dataclass
class ReloadParams:
    pass


@dataclass
class ScreenshotParams:
    path: str
    selector: Optional[str] = None
    full_page: bool = True


@dataclass
class ContentParams:
    selector: str


PARAMS_TYPES = {
    Operation.NAVIGATE: NavigateParams,
    Operation.CLICK: ClickParams,
    Operation.TYPE: TypeParams,
    Operation.SNAPSHOT: SnapshotParams,
    Operation.TABS: TabsParams,
    Operation.CLOSE_CURRENT_TAB: CloseTabParams,
    Operation.RELOAD: ReloadParams,
    Operation.SCREENSHOT: ScreenshotParams,
    Operation.GET_CONTENT: ContentParams,
}

# Parameter names used by JSON callers
PARAM_ALIASES = {
    'isNew': 'is_new',
    'fullPage': 'full_page',
    'website': 'label',
}


def build_params(operation: Operation, params: Union[None, Mapping[str, Any], Any] = None) -> Any:
    """
    Coerce ``params`` into the parameter record of ``operation``.

    Args:
        operation: Operation being invoked
        params: None, a mapping of field names (camelCase aliases accepted),
            or an instance of the operation's parameter type

    Returns:
        Instance of ``operation.params_type``
    """
    params_type = operation.params_type
    if params is None:
        params = {}
    if isinstance(params, params_type):
        return params
    if not isinstance(params, Mapping):
        raise TypeError(
            f"{operation.value} expects {params_type.__name__} or a mapping, "
            f"got {type(params).__name__}"
        )

    known = {f.name for f in fields(params_type)}
    values = {}
    for key, value in params.items():
        name = PARAM_ALIASES.get(key, key)
        if name not in known:
            raise ValueError(f"Unknown parameter for {operation.value}: {key}")
        values[name] = value
    return params_type(**values)
