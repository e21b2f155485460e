"""
ProviderHandler ABC — Template for forge-specific handlers.

Each handler must:
1. Say whether a request comes from its forge (event header + user agent)
2. Map the forge's event header to an EventKind
3. Extract the branch and the repository web url from the payload
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

from ..request import Request


class EventKind(str, Enum):
    """Repository events hooks can react to."""

    PUSH = "push"


def dig(payload: Any, *path: Any) -> Any:
    """Follow keys/indexes into a JSON document, returning None on any miss."""
    node = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
        elif not isinstance(node, dict):
            return None
        node = node[step] if isinstance(step, int) else node.get(step)
    return node


def as_text(value: Any) -> str:
    """Payload string, or "" for null/missing/non-string values."""
    return value if isinstance(value, str) else ""


class ProviderHandler(ABC):
    """Abstract base for forge-specific webhook handlers."""

    name: str = ""
    header: str = ""                          # CGI variable carrying the event name
    events: Dict[str, EventKind] = {}         # header value -> EventKind
    user_agent: str = ""                      # required User-Agent prefix

    def __init__(self, request: Request):
        self.request = request

    @classmethod
    def accepts(cls, request: Request) -> bool:
        """True if the request carries this forge's event header and user agent."""
        if not request.get(cls.header):
            return False
        return request.get("HTTP_USER_AGENT").startswith(cls.user_agent)

    def get_event(self) -> Optional[EventKind]:
        """Event that triggered the delivery, None when the forge event is unknown."""
        return self.events.get(self.request.get(self.header))

    @abstractmethod
    def get_branch(self) -> str:
        """Branch the event applies to."""
        ...

    @abstractmethod
    def get_url(self) -> str:
        """Web url of the repository where the event happened."""
        ...

    @classmethod
    def describe(cls) -> Dict[str, Any]:
        return {
            "header": cls.header,
            "user_agent": cls.user_agent,
            "events": {k: v.value for k, v in cls.events.items()},
        }
