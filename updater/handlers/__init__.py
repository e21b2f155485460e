"""Handler registry — forge handlers in detection order."""

import logging
from typing import Dict, List, Type

from ..errors import NoHandler
from ..request import Request
from .base import EventKind, ProviderHandler
from .bitbucket import BitbucketHandler
from .github import GitHubHandler
from .gitlab import GitLabHandler

log = logging.getLogger("updater.handlers")

# Order matters: the first handler accepting a request wins.
HANDLERS: List[Type[ProviderHandler]] = [
    GitLabHandler,
    BitbucketHandler,
    GitHubHandler,
]


def detect(request: Request) -> ProviderHandler:
    """Return a handler for the first forge that accepts the request."""
    for cls in HANDLERS:
        if cls.accepts(request):
            log.debug(f"Request claimed by {cls.name}")
            return cls(request)
    raise NoHandler("No handler")


def get_handler(provider: str) -> Type[ProviderHandler]:
    """Get a handler class by provider name."""
    for cls in HANDLERS:
        if cls.name == provider:
            return cls
    raise KeyError(provider)


def list_handlers() -> Dict[str, dict]:
    """List all handlers with metadata, in detection order."""
    return {cls.name: cls.describe() for cls in HANDLERS}


__all__ = [
    "EventKind",
    "ProviderHandler",
    "HANDLERS",
    "detect",
    "get_handler",
    "list_handlers",
]
