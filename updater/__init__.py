"""Updater — run deployment commands when a forge sends a push webhook."""

from .dispatcher import Dispatcher, Outcome, update
from .errors import (
    CommandFailed,
    ConfigError,
    InvalidRequest,
    NoHandler,
    NoMatch,
    Unsupported,
    UpdaterError,
)
from .handlers import EventKind, detect
from .hook import Hook
from .request import Request

__all__ = [
    "CommandFailed",
    "ConfigError",
    "Dispatcher",
    "EventKind",
    "Hook",
    "InvalidRequest",
    "NoHandler",
    "NoMatch",
    "Outcome",
    "Request",
    "Unsupported",
    "UpdaterError",
    "detect",
    "update",
]
