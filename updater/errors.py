"""
Updater errors — one class per way a delivery can be refused or fail.

Each error carries the HTTP status the receiver answers with. Every error is
terminal for the current delivery: nothing is retried.
"""


class UpdaterError(Exception):
    """Base class for all delivery failures."""

    status = 500


class InvalidRequest(UpdaterError):
    """Bad content type, unparseable body or unexpected host."""

    status = 400


class NoHandler(UpdaterError):
    """No provider recognised the request."""

    status = 400


class Unsupported(UpdaterError):
    """The provider cannot extract a branch or url from its payload."""

    status = 501


class NoMatch(UpdaterError):
    """No configured hook matches the delivery."""

    status = 404


class CommandFailed(UpdaterError):
    """A hook command exited with a non-zero status."""

    status = 500

    def __init__(self, message: str, command: str = "", exit_code: int = -1):
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


class ConfigError(ValueError):
    """Invalid hook descriptor or hook file."""

    status = 500
