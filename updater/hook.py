"""
Hook — match conditions plus the commands to run when they are met.

A hook is described by a mapping with the keys:

    when   event name or list of event names       (default: "push")
    on     branch name                              (default: "master")
    from   repository web url                       (default: "")
    do     shell command or list of shell commands  (default: "echo Nothing to do!")
    in     working directory, "" for the default    (default: "")

Descriptors are validated once, when the hook is built.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Mapping, Optional, Tuple

from .errors import CommandFailed, ConfigError
from .handlers.base import EventKind

log = logging.getLogger("updater.hook")

Emit = Callable[[str], None]

HOOK_KEYS = ("when", "on", "from", "do", "in")
DEFAULT_COMMAND = "echo Nothing to do!"


def _string_list(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"'{key}' must be a string or a list of strings")


def _string(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


@dataclass(frozen=True)
class Hook:
    """One deployment rule."""

    when: FrozenSet[EventKind] = frozenset({EventKind.PUSH})
    on: str = "master"
    source: str = ""                          # "from" in descriptors
    commands: Tuple[str, ...] = (DEFAULT_COMMAND,)
    directory: str = ""                       # "in" in descriptors

    @classmethod
    def from_config(cls, descriptor: Mapping[str, Any]) -> "Hook":
        """Build a hook from a descriptor, applying defaults to missing keys."""
        if not isinstance(descriptor, Mapping):
            raise ConfigError("hook descriptor must be a mapping")

        unknown = sorted(set(descriptor) - set(HOOK_KEYS))
        if unknown:
            raise ConfigError(f"unknown hook key(s): {', '.join(map(str, unknown))}")

        when = set()
        for name in _string_list("when", descriptor.get("when", EventKind.PUSH.value)):
            try:
                when.add(EventKind(name))
            except ValueError:
                raise ConfigError(f"unknown event '{name}' in 'when'") from None

        return cls(
            when=frozenset(when),
            on=_string("on", descriptor.get("on", "master")),
            source=_string("from", descriptor.get("from", "")),
            commands=_string_list("do", descriptor.get("do", DEFAULT_COMMAND)),
            directory=_string("in", descriptor.get("in", "")),
        )

    def to_config(self) -> dict:
        return {
            "when": sorted(e.value for e in self.when),
            "on": self.on,
            "from": self.source,
            "do": list(self.commands),
            "in": self.directory,
        }

    def match(self, when: Optional[EventKind], on: str, source: str) -> bool:
        """True if the event, branch and repository all match exactly."""
        return when in self.when and on == self.on and source == self.source

    def run(self, default_directory: str, emit: Emit) -> None:
        """Run the commands in order, stopping at the first failure.

        Each command line is emitted prefixed with "$ ", followed by its
        combined stdout/stderr. A non-zero exit emits "Exit code: N" and raises
        CommandFailed; commands already run are not undone.
        """
        directory = self.directory or default_directory

        for command in self.commands:
            emit(f"$ {command}")
            log.info(f"Running in {directory}: {command}")

            try:
                result = subprocess.run(
                    command,
                    shell=True,
                    cwd=directory,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    errors="replace",
                )
            except OSError as exc:
                log.error(f"Cannot run in {directory}: {exc}")
                emit(f"Cannot run in {directory}: {exc.strerror or exc}")
                raise CommandFailed("An error occurred", command=command) from exc

            if result.stdout:
                emit(result.stdout.rstrip("\n"))

            if result.returncode != 0:
                log.warning(f"Command exited with {result.returncode}: {command}")
                emit(f"Exit code: {result.returncode}")
                raise CommandFailed(
                    "An error occurred",
                    command=command,
                    exit_code=result.returncode,
                )

            emit("")
