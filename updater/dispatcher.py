"""
Dispatcher — runs the matching hooks when the site receives a forge webhook.

Flow for one delivery:
    Request → host check → handler detection → (event, branch, url)
            → every matching Hook runs, in order → Outcome

The conditions a delivery must meet:
- the "Host" header equals the site being updated;
- "Content-Type" is application/json and the body is a JSON object;
- a forge event header (e.g. X-Gitlab-Event) and the forge's User-Agent
  (e.g. GitLab/16.0.0) are present;
- a hook matches the event ("when"), the repository ("from") and the
  branch ("on").

Usage:
    outcome = update("example.org", {
        "when": "push",
        "on": "main",
        "from": "https://gitlab.com/example/site",
        "do": ["git pull -v", "bin/composer install"],
        "in": "/var/www/site",
    }, variables, body)
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

from .errors import ConfigError, InvalidRequest, NoMatch, UpdaterError
from .handlers import detect
from .handlers.base import EventKind, ProviderHandler
from .hook import Emit, Hook
from .request import Request

log = logging.getLogger("updater.dispatcher")

HookSpec = Union[Hook, Mapping[str, Any]]


def build_hooks(hooks: Union[HookSpec, Iterable[HookSpec]]) -> List[Hook]:
    """Accept one descriptor, a list of descriptors, or Hook instances."""
    if isinstance(hooks, (Hook, Mapping)):
        hooks = [hooks]
    return [h if isinstance(h, Hook) else Hook.from_config(h) for h in hooks]


def default_directory(request: Request) -> str:
    """Directory above the document root, or the current directory."""
    document_root = request.get("DOCUMENT_ROOT")
    if not document_root:
        return os.getcwd()
    return os.path.dirname(document_root.rstrip("/")) or "/"


@dataclass
class Plan:
    """What a delivery resolves to, before anything runs."""

    handler: ProviderHandler
    event: Optional[EventKind]
    branch: str
    url: str
    hooks: List[Hook] = field(default_factory=list)


class Dispatcher:
    """Matches one delivery against the hooks configured for a site."""

    def __init__(self, host: str, hooks: Union[HookSpec, Iterable[HookSpec]]):
        self.host = host
        self.hooks = build_hooks(hooks)

    def plan(self, request: Request) -> Plan:
        """Validate and normalize the delivery, and list the matching hooks."""
        if request.get("HTTP_HOST") != self.host:
            raise InvalidRequest("Invalid host")

        handler = detect(request)
        event = handler.get_event()
        branch = handler.get_branch()
        url = handler.get_url()
        log.info(
            f"{handler.name} delivery: event={event.value if event else '?'} "
            f"branch={branch!r} url={url!r}"
        )

        return Plan(
            handler=handler,
            event=event,
            branch=branch,
            url=url,
            hooks=[h for h in self.hooks if h.match(event, branch, url)],
        )

    def handle(self, request: Request, emit: Emit) -> int:
        """Run every matching hook in order; returns how many ran."""
        plan = self.plan(request)
        if not plan.hooks:
            raise NoMatch("No match")

        directory = default_directory(request)
        for hook in plan.hooks:
            hook.run(directory, emit)

        return len(plan.hooks)


@dataclass
class Outcome:
    """Result of one delivery, ready for the transport layer."""

    status: int
    body: str
    count: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def update(
    host: str,
    hooks: Union[HookSpec, Iterable[HookSpec]],
    variables: Mapping[str, str],
    body: Optional[Union[str, bytes]],
) -> Outcome:
    """Handle one delivery for `host`; never raises for delivery errors."""
    lines: List[str] = []

    try:
        request = Request(variables, body)
        count = Dispatcher(host, hooks).handle(request, lines.append)
    except (UpdaterError, ConfigError) as exc:
        log.warning(f"Delivery refused ({type(exc).__name__}): {exc}")
        lines.append(f"{exc}.")
        return Outcome(status=exc.status, body=_render(lines), error=exc)

    log.info(f"Hooks executed: {count}")
    lines.append(f"Hooks executed: {count}")
    return Outcome(status=200, body=_render(lines), count=count)


def _render(lines: List[str]) -> str:
    return "\n".join(lines) + "\n"


__all__ = [
    "Dispatcher",
    "Outcome",
    "Plan",
    "build_hooks",
    "default_directory",
    "update",
]
