"""
Updater CLI — Run deployment hooks when a forge sends a webhook.

Usage:
    python3 -m updater start                          Start webhook server (foreground)
    python3 -m updater providers                      List supported forges
    python3 -m updater hooks                          Show configured hooks
    python3 -m updater check <payload.json> <forge>   Dry run: which hooks would run
"""

import json
import logging
import sys
from pathlib import Path

from . import config as cfg
from .dispatcher import Dispatcher
from .errors import ConfigError, UpdaterError
from .handlers import get_handler, list_handlers
from .request import Request

logging.basicConfig(
    level=getattr(logging, cfg.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("updater")


def cmd_start():
    """Start the webhook server."""
    import uvicorn

    from . import server

    hooks = cfg.load_hooks()
    server.configure(cfg.SITE, hooks, cfg.DOCUMENT_ROOT)

    print("Updater Webhook Receiver v1.0.0")
    print(f"  Listen: {cfg.BIND_HOST}:{cfg.PORT}")
    print(f"  Site: {cfg.SITE or '(not set)'}")
    print(f"  Hooks: {len(hooks)} from {cfg.HOOKS_FILE}")
    print("  Endpoint: POST / or POST /webhook")
    print()

    uvicorn.run(server.app, host=cfg.BIND_HOST, port=cfg.PORT, log_level="info")


def cmd_providers():
    """List supported forges in detection order."""
    print("Forges (detection order)")
    print("=" * 55)
    for name, meta in list_handlers().items():
        events = ", ".join(f"{k} -> {v}" for k, v in meta["events"].items())
        print(f"  {name:10s} {meta['header']:22s} UA {meta['user_agent']}")
        print(f"  {'':10s} events: {events}")


def cmd_hooks():
    """Show the configured hooks."""
    hooks = cfg.load_hooks()
    print(f"Site: {cfg.SITE or '(not set)'}")
    print(f"Hooks file: {cfg.HOOKS_FILE}")
    print("=" * 55)
    for i, hook in enumerate(hooks, 1):
        conf = hook.to_config()
        print(f"  [{i}] when={','.join(conf['when'])} on={conf['on']} from={conf['from']!r}")
        print(f"      in={conf['in'] or '(default)'}")
        for command in conf["do"]:
            print(f"      $ {command}")


def cmd_check(payload_file: str, provider: str):
    """Resolve a saved payload as if `provider` had sent it, without running anything."""
    try:
        handler = get_handler(provider)
    except KeyError:
        print(f"Unknown forge: {provider} (one of: {', '.join(list_handlers())})")
        sys.exit(1)
    event_name = next(iter(handler.events))
    variables = {
        "CONTENT_TYPE": "application/json",
        "HTTP_HOST": cfg.SITE,
        "HTTP_USER_AGENT": f"{handler.user_agent}check",
        handler.header: event_name,
    }
    request = Request(variables, Path(payload_file).read_bytes())
    plan = Dispatcher(cfg.SITE, cfg.load_hooks()).plan(request)

    print(f"Forge:  {plan.handler.name}")
    print(f"Event:  {plan.event.value if plan.event else '(unknown)'}")
    print(f"Branch: {plan.branch}")
    print(f"Url:    {plan.url}")
    print(f"Matching hooks: {len(plan.hooks)}")
    for hook in plan.hooks:
        print(f"  {json.dumps(hook.to_config())}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python3 -m updater <command>")
        print()
        print("Commands:")
        print("  start                        Start webhook server (foreground)")
        print("  providers                    List supported forges")
        print("  hooks                        Show configured hooks")
        print("  check <payload.json> <forge> Dry run a saved payload")
        sys.exit(1)

    cmd, args = sys.argv[1], sys.argv[2:]
    commands = {
        "start": (cmd_start, 0),
        "providers": (cmd_providers, 0),
        "hooks": (cmd_hooks, 0),
        "check": (cmd_check, 2),
    }

    entry = commands.get(cmd)
    if not entry:
        print(f"Unknown command: {cmd}")
        sys.exit(1)

    handler, arity = entry
    if len(args) != arity:
        print(f"{cmd}: expected {arity} argument(s), got {len(args)}")
        sys.exit(1)

    try:
        handler(*args)
    except (ConfigError, UpdaterError, OSError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
