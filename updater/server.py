"""
Updater Receiver Server — FastAPI on port 3849.

Receives forge webhooks, runs the matching hooks and answers with a plain
text transcript of the commands and their output.
"""

import logging
from contextlib import asynccontextmanager
from typing import Iterable, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from . import config as cfg
from .dispatcher import HookSpec, build_hooks, update
from .errors import ConfigError
from .handlers import list_handlers
from .hook import Hook
from .request import header_variables

log = logging.getLogger("updater.server")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}

# ── Shared state ──────────────────────────────────────────

_site: str = ""
_hooks: Optional[List[Hook]] = None
_document_root: str = ""


def configure(
    site: str,
    hooks: Iterable[HookSpec],
    document_root: str = "",
) -> None:
    """Set the site and hooks served by the app."""
    if not site:
        raise ConfigError("no site configured: set UPDATER_SITE to the expected Host header")
    global _site, _hooks, _document_root
    _site = site
    _hooks = build_hooks(hooks)
    _document_root = document_root


# ── Lifecycle ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    if _hooks is None:
        configure(cfg.SITE, cfg.load_hooks(), cfg.DOCUMENT_ROOT)
    log.info(
        f"Updater started — site {_site!r}, {len(_hooks)} hook(s), "
        f"providers: {list(list_handlers())}"
    )
    yield
    log.info("Updater shutdown")


app = FastAPI(
    title="Updater Webhook Receiver",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)


# ── Main webhook endpoint ─────────────────────────────────

@app.post("/")
@app.post("/webhook")
async def receive_webhook(request: Request):
    if _hooks is None:
        return PlainTextResponse("Updater not configured.\n", 503, headers=NO_CACHE_HEADERS)

    body = await request.body()
    variables = header_variables(request.headers, _document_root)

    # Commands block: keep them off the event loop
    outcome = await run_in_threadpool(update, _site, _hooks, variables, body)

    headers = {} if outcome.ok else NO_CACHE_HEADERS
    return PlainTextResponse(outcome.body, outcome.status, headers=headers)


# ── Health ────────────────────────────────────────────────

@app.get("/webhook/health")
async def health():
    return {
        "status": "healthy" if _hooks is not None else "unconfigured",
        "site": _site,
        "hooks": len(_hooks or []),
        "providers": list(list_handlers().keys()),
    }
