"""
Updater Configuration — Environment-based settings.

Hooks live in a JSON file holding one descriptor object or a list of them
(see updater.hook for the keys).
"""

import json
import os
from pathlib import Path
from typing import List, Optional, Union

from .dispatcher import build_hooks
from .errors import ConfigError
from .hook import Hook

# ── Server ────────────────────────────────────────────────
BIND_HOST = os.environ.get("UPDATER_BIND_HOST", "127.0.0.1")
PORT = int(os.environ.get("UPDATER_PORT", "3849"))

# ── Site ──────────────────────────────────────────────────
# Expected "Host" header of deliveries
SITE = os.environ.get("UPDATER_SITE", "")
# Hooks without "in" run in the parent of this directory
DOCUMENT_ROOT = os.environ.get("UPDATER_DOCUMENT_ROOT", "")

# ── Hooks ─────────────────────────────────────────────────
STATE_DIR = Path.home() / ".updater"
HOOKS_FILE = Path(os.environ.get("UPDATER_HOOKS_FILE", str(STATE_DIR / "hooks.json")))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL = os.environ.get("UPDATER_LOG_LEVEL", "INFO").upper()


def load_hooks(path: Optional[Union[str, Path]] = None) -> List[Hook]:
    """Read and validate the hook descriptors stored in `path`."""
    path = Path(path) if path else HOOKS_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"hooks file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot read hooks file {path}: {exc}") from exc

    if not isinstance(data, (dict, list)):
        raise ConfigError(f"{path}: expected an object or a list of objects")
    return build_hooks(data)
