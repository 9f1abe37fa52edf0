"""
12-Factor configuration helper.

Defaults for the body parser are read from environment variables so a
deployment can tune them without touching code.
"""

from __future__ import annotations

import os


def env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def env_bool(key: str, default: bool = False) -> bool:
    return os.environ.get(key, str(default)).lower() in ("1", "true", "yes")


# ── Parser defaults ───────────────────────────────────────────────────

JSON_BODY_LIMIT = env("JSON_BODY_LIMIT", "100kb")
JSON_BODY_INFLATE = env_bool("JSON_BODY_INFLATE", True)
JSON_BODY_STRICT = env_bool("JSON_BODY_STRICT", True)

# ── Logging ───────────────────────────────────────────────────────────

LOG_LEVEL = env("LOG_LEVEL", "INFO")
LOG_FORMAT = env("LOG_FORMAT", "json")
