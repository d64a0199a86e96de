from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional


ROOT = Path(__file__).resolve().parents[1]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the app configuration from the environment.

    Values passed in `overrides` win over the environment (tests use this to
    point the app at a temporary data directory).
    """
    config: Dict[str, Any] = {
        "DATA_DIR": os.environ.get("APP_DATA_DIR") or str(ROOT / "data"),
        "SECRET_KEY": os.environ.get("APP_SECRET_KEY", "dev-insecure-secret"),
        "ADMIN_API_KEY": os.environ.get("ADMIN_API_KEY") or "admin-demo-key",
        "RATE_LIMIT_MAX_REQUESTS": _env_int("RATE_LIMIT_MAX_REQUESTS", 100),
        "RATE_LIMIT_WINDOW_SECONDS": _env_int("RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        "FLASH_SALE_SWEEP_SECONDS": _env_int("FLASH_SALE_SWEEP_SECONDS", 60 * 60),
        "FLASH_SALE_SWEEPER_ENABLED": _env_bool("FLASH_SALE_SWEEPER_ENABLED", False),
        "BANNER_PRESERVE_ON_ERROR": _env_bool("BANNER_PRESERVE_ON_ERROR", False),
        "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "PORT": _env_int("PORT", 5000),
    }
    if overrides:
        config.update(overrides)
    return config
