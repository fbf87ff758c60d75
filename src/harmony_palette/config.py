"""
config.py.
=========

Does: Build the explicit, immutable service configuration from environment
      variables once at startup; the HTTP boundary and the upstream client
      receive it as an argument instead of reading the environment ad hoc.
Returns: ServiceConfig.
Used by: harmony_palette.__main__, api.app.create_app, palette.assembler.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

__all__ = [
    "ServiceConfig",
    "DEFAULT_PORT",
    "DEFAULT_ALLOWED_ORIGINS",
    "COLORMIND_API_URL",
    "MAX_ATTEMPTS",
]

# ── Defaults ─────────────────────────────────────────────────────────────────
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
DEFAULT_ALLOWED_ORIGINS: tuple[str, ...] = ("https://harmonyc.netlify.app",)
COLORMIND_API_URL = "http://colormind.io/api/"
COLORMIND_MODEL = "default"
COLORMIND_TIMEOUT = 10.0  # seconds, per attempt
MAX_ATTEMPTS = 7

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _get_port(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if not 0 < value < 65536:
        raise ValueError(f"{name} must be a valid TCP port, got {value}")
    return value


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    key = raw.strip().lower()
    if key in _TRUTHY:
        return True
    if key in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0), got {raw!r}")


def _get_origins(env: Mapping[str, str], name: str) -> tuple[str, ...]:
    raw = env.get(name)
    if raw is None:
        return DEFAULT_ALLOWED_ORIGINS
    # trailing slashes never appear in an Origin header
    return tuple(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


@dataclass(frozen=True)
class ServiceConfig:
    """Does: Hold every process-level setting of the palette service.

    Attributes:
        host: Interface uvicorn binds to.
        port: TCP port (env PORT).
        allowed_origins: Browser origins let through the origin gate.
        upstream_url: Colormind endpoint receiving the POST.
        upstream_model: Colormind model name sent in the body.
        upstream_timeout: Per-attempt timeout in seconds.
        max_attempts: Fetch-and-evaluate budget per request.
        retry_on_fetch_error: When True an upstream failure consumes one
            attempt instead of aborting the request.
        log_level: Root logging level name.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    upstream_url: str = COLORMIND_API_URL
    upstream_model: str = COLORMIND_MODEL
    upstream_timeout: float = COLORMIND_TIMEOUT
    max_attempts: int = MAX_ATTEMPTS
    retry_on_fetch_error: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ServiceConfig:
        """Does: Read the environment (or a given mapping) into a ServiceConfig.
        Raises: ValueError naming the variable when a value cannot be parsed.
        """
        env = os.environ if env is None else env
        config = cls(
            host=env.get("HARMONY_HOST", DEFAULT_HOST).strip() or DEFAULT_HOST,
            port=_get_port(env, "PORT", DEFAULT_PORT),
            allowed_origins=_get_origins(env, "HARMONY_ALLOWED_ORIGINS"),
            upstream_url=env.get("COLORMIND_API_URL", COLORMIND_API_URL).strip() or COLORMIND_API_URL,
            upstream_model=env.get("COLORMIND_MODEL", COLORMIND_MODEL).strip() or COLORMIND_MODEL,
            upstream_timeout=_get_float(env, "COLORMIND_TIMEOUT", COLORMIND_TIMEOUT),
            retry_on_fetch_error=_get_bool(env, "HARMONY_RETRY_ON_FETCH_ERROR", False),
            log_level=env.get("HARMONY_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
        logger.debug("Loaded config: %s", config)
        return config
