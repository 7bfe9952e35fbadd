# utils/config.py - environment driven defaults (override via env if you prefer)
import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = "30"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ClientSettings:
    base_url: str
    timeout: Optional[float]
    log_level: str


def load_log_level(environ=None) -> str:
    """LOG_LEVEL from the environment; unknown names fall back to INFO."""
    env = os.environ if environ is None else environ
    level = (env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def load_settings(environ=None) -> ClientSettings:
    """Read BASE_URL, TIMEOUT and LOG_LEVEL from the environment.

    An empty TIMEOUT disables the timeout; anything else must parse as a
    non-negative number of seconds.
    """
    env = os.environ if environ is None else environ

    raw_timeout = env.get("TIMEOUT", DEFAULT_TIMEOUT).strip()
    timeout = None
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"TIMEOUT must be a number of seconds, got {raw_timeout!r}")
        if timeout < 0:
            raise ValueError(f"TIMEOUT must not be negative, got {raw_timeout!r}")

    return ClientSettings(
        base_url=env.get("BASE_URL", DEFAULT_BASE_URL),
        timeout=timeout,
        log_level=load_log_level(env),
    )
