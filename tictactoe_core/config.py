from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

FIRST_PLAYER_POLICIES = ("alternate", "human", "computer")


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from TTT_* environment variables."""
    first_player: str = "alternate"
    think_delay_ms: int = 500
    max_sessions: int = 1000
    log_level: str = "INFO"
    port: int = 5000
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        first = env.get("TTT_FIRST_PLAYER", "alternate").strip().lower()
        if first not in FIRST_PLAYER_POLICIES:
            raise ValueError(
                f"TTT_FIRST_PLAYER must be one of {', '.join(FIRST_PLAYER_POLICIES)}, got {first!r}"
            )
        level = env.get("TTT_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"TTT_LOG_LEVEL is not a logging level: {level!r}")
        return cls(
            first_player=first,
            think_delay_ms=_int_env(env, "TTT_THINK_DELAY_MS", 500),
            max_sessions=_int_env(env, "TTT_MAX_SESSIONS", 1000, minimum=1),
            log_level=level,
            port=_int_env(env, "PORT", 5000, minimum=1),
            debug=_truthy(env.get("FLASK_DEBUG", env.get("DEBUG", "0"))),
        )


def configure_logging(level: str = "INFO") -> None:
    """Installs a root handler for entry points. Library code never calls this."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
