#!/usr/bin/env python3
"""Environment-driven settings for the canvas server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple


class ConfigError(ValueError):
    """Raised when an environment value cannot be used at all."""


def _read_env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _read_env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    return str(raw).strip()


def parse_size(raw: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a positive ``(width, height)`` pair."""
    parts = raw.lower().replace(" ", "").split("x")
    if len(parts) != 2:
        raise ConfigError(f"Invalid canvas size '{raw}', expected WIDTHxHEIGHT")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ConfigError(f"Invalid canvas size '{raw}', expected WIDTHxHEIGHT") from exc
    if width <= 0 or height <= 0:
        raise ConfigError(f"Canvas size must be positive, got '{raw}'")
    return width, height


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 80
    static_dir: Path = Path("static")
    canvas_path: Path = Path("data/image.png")
    cache_ttl: float = 0.1
    event_queue_size: int = 256
    blank_size: Optional[Tuple[int, int]] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        defaults = cls()

        port = _read_env_int(env, "HTTP_PORT", defaults.port)
        if not 0 <= port <= 65535:
            port = defaults.port

        ttl_ms = _read_env_int(env, "IMAGE_CACHE_TTL_MS", int(defaults.cache_ttl * 1000))
        queue_size = _read_env_int(env, "EVENT_QUEUE_SIZE", defaults.event_queue_size)

        blank_raw = env.get("CANVAS_BLANK_SIZE")
        blank_size = parse_size(blank_raw) if blank_raw and blank_raw.strip() else None

        return cls(
            host=_read_env_str(env, "HTTP_HOST", defaults.host),
            port=port,
            static_dir=Path(_read_env_str(env, "STATIC_DIR", str(defaults.static_dir))),
            canvas_path=Path(_read_env_str(env, "CANVAS_PATH", str(defaults.canvas_path))),
            cache_ttl=max(0, ttl_ms) / 1000.0,
            event_queue_size=max(1, queue_size),
            blank_size=blank_size,
            log_level=_read_env_str(env, "LOG_LEVEL", defaults.log_level).upper(),
        )


__all__ = ["ConfigError", "Settings", "parse_size"]
