#!/usr/bin/env python3
"""Project entry point. Loads the canvas, then serves it until terminated."""

from __future__ import annotations

import logging
import sys

from core import ConfigError, Core, EventBus, Settings
from modules.canvas import CanvasLoadError, CanvasModule
from web.app import create_app
from web.server import CanvasServer

logger = logging.getLogger("prosze_hackowac")


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s %(levelname)s %(message)s',
    )


def build_core(settings: Settings) -> Core:
    """Register the canvas module with a fresh core."""
    core = Core(event_bus=EventBus(settings.event_queue_size))
    core.register_module(
        CanvasModule(
            settings.canvas_path,
            cache_ttl=settings.cache_ttl,
            blank_size=settings.blank_size,
        )
    )
    return core


def main() -> int:
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        configure_logging("INFO")
        logger.error({"evt": "config_error", "error": str(exc)})
        return 1

    configure_logging(settings.log_level)
    logger.info({"evt": "startup", "log_level": settings.log_level, "canvas": str(settings.canvas_path)})

    core = build_core(settings)
    try:
        core.start()
    except CanvasLoadError as exc:
        logger.error({"evt": "canvas_load_error", "error": str(exc)})
        return 1

    try:
        server = CanvasServer(create_app(core, settings.static_dir), settings.host, settings.port)
        server.run()
    except OSError as exc:
        logger.error({"evt": "http_server_error", "error": str(exc)})
        return 1
    finally:
        core.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
