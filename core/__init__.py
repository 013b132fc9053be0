"""Core package exposing the coordinator, event bus and settings."""

from .core import CommandResult, Core
from .events import EventBus
from .settings import ConfigError, Settings

__all__ = ["CommandResult", "ConfigError", "Core", "EventBus", "Settings"]
