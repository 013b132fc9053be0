"""Base class for modules plugged into the core."""

from __future__ import annotations

from typing import Any, Dict, Optional

from core.core import CommandHandler, Core


class BaseModule:
    """Default implementation that concrete modules extend."""

    name = "base"

    def __init__(self) -> None:
        self.core: Optional[Core] = None
        self._command_map: Dict[str, CommandHandler] = {}

    # Lifecycle -----------------------------------------------------------
    def attach(self, core: Core) -> None:
        if self.core is not None and self.core is not core:
            raise RuntimeError(f"Module '{self.name}' is already attached to another core")
        self.core = core
        self._command_map = {}
        for command, handler in (self.build_command_map() or {}).items():
            self.register_command(command, handler)

    def start(self) -> None:  # pragma: no cover - default no-op
        pass

    def stop(self) -> None:  # pragma: no cover - default no-op
        pass

    # Command registration ------------------------------------------------
    def register_command(self, name: str, handler: CommandHandler) -> None:
        if name in self._command_map:
            raise ValueError(f"Command '{name}' already registered in module '{self.name}'")
        self._command_map[name] = handler

    def build_command_map(self) -> Dict[str, CommandHandler]:
        """Modules override to declare commands -> handlers."""
        return {}

    def get_command_map(self) -> Dict[str, CommandHandler]:
        return dict(self._command_map)

    # Utilities -----------------------------------------------------------
    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        # Detached modules (e.g. in tests) simply have nobody to tell.
        if self.core is None:
            return
        self.core.broadcast(event_type, payload)
