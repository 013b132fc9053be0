"""Application kernel: owns the modules, their commands and their lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .events import EventBus

logger = logging.getLogger("prosze_hackowac")


class CommandHandler(Protocol):
    """Typed callable for command handlers."""

    def __call__(self, payload: Optional[Dict[str, Any]] = None) -> Any: ...


class Module(Protocol):
    """Interface the core expects from modules."""

    name: str

    def attach(self, core: "Core") -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def get_command_map(self) -> Dict[str, CommandHandler]: ...


@dataclass
class CommandResult:
    """Response envelope returned by `Core.dispatch`."""

    command: str
    handled: bool
    payload: Optional[Any] = None


class Core:
    """Registers modules, routes commands to them and starts/stops them in order."""

    def __init__(
        self,
        modules: Optional[Iterable[Module]] = None,
        *,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.event_bus = event_bus or EventBus()
        self._modules: Dict[str, Module] = {}
        self._order: List[str] = []
        self._command_registry: Dict[str, CommandHandler] = {}
        self._started = False
        if modules:
            for module in modules:
                self.register_module(module)

    @property
    def modules(self) -> Dict[str, Module]:
        return dict(self._modules)

    @property
    def started(self) -> bool:
        return self._started

    def register_module(self, module: Module) -> None:
        """Attach a module and bind its command handlers.

        Modules registered after `start()` are started immediately.
        """
        if module.name in self._modules:
            raise ValueError(f"Module '{module.name}' already registered")
        module.attach(self)
        command_map = module.get_command_map()
        for command in command_map:
            if command in self._command_registry:
                raise ValueError(f"Command '{command}' already bound")
        self._command_registry.update(command_map)
        self._modules[module.name] = module
        self._order.append(module.name)
        logger.debug({"evt": "module_registered", "module": module.name, "commands": sorted(command_map)})
        if self._started:
            module.start()

    def start(self) -> None:
        if self._started:
            return
        for name in self._order:
            self._modules[name].start()
            logger.info({"evt": "module_started", "module": name})
        self._started = True

    def stop(self) -> None:
        """Stop modules in reverse registration order.

        A failing module is logged and the remaining modules are still stopped.
        """
        if not self._started:
            return
        self._started = False
        for name in reversed(self._order):
            try:
                self._modules[name].stop()
            except Exception as exc:
                logger.error({"evt": "module_stop_failed", "module": name, "error": str(exc)})
                continue
            logger.info({"evt": "module_stopped", "module": name})

    def dispatch(self, command: str, payload: Optional[Dict[str, Any]] = None) -> CommandResult:
        handler = self._command_registry.get(command)
        if handler is None:
            return CommandResult(command=command, handled=False)
        result = handler(payload or {})
        return CommandResult(command=command, handled=True, payload=result)

    def broadcast(self, event_type: str, payload: Dict[str, Any]) -> None:
        self.event_bus.publish(event_type, payload)


__all__ = ["Core", "CommandResult", "Module", "CommandHandler"]
