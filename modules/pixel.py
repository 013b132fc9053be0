#!/usr/bin/env python3
"""Pixel write requests and their validation."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

COORD_MAX = 2**32 - 1
CHANNEL_MAX = 255

_COORD_FIELDS = ("x", "y")
_CHANNEL_FIELDS = ("r", "g", "b")


class PixelError(ValueError):
    """A pixel request that cannot be accepted."""


class PixelOutOfBounds(PixelError):
    def __init__(self, message: str = "pixel outside of drawing area") -> None:
        super().__init__(message)


def _require_int(payload: Mapping[str, Any], key: str, upper: int) -> int:
    if key not in payload:
        raise PixelError(f"missing field '{key}'")
    value = payload[key]
    # bool is an int subclass; JSON true/false is not a coordinate.
    if isinstance(value, bool) or not isinstance(value, int):
        raise PixelError(f"field '{key}' must be an integer")
    if value < 0 or value > upper:
        raise PixelError(f"field '{key}' must be between 0 and {upper}")
    return value


@dataclass(frozen=True)
class Pixel:
    x: int
    y: int
    r: int
    g: int
    b: int

    @classmethod
    def from_payload(cls, payload: Any) -> "Pixel":
        """Build a pixel from decoded JSON. Unknown keys are ignored."""
        if not isinstance(payload, Mapping):
            raise PixelError("pixel payload must be a JSON object")
        values = {key: _require_int(payload, key, COORD_MAX) for key in _COORD_FIELDS}
        values.update({key: _require_int(payload, key, CHANNEL_MAX) for key in _CHANNEL_FIELDS})
        return cls(**values)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


__all__ = ["CHANNEL_MAX", "COORD_MAX", "Pixel", "PixelError", "PixelOutOfBounds"]
