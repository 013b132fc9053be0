from __future__ import annotations

import pytest

from modules.pixel import COORD_MAX, Pixel, PixelError, PixelOutOfBounds


def _payload(**overrides):
    base = {"x": 1, "y": 2, "r": 3, "g": 4, "b": 5}
    base.update(overrides)
    return base


def test_from_payload_valid():
    pixel = Pixel.from_payload(_payload())
    assert pixel == Pixel(x=1, y=2, r=3, g=4, b=5)
    assert pixel.to_dict() == {"x": 1, "y": 2, "r": 3, "g": 4, "b": 5}


def test_unknown_fields_are_ignored():
    pixel = Pixel.from_payload(_payload(alpha=7, note="hi"))
    assert pixel.x == 1


def test_limits_are_inclusive():
    pixel = Pixel.from_payload(_payload(x=COORD_MAX, y=0, r=255, g=0, b=255))
    assert pixel.x == COORD_MAX
    assert pixel.r == 255


@pytest.mark.parametrize("key", ["x", "y", "r", "g", "b"])
def test_missing_field(key):
    payload = _payload()
    del payload[key]
    with pytest.raises(PixelError, match=key):
        Pixel.from_payload(payload)


@pytest.mark.parametrize(
    "overrides",
    [
        {"x": -1},
        {"y": COORD_MAX + 1},
        {"r": 256},
        {"g": -1},
        {"b": 1.5},
        {"x": "1"},
        {"r": True},
        {"y": None},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(PixelError):
        Pixel.from_payload(_payload(**overrides))


@pytest.mark.parametrize("payload", [None, [], [1, 2, 3], "pixel", 5])
def test_payload_must_be_object(payload):
    with pytest.raises(PixelError):
        Pixel.from_payload(payload)


def test_out_of_bounds_is_pixel_error():
    exc = PixelOutOfBounds()
    assert isinstance(exc, PixelError)
    assert str(exc) == "pixel outside of drawing area"
