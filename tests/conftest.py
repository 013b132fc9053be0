from __future__ import annotations

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core import Core, EventBus  # noqa: E402
from modules.canvas import CanvasModule  # noqa: E402
from web.app import create_app  # noqa: E402

WIDTH, HEIGHT = 4, 3


@pytest.fixture
def make_png(tmp_path):
    """Write an RGB image (height x width x 3) as PNG and return its path."""

    def _make(rgb: np.ndarray, name: str = "image.png") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        assert cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
        return path

    return _make


@pytest.fixture
def canvas_file(make_png):
    rgb = np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)
    rgb[0, 0] = (10, 20, 30)
    rgb[2, 3] = (200, 100, 50)
    return make_png(rgb, "data/image.png")


@pytest.fixture
def canvas(canvas_file):
    module = CanvasModule(canvas_file, cache_ttl=0)
    core = Core(event_bus=EventBus(max_queue=16))
    core.register_module(module)
    core.start()
    yield module
    core.stop()


@pytest.fixture
def core(canvas):
    return canvas.core


@pytest.fixture
def static_dir(tmp_path):
    root = tmp_path / "static"
    root.mkdir()
    (root / "index.html").write_text("<html>canvas</html>", encoding="utf-8")
    (root / "app.js").write_text("console.log('hi');", encoding="utf-8")
    return root


@pytest.fixture
def client(core, static_dir):
    app = create_app(core, static_dir, sse_keepalive=0.05)
    app.config["TESTING"] = True
    return app.test_client()
