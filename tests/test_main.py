from __future__ import annotations

import main
from modules.canvas import CanvasModule
from core.settings import Settings


def test_build_core_registers_canvas(canvas_file):
    settings = Settings(canvas_path=canvas_file, cache_ttl=0.5, event_queue_size=4)
    core = main.build_core(settings)
    module = core.modules["canvas"]
    assert isinstance(module, CanvasModule)
    assert module.path == canvas_file
    assert module._cache.ttl == 0.5
    assert not core.started


def test_main_fails_on_missing_canvas(monkeypatch, tmp_path):
    monkeypatch.setenv("CANVAS_PATH", str(tmp_path / "missing.png"))
    monkeypatch.delenv("CANVAS_BLANK_SIZE", raising=False)
    assert main.main() == 1


def test_main_fails_on_bad_blank_size(monkeypatch):
    monkeypatch.setenv("CANVAS_BLANK_SIZE", "big")
    assert main.main() == 1


def test_main_serves_and_saves_on_stop(monkeypatch, canvas_file, static_dir):
    monkeypatch.setenv("CANVAS_PATH", str(canvas_file))
    monkeypatch.setenv("STATIC_DIR", str(static_dir))
    monkeypatch.setenv("HTTP_HOST", "127.0.0.1")
    monkeypatch.setenv("HTTP_PORT", "0")

    def fake_run(self, signals=()):
        self.request_stop()
        self._server.server_close()

    monkeypatch.setattr(main.CanvasServer, "run", fake_run)
    canvas_file.unlink()
    monkeypatch.setenv("CANVAS_BLANK_SIZE", "3x3")
    assert main.main() == 0
    assert canvas_file.exists()
