#!/usr/bin/env python3
# coding: utf-8
"""Shared pixel canvas: in-memory image, PNG snapshot cache and the pixel writer thread."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import cv2
import numpy as np

from core.core import CommandHandler
from .base import BaseModule
from .pixel import Pixel, PixelOutOfBounds

logger = logging.getLogger("prosze_hackowac")

BLANK_COLOR = (255, 255, 255)
_STOP = object()


class CanvasError(RuntimeError):
    pass


class CanvasLoadError(CanvasError):
    pass


class EncodedImageCache:
    """Holds the most recent PNG encoding for ``ttl`` seconds."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Optional[bytes] = None
        self._updated_at = 0.0

    def get(self) -> Optional[bytes]:
        with self._lock:
            if self._data is None:
                return None
            if self._clock() - self._updated_at >= self.ttl:
                return None
            return self._data

    def put(self, data: bytes) -> None:
        with self._lock:
            self._data = data
            self._updated_at = self._clock()

    def clear(self) -> None:
        with self._lock:
            self._data = None


def load_canvas(path: Path, blank_size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """Read ``path`` as an 8-bit, 3-channel image (OpenCV channel order).

    A missing file is replaced by a blank canvas when ``blank_size`` is given.
    """
    if not path.exists():
        if blank_size is None:
            raise CanvasLoadError(f"Canvas image not found: {path}")
        width, height = blank_size
        logger.warning({"evt": "canvas_blank", "path": str(path), "width": width, "height": height})
        return np.full((height, width, 3), BLANK_COLOR, dtype=np.uint8)
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise CanvasLoadError(f"Canvas image could not be decoded: {path}")
    return image


class CanvasModule(BaseModule):
    """Owns the canvas. Requests enqueue pixels; a single thread applies them."""

    name = "canvas"

    def __init__(
        self,
        path: Path,
        *,
        cache_ttl: float = 0.1,
        blank_size: Optional[Tuple[int, int]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.blank_size = blank_size
        self._image: Optional[np.ndarray] = None
        self._lock = threading.Lock()
        self._cache = EncodedImageCache(cache_ttl, clock=clock)
        self._queue: queue.Queue = queue.Queue()
        self._writer: Optional[threading.Thread] = None
        self._accepting = threading.Event()
        # Orders submissions against stop(): nothing is queued after _STOP.
        self._submit_lock = threading.Lock()

    # Lifecycle -----------------------------------------------------------
    def load(self) -> None:
        image = load_canvas(self.path, self.blank_size)
        with self._lock:
            self._image = image
        self._cache.clear()
        height, width = image.shape[:2]
        logger.info({"evt": "canvas_loaded", "path": str(self.path), "width": width, "height": height})

    def start(self) -> None:
        if self._writer is not None:
            return
        if self._image is None:
            self.load()
        self._writer = threading.Thread(target=self._run_writer, name="canvas_writer", daemon=True)
        self._writer.start()
        self._accepting.set()

    def stop(self) -> None:
        """Apply everything already queued, then persist the canvas."""
        if self._writer is None:
            return
        with self._submit_lock:
            self._accepting.clear()
            self._queue.put(_STOP)
        self._writer.join()
        self._writer = None
        self.save()

    @property
    def running(self) -> bool:
        return self._accepting.is_set()

    # Commands ------------------------------------------------------------
    def build_command_map(self) -> Dict[str, CommandHandler]:
        return {
            "canvas.set_pixel": lambda payload=None: self.set_pixel(Pixel.from_payload(payload)).to_dict(),
            "canvas.snapshot": lambda payload=None: self.snapshot_png(),
            "canvas.info": lambda payload=None: self.info(),
            "canvas.save": lambda payload=None: {"path": str(self.save())},
        }

    # Canvas access -------------------------------------------------------
    @property
    def size(self) -> Tuple[int, int]:
        image = self._require_image()
        height, width = image.shape[:2]
        return width, height

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def info(self) -> Dict[str, Any]:
        width, height = self.size
        return {"width": width, "height": height, "pending": self.pending}

    def set_pixel(self, pixel: Pixel) -> Pixel:
        """Queue ``pixel`` for the writer. Returns as soon as it is queued."""
        width, height = self.size
        if pixel.x >= width or pixel.y >= height:
            raise PixelOutOfBounds()
        with self._submit_lock:
            if not self._accepting.is_set():
                raise CanvasError("Canvas is not accepting pixels")
            self._queue.put(pixel)
        return pixel

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        with self._lock:
            image = self._require_image()
            b, g, r = (int(v) for v in image[y, x])
        return r, g, b

    def flush(self) -> None:
        """Block until every queued pixel has been applied."""
        self._queue.join()

    def snapshot_png(self) -> bytes:
        cached = self._cache.get()
        if cached is not None:
            return cached
        with self._lock:
            frame = self._require_image().copy()
        ok, encoded = cv2.imencode(".png", frame)
        if not ok:
            raise CanvasError("Failed to encode canvas as PNG")
        data = encoded.tobytes()
        self._cache.put(data)
        return data

    def save(self, path: Optional[Path] = None) -> Path:
        target = Path(path) if path is not None else self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp.png")
        with self._lock:
            frame = self._require_image().copy()
        if not cv2.imwrite(str(tmp), frame):
            raise CanvasError(f"Failed to write canvas to {tmp}")
        os.replace(tmp, target)
        logger.info({"evt": "canvas_saved", "path": str(target)})
        return target

    # Writer --------------------------------------------------------------
    def _require_image(self) -> np.ndarray:
        if self._image is None:
            raise CanvasError("Canvas is not loaded")
        return self._image

    def _run_writer(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                self._queue.task_done()
                return
            applied = []
            stop = False
            # Hold the lock across the whole backlog so bursts land in one go.
            with self._lock:
                image = self._require_image()
                while True:
                    image[item.y, item.x] = (item.b, item.g, item.r)
                    applied.append(item)
                    self._queue.task_done()
                    try:
                        item = self._queue.get_nowait()
                    except queue.Empty:
                        break
                    if item is _STOP:
                        self._queue.task_done()
                        stop = True
                        break
            logger.debug({"evt": "pixels_applied", "count": len(applied)})
            for pixel in applied:
                self.publish("pixel", pixel.to_dict())
            if stop:
                return


__all__ = ["CanvasError", "CanvasLoadError", "CanvasModule", "EncodedImageCache", "load_canvas"]
