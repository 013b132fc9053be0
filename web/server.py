#!/usr/bin/env python
"""Threaded HTTP server that runs until SIGTERM/SIGINT."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Iterable

from flask import Flask
from werkzeug.serving import make_server

logger = logging.getLogger("prosze_hackowac")

STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class CanvasServer:
    def __init__(self, app: Flask, host: str, port: int) -> None:
        self.host = host
        self._server = make_server(host, port, app, threaded=True)
        self._stop = threading.Event()

    @property
    def port(self) -> int:
        return self._server.server_port

    def request_stop(self, signum=None, frame=None) -> None:
        if signum is not None:
            logger.info({"evt": "signal", "signal": signal.Signals(signum).name})
        self._stop.set()

    def _install_handlers(self, signals: Iterable[signal.Signals]):
        # signal.signal only works from the main thread.
        if threading.current_thread() is not threading.main_thread():
            return {}
        previous = {}
        for signum in signals:
            previous[signum] = signal.signal(signum, self.request_stop)
        return previous

    def run(self, signals: Iterable[signal.Signals] = STOP_SIGNALS) -> None:
        """Serve until a stop signal (or `request_stop`), then close the listener."""
        previous = self._install_handlers(signals)
        serve_thread = threading.Thread(target=self._server.serve_forever, name="http_server", daemon=True)
        serve_thread.start()
        logger.info({"evt": "http_server", "status": "listening", "host": self.host, "port": self.port})
        try:
            while not self._stop.wait(0.5):
                pass
        finally:
            self._server.shutdown()
            serve_thread.join()
            self._server.server_close()
            for signum, handler in previous.items():
                signal.signal(signum, handler)
            logger.info({"evt": "http_server", "status": "stopped"})


__all__ = ["CanvasServer", "STOP_SIGNALS"]
