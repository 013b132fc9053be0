#!/usr/bin/env python
"""Flask application exposing the canvas and the bundled static assets."""

from __future__ import annotations

import json
import logging
import queue
import time
from pathlib import Path

from flask import Flask, Response, g, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from core.core import Core
from modules.canvas import CanvasError
from modules.pixel import PixelError

logger = logging.getLogger("prosze_hackowac")

default_index = "index.html"


def _event_stream(core: Core, keepalive: float):
    """Server-sent events generator for canvas updates."""
    listener = core.event_bus.listen()
    try:
        yield ": connected\n\n"
        while True:
            try:
                message = listener.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            event_type = message.get("type", "message")
            payload = message.get("payload", {})
            yield f"event: {event_type}\ndata: {json.dumps(payload)}\n\n"
    finally:
        core.event_bus.remove(listener)


def create_app(core: Core, static_dir: Path, *, sse_keepalive: float = 15.0) -> Flask:
    app = Flask(__name__, static_folder=None)
    CORS(app, supports_credentials=True)
    static_root = Path(static_dir).resolve()
    if not (static_root / default_index).is_file():
        logger.warning({"evt": "static_index_missing", "path": str(static_root / default_index)})

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        logger.info({
            "evt": "http_request",
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
        })
        return response

    @app.route('/')
    def index():
        return send_from_directory(static_root, default_index)

    @app.route('/image')
    def image():
        """Current canvas as PNG. Put this in the src attribute of an img tag."""
        data = core.dispatch("canvas.snapshot").payload
        response = Response(data, mimetype="image/png")
        response.headers["Cache-Control"] = "no-store"
        return response

    @app.route('/pixel', methods=['POST'])
    def pixel():
        try:
            payload = request.get_json(force=True)
        except BadRequest:
            return jsonify({"error": "request body must be JSON"}), 400
        if not isinstance(payload, dict):
            return jsonify({"error": "pixel payload must be a JSON object"}), 400
        try:
            core.dispatch("canvas.set_pixel", payload)
        except PixelError as exc:
            logger.debug({"evt": "pixel_rejected", "error": str(exc)})
            return jsonify({"error": str(exc)}), 400
        except CanvasError as exc:
            logger.warning({"evt": "pixel_unavailable", "error": str(exc)})
            return jsonify({"error": str(exc)}), 503
        return Response(status=204)

    @app.route('/api/events')
    def events():
        return Response(
            _event_stream(core, sse_keepalive),
            mimetype='text/event-stream',
            headers={"Cache-Control": "no-store"},
        )

    @app.route('/healthz')
    def healthz():
        info = core.dispatch("canvas.info").payload
        return jsonify({"status": "ok", **info})

    @app.route('/<path:filename>')
    def static_file(filename):
        return send_from_directory(static_root, filename)

    return app


__all__ = ["create_app"]
