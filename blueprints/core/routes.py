from __future__ import annotations
import json, logging
from datetime import datetime, UTC

from flask import g, jsonify, request
from werkzeug.wrappers.response import Response

from . import bp
from .errors import register_error_handlers


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms", "user_id"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _setup_structured_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in root.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    root.setLevel(level)
    app.logger.setLevel(level)


@bp.before_app_request
def _start_timer():
    g._req_start = datetime.now(UTC)


@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.now(UTC) - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    # only read the user if the request already resolved one; never trigger a load here
    user = g.get("_login_user")
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
        "user_id": getattr(user, "id", None),
    }
    logging.getLogger("campus.http").info("request handled", extra=extra)
    return response


@bp.record_once
def _on_register(state):
    app = state.app
    _setup_structured_logging(app)
    register_error_handlers(app)


@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z"),
    })
