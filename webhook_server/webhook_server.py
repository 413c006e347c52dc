"""
Development sink for webhook notifications.

Run it next to a network-element process to see what the dispatcher sends:

    python webhook_server/webhook_server.py

and point ``<subsystem>.webhook.url`` at ``http://127.0.0.1:8000/events``.
Set ``WEBHOOK_TOKEN`` (environment or ``.env``) to the token expected in a
``Bearer`` Authorization header; leave it empty to accept any request.
Set ``WEBHOOK_REPLY_STATUS`` to answer with another status, which is handy
for checking how the dispatcher logs a rejected notification.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)

MAX_EVENTS = 500


def create_app(token: str | None = None, reply_status: int | None = None) -> Flask:
    """
    Build the sink application.

    Parameters
    ----------
    token
        Expected Bearer token; None or empty disables the check.
    reply_status
        Status returned from POST /events; 200 by default.
    """
    app = Flask(__name__)
    events: List[Dict[str, Any]] = []
    app.config["EVENTS"] = events

    def require_bearer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not token:
                return fn(*args, **kwargs)

            auth = request.headers.get("Authorization", "")
            if auth.startswith("Bearer "):
                if auth.removeprefix("Bearer ").strip() == token:
                    return fn(*args, **kwargs)
                return jsonify({"error": "invalid token"}), 403

            return jsonify({"error": "unauthorized"}), 401
        return wrapper

    @app.post("/events")
    @require_bearer
    def receive_event():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "expected a JSON object"}), 400

        events.append({
            "received_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "body": data,
        })
        if len(events) > MAX_EVENTS:
            del events[:-MAX_EVENTS]

        logger.info("webhook received: %s", data.get("event", "?"))
        return jsonify({"status": "ok"}), reply_status or 200

    @app.get("/api/events/recent")
    @require_bearer
    def recent_events():
        kind = request.args.get("event")
        recent = [e for e in reversed(events[-200:]) if kind is None or e["body"].get("event") == kind]
        return jsonify({"count": len(events), "events": recent}), 200

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


def main() -> None:
    load_dotenv(Path(__file__).resolve().parent / ".env")
    logging.basicConfig(level=logging.INFO)

    status = os.getenv("WEBHOOK_REPLY_STATUS")
    app = create_app(
        token=os.getenv("WEBHOOK_TOKEN", ""),
        reply_status=int(status) if status else None,
    )
    app.run(host="0.0.0.0", port=int(os.getenv("WEBHOOK_PORT", "8000")), debug=False)


if __name__ == "__main__":
    main()
