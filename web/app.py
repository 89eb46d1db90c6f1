from __future__ import annotations

from flask import Flask, jsonify, request, render_template
import sys
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tictactoe import JsonFileStore, MemoryStore, Session, Timing

SETTING_KEYS = ("theme", "difficulty", "symbol", "mode")


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_mapping(
        PREFERENCES_PATH=None,
        AI_REPLY_DELAY=0.5,
        AI_OPENING_DELAY=0.45,
        AUTOPLAY_DELAY=0.8,
        AUTO_RESTART_DELAY=3.0,
    )
    app.config.from_prefixed_env()
    if test_config is not None:
        app.config.from_mapping(test_config)

    prefs_path = app.config["PREFERENCES_PATH"]
    store = JsonFileStore(prefs_path) if prefs_path else MemoryStore()
    timing = Timing(
        ai_reply=float(app.config["AI_REPLY_DELAY"]),
        ai_opening=float(app.config["AI_OPENING_DELAY"]),
        autoplay=float(app.config["AUTOPLAY_DELAY"]),
        auto_restart=float(app.config["AUTO_RESTART_DELAY"]),
    )
    session = Session(store=store, timing=timing)
    # The dev server is threaded; the session expects one caller at a time
    lock = threading.Lock()

    def payload_dict() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def respond(status: int = 200, error: Optional[str] = None):
        session.tick()
        snap = session.snapshot()
        if error is not None:
            snap["error"] = error
        return jsonify(snap), status

    @app.get("/")
    def index():
        return render_template("index.html")

    @app.get("/api/state")
    def api_state():
        with lock:
            return respond()

    @app.get("/api/games")
    def api_games():
        with lock:
            session.tick()
            return jsonify({"games": session.game_records()})

    @app.post("/api/move")
    def api_move():
        payload = payload_dict()
        index = payload.get("index")
        with lock:
            session.tick()
            if not isinstance(index, int) or isinstance(index, bool):
                return respond(400, "Missing or non-integer cell index")
            if not session.select_cell(index):
                app.logger.debug("Move at %s rejected", index)
                return respond(400, f"Move at cell {index} is not allowed now")
            return respond()

    @app.post("/api/reset")
    def api_reset():
        with lock:
            session.reset_round()
            return respond()

    @app.post("/api/reset-scores")
    def api_reset_scores():
        with lock:
            session.reset_scores()
            return respond()

    @app.post("/api/undo")
    def api_undo():
        with lock:
            session.tick()
            if not session.undo():
                return respond(400, "Nothing to undo right now")
            return respond()

    @app.post("/api/settings")
    def api_settings():
        payload = payload_dict()
        changes = {key: payload[key] for key in SETTING_KEYS if payload.get(key) is not None}
        with lock:
            try:
                session.configure(**changes)
            except ValueError as exc:
                return respond(400, f"Invalid setting: {exc}")
            app.logger.info("Settings changed: %s", changes)
            return respond()

    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
