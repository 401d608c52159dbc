from __future__ import annotations

import os

from flask import Flask, Response, jsonify, send_from_directory
from werkzeug.utils import secure_filename

from app.outreach import config, telemetry
from app.outreach.healthcheck import run_health_checks
from app.outreach.utils import ensure_dirs, load_json_file, tail_log_lines

app = Flask(__name__)

# Initialise storage paths on import so WSGI entrypoints have the expected
# directories ready. Idempotent.
ensure_dirs()


@app.route("/api/health")
def api_health() -> Response:
    result = run_health_checks(entrypoint="ui")
    status = 200 if result.ok else 503
    return jsonify({"ok": result.ok, "checks": result.checks}), status


@app.route("/api/connections")
def api_connections() -> Response:
    """Return the connections snapshot written by the last scrape."""

    data = load_json_file(config.CONNECTIONS_FILE, default=None)
    if not isinstance(data, list):
        return jsonify({"ok": False, "error": "no_snapshot"}), 404
    return jsonify({"ok": True, "count": len(data), "connections": data})


@app.route("/api/runs")
def api_runs_list() -> Response:
    run_ids = [path.stem[len("run_"):] for path in telemetry.list_run_paths()]
    return jsonify({"ok": True, "count": len(run_ids), "runs": list(reversed(run_ids))})


@app.route("/api/runs/latest")
def api_runs_latest() -> Response:
    payload = telemetry.load_run()
    if payload is None:
        return jsonify({"ok": False, "error": "no runs"}), 404
    return jsonify({"ok": True, "run": payload})


@app.route("/api/runs/<run_id>")
def api_run(run_id: str) -> Response:
    payload = telemetry.load_run(secure_filename(run_id))
    if payload is None:
        return jsonify({"ok": False, "error": "run_not_found", "run_id": run_id}), 404
    return jsonify({"ok": True, "run": payload})


@app.route("/logs/latest")
def logs_latest() -> Response:
    return Response("\n".join(tail_log_lines()) + "\n", mimetype="text/plain")


@app.route("/debug/screenshots/<path:filename>")
def debug_screenshot(filename: str) -> Response:
    return send_from_directory(
        os.path.abspath(config.SCREENSHOT_DIR),
        secure_filename(filename),
        mimetype="image/png",
    )
