#!/usr/bin/env python3
"""
Year Board Server
-----------------
Serves the year kanban calendar over a folder of JSON task files.

Usage:
    yearboard --data-dir ./data
    yearboard --config config.yaml --port 3000

Access:
    Local:  http://localhost:3000

API:
    GET  /?year=YYYY       → board (HTML)
    POST /                 → form field action=reschedule (file, deadline)
                                         or action=additem (program, deadline, name)
                             Returns: { success, error? }
    GET  /api/board?year=  → JSON: { year, buckets, programs, warnings, total }
    GET  /health           → JSON: { status, data_dir }
"""

import argparse
import logging
from pathlib import Path

from flask import Flask, jsonify, render_template, request

from .config import Config
from .render import build_board_view, today_in
from .scanner import scan_board
from .schema import ActionResult
from .store import StoreError, TaskFileStore

logger = logging.getLogger(__name__)

app = Flask(__name__)


# ── Config ───────────────────────────────────────────────────────────────────

def get_config() -> Config:
    """Config installed by main() or a test, else loaded from YAML/env."""
    cfg = app.config.get("YEARBOARD")
    if cfg is None:
        cfg = Config.load()
        app.config["YEARBOARD"] = cfg
    return cfg


def get_store() -> TaskFileStore:
    cfg = get_config()
    return TaskFileStore(cfg.data_dir, new_item_defaults=cfg.new_item_defaults)


def requested_year(cfg: Config) -> int:
    """?year= if it is an integer within bounds, else the current year."""
    current = today_in(cfg.timezone).year
    try:
        year = int(request.args.get("year", current))
    except (TypeError, ValueError):
        return current
    if year < cfg.min_year or year > cfg.max_year:
        return current
    return year


# ── Mutations ────────────────────────────────────────────────────────────────

def _run_action(action, *args):
    try:
        action(*args)
        return ActionResult(success=True), 200
    except StoreError as e:
        logger.warning(f"{action.__name__} rejected: {e}")
        return ActionResult(success=False, error=str(e)), e.status_code
    except OSError as e:
        logger.warning(f"{action.__name__} failed: {e}")
        return ActionResult(success=False, error=f"Filesystem error: {e.strerror or e}"), 500
    except ValueError as e:
        # pathlib refuses some names that pass the store's checks
        logger.warning(f"{action.__name__} rejected: {e}")
        return ActionResult(success=False, error=f"Invalid request: {e}"), 400


def handle_reschedule(form) -> tuple:
    store = get_store()
    return _run_action(store.reschedule, form.get("file", ""), form.get("deadline", ""))


def handle_add_item(form) -> tuple:
    store = get_store()
    return _run_action(
        store.add_item,
        form.get("program", ""),
        form.get("deadline", ""),
        form.get("name", ""),
    )


ACTIONS = {
    "reschedule": handle_reschedule,
    "additem": handle_add_item,
}


# ── Routes ───────────────────────────────────────────────────────────────────

@app.route("/", methods=["GET"])
def index():
    cfg = get_config()
    year = requested_year(cfg)
    scan = scan_board(cfg.data_dir, year, only_this_year=cfg.only_this_year)
    view = build_board_view(
        scan,
        today=today_in(cfg.timezone),
        data_dir_name=Path(cfg.data_dir).name,
    )
    return render_template("board.html", board=view)


@app.route("/", methods=["POST"])
def mutate():
    action = request.form.get("action", "")
    handler = ACTIONS.get(action)
    if handler is None:
        result, code = ActionResult(success=False, error=f"Unknown action: {action}"), 400
    else:
        result, code = handler(request.form)
    return jsonify(result.to_dict()), code


@app.route("/api/board")
def api_board():
    cfg = get_config()
    scan = scan_board(cfg.data_dir, requested_year(cfg), only_this_year=cfg.only_this_year)
    return jsonify(scan.to_dict())


@app.route("/health")
def health():
    cfg = get_config()
    return jsonify({"status": "ok", "data_dir": cfg.data_dir})


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Year Board Server")
    parser.add_argument("--config", help="Path to config.yaml (overrides YEARBOARD_CONFIG env var)")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--data-dir", help="Folder of task .json files (overrides YEARBOARD_DATA_DIR)")
    args = parser.parse_args(argv)

    cfg = Config.load(args.config)
    if args.data_dir:
        cfg.data_dir = str(Path(args.data_dir).expanduser())
    if args.host:
        cfg.host = args.host
    if args.port:
        cfg.port = args.port

    logging.basicConfig(
        level=getattr(logging, str(cfg.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.config["YEARBOARD"] = cfg

    print(f"""
╔═══════════════════════════════════════╗
║  Year Board Server                    ║
╠═══════════════════════════════════════╣
║  URL:  http://{cfg.host}:{cfg.port:<20}║
║  Data: {cfg.data_dir:<31}║
╚═══════════════════════════════════════╝
""")

    app.run(host=cfg.host, port=cfg.port, debug=False)


if __name__ == "__main__":
    main()
