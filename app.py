#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import datetime
import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from flask import Flask, jsonify, render_template, request, send_file
from jinja2 import TemplateNotFound

from client import build_session
from constants import API_BASE, DEFAULT_CATEGORY, DEFAULT_TIMEOUT
from controller import ListController
from details import DetailLoader
from events import (
    CATEGORY_SELECTED,
    FILTER_CHANGED,
    ITEM_SELECTED,
    RELOAD_REQUESTED,
    EventDispatcher,
    UnknownItemError,
    build_dispatcher,
)
from models import CATEGORIES, UnknownCategoryError
from views import render_tabs, rows_to_text, to_csv_bytes

logger = logging.getLogger(__name__)

REQUIRED_TEMPLATES = ("index.html",)


@dataclass
class Browser:
    """One controller/loader pair plus the dispatcher wired to them.

    The state is unsynchronised, so the web server runs single-threaded.
    """

    controller: ListController
    loader: DetailLoader
    dispatcher: EventDispatcher

    def ensure_loaded(self) -> None:
        if self.controller.state == "idle":
            self.dispatcher.dispatch(CATEGORY_SELECTED, category=self.controller.category)

    def view(self) -> Dict[str, Any]:
        ctrl = self.controller
        return {
            "category": ctrl.category,
            "query": ctrl.query,
            "state": ctrl.state,
            "tabs": render_tabs(ctrl.category),
            "rows": ctrl.render(),
        }


def build_browser(
    session: Optional[requests.Session] = None,
    *,
    base_url: str = API_BASE,
    timeout: int = DEFAULT_TIMEOUT,
) -> Browser:
    session = session if session is not None else build_session()
    controller = ListController(session, base_url=base_url, timeout=timeout)
    loader = DetailLoader(session, base_url=base_url, timeout=timeout)
    return Browser(controller, loader, build_dispatcher(controller, loader))


def _check_templates(flask_app: Flask) -> None:
    for name in REQUIRED_TEMPLATES:
        try:
            flask_app.jinja_env.get_template(name)
        except TemplateNotFound as exc:
            raise RuntimeError(f"Required template missing: {name}") from exc


def create_app(browser: Optional[Browser] = None) -> Flask:
    flask_app = Flask(__name__)
    _check_templates(flask_app)
    state = browser if browser is not None else build_browser()
    flask_app.extensions["swapi_browser"] = state

    @flask_app.route("/")
    def index():
        state.ensure_loaded()
        return render_template("index.html", **state.view())

    @flask_app.route("/api/view")
    def view():
        state.ensure_loaded()
        return jsonify(state.view())

    @flask_app.route("/api/category/<category>", methods=["POST"])
    def select_category(category: str):
        try:
            state.dispatcher.dispatch(CATEGORY_SELECTED, category=category)
        except UnknownCategoryError as exc:
            return jsonify({"error": str(exc)}), 404
        return jsonify(state.view())

    @flask_app.route("/api/filter", methods=["POST"])
    def change_filter():
        payload = request.get_json(silent=True) or {}
        query = payload.get("q", request.form.get("q", ""))
        state.dispatcher.dispatch(FILTER_CHANGED, query=str(query or ""))
        return jsonify(state.view())

    @flask_app.route("/api/items/<identifier>/detail", methods=["POST"])
    def item_detail(identifier: str):
        try:
            state.dispatcher.dispatch(ITEM_SELECTED, identifier=identifier)
        except UnknownItemError as exc:
            return jsonify({"error": str(exc)}), 404
        return jsonify(state.view())

    @flask_app.route("/api/reload", methods=["POST"])
    def reload_list():
        state.dispatcher.dispatch(RELOAD_REQUESTED)
        return jsonify(state.view())

    @flask_app.route("/download_csv", methods=["GET"])
    def download_csv():
        csv_bytes = to_csv_bytes(state.controller.render())
        ts = datetime.datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        mem = io.BytesIO(csv_bytes)
        mem.seek(0)
        return send_file(
            mem,
            mimetype="text/csv; charset=utf-8",
            as_attachment=True,
            download_name=f"{state.controller.category}_{ts}.csv",
        )

    return flask_app


# ---------- CLI entry ----------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Browse films, people and planets from the Star Wars API.")
    p.add_argument("--category", "-c", choices=CATEGORIES, help="Category to list (default: films).")
    p.add_argument("--filter", "-f", default="", help="Case-insensitive title filter.")
    p.add_argument("--detail", "-d", action="append", default=[], metavar="UID", help="Load detail for an item (repeatable).")
    p.add_argument("--csv", help="Write the rendered rows to this CSV file.")
    p.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds (default: 10).")
    p.add_argument("--base-url", default=API_BASE, help="Star Wars API base URL.")
    p.add_argument("--serve", action="store_true", help="Run the web interface.")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8080)
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def run_cli(args: argparse.Namespace, session: Optional[requests.Session] = None) -> int:
    own_session = session is None
    session = session if session is not None else build_session()
    try:
        browser = build_browser(session, base_url=args.base_url, timeout=args.timeout)
        dispatch = browser.dispatcher.dispatch
        dispatch(CATEGORY_SELECTED, category=args.category or DEFAULT_CATEGORY)
        if browser.controller.state == "error":
            print(f"[ERROR] {browser.controller.error}", file=sys.stderr)
            return 1

        rows = dispatch(FILTER_CHANGED, query=args.filter)
        for identifier in args.detail:
            try:
                rows = dispatch(ITEM_SELECTED, identifier=identifier)
            except UnknownItemError as exc:
                print(f"[WARN] {exc}", file=sys.stderr)

        sys.stdout.write(rows_to_text(rows))
        if args.csv:
            output = Path(args.csv)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(to_csv_bytes(rows))
            print(f"[OK] Rows written to {output}")
        return 0
    finally:
        if own_session:
            session.close()


def _wants_listing(args: argparse.Namespace) -> bool:
    return bool(args.category or args.filter or args.detail or args.csv)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.serve or not _wants_listing(args):
        logger.info("Serving on http://%s:%d", args.host, args.port)
        create_app(build_browser(base_url=args.base_url, timeout=args.timeout)).run(
            host=args.host,
            port=args.port,
            debug=args.verbose,
            threaded=False,
        )
        return 0
    return run_cli(args)


if __name__ == "__main__":
    raise SystemExit(main())
