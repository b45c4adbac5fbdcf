"""
Web UI — Flask front-end for the weather lookup.

Provides:
  - GET  /              city entry form
  - POST /              submit the form (validates, stages the city)
  - GET  /weather       result page, fetches on every visit
  - POST /weather/back  back to the entry form
  - POST /api/weather   JSON: submit + fetch in one call

The city travels between the two pages in the signed cookie session,
never in the URL.

Usage:
  python web.py
"""

import asyncio
import logging
from typing import Optional

from flask import Flask, render_template, request, jsonify, redirect, url_for, session

from config import WEB_HOST, WEB_PORT, WEB_SECRET, LOG_LEVEL
from models import ViewState
from router import Router
from views import ENTRY, RESULTS, Fetch

log = logging.getLogger(__name__)

ENDPOINTS = {ENTRY: "entry", RESULTS: "results"}


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.run_until_complete(loop.shutdown_default_executor())
        loop.close()


def create_app(fetch: Optional[Fetch] = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = WEB_SECRET

    def _router() -> Router:
        return Router(session, fetch)

    def _follow(router: Router):
        return redirect(url_for(ENDPOINTS[router.last_transition.route]))

    # ── Pages ───────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def entry():
        return render_template("entry.html", error="", value="")

    @app.route("/", methods=["POST"])
    def submit():
        router = _router()
        raw = request.form.get("city", "")
        if not router.entry.submit(raw):
            return render_template("entry.html", error=router.entry.error, value=raw)
        return _follow(router)

    @app.route("/weather", methods=["GET"])
    def results():
        router = _router()
        state = _run(router.open_results())
        if state is ViewState.REDIRECTING:
            return _follow(router)
        return render_template("weather.html", view=router.result)

    @app.route("/weather/back", methods=["POST"])
    def back():
        router = _router()
        router.back()
        return _follow(router)

    # ── API ─────────────────────────────────────────────────

    @app.route("/api/weather", methods=["POST"])
    def api_weather():
        data = request.get_json(silent=True) or {}
        city = data.get("city") if isinstance(data, dict) else None
        router = _router()
        state = _run(router.submit(city if isinstance(city, str) else ""))
        if state is None:
            return jsonify({"error": router.entry.error}), 400
        return jsonify(router.result.to_dict())

    return app


def main():
    logging.basicConfig(
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        level=LOG_LEVEL,
    )
    app = create_app()
    log.info(f"Web UI: http://{WEB_HOST}:{WEB_PORT}")
    app.run(host=WEB_HOST, port=WEB_PORT, use_reloader=False)


if __name__ == "__main__":
    main()
