# marketsim/app.py
from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify, make_response, request
from flask_cors import CORS

from .auth import AuthError, MockAuthenticator, RemoteAuthenticator
from .catalog import catalog_to_dict, load_catalog
from .choice_resolver import resolve
from .config import Settings, load_settings
from .turn_service import (
    GradesService,
    MockGradesService,
    MockTurnSimulator,
    PayloadError,
    RemoteGradesService,
    RemoteTurnSimulator,
    TurnSimulator,
)

logger = logging.getLogger("MarketSimAPI")

BUILD = "marketsim-backend-v1"


def _nocache(resp: Response) -> Response:
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    resp.headers["Expires"] = "0"
    return resp


def _json(data: Any, code: int = 200) -> Response:
    return _nocache(make_response(jsonify(data), code))


def build_services(settings: Settings) -> Tuple[TurnSimulator, GradesService, Any]:
    """Mock or remote providers, picked from settings."""
    if settings.use_mock:
        rng = random.Random(settings.seed)
        return (
            MockTurnSimulator(rng=rng, latency=settings.mock_latency),
            MockGradesService(latency=settings.mock_latency),
            MockAuthenticator(),
        )
    return (
        RemoteTurnSimulator(settings.base_url, timeout=settings.timeout),
        RemoteGradesService(settings.base_url, timeout=settings.timeout),
        RemoteAuthenticator(settings.base_url, timeout=settings.timeout),
    )


def create_app(settings: Optional[Settings] = None,
               simulator: Optional[TurnSimulator] = None,
               grades: Optional[GradesService] = None,
               authenticator: Any = None) -> Flask:
    settings = settings or load_settings()
    default_sim, default_grades, default_auth = build_services(settings)
    simulator = simulator or default_sim
    grades = grades or default_grades
    authenticator = authenticator or default_auth
    catalog = load_catalog(settings.catalog_path)
    catalog_json = catalog_to_dict(catalog)

    app = Flask(__name__, static_folder=None)
    CORS(app)
    app.json.ensure_ascii = False
    # category order is part of the catalog
    app.json.sort_keys = False
    app.config["MARKETSIM_SETTINGS"] = settings
    logger.info("MarketSim API ready (mode=%s, options=%d)", settings.mode,
                sum(len(v) for v in catalog_json.values()))

    # ---------- Health ----------
    @app.get("/health")
    def health():
        return _json({
            "ok": True,
            "build": BUILD,
            "mode": settings.mode,
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        })

    # ---------- Catalog ----------
    @app.get("/api/options")
    def options():
        return _json(catalog_json)

    # ---------- Turns ----------
    @app.post("/api/simulate")
    def simulate():
        """
        Accepts the browser's turn payload:
          { turn, maxTurns, stats, choice, options, history }
        Returns:
          200 { stats, done, event, rivalMove, chosenOption, explanation }
        """
        payload: Dict[str, Any] = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return _json({"ok": False, "reason": "payload must be an object"}, 400)
        if not payload.get("options"):
            payload = {**payload, "options": catalog_json}
        try:
            out = simulator.simulate(payload)
        except PayloadError as e:
            return _json({"ok": False, "reason": str(e)}, 400)
        return _json(out)

    @app.post("/api/resolve")
    def resolve_choice():
        payload = request.get_json(silent=True) or {}
        choice = payload.get("choice") if isinstance(payload, dict) else None
        if not isinstance(choice, str):
            return _json({"ok": False, "reason": "choice must be a string"}, 400)
        options = payload.get("options") or catalog_json
        return _json(resolve(choice, options).to_dict())

    # ---------- Grades ----------
    @app.get("/api/grades")
    def grades_report():
        report = grades.fetch()
        if report is None:
            return _json({"ok": False, "reason": "grades unavailable"}, 502)
        return _json(report)

    # ---------- Auth (demo) ----------
    @app.post("/api/login")
    def login():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            payload = {}
        try:
            user = authenticator.login(
                str(payload.get("email") or ""),
                str(payload.get("password") or ""),
                bool(payload.get("rememberMe")),
            )
        except AuthError as e:
            return _json({"ok": False, "reason": str(e)}, 401)
        return _json(user)

    return app
