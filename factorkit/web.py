from __future__ import annotations
import time
from typing import Optional

from flask import Flask, current_app, jsonify, request

from .config import Settings
from .errors import FactorizationCancelled, InvalidInput
from .factorize import analyze
from .jobs_api import jobs_bp
from .numtext import int_text
from .primality import is_probable_prime
from .validate import parse_positive_int


def _params() -> dict:
    if request.method != "POST":
        return request.args.to_dict()
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("JSON body must be an object")
    return data


def _rounds(data: dict, settings: Settings) -> int:
    try:
        rounds = int(data.get("rounds", settings.rounds))
    except (TypeError, ValueError):
        raise InvalidInput("rounds must be an integer")
    if rounds < 1 or rounds > 256:
        raise InvalidInput("rounds must be between 1 and 256")
    return rounds


def api_is_prime():
    settings: Settings = current_app.config["FACTORKIT"]
    data = _params()
    n = parse_positive_int(data.get("n", ""), max_bits=settings.max_bits)
    verdict = is_probable_prime(n, rounds=_rounds(data, settings))
    return jsonify(n=int_text(n), bits=n.bit_length(), is_probable_prime=verdict)


def api_factor():
    settings: Settings = current_app.config["FACTORKIT"]
    data = _params()
    n = parse_positive_int(data.get("n", ""), max_bits=settings.max_bits)
    t0 = time.perf_counter()
    out = analyze(n, rounds=_rounds(data, settings),
                  max_attempts=settings.rho_attempts, max_splits=settings.max_splits)
    ms = int((time.perf_counter() - t0) * 1000)
    if out["status"] == "incomplete":
        current_app.logger.warning("incomplete factorization of %s: unsplit %s", out["n"], out["unsplit"])
    resp = jsonify(out)
    resp.headers["X-Compute-ms"] = str(ms)
    return resp


def api_health():
    settings: Settings = current_app.config["FACTORKIT"]
    return jsonify(ok=True, max_bits=settings.max_bits, time=int(time.time()))


def create_app(settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    app.config["FACTORKIT"] = settings or Settings.from_env()

    app.add_url_rule("/api/is_prime", view_func=api_is_prime, methods=["GET", "POST"])
    app.add_url_rule("/api/factor", view_func=api_factor, methods=["GET", "POST"])
    app.add_url_rule("/api/health", view_func=api_health, methods=["GET"])
    app.register_blueprint(jobs_bp)

    @app.errorhandler(InvalidInput)
    def _bad_input(e):
        return jsonify(error=str(e)), 400

    @app.errorhandler(FactorizationCancelled)
    def _cancelled(e):
        return jsonify(error=str(e)), 503

    return app
