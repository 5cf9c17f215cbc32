from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if app.config["DEBUG"]:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logger.info(
        "settings=%s integrity=%s fallback=%s",
        settings_module,
        getattr(settings, "INTEGRITY_ALGORITHM", "checksum"),
        "on" if getattr(settings, "FALLBACK_LOCATION", None) else "off",
    )

    CORS(app)
    container = build_container(settings=settings)
    app.extensions["class_attendance"] = container

    @app.route("/api/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"}), 200

    register_sessions(app, container)
    register_attendance(app, container)

    return app
