from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.validators import require_number
from ..container import Container
from ..core.exceptions import LocationAcquisitionError, ValidationError
from ..location.acquisition import SubmittedLocationProvider

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["GET"], endpoint="list_sessions")
    def list_sessions():
        sessions = container.session_service.list_sessions()
        return jsonify([s.to_payload() for s in sessions]), 200

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="get_session")
    def get_session(session_id: str):
        session = container.session_service.get_session(session_id)
        if not session:
            return jsonify({"success": False, "message": "Session not found"}), 404
        return jsonify(session.to_payload()), 200

    @app.route("/api/sessions", methods=["POST"], endpoint="create_session")
    def create_session():
        """Lecturer opens a session at their current location and gets the QR text."""
        try:
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            location = container.location_acquirer.acquire(SubmittedLocationProvider(data))

            session = container.session_service.create_session(
                course=str(data.get("course") or ""),
                scheduled_time=str(data.get("time") or ""),
                location=location,
                tolerance_meters=data.get("tolerance"),
            )
            body = session.to_payload()
            body["qrText"] = container.session_service.qr_text(session)
            return jsonify(body), 201
        except LocationAcquisitionError as e:
            return jsonify({"success": False, "code": e.code.value, "message": str(e), "detail": e.detail}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Unexpected error while creating session")
            return jsonify({"success": False, "message": "Internal server error"}), 500

    @app.route("/api/settings/tolerance", methods=["GET"], endpoint="get_tolerance")
    def get_tolerance():
        return jsonify({"tolerance": container.session_service.default_tolerance_meters}), 200

    @app.route("/api/settings/tolerance", methods=["PUT"], endpoint="set_tolerance")
    def set_tolerance():
        """Admin: default tolerance for new sessions, clamped to 10..500 m."""
        try:
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            tolerance = container.session_service.set_default_tolerance(require_number(data.get("tolerance"), "tolerance"))
            logger.info("Default tolerance set to %sm", tolerance)
            return jsonify({"success": True, "tolerance": tolerance}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Unexpected error while updating tolerance")
            return jsonify({"success": False, "message": "Internal server error"}), 500
