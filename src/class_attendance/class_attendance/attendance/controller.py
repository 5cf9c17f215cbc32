from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import LocationAcquisitionError, ValidationError
from ..location.acquisition import SubmittedLocationProvider
from ..location.model import GeoReading

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        session_id = request.args.get("sessionId")
        records = container.attendance_service.list_records(session_id=session_id)
        return jsonify([r.to_dict() for r in records]), 200

    @app.route("/api/attendance", methods=["POST"], endpoint="submit_attendance")
    def submit_attendance():
        """Student claim: scanned QR payload + device location (or the device's location error)."""
        try:
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            # accuracy and freshness of a submitted reading are judged by the verifier
            if data.get("locationError"):
                reading = container.location_acquirer.acquire(SubmittedLocationProvider(data))
            elif data.get("location") is not None:
                reading = GeoReading.from_dict(data["location"])
            else:
                reading = None

            outcome = container.attendance_service.submit_claim(
                student_id=data.get("studentId"),
                payload=data.get("payload"),
                reading=reading,
            )
            status = 201 if outcome.result.accepted else 422
            body = outcome.to_dict()
            body["success"] = outcome.result.accepted
            return jsonify(body), status
        except LocationAcquisitionError as e:
            return jsonify({"success": False, "code": e.code.value, "message": str(e), "detail": e.detail}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Unexpected error while recording attendance")
            return jsonify({"success": False, "message": "Internal server error"}), 500
