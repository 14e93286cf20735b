# Overview: Flask API routes for the business-day session lifecycle.

"""
Session routes

- GET  /current  the open session (opened lazily)
- GET  /history  closed sessions, most recent first
- POST /close    close the open session and open its successor
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import session_service
from ..decorators import ledger_errors


sessions_bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


@sessions_bp.get("/current")
@ledger_errors("get session")
def current_session_route():
    return jsonify(session_service.get_current_session().to_dict())


@sessions_bp.get("/history")
@ledger_errors("get history")
def session_history_route():
    limit = request.args.get("limit", type=int)
    sessions = session_service.list_closed_sessions(limit=limit)
    return jsonify([s.to_dict() for s in sessions])


@sessions_bp.post("/close")
@ledger_errors("close session")
def close_session_route():
    current_app.logger.info("Closing current session...")
    result = session_service.close_session()
    current_app.logger.info("Session %s closed. New session: %s", result["closed_id"], result["new_id"])
    return jsonify({"success": True, **result}), 200
