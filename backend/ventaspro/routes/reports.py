from flask import Blueprint, Response, jsonify

from ..services import reporting_service
from ..decorators import ledger_errors


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/session/<int:session_id>")
@ledger_errors("load session report")
def session_report(session_id: int):
    return jsonify(reporting_service.report_for_session(session_id)), 200


@reports_bp.get("/current")
@ledger_errors("load current report")
def current_report():
    return jsonify(reporting_service.current_session_report()), 200


@reports_bp.get("/session/<int:session_id>/summary")
@ledger_errors("load session summary")
def session_summary(session_id: int):
    return jsonify(reporting_service.session_summary(session_id)), 200


@reports_bp.get("/session/<int:session_id>/export")
@ledger_errors("export session report")
def export_session(session_id: int):
    body = reporting_service.export_session_csv(session_id)
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=session_{session_id}.csv"},
    )
