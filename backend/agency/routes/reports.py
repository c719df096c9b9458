# backend/agency/routes/reports.py
"""
Reporting endpoints.

- owners-summary: credit / debit / balance per owner for a date range
- weekly: owner -> date -> items grouped report for a date range

Both have an xlsx export twin. Dates are YYYY-MM-DD business dates and the
range is inclusive.
"""

from io import BytesIO

from flask import Blueprint, request, jsonify, current_app, send_file

from ..extensions import db
from ..services import export_service, reporting_service
from ..decorators import service_errors

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SUMMARY_EXPORT_COLUMNS = (
    ("Owner", "owner_name"),
    ("Active", "is_active"),
    ("Credit", "total_credit"),
    ("Debit", "total_debit"),
    ("Balance", "balance"),
    ("Last Activity", "last_activity"),
)


def _xlsx_response(data: bytes, filename: str):
    return send_file(
        BytesIO(data),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=filename,
    )


def _owners_summary():
    return reporting_service.owners_summary(
        db.session,
        date_from=request.args.get("from"),
        date_to=request.args.get("to"),
        tz_name=current_app.config["BUSINESS_TIMEZONE"],
        sort=request.args.get("sort", reporting_service.SORT_BY_NAME),
    )


def _period_report():
    return reporting_service.period_report(
        db.session,
        date_from=request.args.get("from"),
        date_to=request.args.get("to"),
        tz_name=current_app.config["BUSINESS_TIMEZONE"],
    )


@reports_bp.get("/owners-summary")
@service_errors("Failed to build owners summary")
def owners_summary_route():
    """
    Query params:
    - from, to: YYYY-MM-DD (default today; one side fills the other)
    - sort: name | activity
    """
    return jsonify(_owners_summary()), 200


@reports_bp.get("/owners-summary/export")
@service_errors("Failed to export owners summary")
def export_owners_summary_route():
    report = _owners_summary()
    data = export_service.table_workbook(
        report["owners"],
        SUMMARY_EXPORT_COLUMNS,
        title=f"Owners Summary {report['from']} to {report['to']}",
        sheet_name="Owners Summary",
    )
    return _xlsx_response(data, f"owners_summary_{report['from']}_{report['to']}.xlsx")


@reports_bp.get("/weekly")
@service_errors("Failed to fetch weekly data")
def weekly_report_route():
    """Query params: from, to (both required, YYYY-MM-DD)."""
    return jsonify(_period_report()), 200


@reports_bp.get("/weekly/export")
@service_errors("Failed to export weekly data")
def export_weekly_report_route():
    report = _period_report()
    data = export_service.period_workbook(report)
    return _xlsx_response(data, f"weekly_ledger_{report['from']}_{report['to']}.xlsx")
