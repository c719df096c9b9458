# Overview: Flask API routes for owner ledgers and payments.

from io import BytesIO

from flask import Blueprint, request, jsonify, current_app, send_file

from ..extensions import db
from ..services import catalog_service, export_service, ledger_service, payment_service
from ..decorators import service_errors

ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/owners")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

LEDGER_EXPORT_COLUMNS = (
    ("Date", "entry_date"),
    ("Type", "entry_type"),
    ("Description", "material_name"),
    ("Vehicle", "vehicle_number"),
    ("Qty", "quantity"),
    ("Rate", "rate_at_sale"),
    ("Credit", "credit_amount"),
    ("Debit", "debit_amount"),
    ("Balance", "balance"),
)


@ledger_bp.get("/<int:owner_id>/ledger")
@service_errors("Failed to fetch ledger")
def owner_ledger_route(owner_id: int):
    """Chronological credits and debits with a running balance (oldest first)."""
    return jsonify(ledger_service.owner_ledger(db.session, owner_id)), 200


@ledger_bp.get("/<int:owner_id>/ledger/export")
@service_errors("Failed to export ledger")
def export_owner_ledger_route(owner_id: int):
    owner = catalog_service.get_owner(db.session, owner_id)
    entries = ledger_service.owner_ledger(db.session, owner_id)
    data = export_service.table_workbook(entries, LEDGER_EXPORT_COLUMNS, title=owner.name)

    return send_file(
        BytesIO(data),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f"ledger_{owner_id}.xlsx",
    )


@ledger_bp.post("/<int:owner_id>/payments")
@service_errors("Failed to record payment")
def record_payment_route(owner_id: int):
    """
    Record a payment (ledger debit).

    Body: {amount, mode?, notes?, payment_date?}
    payment_date may be YYYY-MM-DD (business date) or an ISO-8601 datetime.
    """
    payload = request.get_json(silent=True) or {}
    payment = payment_service.record_payment(
        db.session,
        owner_id=owner_id,
        amount=payload.get("amount"),
        mode=payload.get("mode"),
        notes=payload.get("notes"),
        payment_date=payload.get("payment_date"),
        tz_name=current_app.config["BUSINESS_TIMEZONE"],
    )
    return jsonify({"message": "Payment recorded successfully", "payment": payment.to_dict()}), 201


@ledger_bp.get("/<int:owner_id>/payments")
@service_errors("Failed to fetch payments")
def list_payments_route(owner_id: int):
    payments = payment_service.list_payments(db.session, owner_id)
    return jsonify([p.to_dict() for p in payments]), 200
