# Overview: Flask API routes for transaction-line corrections.

from flask import Blueprint, request, jsonify

from ..extensions import db
from ..services import transaction_service
from ..validation import ValidationError
from ..decorators import service_errors

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.get("")
@service_errors("Failed to fetch transactions")
def list_transactions_route():
    owner_id = request.args.get("owner_id", type=int)
    if not owner_id:
        raise ValidationError("owner_id is required")

    rows = transaction_service.list_owner_transactions(db.session, owner_id)
    return jsonify([t.to_dict() for t in rows]), 200


@transactions_bp.put("/<int:transaction_id>")
@service_errors("Failed to update transaction")
def update_transaction_route(transaction_id: int):
    """Body: {vehicle_number, quantity, rate_at_sale}. total_cost is recomputed."""
    payload = request.get_json(silent=True) or {}
    tx = transaction_service.update_transaction(
        db.session,
        transaction_id,
        vehicle_number=payload.get("vehicle_number"),
        quantity=payload.get("quantity"),
        rate_at_sale=payload.get("rate_at_sale"),
    )
    return jsonify({"message": "Transaction updated successfully", "transaction": tx.to_dict()}), 200


@transactions_bp.delete("/<int:transaction_id>")
@service_errors("Failed to delete transaction")
def delete_transaction_route(transaction_id: int):
    snapshot = transaction_service.delete_transaction(db.session, transaction_id)
    return jsonify({"message": "Transaction deleted successfully", "transaction": snapshot}), 200
