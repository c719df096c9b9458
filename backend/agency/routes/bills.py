# Overview: Flask API routes for bills; parses input and returns JSON responses.

import os
from decimal import Decimal

from flask import Blueprint, request, jsonify, current_app, send_file

from ..extensions import db
from ..services import bill_service
from ..decorators import service_errors
from ..validation import to_flag

bills_bp = Blueprint("bills", __name__, url_prefix="/api/bills")


@bills_bp.post("")
@service_errors("Failed to create bill")
def create_bill_route():
    """
    Create a bill atomically.

    Body:
    {
      "owner_id": 1,
      "vehicle_number": "KL 07 AB 1234",
      "items": [{"material_id": 3, "quantity": 10, "mattam": "2"}],
      "include_pass": true
    }

    The PDF is generated after commit; its outcome is reported under
    "document" and never changes the status code.
    """
    payload = request.get_json(silent=True) or {}
    result = bill_service.create_bill(
        db.session,
        owner_id=payload.get("owner_id"),
        vehicle_number=payload.get("vehicle_number"),
        items=payload.get("items"),
        include_pass=to_flag(payload.get("include_pass"), "include_pass"),
        pass_amount=Decimal(str(current_app.config["PASS_AMOUNT"])),
        tz_name=current_app.config["BUSINESS_TIMEZONE"],
        pdf_dir=current_app.config.get("BILL_PDF_DIR"),
    )
    if result.document.status == "failed":
        current_app.logger.warning(
            "Bill %s saved without PDF: %s", result.bill.bill_id, result.document.error
        )

    body = {"message": "Bill created successfully"}
    body.update(result.to_dict())
    return jsonify(body), 201


@bills_bp.get("")
@service_errors("Failed to fetch bills")
def list_bills_route():
    owner_id = request.args.get("owner_id", type=int)
    return jsonify(bill_service.list_bills(db.session, owner_id=owner_id)), 200


@bills_bp.get("/<int:bill_id>")
@service_errors("Failed to fetch bill details")
def get_bill_route(bill_id: int):
    return jsonify(bill_service.get_bill_details(db.session, bill_id)), 200


@bills_bp.get("/<int:bill_id>/download")
@service_errors("Failed to download bill")
def download_bill_route(bill_id: int):
    bill = bill_service.get_bill(db.session, bill_id)
    pdf_dir = current_app.config.get("BILL_PDF_DIR")
    path = bill_service.bill_pdf_path(bill, pdf_dir) if pdf_dir else None
    if not path or not os.path.isfile(path):
        return jsonify({"error": "Bill PDF not found"}), 404

    return send_file(
        os.path.abspath(path),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=os.path.basename(path),
    )
