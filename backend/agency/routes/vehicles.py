# Overview: Flask API routes for vehicle-number suggestions.

from flask import Blueprint, request, jsonify

from ..extensions import db
from ..services import vehicle_service
from ..validation import ValidationError
from ..decorators import service_errors

vehicles_bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


@vehicles_bp.get("")
@service_errors("Failed to fetch vehicles")
def suggest_vehicles_route():
    """
    Recent vehicles for an owner.

    Query params:
    - owner_id: int (required)
    - q: partial vehicle number (optional)
    """
    owner_id = request.args.get("owner_id", type=int)
    if not owner_id:
        raise ValidationError("owner_id is required")

    vehicles = vehicle_service.suggest_vehicles(db.session, owner_id=owner_id, q=request.args.get("q", ""))
    return jsonify([{"vehicle_id": v.vehicle_id, "vehicle_number": v.vehicle_number} for v in vehicles]), 200


@vehicles_bp.post("")
@service_errors("Failed to add vehicle")
def add_vehicle_route():
    payload = request.get_json(silent=True) or {}
    vehicle = vehicle_service.add_vehicle(
        db.session,
        owner_id=payload.get("owner_id"),
        vehicle_number=payload.get("vehicle_number"),
    )
    return jsonify({"vehicle_id": vehicle.vehicle_id, "vehicle_number": vehicle.vehicle_number}), 201


@vehicles_bp.delete("/<int:vehicle_id>")
@service_errors("Failed to delete vehicle")
def delete_vehicle_route(vehicle_id: int):
    vehicle_service.delete_vehicle(db.session, vehicle_id)
    return jsonify({"message": "Vehicle deleted successfully", "vehicle_id": vehicle_id}), 200
