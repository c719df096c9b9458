# Overview: Flask API routes for vehicle owners; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..extensions import db
from ..models import Owner
from ..services import catalog_service
from ..validation import ModelValidationPolicy, ValidationError, validate_payload
from ..decorators import service_errors

OWNER_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "contact_info"},
    required_on_create={"name"},
)

OWNER_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "contact_info", "is_active"},
    required_on_create={"name"},
)

owners_bp = Blueprint("owners", __name__, url_prefix="/api/owners")


@owners_bp.get("")
@service_errors("Failed to fetch vehicle owners")
def list_owners_route():
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    owners = catalog_service.list_owners(db.session, include_inactive=include_inactive)
    return jsonify([o.to_dict() for o in owners]), 200


@owners_bp.post("")
@service_errors("Failed to create vehicle owner")
def create_owner_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Owner, payload=payload, policy=OWNER_CREATE_POLICY, partial=False)

    owner = catalog_service.create_owner(db.session, patch=patch)
    return jsonify(owner.to_dict()), 201


@owners_bp.put("/<int:owner_id>")
@service_errors("Failed to update owner")
def update_owner_route(owner_id: int):
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Owner, payload=payload, policy=OWNER_UPDATE_POLICY, partial=False)

    owner = catalog_service.update_owner(db.session, owner_id, patch=patch)
    return jsonify(owner.to_dict()), 200


@owners_bp.patch("/<int:owner_id>/active")
@service_errors("Failed to update owner status")
def set_owner_active_route(owner_id: int):
    payload = request.get_json(silent=True) or {}
    is_active = payload.get("is_active")
    if not isinstance(is_active, bool):
        raise ValidationError("is_active must be a boolean")

    owner = catalog_service.set_owner_active(db.session, owner_id, is_active)
    return jsonify(owner.to_dict()), 200
