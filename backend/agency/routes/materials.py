# Overview: Flask API routes for the material catalog; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..extensions import db
from ..models import Material
from ..services import catalog_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_material
from ..decorators import service_errors

MATERIAL_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "rate_per_unit", "unit"},
    required_on_create={"name", "rate_per_unit"},
)

MATERIAL_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "rate_per_unit", "unit", "is_active"},
    required_on_create={"name", "rate_per_unit", "unit"},
)

materials_bp = Blueprint("materials", __name__, url_prefix="/api/materials")


@materials_bp.get("")
@service_errors("Failed to fetch materials")
def list_materials_route():
    """Active materials by name; ?include_inactive=true for the admin page."""
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    materials = catalog_service.list_materials(db.session, include_inactive=include_inactive)
    return jsonify([m.to_dict() for m in materials]), 200


@materials_bp.post("")
@service_errors("Failed to create material")
def create_material_route():
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Material, payload=payload, policy=MATERIAL_CREATE_POLICY, partial=False)
    enforce_rules_material(patch)

    material = catalog_service.create_material(db.session, patch=patch)
    return jsonify(material.to_dict()), 201


@materials_bp.put("/<int:material_id>")
@service_errors("Failed to update material")
def update_material_route(material_id: int):
    """
    Full update of name, rate_per_unit and unit; is_active is optional.

    A new rate applies to future bills only.
    """
    payload = request.get_json(silent=True) or {}
    patch = validate_payload(model=Material, payload=payload, policy=MATERIAL_UPDATE_POLICY, partial=False)
    enforce_rules_material(patch)

    material = catalog_service.update_material(db.session, material_id, patch=patch)
    return jsonify(material.to_dict()), 200
