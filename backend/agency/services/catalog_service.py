# backend/agency/services/catalog_service.py
"""
Catalog Service - materials and vehicle owners

Both are admin-maintained master data:
- names are unique (duplicates raise ConflictError -> 409)
- rows are never hard-deleted; is_active is the soft switch
- list endpoints return active rows only unless asked otherwise
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..models import Material, Owner
from ..validation import ConflictError, NotFoundError

MATERIAL_MUTABLE_FIELDS = {"name", "rate_per_unit", "unit", "is_active"}
OWNER_MUTABLE_FIELDS = {"name", "contact_info", "is_active"}

DEFAULT_UNIT = "ton"


def _apply_patch(obj, patch: dict, allowed: set[str]) -> None:
    for k, v in patch.items():
        if k not in allowed:
            continue
        setattr(obj, k, v)


def _name_taken(session, model, name: str, exclude_pk=None) -> bool:
    pk = model.__mapper__.primary_key[0]
    query = session.query(model).filter(model.name == name)
    if exclude_pk is not None:
        query = query.filter(pk != exclude_pk)
    return session.query(query.exists()).scalar()


def _commit_or_conflict(session, message: str) -> None:
    # Pre-checks catch the common case; the unique index still decides races.
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError(message)


# =============================================================================
# Materials
# =============================================================================

def list_materials(session, *, include_inactive: bool = False) -> list[Material]:
    query = session.query(Material)
    if not include_inactive:
        query = query.filter(Material.is_active.is_(True))
    return query.order_by(Material.name.asc(), Material.material_id.asc()).all()


def get_material(session, material_id: int) -> Material:
    material = session.get(Material, material_id)
    if material is None:
        raise NotFoundError("Material not found")
    return material


def create_material(session, *, patch: dict) -> Material:
    """Create a material from a validated patch (name, rate_per_unit, unit?)."""
    if _name_taken(session, Material, patch["name"]):
        raise ConflictError("A material with this name already exists")

    material = Material(unit=DEFAULT_UNIT, is_active=True)
    _apply_patch(material, patch, MATERIAL_MUTABLE_FIELDS)
    if not material.unit:
        material.unit = DEFAULT_UNIT

    session.add(material)
    _commit_or_conflict(session, "A material with this name already exists")
    return material


def update_material(session, material_id: int, *, patch: dict) -> Material:
    """
    Update name/rate/unit/is_active.

    Changing rate_per_unit only affects future bills; existing transactions
    keep their rate_at_sale.
    """
    material = get_material(session, material_id)

    if "name" in patch and patch["name"] != material.name:
        if _name_taken(session, Material, patch["name"], exclude_pk=material.material_id):
            raise ConflictError("Another material already has this name")

    _apply_patch(material, patch, MATERIAL_MUTABLE_FIELDS)
    _commit_or_conflict(session, "Another material already has this name")
    return material


# =============================================================================
# Owners
# =============================================================================

def list_owners(session, *, include_inactive: bool = False) -> list[Owner]:
    query = session.query(Owner)
    if not include_inactive:
        query = query.filter(Owner.is_active.is_(True))
    return query.order_by(Owner.name.asc(), Owner.owner_id.asc()).all()


def get_owner(session, owner_id: int) -> Owner:
    owner = session.get(Owner, owner_id)
    if owner is None:
        raise NotFoundError("Owner not found")
    return owner


def create_owner(session, *, patch: dict) -> Owner:
    if _name_taken(session, Owner, patch["name"]):
        raise ConflictError("An owner with this name already exists")

    owner = Owner(is_active=True)
    _apply_patch(owner, patch, OWNER_MUTABLE_FIELDS)

    session.add(owner)
    _commit_or_conflict(session, "An owner with this name already exists")
    return owner


def update_owner(session, owner_id: int, *, patch: dict) -> Owner:
    owner = get_owner(session, owner_id)

    if "name" in patch and patch["name"] != owner.name:
        if _name_taken(session, Owner, patch["name"], exclude_pk=owner.owner_id):
            raise ConflictError("Another owner already has this name")

    _apply_patch(owner, patch, OWNER_MUTABLE_FIELDS)
    _commit_or_conflict(session, "Another owner already has this name")
    return owner


def set_owner_active(session, owner_id: int, is_active: bool) -> Owner:
    owner = get_owner(session, owner_id)
    owner.is_active = bool(is_active)
    session.commit()
    return owner
