# Overview: Pytest coverage for materials, owners, vehicles and master-data seeding.

from datetime import datetime
from decimal import Decimal

import pytest

from agency.models import Material, Owner, Vehicle
from agency.services import catalog_service, seed_service, vehicle_service
from agency.validation import ConflictError, NotFoundError, ValidationError


class TestMaterials:
    def test_create_defaults_unit(self, db_session):
        material = catalog_service.create_material(db_session, patch={"name": "Dust", "rate_per_unit": Decimal("56")})
        assert material.unit == "ton"
        assert material.is_active is True

    def test_duplicate_name_conflicts(self, db_session, sand):
        with pytest.raises(ConflictError):
            catalog_service.create_material(db_session, patch={"name": "M-Sand 1", "rate_per_unit": Decimal("1")})
        assert db_session.query(Material).count() == 1

    def test_rename_onto_existing_conflicts(self, db_session, sand, cement):
        with pytest.raises(ConflictError):
            catalog_service.update_material(db_session, cement.material_id, patch={"name": "M-Sand 1"})

    def test_update_rate(self, db_session, sand):
        updated = catalog_service.update_material(
            db_session, sand.material_id, patch={"rate_per_unit": Decimal("61.50"), "unit": "unit"}
        )
        assert Decimal(updated.rate_per_unit) == Decimal("61.50")

    def test_update_missing(self, db_session):
        with pytest.raises(NotFoundError):
            catalog_service.update_material(db_session, 4242, patch={"name": "X"})

    def test_inactive_hidden_by_default(self, db_session, sand, cement):
        catalog_service.update_material(db_session, cement.material_id, patch={"is_active": False})

        assert [m.name for m in catalog_service.list_materials(db_session)] == ["M-Sand 1"]
        assert len(catalog_service.list_materials(db_session, include_inactive=True)) == 2


class TestOwners:
    def test_create_and_duplicate(self, db_session):
        catalog_service.create_owner(db_session, patch={"name": "DX", "contact_info": "98400 00000"})
        with pytest.raises(ConflictError):
            catalog_service.create_owner(db_session, patch={"name": "DX"})
        assert db_session.query(Owner).count() == 1

    def test_deactivate(self, db_session, owner, other_owner):
        catalog_service.set_owner_active(db_session, owner.owner_id, False)
        assert [o.name for o in catalog_service.list_owners(db_session)] == ["BALA JCB"]

    def test_rename_conflict(self, db_session, owner, other_owner):
        with pytest.raises(ConflictError):
            catalog_service.update_owner(db_session, owner.owner_id, patch={"name": "BALA JCB"})


class TestVehicles:
    def test_suggestions_recent_first(self, db_session, owner):
        vehicle_service.touch_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="TN01A",
                                      used_at=datetime(2026, 10, 1, 1, 0))
        vehicle_service.touch_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="TN02B",
                                      used_at=datetime(2026, 10, 2, 1, 0))
        vehicle_service.touch_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="KL09C",
                                      used_at=datetime(2026, 10, 3, 1, 0))
        db_session.commit()

        all_numbers = [v.vehicle_number for v in vehicle_service.suggest_vehicles(db_session, owner_id=owner.owner_id)]
        assert all_numbers == ["KL09C", "TN02B", "TN01A"]

        matched = vehicle_service.suggest_vehicles(db_session, owner_id=owner.owner_id, q="tn")
        assert [v.vehicle_number for v in matched] == ["TN02B", "TN01A"]

    def test_suggestions_capped(self, db_session, owner):
        for i in range(8):
            vehicle_service.touch_vehicle(db_session, owner_id=owner.owner_id, vehicle_number=f"TN{i}")
        db_session.commit()
        assert len(vehicle_service.suggest_vehicles(db_session, owner_id=owner.owner_id)) == 5

    def test_add_is_idempotent(self, db_session, owner):
        first = vehicle_service.add_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="tn 01")
        second = vehicle_service.add_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="TN01")
        assert first.vehicle_id == second.vehicle_id
        assert db_session.query(Vehicle).count() == 1

    def test_add_validation(self, db_session, owner):
        with pytest.raises(ValidationError):
            vehicle_service.add_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="  ")
        with pytest.raises(NotFoundError):
            vehicle_service.add_vehicle(db_session, owner_id=99999, vehicle_number="TN01")
        with pytest.raises(ValidationError):
            vehicle_service.add_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="TN" + "1" * 31)
        assert db_session.query(Vehicle).count() == 0

    def test_delete(self, db_session, owner):
        vehicle_id = vehicle_service.add_vehicle(db_session, owner_id=owner.owner_id, vehicle_number="TN01").vehicle_id
        vehicle_service.delete_vehicle(db_session, vehicle_id)
        assert db_session.query(Vehicle).count() == 0
        with pytest.raises(NotFoundError):
            vehicle_service.delete_vehicle(db_session, vehicle_id)


class TestSeed:
    def test_seed_is_idempotent(self, db_session):
        seed_service.seed_master_data(db_session)
        seed_service.seed_master_data(db_session)

        assert db_session.query(Owner).count() == len(seed_service.OWNER_NAMES)
        assert db_session.query(Material).count() == len(seed_service.MATERIAL_PRICE_LIST)

    def test_seed_updates_rates_keeps_owners(self, db_session):
        db_session.add(Owner(name="AARON", contact_info="kept", is_active=False))
        db_session.add(Material(name="Cement", rate_per_unit=Decimal("1"), unit="ton", is_active=True))
        db_session.commit()

        seed_service.seed_master_data(db_session)
        db_session.expire_all()

        aaron = db_session.query(Owner).filter_by(name="AARON").one()
        assert aaron.contact_info == "kept"
        cement = db_session.query(Material).filter_by(name="Cement").one()
        assert Decimal(cement.rate_per_unit) == Decimal("290")
        assert cement.unit == "bag"
