"""
Pytest fixtures for agency backend tests.

Provides the application on an in-memory database, a per-test table wipe,
master-data fixtures, and a test client.
"""

from decimal import Decimal

import pytest
from agency import create_app
from agency.extensions import db
from agency.models import Material, Owner

TEST_TIMEZONE = "Asia/Kolkata"


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BUSINESS_TIMEZONE': TEST_TIMEZONE,
        'BILL_PDF_DIR': str(tmp_path_factory.mktemp("pdfs")),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()
        db.session.remove()


@pytest.fixture(scope='function')
def pdf_dir(tmp_path):
    """Per-test directory for generated bill PDFs."""
    return str(tmp_path / "pdfs")


@pytest.fixture(scope='function')
def owner(db_session):
    """Owner with no activity."""
    owner = Owner(name="AARON", is_active=True)
    db_session.add(owner)
    db_session.commit()
    return owner


@pytest.fixture(scope='function')
def other_owner(db_session):
    owner = Owner(name="BALA JCB", is_active=True)
    db_session.add(owner)
    db_session.commit()
    return owner


@pytest.fixture(scope='function')
def sand(db_session):
    """Material priced at 50 per unit."""
    material = Material(name="M-Sand 1", rate_per_unit=Decimal("50"), unit="unit", is_active=True)
    db_session.add(material)
    db_session.commit()
    return material


@pytest.fixture(scope='function')
def cement(db_session):
    material = Material(name="Cement", rate_per_unit=Decimal("290"), unit="bag", is_active=True)
    db_session.add(material)
    db_session.commit()
    return material
