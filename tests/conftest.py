"""
Shared test fixtures — SQLite database, test client, catalog snapshots.
"""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point settings at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SEED_CATALOG_ON_STARTUP"] = "false"

from backend.database import Base, get_db
from backend.main import app
from backend.calculators.catalog import Catalog
from backend.routers.materials import seed_materials
from backend.routers.products import seed_products
from backend.routers.stairs import seed_stair_catalog


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

RULE_START = date(2024, 1, 1)
AS_OF = date(2025, 6, 1)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Database loaded with the default materials, stair catalog and products."""
    seed_materials(db)
    seed_stair_catalog(db)
    seed_products(db)
    return db


def _rule(rule_id, role, unit_cost, **fields):
    data = {
        "id": rule_id, "board_role": role, "material_id": None,
        "begin_date": RULE_START, "unit_cost": unit_cost,
    }
    data.update(fields)
    return data


@pytest.fixture
def catalog():
    """
    In-memory catalog with string-typed numbers, the way an external
    catalog feed delivers them.
    """
    tread_band = {
        "length_max": "48", "width_max": "14", "thickness_max": "2",
        "base_length": "36", "length_increment": "6", "length_increment_cost": "6",
        "base_width": "11.5", "width_increment": "1", "width_increment_cost": "3",
    }
    return Catalog.from_records(
        materials=[
            {"id": 20, "name": "Red Oak", "multiplier": "1.0"},
            {"id": 21, "name": "White Oak", "multiplier": "1.25"},
            {"id": 40, "name": "Cherry", "multiplier": "1.5"},
            {"id": 99, "name": "Discontinued", "multiplier": "1.0", "is_active": False},
        ],
        board_types=[
            {"id": 1, "code": "box_tread", "description": "Box tread"},
            {"id": 2, "code": "open_left_tread", "description": "Open left tread"},
            {"id": 3, "code": "open_right_tread", "description": "Open right tread"},
            {"id": 4, "code": "double_open_tread", "description": "Double open tread"},
            {"id": 5, "code": "riser", "description": "Riser"},
            {"id": 6, "code": "stringer", "description": "Stringer", "priced_per_riser": True},
            {"id": 7, "code": "center_horse", "description": "Center horse", "priced_per_riser": True},
        ],
        price_rules=[
            _rule(1, "box_tread", "45.00", full_mitre_cost="25", **tread_band),
            _rule(2, "open_left_tread", "58.00", full_mitre_cost="30", **tread_band),
            _rule(3, "open_right_tread", "58.00", full_mitre_cost="30", **tread_band),
            _rule(4, "double_open_tread", "72.00", full_mitre_cost="55", **tread_band),
            _rule(5, "riser", "18.00", length_max="72", width_max="12",
                  base_length="36", length_increment="6", length_increment_cost="3",
                  base_width="8", width_increment="1", width_increment_cost="2"),
            _rule(6, "stringer", "6.50", width_max="16", thickness_max="2",
                  base_width="9.25", width_increment="1", width_increment_cost="0.75",
                  base_thickness="1", thickness_increment="0.25", thickness_increment_cost="1"),
            _rule(7, "center_horse", "9.00", width_max="16", thickness_max="4",
                  base_width="9.25", width_increment="1", width_increment_cost="0.75",
                  base_thickness="2", thickness_increment="0.25", thickness_increment_cost="1"),
        ],
        special_parts=[
            {"part_id": 1, "material_id": 20, "description": "Scroll bracket",
             "unit_cost": "18.00", "labor_cost": "6.00"},
            {"part_id": 3, "material_id": 20, "description": "Starting newel post",
             "unit_cost": "145.00", "labor_cost": "35.00"},
        ],
        products=[
            {"id": 1, "name": "Colonial handrail", "product_type": "handrail", "cost_per_6_inches": "12.00",
             "labor_install_cost": "3.00"},
            {"id": 3, "name": "Landing tread", "product_type": "landing_tread", "cost_per_6_inches": "9.00",
             "labor_install_cost": "4.00"},
            {"id": 4, "name": "Rosette", "product_type": "rail_parts", "base_price": "8.00",
             "labor_install_cost": "2.00"},
        ],
    )
