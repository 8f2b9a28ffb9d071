# tests/conftest.py
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# point the study store at a throwaway sqlite file before the app module builds its repository
os.environ.setdefault("COSTSEG_DB_URI", f"sqlite:///{tempfile.mkdtemp()}/costseg_test.db")

from costseg.api.http import app  # noqa: E402


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def commercial_study():
    """$2M commercial property split with the typical commercial percentages."""
    return {
        "property_address": "100 Main St",
        "property_type": "commercial",
        "purchase_price": 2_000_000,
        "tax_rate": 37,
        "discount_rate": 5,
        "bonus_depreciation_rate": 100,
        "assets": [
            {"category": "personal_property_5yr", "cost_basis": 160_000, "recovery_period": 5},
            {"category": "personal_property_7yr", "cost_basis": 140_000, "recovery_period": 7},
            {"category": "land_improvements_15yr", "cost_basis": 200_000, "recovery_period": 15},
            {"category": "building_39yr", "cost_basis": 1_100_000, "recovery_period": 39},
            {"category": "land", "cost_basis": 400_000, "recovery_period": 0},
        ],
    }
