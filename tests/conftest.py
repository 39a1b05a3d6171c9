"""
Pytest configuration for health prediction tests
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

# Configure the app BEFORE importing any app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["HEALTH_PREDICTION_DEMO_MODE"] = "true"
os.environ.pop("XAI_API_KEY", None)

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.models.patient import Patient  # noqa: E402
from app.schemas.health_prediction import HealthDataPoint  # noqa: E402


def make_patient(**overrides) -> Patient:
    """Transient Patient row with a healthy default snapshot"""
    fields = {
        "id": 1,
        "name": "Test Patient",
        "email": "patient@test.com",
        "age": 35,
        "weight": 150,
        "weight_goal": 140,
        "body_fat": 20,
        "body_fat_goal": 15,
        "insulin_resistance": False,
        "blood_pressure": "118/76",
        "adherence": 95,
    }
    fields.update(overrides)
    return Patient(**fields)


def make_points(field: str, values) -> list:
    """Weekly HealthDataPoints carrying the given values for one metric"""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return [
        HealthDataPoint(timestamp=start + timedelta(weeks=i), **{field: v})
        for i, v in enumerate(values)
    ]


@pytest.fixture
def patient():
    return make_patient()


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(1234)
