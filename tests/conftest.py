"""Shared pytest configuration.

Tests run against the in-memory mock Firestore. The environment is set
before any app module is imported because settings are read at import time.
"""

import os

os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = ""
os.environ.pop("SERVICE_AREA_CONFIG_PATH", None)

import pytest
from fastapi.testclient import TestClient

from app.config.firebase import get_db
from app.config.service_area import reset_service_area
from app.services.analytics_service import reset_analytics_service
from app.services.geofence import reset_geofence_validator
from app.services.issue_service import reset_issue_service


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_service_area()
    reset_geofence_validator()
    reset_issue_service()
    reset_analytics_service()
    yield
    reset_service_area()
    reset_geofence_validator()
    reset_issue_service()
    reset_analytics_service()


@pytest.fixture
def db():
    mock_db = get_db()
    mock_db.clear()
    yield mock_db
    mock_db.clear()


@pytest.fixture
def client(db):
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def resident(db):
    db.collection("residents").document("resident-001").set({
        "user_id": "user-001",
        "name": "Nimal Perera",
        "address": "14 Nagoda Road, Makola",
        "phone_number": "+94771234567",
    })
    return "resident-001"
