import json
import logging

import pytest

from app.config import service_area
from app.config.service_area import (
    MAKOLA_SERVICE_AREA,
    get_service_area,
    load_service_area,
    parse_service_area,
    warn_on_inconsistent_boundaries,
)
from app.core.errors import ServiceAreaConfigError
from app.core.settings import settings
from app.models.location import GeoPoint
from app.services.geofence import get_geofence_validator


SQUARE_AREA = {
    "name": "Square",
    "boundaries": {"north": 1, "south": 0, "east": 1, "west": 0},
    "polygon": [
        {"lat": 0, "lng": 0},
        {"lat": 0, "lng": 1},
        {"lat": 1, "lng": 1},
        {"lat": 1, "lng": 0},
    ],
}


def write_area(tmp_path, data):
    path = tmp_path / "area.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_default_is_makola():
    assert load_service_area(None) is MAKOLA_SERVICE_AREA
    assert load_service_area("") is MAKOLA_SERVICE_AREA


def test_makola_polygon_has_twelve_vertices():
    assert len(MAKOLA_SERVICE_AREA.polygon.vertices) == 12
    assert MAKOLA_SERVICE_AREA.bounding_box.north == 6.981


def test_load_from_file(tmp_path):
    area = load_service_area(write_area(tmp_path, SQUARE_AREA))
    assert area.name == "Square"
    assert area.polygon.vertices[1] == GeoPoint(latitude=0, longitude=1)
    assert area.bounding_box.east == 1


def test_missing_file(tmp_path):
    with pytest.raises(ServiceAreaConfigError, match="not found"):
        load_service_area(str(tmp_path / "missing.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "area.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ServiceAreaConfigError, match="not valid JSON"):
        load_service_area(str(path))


def test_too_few_vertices():
    data = dict(SQUARE_AREA, polygon=SQUARE_AREA["polygon"][:2])
    with pytest.raises(ServiceAreaConfigError):
        parse_service_area(data)


def test_missing_boundaries():
    data = {"name": "Square", "polygon": SQUARE_AREA["polygon"]}
    with pytest.raises(ServiceAreaConfigError):
        parse_service_area(data)


def test_configured_area_is_used_by_validator(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SERVICE_AREA_CONFIG_PATH", write_area(tmp_path, SQUARE_AREA))
    assert get_service_area().name == "Square"
    validator = get_geofence_validator()
    assert validator.is_within_service_area(GeoPoint(latitude=0.5, longitude=0.5)) is True
    assert validator.is_within_service_area(GeoPoint(latitude=6.9745, longitude=79.95)) is False


def test_service_area_is_cached(monkeypatch):
    first = get_service_area()
    monkeypatch.setattr(settings, "SERVICE_AREA_CONFIG_PATH", "/does/not/exist.json")
    assert get_service_area() is first
    service_area.reset_service_area()
    with pytest.raises(ServiceAreaConfigError):
        get_service_area()


def test_inconsistent_box_is_reported_not_corrected(caplog):
    data = dict(SQUARE_AREA, boundaries={"north": 0.5, "south": 0, "east": 1, "west": 0})
    area = parse_service_area(data)
    with caplog.at_level(logging.WARNING):
        warn_on_inconsistent_boundaries(area)
    assert "does not enclose 2" in caplog.text
    assert area.bounding_box.north == 0.5
