"""
Service-area configuration.

The built-in boundary approximates the Makola area. Deployments can replace
it with a JSON file referenced by SERVICE_AREA_CONFIG_PATH:

    {
      "name": "Makola",
      "boundaries": {"north": 6.981, "south": 6.9695, "east": 79.958, "west": 79.94},
      "polygon": [{"lat": 6.9723, "lng": 79.941}, ...]
    }
"""

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from app.core.errors import ServiceAreaConfigError
from app.core.settings import settings
from app.models.location import BoundingBox, GeoPoint, Polygon, ServiceArea

logger = logging.getLogger(__name__)


MAKOLA_POLYGON = Polygon(vertices=(
    GeoPoint(latitude=6.9723, longitude=79.941),   # Southwest corner near Y Junction
    GeoPoint(latitude=6.976, longitude=79.9415),   # Northwest near Nagoda Rd
    GeoPoint(latitude=6.9788, longitude=79.944),   # Top
    GeoPoint(latitude=6.9805, longitude=79.9488),  # East top
    GeoPoint(latitude=6.9802, longitude=79.9515),  # Mid East
    GeoPoint(latitude=6.9783, longitude=79.955),   # East bend
    GeoPoint(latitude=6.9753, longitude=79.9575),  # Eastern curve
    GeoPoint(latitude=6.972, longitude=79.9565),   # Near Keells
    GeoPoint(latitude=6.97, longitude=79.953),     # Bottom
    GeoPoint(latitude=6.9702, longitude=79.947),   # South central
    GeoPoint(latitude=6.9712, longitude=79.943),   # South West
    GeoPoint(latitude=6.9723, longitude=79.941),   # Closes the loop
))

MAKOLA_BOUNDARIES = BoundingBox(north=6.981, south=6.9695, east=79.958, west=79.94)

MAKOLA_SERVICE_AREA = ServiceArea(
    name="Makola",
    bounding_box=MAKOLA_BOUNDARIES,
    polygon=MAKOLA_POLYGON,
)


def parse_service_area(data: dict) -> ServiceArea:
    """
    Build a ServiceArea from its JSON representation.

    Raises:
        ServiceAreaConfigError: If required keys are missing or malformed
    """
    try:
        vertices = tuple(
            GeoPoint(latitude=vertex["lat"], longitude=vertex["lng"])
            for vertex in data["polygon"]
        )
        return ServiceArea(
            name=data.get("name", "Service"),
            bounding_box=BoundingBox(**data["boundaries"]),
            polygon=Polygon(vertices=vertices),
        )
    except (KeyError, TypeError, ValidationError) as e:
        raise ServiceAreaConfigError(f"Invalid service area definition: {e}") from e


def load_service_area(path: Optional[str] = None) -> ServiceArea:
    """
    Load the service area from a JSON file, or return the built-in Makola area.

    Args:
        path: JSON file path; None means use the built-in boundary

    Raises:
        ServiceAreaConfigError: If the file is missing, unreadable or invalid
    """
    if not path:
        return MAKOLA_SERVICE_AREA

    if not os.path.exists(path):
        raise ServiceAreaConfigError(
            f"Service area file not found: {path}\n"
            f"Check SERVICE_AREA_CONFIG_PATH in your .env file."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ServiceAreaConfigError(f"Service area file is not valid JSON: {e}") from e

    area = parse_service_area(data)
    logger.info(f"[SERVICE AREA] Loaded '{area.name}' from {path} ({len(area.polygon.vertices)} vertices)")
    return area


def warn_on_inconsistent_boundaries(area: ServiceArea) -> None:
    """Log polygon vertices lying outside the bounding box. Never modifies the area."""
    from app.services.geofence import find_vertices_outside_box

    outside = find_vertices_outside_box(area)
    if outside:
        logger.warning(
            f"⚠️ Service area '{area.name}' bounding box does not enclose {len(outside)} polygon "
            f"vertex/vertices; fix the configuration. First offender: "
            f"({outside[0].latitude}, {outside[0].longitude})"
        )


_service_area: Optional[ServiceArea] = None


def get_service_area() -> ServiceArea:
    """Get the process-wide service area, loading it on first use."""
    global _service_area
    if _service_area is None:
        _service_area = load_service_area(settings.SERVICE_AREA_CONFIG_PATH)
        warn_on_inconsistent_boundaries(_service_area)
    return _service_area


def reset_service_area() -> None:
    global _service_area
    _service_area = None
