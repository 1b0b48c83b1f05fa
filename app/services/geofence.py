"""
Geofence Service - decides whether a point lies inside the service area.

ALGORITHM:
1. Bounding-box pre-filter (cheap necessary condition)
2. Point-in-polygon via even-odd ray casting (precise containment)

Both must pass. The box is only an optimization and never accepts a point
on its own.

Points exactly on the polygon boundary get whatever answer the even-odd
rule produces; there is no boundary-inclusive tie-break.
"""

from app.models.location import GeoPoint, Polygon, ServiceArea, ValidationResult
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)


def is_point_in_polygon(point: GeoPoint, vertices: Sequence[GeoPoint]) -> bool:
    """
    Even-odd ray casting test.

    A horizontal ray is cast from the point towards increasing longitude and
    the number of polygon edges it crosses is counted. An odd count means the
    point is inside. Latitude is y and longitude is x.

    Args:
        point: Point to test
        vertices: Polygon ring (implicitly closed)

    Returns:
        True if the crossing count is odd
    """
    lat = point.latitude
    lng = point.longitude
    inside = False

    j = len(vertices) - 1
    for i in range(len(vertices)):
        xi, yi = vertices[i].longitude, vertices[i].latitude
        xj, yj = vertices[j].longitude, vertices[j].latitude
        j = i

        # Zero-length and horizontal edges can never straddle the ray
        if yi == yj:
            continue

        if (yi > lat) != (yj > lat):
            x_intersect = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lng < x_intersect:
                inside = not inside

    return inside


class GeofenceValidator:
    """
    Validates coordinates against a configured service area.

    The area is injected so the boundary can be swapped without touching
    the geometry code.
    """

    def __init__(self, service_area: ServiceArea):
        self.service_area = service_area

    def is_within_service_area(self, point: GeoPoint) -> bool:
        if not self.service_area.bounding_box.contains(point):
            return False
        return is_point_in_polygon(point, self.service_area.polygon.vertices)

    def validate(self, point: GeoPoint) -> ValidationResult:
        """
        Check a point and build a user-facing result.

        Args:
            point: Coordinates to check (assumed finite)

        Returns:
            ValidationResult with the verdict, a message and the echoed point
        """
        name = self.service_area.name
        if self.is_within_service_area(point):
            return ValidationResult(
                valid=True,
                message=f"Location is within {name} area",
                coordinates=point,
            )

        logger.info(f"📍 Location ({point.latitude}, {point.longitude}) rejected: outside {name} area")
        return ValidationResult(
            valid=False,
            message=f"Location is outside {name} area. Please select a location within {name} boundaries.",
            coordinates=point,
        )


def find_vertices_outside_box(service_area: ServiceArea) -> list:
    """
    Return polygon vertices that the bounding box does not enclose.

    A non-empty result means the box is not a superset of the polygon and
    will reject points the polygon accepts. That is a configuration
    inconsistency; the validator itself still treats the box as a pre-filter.
    """
    box = service_area.bounding_box
    return [vertex for vertex in service_area.polygon.vertices if not box.contains(vertex)]


# Global validator instance (singleton pattern)
_geofence_validator: Optional[GeofenceValidator] = None


def get_geofence_validator() -> GeofenceValidator:
    """
    Get or create the GeofenceValidator for the configured service area.

    Returns:
        GeofenceValidator: The global validator instance
    """
    global _geofence_validator
    if _geofence_validator is None:
        from app.config.service_area import get_service_area
        _geofence_validator = GeofenceValidator(get_service_area())
    return _geofence_validator


def reset_geofence_validator() -> None:
    """Drop the cached validator so the next call rebuilds it from configuration."""
    global _geofence_validator
    _geofence_validator = None
