"""
Pydantic models for geographic locations and the service-area geofence.

DESIGN NOTE:
- Latitude is always the y axis and longitude the x axis
- Geometry models are immutable value objects (frozen)
- Request models reject NaN/Infinity so the geometry only sees finite numbers
"""

from pydantic import BaseModel, Field
from typing import List, Tuple


class GeoPoint(BaseModel):
    """A latitude/longitude pair in degrees."""
    latitude: float
    longitude: float

    class Config:
        frozen = True

    def to_lat_lng(self) -> dict:
        """Map-friendly representation used by the frontend ({lat, lng})."""
        return {"lat": self.latitude, "lng": self.longitude}


class BoundingBox(BaseModel):
    """
    Axis-aligned rectangle enclosing the service area.
    Expected to satisfy north > south and east > west; this is a configuration
    concern and is not enforced here.
    """
    north: float
    south: float
    east: float
    west: float

    class Config:
        frozen = True

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.south <= point.latitude <= self.north
            and self.west <= point.longitude <= self.east
        )

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            latitude=(self.north + self.south) / 2,
            longitude=(self.east + self.west) / 2,
        )


class Polygon(BaseModel):
    """
    Ordered ring of vertices, implicitly closed (last vertex connects back to
    the first). Repeating the first vertex at the end is allowed.
    """
    vertices: Tuple[GeoPoint, ...] = Field(..., min_length=3)

    class Config:
        frozen = True


class ServiceArea(BaseModel):
    """The jurisdiction within which issue reports are accepted."""
    name: str
    bounding_box: BoundingBox
    polygon: Polygon

    class Config:
        frozen = True

    @property
    def center(self) -> GeoPoint:
        return self.bounding_box.center


class ValidationResult(BaseModel):
    """Outcome of a service-area check, echoing the checked coordinates."""
    valid: bool
    message: str
    coordinates: GeoPoint


class LocationValidationRequest(BaseModel):
    """Incoming POST /validate-location body."""
    latitude: float = Field(..., allow_inf_nan=False, description="Latitude in degrees")
    longitude: float = Field(..., allow_inf_nan=False, description="Longitude in degrees")

    class Config:
        json_schema_extra = {
            "example": {"latitude": 6.9745, "longitude": 79.95}
        }


class LatLng(BaseModel):
    lat: float
    lng: float


class ServiceAreaResponse(BaseModel):
    """Service-area description for map initialisation."""
    name: str
    boundaries: BoundingBox
    polygon: List[LatLng]
    center: LatLng
