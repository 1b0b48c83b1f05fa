"""
Location endpoints - service-area checks for the map/location picker.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.models.location import (
    GeoPoint,
    LatLng,
    LocationValidationRequest,
    ServiceAreaResponse,
    ValidationResult,
)
from app.services.geofence import get_geofence_validator

router = APIRouter(prefix="/validate-location", tags=["Locations"])


@router.post(
    "",
    response_model=ValidationResult,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ValidationResult}},
)
async def validate_location(request: LocationValidationRequest):
    """
    Check whether coordinates lie inside the service area.

    Returns 200 with valid=true when inside, 400 with valid=false when outside.
    Non-numeric or non-finite coordinates are rejected with 422 before the
    geometry runs.
    """
    point = GeoPoint(latitude=request.latitude, longitude=request.longitude)
    result = get_geofence_validator().validate(point)

    if not result.valid:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=result.model_dump(),
        )
    return result


@router.get("", response_model=ServiceAreaResponse)
async def get_service_area_boundaries():
    """
    Service-area boundary for frontend map initialisation.
    """
    area = get_geofence_validator().service_area
    center = area.center
    return ServiceAreaResponse(
        name=area.name,
        boundaries=area.bounding_box,
        polygon=[LatLng(**vertex.to_lat_lng()) for vertex in area.polygon.vertices],
        center=LatLng(**center.to_lat_lng()),
    )
