import pytest

from app.config.service_area import MAKOLA_SERVICE_AREA
from app.models.location import BoundingBox, GeoPoint, Polygon, ServiceArea
from app.services.geofence import (
    GeofenceValidator,
    find_vertices_outside_box,
    get_geofence_validator,
    is_point_in_polygon,
)


def pt(lat, lng):
    return GeoPoint(latitude=lat, longitude=lng)


def polygon(*coords):
    return Polygon(vertices=tuple(pt(lat, lng) for lat, lng in coords))


UNIT_SQUARE = polygon((0, 0), (0, 1), (1, 1), (1, 0))
UNIT_BOX = BoundingBox(north=1, south=0, east=1, west=0)


def square_validator():
    return GeofenceValidator(ServiceArea(name="Square", bounding_box=UNIT_BOX, polygon=UNIT_SQUARE))


# Unit square with the north-east quarter cut away (an L shape)
NOTCHED = polygon((0, 0), (0, 1), (0.5, 1), (0.5, 0.5), (1, 0.5), (1, 0))


class TestPointInPolygon:
    def test_centroid_of_unit_square_is_inside(self):
        assert is_point_in_polygon(pt(0.5, 0.5), UNIT_SQUARE.vertices) is True

    def test_far_point_is_outside(self):
        assert is_point_in_polygon(pt(5, 5), UNIT_SQUARE.vertices) is False

    @pytest.mark.parametrize("lat,lng", [(-0.5, 0.5), (0.5, -0.5), (1.5, 0.5), (0.5, 1.5)])
    def test_points_beside_each_side_are_outside(self, lat, lng):
        assert is_point_in_polygon(pt(lat, lng), UNIT_SQUARE.vertices) is False

    def test_triangle(self):
        triangle = polygon((0, 0), (2, 1), (0, 2))
        assert is_point_in_polygon(pt(0.5, 1), triangle.vertices) is True
        assert is_point_in_polygon(pt(1.9, 0.1), triangle.vertices) is False

    def test_explicitly_closed_ring_matches_open_ring(self):
        closed = polygon((0, 0), (0, 1), (1, 1), (1, 0), (0, 0))
        for point in (pt(0.5, 0.5), pt(0.1, 0.9), pt(2, 2), pt(-1, 0.5)):
            assert is_point_in_polygon(point, closed.vertices) == is_point_in_polygon(point, UNIT_SQUARE.vertices)

    def test_duplicate_consecutive_vertices_do_not_divide_by_zero(self):
        ring = polygon((0, 0), (0, 0), (0, 1), (1, 1), (1, 1), (1, 0))
        assert is_point_in_polygon(pt(0.5, 0.5), ring.vertices) is True
        assert is_point_in_polygon(pt(0, 5), ring.vertices) is False

    def test_concave_notch_is_outside(self):
        assert is_point_in_polygon(pt(0.75, 0.75), NOTCHED.vertices) is False
        assert is_point_in_polygon(pt(0.25, 0.75), NOTCHED.vertices) is True
        assert is_point_in_polygon(pt(0.75, 0.25), NOTCHED.vertices) is True

    def test_axis_transposition_changes_result(self):
        # Tall thin rectangle: latitude 0..10, longitude 0..1
        tall = polygon((0, 0), (10, 0), (10, 1), (0, 1))
        transposed = polygon((0, 0), (0, 10), (1, 10), (1, 0))
        point = pt(5, 0.5)
        assert is_point_in_polygon(point, tall.vertices) is True
        assert is_point_in_polygon(point, transposed.vertices) is False


class TestGeofenceValidator:
    @pytest.mark.parametrize("lat,lng", [(1.01, 0.5), (-0.01, 0.5), (0.5, 1.01), (0.5, -0.01), (50, -50)])
    def test_points_outside_box_are_rejected(self, lat, lng):
        # Polygon far larger than the box: only the box can reject these points
        huge = polygon((-100, -100), (100, -100), (100, 100), (-100, 100))
        validator = GeofenceValidator(ServiceArea(name="Huge", bounding_box=UNIT_BOX, polygon=huge))
        assert is_point_in_polygon(pt(lat, lng), huge.vertices) is True
        assert validator.is_within_service_area(pt(lat, lng)) is False

    def test_point_in_box_but_in_concave_notch_is_rejected(self):
        validator = GeofenceValidator(ServiceArea(name="Notched", bounding_box=UNIT_BOX, polygon=NOTCHED))
        point = pt(0.75, 0.75)
        assert UNIT_BOX.contains(point)
        assert validator.is_within_service_area(point) is False

    def test_interior_point_is_accepted(self):
        assert square_validator().is_within_service_area(pt(0.5, 0.5)) is True

    def test_exterior_point_is_rejected(self):
        assert square_validator().is_within_service_area(pt(5, 5)) is False

    def test_repeated_calls_give_same_answer(self):
        validator = square_validator()
        for point in (pt(0.5, 0.5), pt(5, 5), pt(0.25, 0.75)):
            first = validator.is_within_service_area(point)
            assert validator.is_within_service_area(point) == first
            assert validator.is_within_service_area(point) == first

    def test_validate_inside(self):
        result = square_validator().validate(pt(0.5, 0.5))
        assert result.valid is True
        assert result.message == "Location is within Square area"
        assert result.coordinates == pt(0.5, 0.5)

    def test_validate_outside(self):
        result = square_validator().validate(pt(5, 5))
        assert result.valid is False
        assert "outside Square area" in result.message
        assert result.coordinates.latitude == 5


class TestMakolaServiceArea:
    def test_interior_point(self):
        validator = GeofenceValidator(MAKOLA_SERVICE_AREA)
        assert validator.is_within_service_area(pt(6.9745, 79.95)) is True

    def test_far_point(self):
        validator = GeofenceValidator(MAKOLA_SERVICE_AREA)
        assert validator.is_within_service_area(pt(6.90, 79.90)) is False

    def test_point_in_box_outside_polygon(self):
        # South-east corner of the box lies below the "Bottom" vertex
        validator = GeofenceValidator(MAKOLA_SERVICE_AREA)
        point = pt(6.9697, 79.9575)
        assert MAKOLA_SERVICE_AREA.bounding_box.contains(point)
        assert validator.is_within_service_area(point) is False

    def test_box_encloses_polygon(self):
        assert find_vertices_outside_box(MAKOLA_SERVICE_AREA) == []

    def test_default_validator_uses_makola(self):
        assert get_geofence_validator().service_area == MAKOLA_SERVICE_AREA
        assert get_geofence_validator() is get_geofence_validator()

    def test_center_is_box_midpoint(self):
        center = MAKOLA_SERVICE_AREA.center
        assert center.latitude == pytest.approx((6.981 + 6.9695) / 2)
        assert center.longitude == pytest.approx((79.958 + 79.94) / 2)


class TestModels:
    def test_polygon_requires_three_vertices(self):
        with pytest.raises(ValueError):
            polygon((0, 0), (1, 1))

    def test_geopoint_is_immutable(self):
        point = pt(1, 2)
        with pytest.raises(Exception):
            point.latitude = 3
