from types import SimpleNamespace

import pytest

from hris.attendance.geofence import distance_meters
from hris.attendance.geofence import match_location
from hris.attendance.geofence import within_geofence
from tests.factories import offset_north

MANILA = (14.5826, 120.9787)
MAKATI = (14.5547, 121.0244)
CEBU = (10.3157, 123.8854)


def _site(pk, lat, lng, radius=100, name=""):
    return SimpleNamespace(
        pk=pk, latitude=lat, longitude=lng, geo_radius=radius, name=name
    )


@pytest.mark.parametrize("point", [MANILA, MAKATI, CEBU, (0.0, 0.0), (-33.9, 151.2)])
def test_distance_to_self_is_zero(point):
    assert distance_meters(*point, *point) == 0


@pytest.mark.parametrize(("a", "b"), [(MANILA, MAKATI), (MANILA, CEBU), (CEBU, MAKATI)])
def test_distance_is_symmetric(a, b):
    assert distance_meters(*a, *b) == pytest.approx(distance_meters(*b, *a))


def test_distance_manila_to_makati():
    assert distance_meters(*MANILA, *MAKATI) == pytest.approx(5_815, rel=0.01)


def test_boundary_is_inclusive():
    lat = offset_north(MANILA[0], 100)
    assert within_geofence(lat, MANILA[1], *MANILA, 100)


def test_one_meter_beyond_boundary_is_outside():
    lat = offset_north(MANILA[0], 101)
    assert not within_geofence(lat, MANILA[1], *MANILA, 100)


def test_fence_without_center_is_unrestricted():
    assert within_geofence(*CEBU, None, None, 1)


def test_match_accepts_first_matching_location():
    office = _site(1, *MANILA, radius=200)
    project = _site(2, *MANILA, radius=500)
    match = match_location(*MANILA, [office, project])
    assert match.matched
    assert match.location is office
    assert match.distance_meters == 0


def test_match_skips_far_locations():
    far = _site(1, *CEBU)
    near = _site(2, *MAKATI)
    match = match_location(*MAKATI, [far, near])
    assert match.location is near


def test_no_match_reports_nearest_location():
    far = _site(1, *CEBU)
    nearer = _site(2, *MAKATI)
    match = match_location(*MANILA, [far, nearer])
    assert not match.matched
    assert match.nearest is nearer
    assert match.nearest_distance_meters == pytest.approx(
        distance_meters(*MANILA, *MAKATI)
    )


def test_zero_radius_uses_default():
    site = _site(1, *MANILA, radius=0)
    lat = offset_north(MANILA[0], 50)
    assert match_location(lat, MANILA[1], [site], default_radius_meters=100).matched


def test_location_without_coordinates_matches_anywhere():
    site = _site(1, None, None)
    assert match_location(*CEBU, [site]).location is site


def test_no_locations_is_no_match():
    match = match_location(*MANILA, [])
    assert not match.matched
    assert match.nearest is None
