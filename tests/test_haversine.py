import math

import pytest

from homefix.utils.haversine import haversine

RIYADH = (24.7136, 46.6753)
JEDDAH = (21.4858, 39.1925)


def test_same_point_is_zero():
    assert haversine(*RIYADH, *RIYADH) == 0


@pytest.mark.parametrize("a, b", [
    (RIYADH, JEDDAH),
    ((0.0, 0.0), (10.0, -20.0)),
    ((-33.86, 151.21), (51.5, -0.12)),
])
def test_distance_is_symmetric(a, b):
    assert haversine(*a, *b) == pytest.approx(haversine(*b, *a))


def test_small_latitude_shift_is_about_one_km():
    lat, lng = RIYADH
    assert haversine(lat, lng, lat + 0.009, lng) == pytest.approx(1.0, abs=0.05)


def test_riyadh_to_jeddah():
    assert 835 < haversine(*RIYADH, *JEDDAH) < 855


def test_nan_propagates():
    assert math.isnan(haversine(float("nan"), 46.6753, *RIYADH))


def test_antipodal_points_do_not_fail():
    distance = haversine(15.856390035994224, -140.80869711671647, -15.856390035994224, 39.19130288328353)
    assert distance == pytest.approx(math.pi * 6371)
