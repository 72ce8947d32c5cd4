import math

import pytest

from retrokit.trig import (
    arc_tan_lookup,
    cos256,
    cos512,
    cos_m,
    sin256,
    sin512,
    sin_m,
)


def test_fixed_quadrant_values_512():
    assert sin512(0) == 0
    assert sin512(0x80) == 0x200
    assert sin512(0x100) == 0
    assert sin512(0x180) == -0x200
    assert cos512(0) == 0x200
    assert cos512(0x100) == -0x200


def test_fixed_quadrant_values_m():
    assert sin_m(0x80) == 0x1000
    assert sin_m(0x180) == -0x1000
    assert cos_m(0) == 0x1000
    assert cos_m(0x80) == 0


@pytest.mark.parametrize("angle", range(0, 0x100, 7))
def test_256_tables_are_halved_512_entries(angle):
    assert sin256(angle) == sin512(angle * 2) >> 1
    assert cos256(angle) == cos512(angle * 2) >> 1


@pytest.mark.parametrize("angle", range(0, 0x200, 13))
def test_512_tables_are_close_to_unit_circle(angle):
    s = sin512(angle)
    c = cos512(angle)
    assert abs(s - 512 * math.sin(angle * math.pi / 256)) < 1.0
    assert abs(math.hypot(s, c) - 512) < 2.0


@pytest.mark.parametrize("angle", range(0, 0x200, 17))
def test_m_table_close_to_sine(angle):
    assert abs(sin_m(angle) - 4096 * math.sin(angle * math.pi / 256)) < 1.0


def test_periodic_wrap():
    assert sin512(0x200 + 5) == sin512(5)
    assert cos256(0x100 + 3) == cos256(3)
    assert sin_m(0x400 + 9) == sin_m(9)


def test_negative_angles_wrap_as_source_does():
    assert sin512(-1) == sin512(1)
    assert cos256(-10) == cos256(10)
    assert cos_m(-3) == cos_m(3)


def test_arc_tan_of_positive_x_axis_is_zero():
    assert arc_tan_lookup(1, 0) == 0
    assert arc_tan_lookup(500, 0) == 0


@pytest.mark.parametrize("x,y", [(3, 5), (100, 7), (255, 255), (1000, 4000)])
def test_arc_tan_quadrant_symmetry(x, y):
    first = arc_tan_lookup(x, y)
    assert arc_tan_lookup(x, -y) == (-first) & 0xFF
    assert arc_tan_lookup(-x, -y) == (first - 0x80) & 0xFF
    assert arc_tan_lookup(-x, y) == (-0x80 - first) & 0xFF


@pytest.mark.parametrize("x,y", [(30, 90), (200, 10), (128, 128), (7, 255)])
def test_arc_tan_first_quadrant_matches_atan2(x, y):
    expected = math.atan2(y, x) * 256 / (2 * math.pi)
    assert 0 <= arc_tan_lookup(x, y) <= 64
    assert abs(arc_tan_lookup(x, y) - expected) <= 1.0


def test_arc_tan_large_values_are_scaled_down():
    assert arc_tan_lookup(0x1000, 0x1000) == arc_tan_lookup(0x100, 0x100)
    assert arc_tan_lookup(0x1230, 0x0560) == arc_tan_lookup(0x123, 0x056)


def test_arc_tan_monotonic_in_first_quadrant():
    values = [arc_tan_lookup(255, y) for y in range(1, 256)]
    assert values == sorted(values)


def test_arc_tan_results_are_bytes():
    results = {arc_tan_lookup(x, y) for x in range(-300, 301, 37) for y in range(-300, 301, 41)}
    assert all(0 <= r <= 255 for r in results)