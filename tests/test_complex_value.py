import math

import pytest

from formulae.complex_value import (
    ComplexNumber,
    parse_complex,
    parse_polar,
    parse_rectangular,
)


@pytest.mark.parametrize("text,expected", [
    ("3 + 4i", ComplexNumber(3, 4)),
    ("3 - 4i", ComplexNumber(3, -4)),
    ("-2+0.5i", ComplexNumber(-2, 0.5)),
    ("5i", ComplexNumber(0, 5)),
    ("i", ComplexNumber(0, 1)),
    ("-i", ComplexNumber(0, -1)),
    ("2", ComplexNumber(2, 0)),
    ("1 + I", ComplexNumber(1, 1)),
    ("1e-3+2i", ComplexNumber(0.001, 2)),
    ("2.5e+2 - 1.5e-1i", ComplexNumber(250, -0.15)),
    ("1e-3i", ComplexNumber(0, 0.001)),
])
def test_parse_rectangular(text, expected):
    assert parse_rectangular(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "3 + xi"])
def test_parse_rectangular_rejects(text):
    assert parse_rectangular(text) is None


def test_parse_polar_degrees_by_default():
    c = parse_polar("5∠90°")
    assert c.real == pytest.approx(0.0, abs=1e-12)
    assert c.imaginary == pytest.approx(5.0)
    assert parse_polar("2<0") == ComplexNumber(2, 0)
    assert parse_polar("1∠90").imaginary == pytest.approx(1.0)


def test_parse_polar_suffix_wins():
    c = parse_polar("1∠0.5rad")
    assert c.angle() == pytest.approx(0.5)
    assert parse_polar("1∠1r").angle() == pytest.approx(1.0)
    assert parse_polar("1∠90d", angle_in_degrees=False).imaginary == pytest.approx(1.0)
    assert parse_polar("1∠90deg", angle_in_degrees=False).imaginary == pytest.approx(1.0)


def test_parse_polar_radians_flag():
    c = parse_polar("1∠3", angle_in_degrees=False)
    assert c.angle() == pytest.approx(3.0)


@pytest.mark.parametrize("text", ["abc∠3", "1∠x", "1∠2∠3", "12"])
def test_parse_polar_rejects(text):
    assert parse_polar(text) is None


def test_parse_complex_dispatches():
    assert parse_complex("3 + 4i") == ComplexNumber(3, 4)
    assert parse_complex("2∠0") == ComplexNumber(2, 0)
    assert parse_complex("junk") is None


def test_polar_parts_and_formatting():
    c = ComplexNumber(3, 4)
    assert c.magnitude() == 5.0
    assert c.angle() == pytest.approx(math.atan2(4, 3))
    assert c.to_rectangular_string() == "3 + 4i"
    assert str(ComplexNumber(3, -4)) == "3 - 4i"
    assert ComplexNumber(0, 5).to_polar_string() == "5∠90°"
    assert ComplexNumber(2, 0).to_polar_string(degrees=False) == "2∠0 rad"
    assert ComplexNumber(2, 0).to_exponential_string() == "2·e^(0i)"


def test_arithmetic():
    a, b = ComplexNumber(1, 2), ComplexNumber(3, 4)
    assert a + b == ComplexNumber(4, 6)
    assert b - a == ComplexNumber(2, 2)
    assert a * b == ComplexNumber(-5, 10)
    assert ComplexNumber(4, 2).divide(ComplexNumber(1, 1)) == ComplexNumber(3, -1)
    assert a.divide(ComplexNumber(0, 0)) is None
    assert a.conjugate() == ComplexNumber(1, -2)
    assert complex(a) == 1 + 2j


def test_predicates():
    assert ComplexNumber(2, 0).is_real()
    assert not ComplexNumber(2, 1).is_real()
    assert ComplexNumber(0, 3).is_imaginary()
    assert ComplexNumber.from_polar(2, 0) == ComplexNumber(2, 0)
