import math

import numpy as np
import pytest

from flareprofile.model.linear import LinearFunction


def test_from_points():
    line = LinearFunction.from_points((0.0, 10.0), (2.0, 14.0))
    assert line.k == pytest.approx(2.0)
    assert line.b == pytest.approx(10.0)
    assert line.is_valid


def test_from_points_vertical_line_is_invalid():
    line = LinearFunction.from_points((1.0, 10.0), (1.0, 14.0))
    assert math.isnan(line.k)
    assert math.isnan(line.b)
    assert not line.is_valid


def test_from_end_time():
    line = LinearFunction.from_end_time(b=10.0, x1=2.0, integral=24.0)
    assert line.k == pytest.approx(2.0)
    assert line.integral(2.0) == pytest.approx(24.0)
    assert not LinearFunction.from_end_time(b=10.0, x1=0.0, integral=24.0).is_valid


def test_from_end_value():
    line = LinearFunction.from_end_value(b=10.0, y1=14.0, integral=24.0)
    assert line.k == pytest.approx(2.0)
    assert line.x_from_y(14.0) == pytest.approx(2.0)


def test_from_end_value_rejects_zero_integral_and_constant_speed():
    assert not LinearFunction.from_end_value(b=10.0, y1=14.0, integral=0.0).is_valid
    assert not LinearFunction.from_end_value(b=10.0, y1=10.0, integral=5.0).is_valid


def test_x_from_y():
    line = LinearFunction(2.0, 10.0)
    assert line.x_from_y(14.0) == pytest.approx(2.0)
    assert math.isnan(LinearFunction(0.0, 10.0).x_from_y(14.0))
    assert math.isnan(LinearFunction.invalid().x_from_y(14.0))


def test_y_accepts_arrays():
    line = LinearFunction(2.0, 10.0)
    np.testing.assert_allclose(line.y(np.array([0.0, 1.0, 2.0])), [10.0, 12.0, 14.0])


def test_x_from_integral_zero():
    assert LinearFunction(-3780.0, 15190.0).x_from_integral(0.0) == 0.0


@pytest.mark.parametrize("x", [0.01, 0.05, 0.1, 0.1339])
def test_x_from_integral_round_trip_decelerating(x):
    line = LinearFunction(-3780.0, 15190.0)
    assert line.x_from_integral(line.integral(x)) == pytest.approx(x, rel=1e-12)


@pytest.mark.parametrize("x", [0.5, 1.0, 3.0])
def test_x_from_integral_round_trip_accelerating(x):
    line = LinearFunction(2.0, 10.0)
    assert line.x_from_integral(line.integral(x)) == pytest.approx(x, rel=1e-12)


def test_x_from_integral_constant_line():
    assert LinearFunction(0.0, 5.0).x_from_integral(10.0) == pytest.approx(2.0)


def test_x_from_integral_negative_discriminant():
    # the integral of 2 - 2x never exceeds 1
    assert math.isnan(LinearFunction(-2.0, 2.0).x_from_integral(5.0))


def test_x_from_integral_no_non_negative_root():
    # x²/2 + x = -0.25 only has negative roots
    assert math.isnan(LinearFunction(1.0, 1.0).x_from_integral(-0.25))


def test_x_from_integral_falls_back_to_other_root():
    # x²/2 - x = 1.5 has roots -1 and 3
    assert LinearFunction(1.0, -1.0).x_from_integral(1.5) == pytest.approx(3.0)


def test_xy_from_integral():
    line = LinearFunction(2.0, 10.0)
    x, y = line.xy_from_integral(line.integral(1.0))
    assert x == pytest.approx(1.0)
    assert y == pytest.approx(12.0)

    x, y = LinearFunction(-2.0, 2.0).xy_from_integral(5.0)
    assert math.isnan(x) and math.isnan(y)


def test_invalid_line_propagates_nan():
    line = LinearFunction.invalid()
    assert math.isnan(line.y(1.0))
    assert math.isnan(line.integral(1.0))
    assert math.isnan(line.x_from_integral(1.0))
