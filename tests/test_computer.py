import logging
import math

import numpy as np
import pytest

from flareprofile.config import FLARE_TIME_GUARD_MINUTES
from flareprofile.model.computer import FlareProfileComputer, merge_sample_distances
from flareprofile.model.models import FlareModel


@pytest.fixture
def computer():
    return FlareProfileComputer.example()


def _sqrt_infeasible_computer():
    # K/x1 = 0.75 over 0.2 minutes, beyond the square root family
    return FlareProfileComputer(
        initial_lateral_speed=15000.0,
        touchdown_lateral_speed=14000.0,
        initial_vertical_speed=-600.0,
        touchdown_vertical_speed=-100.0,
        touchdown_distance=2900.0,
        flare_height=45.0,
    )


# ------------------------------------------------------------------
# Inputs and derived views
# ------------------------------------------------------------------
def test_example(computer):
    assert computer.initial_speed_knots == pytest.approx(150.0)
    assert computer.touchdown_speed_knots == pytest.approx(145.0)
    assert computer.initial_vertical_speed == pytest.approx(-795.0, abs=1.0)
    assert computer.initial_flight_path_angle == pytest.approx(-3.0, abs=0.01)
    assert computer.h1 == -50.0


def test_h1_setter(computer):
    computer.h1 = -80.0
    assert computer.flare_height == 80.0


def test_initial_speed_pushes_touchdown_speed_down(computer):
    computer.initial_speed_knots = 140.0
    assert computer.initial_speed_knots == pytest.approx(140.0)
    assert computer.touchdown_speed_knots == pytest.approx(139.0)


def test_touchdown_speed_pushes_initial_speed_up(computer):
    computer.touchdown_speed_knots = 160.0
    assert computer.touchdown_speed_knots == pytest.approx(160.0)
    assert computer.initial_speed_knots == pytest.approx(161.0)


def test_flight_path_angle_setter(computer):
    computer.initial_flight_path_angle = -5.0
    assert computer.initial_flight_path_angle == pytest.approx(-5.0)
    assert computer.initial_vertical_speed < 0


def test_flare_time_bounds(computer):
    vy0 = computer.initial_vertical_speed
    assert computer.minimum_flare_time == pytest.approx(-100.0 / (vy0 - 150.0) + FLARE_TIME_GUARD_MINUTES)
    assert computer.maximum_flare_time == pytest.approx(1.0 / 3.0 - FLARE_TIME_GUARD_MINUTES)


def test_total_flare_time_from_lateral_profile(computer):
    lateral = computer.lateral_profile
    assert lateral.is_valid
    assert lateral.y(0.0) == pytest.approx(computer.initial_lateral_speed)

    expected = 2 * 2000.0 / (computer.initial_lateral_speed + computer.touchdown_lateral_speed)
    assert computer.total_flare_time == pytest.approx(expected)
    assert computer.minimum_flare_time < computer.total_flare_time < computer.maximum_flare_time


def test_total_flare_time_is_clamped(computer):
    computer.touchdown_distance = 10000.0
    assert computer.total_flare_time == pytest.approx(computer.maximum_flare_time)

    computer.touchdown_distance = 500.0
    assert computer.total_flare_time == pytest.approx(computer.minimum_flare_time)


def test_vertical_profile(computer):
    curve = computer.vertical_profile(FlareModel.EXPONENTIAL)
    assert curve.is_valid
    assert curve.x1 == pytest.approx(computer.total_flare_time)
    assert curve.h1 == -50.0


# ------------------------------------------------------------------
# Sample merging
# ------------------------------------------------------------------
def test_merge_keeps_larger_of_close_distances():
    merged = merge_sample_distances([0.0, 500.0, 1000.0, 1312.0, 1400.0, 1500.0, 2000.0], 100.0)
    assert merged == [0.0, 500.0, 1000.0, 1400.0, 1500.0, 2000.0]


def test_merge_sorts_and_filters():
    merged = merge_sample_distances([3000.0, 1995.0, math.nan, 0.0, 2000.0], 100.0, maximum=1999.0)
    assert merged == [0.0, 1995.0]


def test_merge_collapses_chained_distances_into_largest():
    # each kept distance absorbs the next one within the threshold
    assert merge_sample_distances([0.0, 60.0, 120.0, 180.0], 100.0) == [180.0]


def test_merge_rejects_negative_threshold():
    with pytest.raises(ValueError):
        merge_sample_distances([0.0, 1.0], -1.0)


# ------------------------------------------------------------------
# Key points
# ------------------------------------------------------------------
@pytest.mark.parametrize("model", list(FlareModel))
def test_key_points(computer, model):
    points = computer.key_points(model)
    total_time = computer.total_flare_time

    assert len(points) >= 3

    first, last = points[0], points[-1]
    assert first.elapsed == 0.0
    assert first.lateral_position == 0.0
    assert first.height == pytest.approx(50.0)
    assert first.vertical_rate == pytest.approx(computer.initial_vertical_speed)

    assert last.elapsed == total_time
    assert last.height == 0.0
    assert last.height_descended == -50.0
    assert last.vertical_rate == computer.touchdown_vertical_speed
    assert last.lateral_position == pytest.approx(2000.0)

    elapsed = np.array([p.elapsed for p in points])
    assert np.all(np.diff(elapsed) >= 0)
    assert np.all(elapsed <= total_time)

    distances = np.array([p.lateral_position for p in points])
    assert np.all(np.diff(distances) >= 100.0)

    heights = np.array([p.height for p in points])
    assert np.all(np.diff(heights) <= 0)

    for p in points:
        assert p.height == pytest.approx(50.0 + p.height_descended)


def test_key_points_merge_near_duplicates(computer):
    points = computer.key_points(FlareModel.EXPONENTIAL, sample_distances=[0.0, 900.0, 950.0, 1000.0])
    distances = [p.lateral_position for p in points]
    assert distances[:2] == [0.0, 1000.0]
    assert len(distances) == 3


def test_key_points_drop_distances_beyond_touchdown(computer):
    points = computer.key_points(FlareModel.RATIONAL, sample_distances=[0.0, 2500.0, 3000.0])
    assert [p.lateral_position for p in points][:1] == [0.0]
    assert len(points) == 2


def test_piecewise_key_points_include_ramp_end(computer):
    points = computer.key_points(FlareModel.PIECEWISE_LINEAR_PLATEAU, sample_distances=[])
    curve = computer.vertical_profile(FlareModel.PIECEWISE_LINEAR_PLATEAU)

    assert len(points) == 2
    ramp_end = points[0]
    assert ramp_end.elapsed == pytest.approx(curve.a)
    assert ramp_end.vertical_rate == pytest.approx(computer.touchdown_vertical_speed)


def test_infeasible_fit_is_logged(caplog):
    computer = _sqrt_infeasible_computer()
    assert computer.total_flare_time == pytest.approx(0.2)

    with caplog.at_level(logging.WARNING, logger="flareprofile"):
        points = computer.key_points(FlareModel.SQRT)

    assert "no solution" in caplog.text
    assert points[-1].height == 0.0
    assert all(math.isnan(p.height) for p in points[:-1])


def test_other_models_handle_hard_flare():
    computer = _sqrt_infeasible_computer()
    for model in FlareModel:
        if model is FlareModel.SQRT:
            continue
        points = computer.key_points(model)
        assert all(math.isfinite(p.height) for p in points)


def test_long_touchdown_distance_clamps_to_maximum_flare_time():
    computer = FlareProfileComputer.from_knots(150.0, 145.0, -3.0, -150.0, 6000.0, 50.0)
    assert computer.total_flare_time == pytest.approx(computer.maximum_flare_time)

    for model in FlareModel:
        if model is FlareModel.SQRT:
            continue
        assert computer.vertical_profile(model).is_valid, model
        points = computer.key_points(model)
        assert all(math.isfinite(p.height) for p in points), model
