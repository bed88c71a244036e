import math

import numpy as np
import pytest

from flareprofile.solvers import forward_difference, solve_bisection, solve_newton


def test_newton_converges_to_square_root():
    root = solve_newton(lambda x: x * x, lambda x: 2 * x, target=2.0, initial_guess=1.0)
    assert root == pytest.approx(math.sqrt(2.0), abs=1e-10)


def test_newton_returns_last_iterate_when_budget_runs_out():
    # x³ - 2x + 2 cycles between 0 and 1 from x = 0
    root = solve_newton(
        lambda x: x ** 3 - 2 * x + 2,
        lambda x: 3 * x * x - 2,
        initial_guess=0.0,
        max_iterations=10,
    )
    assert root in (0.0, 1.0)


def test_newton_stops_on_flat_derivative():
    assert solve_newton(lambda x: x * x, lambda x: 2 * x, target=1.0, initial_guess=0.0) == 0.0


def test_newton_leaving_domain_returns_nan():
    # the first step from x = 3 lands at x < 0, where log is undefined
    root = solve_newton(np.log, lambda x: 1.0 / x, initial_guess=3.0)
    assert math.isnan(root)


def test_newton_bracket_keeps_iterate_in_domain():
    root = solve_newton(np.log, lambda x: 1.0 / x, initial_guess=3.0, lower=0.0)
    assert root == pytest.approx(1.0, abs=1e-9)


def test_newton_upper_bracket():
    # plain Newton on arctan diverges from |x| = 1.5
    root = solve_newton(np.arctan, lambda x: 1 / (1 + x * x), initial_guess=-1.5, upper=1.0)
    assert root == pytest.approx(0.0, abs=1e-9)


def test_forward_difference():
    derivative = forward_difference(lambda x: x * x, 1e-6)
    assert derivative(3.0) == pytest.approx(6.0, abs=1e-5)


def test_bisection_increasing():
    assert solve_bisection(lambda x: x ** 3, 8.0, 0.0, 3.0) == pytest.approx(2.0, abs=1e-9)


def test_bisection_decreasing():
    assert solve_bisection(lambda x: -x, -0.5, 0.0, 1.0) == pytest.approx(0.5, abs=1e-9)


def test_bisection_returns_endpoints():
    assert solve_bisection(lambda x: x, 0.0, 0.0, 1.0) == 0.0
    assert solve_bisection(lambda x: x, 1.0, 0.0, 1.0) == 1.0


def test_bisection_unbracketed_target_is_nan():
    assert math.isnan(solve_bisection(lambda x: x, 2.0, 0.0, 1.0))
