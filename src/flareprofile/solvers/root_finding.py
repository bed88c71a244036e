from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from flareprofile.config import (
    BISECTION_ITERATIONS,
    DERIVATIVE_GUARD,
    INVERSE_TOLERANCE,
    NEWTON_MAX_ITERATIONS,
    NEWTON_TOLERANCE,
)

ScalarFunction = Callable[[float], float]


def solve_newton(
    f: ScalarFunction,
    df: ScalarFunction,
    target: float = 0.0,
    initial_guess: float = 1.0,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
    tolerance: float = NEWTON_TOLERANCE,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
) -> float:
    """
    Solve f(x) = target with Newton's method.

    There is no convergence guarantee. When the iteration budget runs out, or
    the derivative becomes too small to divide by, the last iterate is returned
    as is, so the caller has to validate the result.

    Args:
        f: Function whose level set is sought.
        df: Derivative of `f` (analytic or numeric).
        target: Value that `f` should reach.
        initial_guess: Starting point of the iteration.
        max_iterations: Hard cap on the number of Newton steps.
        tolerance: Absolute step size below which the iteration stops.
        lower: Optional open lower bound for the iterate.
        upper: Optional open upper bound for the iterate.

    Returns:
        The final iterate, or NaN if `f`/`df` left their domain (non-finite step).

    Notes:
        A step that would leave the open bracket (lower, upper) is replaced by
        a move halfway to the violated bound. The iterate therefore stays
        inside the domain of functions such as sqrt(b) or log(b).
    """
    x = float(initial_guess)

    with np.errstate(all="ignore"):
        for _ in range(max_iterations):
            slope = df(x)
            if abs(slope) < DERIVATIVE_GUARD:
                break

            step = (f(x) - target) / slope
            if not math.isfinite(step):
                return math.nan

            x_next = x - step
            if lower is not None and x_next <= lower:
                x_next = 0.5 * (x + lower)
            elif upper is not None and x_next >= upper:
                x_next = 0.5 * (x + upper)

            if abs(x_next - x) < tolerance:
                return float(x_next)
            x = float(x_next)

    return x


def forward_difference(f: ScalarFunction, step: float) -> ScalarFunction:
    """
    Numeric derivative of `f` using a forward difference with a fixed step.

    Args:
        f: Function to differentiate.
        step: Absolute step size.

    Returns:
        A callable approximating f'(x) = (f(x + step) - f(x)) / step.
    """
    def derivative(x: float) -> float:
        return (f(x + step) - f(x)) / step

    return derivative


def solve_bisection(
    f: ScalarFunction,
    target: float,
    low: float,
    high: float,
    tolerance: float = INVERSE_TOLERANCE,
    max_iterations: int = BISECTION_ITERATIONS,
) -> float:
    """
    Solve f(x) = target on [low, high] by bisection.

    Works for increasing as well as decreasing functions, only the sign change
    of f(x) - target across the bracket matters.

    Args:
        f: Continuous function on [low, high].
        target: Value that `f` should reach.
        low: Lower end of the bracket.
        high: Upper end of the bracket.
        tolerance: Absolute tolerance on |f(x) - target|.
        max_iterations: Number of halvings before giving up.

    Returns:
        x with |f(x) - target| < tolerance, or NaN if the target is not
        bracketed or the tolerance was not met within the budget.
    """
    with np.errstate(all="ignore"):
        r_low = f(low) - target
        r_high = f(high) - target

        if math.isnan(r_low) or math.isnan(r_high):
            return math.nan
        if abs(r_low) < tolerance:
            return float(low)
        if abs(r_high) < tolerance:
            return float(high)
        if (r_low < 0) == (r_high < 0):
            return math.nan

        for _ in range(max_iterations):
            mid = 0.5 * (low + high)
            r_mid = f(mid) - target
            if abs(r_mid) < tolerance:
                return float(mid)
            if (r_mid < 0) == (r_low < 0):
                low, r_low = mid, r_mid
            else:
                high = mid

    return math.nan
