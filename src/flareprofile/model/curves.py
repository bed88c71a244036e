"""
Flare Curves
============
Curve families fitted to a boundary problem (y0, y1, x1, h1) so that

    y(0) = y0,   y(x1) = y1,   ∫₀^x1 y(t) dt = h1.

In the flare model y is the vertical speed (ft/min), x the elapsed time
(minutes) and the integral the height descended (ft).

A fit that cannot satisfy the problem leaves every shape parameter at NaN.
Nothing is raised: callers check `is_valid` (or `math.isnan` on a parameter)
and every evaluation of an invalid curve returns NaN.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np
import matplotlib.pyplot as plt

from flareprofile.config import (
    DEGENERACY_EPSILON,
    EXPONENTIAL_SHAPE_BRACKET,
    FIT_HEIGHT_TOLERANCE,
    INVERSE_NEWTON_ITERATIONS,
    INVERSE_SLOPE_GUARD,
    INVERSE_SQRT_DERIVATIVE_STEP,
    INVERSE_TOLERANCE,
    RATIONAL_DERIVATIVE_STEP,
    RECIPROCAL_SHAPE_BRACKET,
)
from flareprofile.model.boundary import BoundaryProblem
from flareprofile.solvers import forward_difference, solve_bisection, solve_newton

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _accept_root(
    shape: Callable[[float], float],
    root: float,
    target: float,
    tolerance: float,
) -> bool:
    """A root is trusted only if it is positive and actually solves the shape equation."""
    if not (math.isfinite(root) and root > 0):
        return False
    with np.errstate(all="ignore"):
        residual = shape(root) - target
    return bool(abs(residual) <= tolerance)


def _solve_shape_parameter(
    shape: Callable[[float], float],
    shape_slope: Callable[[float], float],
    target: float,
    initial_guess: float,
    bracket: tuple[float, float],
    problem: BoundaryProblem,
) -> float:
    """
    Solve shape(b) = target for b > 0.

    Newton's method first. If its root does not meet the height tolerance
    (slow convergence of a numeric derivative, or b far below the initial
    guess near the rectangle bound), bisection over `bracket` takes over.
    Every shape equation here is monotonic in b.

    Args:
        shape: Shape function of the family, K as a function of b.
        shape_slope: Its derivative (analytic or numeric).
        target: The problem's shape ratio K.
        initial_guess: Newton starting point.
        bracket: (low, high) with shape(low) and shape(high) on both sides of K.
        problem: Boundary problem, sets the tolerance on K.

    Returns:
        b, or NaN if neither method meets the tolerance.
    """
    # integral(x1) - h1 == (y1 - y0)·(shape(b) - K)
    tolerance = FIT_HEIGHT_TOLERANCE / abs(problem.y1 - problem.y0)

    b = solve_newton(shape, shape_slope, target=target, initial_guess=initial_guess, lower=0.0)
    if _accept_root(shape, b, target, tolerance):
        return b

    logger.debug(f"Newton root b={b} rejected for {problem}, bisecting on {bracket}")
    b = solve_bisection(shape, target, bracket[0], bracket[1], tolerance=tolerance)
    if _accept_root(shape, b, target, tolerance):
        return b
    return math.nan


# ==========================================
# ABSTRACT CLASS FOR FLARE CURVES
# ==========================================
class FlareCurve(ABC):
    """
    Abstract base class for flare curves.

    Subclasses implement `_fit` (derive the shape parameters) and the two
    vectorised kernels `_y` and `_integral`. The public methods take care of
    scalar/array handling and of NaN propagation for invalid fits.
    """
    NAME: str = "Flare Curve"
    PARAMETER_NAMES: tuple[str, ...] = ("a", "b", "c")

    def __init__(self, y0: float, y1: float, x1: float, h1: float) -> None:
        """
        Args:
            y0: Value at x = 0.
            y1: Value at x = x1.
            x1: Upper bound of the domain (> 0).
            h1: Integral of the curve over [0, x1].
        """
        self.problem = BoundaryProblem(float(y0), float(y1), float(x1), float(h1))

        for name in self.PARAMETER_NAMES:
            setattr(self, name, math.nan)

        if not self.problem.is_feasible():
            logger.debug(f"{self.NAME}: infeasible boundary problem {self.problem}")
            return

        with np.errstate(all="ignore"):
            values = self._fit(self.problem)

        if values is None or not all(math.isfinite(v) for v in values):
            logger.debug(f"{self.NAME}: no solution for {self.problem}")
            return

        for name, value in zip(self.PARAMETER_NAMES, values):
            setattr(self, name, float(value))

    @classmethod
    def from_problem(cls, problem: BoundaryProblem) -> FlareCurve:
        return cls(problem.y0, problem.y1, problem.x1, problem.h1)

    @abstractmethod
    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        """
        Derive the shape parameters.

        Args:
            problem: A boundary problem that already passed the feasibility guard.

        Returns:
            Parameter values in the order of PARAMETER_NAMES, or None if the
            problem has no solution for this family.
        """
        pass

    @abstractmethod
    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        pass

    @abstractmethod
    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        pass

    # ------------------------------------------------------------------
    # Boundary problem
    # ------------------------------------------------------------------
    @property
    def y0(self) -> float:
        return self.problem.y0

    @property
    def y1(self) -> float:
        return self.problem.y1

    @property
    def x1(self) -> float:
        return self.problem.x1

    @property
    def h1(self) -> float:
        return self.problem.h1

    @property
    def min_x1(self) -> float:
        return self.problem.min_x1

    @property
    def max_x1(self) -> float:
        return self.problem.max_x1

    @property
    def parameters(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.PARAMETER_NAMES}

    @property
    def is_valid(self) -> bool:
        """True if every shape parameter is finite."""
        return all(math.isfinite(value) for value in self.parameters.values())

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def _evaluate(
        self,
        x: float | npt.NDArray[np.float64],
        kernel: Callable[[npt.NDArray[np.float64]], npt.NDArray[np.float64]],
    ) -> float | npt.NDArray[np.float64]:
        x_array = np.asarray(x, dtype=np.float64)

        if self.is_valid:
            with np.errstate(all="ignore"):
                values = kernel(x_array)
        else:
            values = np.full_like(x_array, np.nan)

        if np.isscalar(x):
            return float(values)
        return values

    def y(self, x: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        """
        Evaluate the curve.

        Args:
            x: Position(s) in the domain (e.g. time in minutes).

        Returns:
            y(x); NaN if the fit is invalid.
        """
        return self._evaluate(x, self._y)

    def integral(self, x: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        """
        Evaluate ∫₀ˣ y(t) dt in closed form.

        Args:
            x: Upper integration bound(s).

        Returns:
            The definite integral; NaN if the fit is invalid.
        """
        return self._evaluate(x, self._integral)

    def x_from_integral(
        self,
        integral: float,
        tolerance: float = INVERSE_TOLERANCE,
        max_iterations: int = INVERSE_NEWTON_ITERATIONS,
        use_newton: bool = True,
    ) -> float:
        """
        Solve ∫₀ˣ y(t) dt = integral for x in [0, x1].

        Newton iteration (y is the derivative of the integral) seeded with a
        linear interpolation between the ends of the domain. If a Newton step
        leaves [0, x1] or the iteration does not converge, bisection over
        [0, x1] takes over.

        Args:
            integral: Target value of the integral.
            tolerance: Absolute tolerance on the integral.
            max_iterations: Newton step budget before falling back to bisection.
            use_newton: If False, go straight to bisection.

        Returns:
            x, or NaN if the fit is invalid or the target is out of range.
        """
        if not self.is_valid or math.isnan(integral):
            return math.nan

        low, high = 0.0, self.x1
        h_low = self.integral(low)
        h_high = self.integral(high)

        if not min(h_low, h_high) <= integral <= max(h_low, h_high):
            return math.nan

        if use_newton and h_high != h_low:
            x = high * (integral - h_low) / (h_high - h_low)
            for _ in range(max_iterations):
                residual = self.integral(x) - integral
                if abs(residual) < tolerance:
                    return x

                slope = self.y(x)
                if not abs(slope) >= INVERSE_SLOPE_GUARD:
                    break

                x_next = x - residual / slope
                if not low <= x_next <= high:
                    break
                x = x_next

        return solve_bisection(self.integral, integral, low, high, tolerance)

    def residuals(self) -> tuple[float, float, float]:
        """(y(0) - y0, y(x1) - y1, integral(x1) - h1); all NaN for an invalid fit."""
        return (
            self.y(0.0) - self.y0,
            self.y(self.x1) - self.y1,
            self.integral(self.x1) - self.h1,
        )

    def plot(self, num_points: int = 200) -> None:
        """
        Plot the fitted curve over its domain.
        """
        if not self.is_valid:
            logger.warning(f"{self.NAME}: nothing to plot, the fit has no solution.")
            return

        times = np.linspace(0.0, self.x1, num_points)  # minutes
        speeds = self.y(times)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))

        plt.plot(times * 60, speeds, 'b', lw=2)

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.NAME} Flare Curve")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Vertical speed (ft/min)")

        plt.xlim(0, self.x1 * 60)
        plt.show()

    def __repr__(self) -> str:
        params = ", ".join(f"{name}={value:.6g}" for name, value in self.parameters.items())
        return f"{type(self).__name__}({self.problem}, {params})"


# ==========================================
# RECIPROCAL / EXPONENTIAL FAMILIES (Newton)
# ==========================================

class ExponentialFlareFunction(FlareCurve):
    """
    Shifted exponential: y(x) = c - a·exp(-b·x).

    The classic saturating model, approaching the asymptote c.

    Eliminating a and c from the three boundary equations leaves one equation in b:

        K = x1 / (1 - exp(-b·x1)) - 1/b,    K = (h1 - y0·x1) / (y1 - y0)

    which is solved with Newton's method (analytic derivative).
    """
    NAME = "Exponential"
    PARAMETER_NAMES = ("a", "b", "c")

    a: float
    b: float
    c: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        x1 = problem.x1
        target = problem.shape_ratio

        def shape(b: float) -> float:
            # 1 - exp(-b·x1)
            return x1 / -np.expm1(-b * x1) - 1.0 / b

        def shape_slope(b: float) -> float:
            e = np.exp(-b * x1)
            decay = -np.expm1(-b * x1)
            return -(x1 * x1 * e) / (decay * decay) + 1.0 / (b * b)

        low, high = EXPONENTIAL_SHAPE_BRACKET
        b = _solve_shape_parameter(
            shape, shape_slope, target, 1.0 / x1, (low / x1, high / x1), problem
        )
        if math.isnan(b):
            return None

        a = (problem.y1 - problem.y0) / -np.expm1(-b * x1)
        c = problem.y0 + a
        return a, b, c

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.c - self.a * np.exp(-self.b * x)

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.c * x + (self.a / self.b) * np.expm1(-self.b * x)


class RationalFlareFunction(FlareCurve):
    """
    Shifted hyperbola: y(x) = c - a / (x + b).

    The rate of change dies off quickly, giving a "hard" flare.

    Shape equation (numeric derivative, forward difference):

        K = (x1 + b)·(1 - (b/x1)·ln(1 + x1/b))
    """
    NAME = "Rational"
    PARAMETER_NAMES = ("a", "b", "c")

    a: float
    b: float
    c: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        x1 = problem.x1
        target = problem.shape_ratio

        def shape(b: float) -> float:
            return (x1 + b) * (1.0 - (b / x1) * np.log1p(x1 / b))

        low, high = RECIPROCAL_SHAPE_BRACKET
        b = _solve_shape_parameter(
            shape,
            forward_difference(shape, RATIONAL_DERIVATIVE_STEP),
            target,
            x1,
            (low * x1, high * x1),
            problem,
        )
        if math.isnan(b):
            return None

        a = (problem.y1 - problem.y0) * b * (x1 + b) / x1
        c = problem.y0 + a / b
        return a, b, c

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.c - self.a / (x + self.b)

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        # ln(x + b) - ln(b)
        return self.c * x - self.a * np.log1p(x / self.b)


class InverseSqrtFlareFunction(FlareCurve):
    """
    Inverse square root: y(x) = c - a / sqrt(x + b).

    Sits between the rational and the exponential model. b is the root of

        (x1/√b - 2(√(x1+b) - √b)) / (1/√b - 1/√(x1+b)) - K = 0

    found with Newton's method and a forward-difference derivative. With
    √(x1+b) - √b = x1/(√b + √(x1+b)) the left-hand ratio reduces to

        x1·√(x1+b) / (√b + √(x1+b))

    which falls monotonically from x1 (b → 0) to x1/2 (b → ∞) and stays free of
    cancellation at both ends.
    """
    NAME = "Inverse Square Root"
    PARAMETER_NAMES = ("a", "b", "c")

    a: float
    b: float
    c: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        x1 = problem.x1
        target = problem.shape_ratio

        def ratio(b: float) -> float:
            sqrt_xb = np.sqrt(x1 + b)
            return x1 * sqrt_xb / (np.sqrt(b) + sqrt_xb)

        low, high = RECIPROCAL_SHAPE_BRACKET
        b = _solve_shape_parameter(
            ratio,
            forward_difference(ratio, INVERSE_SQRT_DERIVATIVE_STEP),
            target,
            x1,
            (low * x1, high * x1),
            problem,
        )
        if math.isnan(b):
            return None

        sqrt_b = np.sqrt(b)
        sqrt_xb = np.sqrt(x1 + b)
        # 1/√b - 1/√(x1+b) = x1 / (√b·√(x1+b)·(√b + √(x1+b)))
        a = (problem.y1 - problem.y0) * sqrt_b * sqrt_xb * (sqrt_b + sqrt_xb) / x1
        c = problem.y0 + a / sqrt_b
        return a, b, c

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.c - self.a / np.sqrt(x + self.b)

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        # √(x+b) - √b
        rise = x / (np.sqrt(x + self.b) + np.sqrt(self.b))
        return self.c * x - 2.0 * self.a * rise



# ==========================================
# CLOSED-FORM FAMILIES
# ==========================================

class InverseSquareFlareFunction(FlareCurve):
    """
    Inverse square: y(x) = c - a / (x + b)².

    The only reciprocal model with an exact solution. Combining the integral
    with the two end conditions gives K = x1(x1 + b)/(x1 + 2b), hence

        b = x1(x1 - K) / (2K - x1)

    b must be positive, otherwise the curve has a pole inside [0, x1].
    """
    NAME = "Inverse Square"
    PARAMETER_NAMES = ("a", "b", "c")

    a: float
    b: float
    c: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        x1 = problem.x1
        dy = problem.y1 - problem.y0
        if abs(dy) < DEGENERACY_EPSILON:
            return None

        k_ratio = (problem.h1 - problem.y0 * x1) / dy
        denominator = 2 * k_ratio - x1
        if abs(denominator) < DEGENERACY_EPSILON:
            return None

        b = x1 * (x1 - k_ratio) / denominator
        if not b > 0:
            return None

        term0 = 1.0 / (b * b)
        term1 = 1.0 / ((x1 + b) * (x1 + b))
        a = dy / (term0 - term1)
        c = problem.y0 + a * term0
        return a, b, c

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        denominator = x + self.b
        return self.c - self.a / (denominator * denominator)

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return self.c * x + self.a * (1.0 / (x + self.b) - 1.0 / self.b)


class PiecewiseLinearPlateauFunction(FlareCurve):
    """
    Linear ramp followed by a plateau:

        y(x) = k·x + y0   for x <= a
        y(x) = y1         for x >  a

    Continuity at the transition point gives k = (y1 - y0)/a. The integral is a
    trapezoid over [0, a] plus a rectangle over [a, x1]:

        h1 = (y0 + y1)/2 · a + y1·(x1 - a)   →   a = 2(h1 - y1·x1) / (y0 - y1)

    The fit is rejected unless 0 < a <= x1.
    """
    NAME = "Piecewise Linear Plateau"
    PARAMETER_NAMES = ("a", "k")

    a: float
    k: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        denominator = problem.y0 - problem.y1
        if denominator == 0:
            return None

        a = 2.0 * (problem.h1 - problem.y1 * problem.x1) / denominator
        if a <= 0 or a > problem.x1:
            return None

        k = (problem.y1 - problem.y0) / a
        return a, k

    @property
    def transition_integral(self) -> float:
        """H(a) = (k/2)·a² + y0·a, the integral at the end of the ramp."""
        return 0.5 * self.k * self.a * self.a + self.y0 * self.a

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.where(x <= self.a, self.k * x + self.y0, self.y1)

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        ramp = 0.5 * self.k * x * x + self.y0 * x
        plateau = self.transition_integral + self.y1 * (x - self.a)
        return np.where(x <= self.a, ramp, plateau)

    def x_from_integral(self, integral: float, *args, **kwargs) -> float:
        """
        Analytic inverse of the integral.

        - Target between 0 and H(a): the ramp region, solve the quadratic
          (k/2)x² + y0·x - H = 0 for a root in [0, a].
        - Beyond H(a): the plateau region, x = a + (H - H(a))/y1.

        Returns:
            x, or NaN for a negative discriminant, no root in [0, a], or a
            plateau solution that falls before a.
        """
        if not self.is_valid or math.isnan(integral):
            return math.nan

        a, k = self.a, self.k
        h_a = self.transition_integral

        if min(0.0, h_a) <= integral <= max(0.0, h_a):
            qa = 0.5 * k
            qb = self.y0
            qc = -integral

            discriminant = qb * qb - 4 * qa * qc
            if discriminant < 0:
                return math.nan

            sqrt_disc = math.sqrt(discriminant)
            roots = ((-qb + sqrt_disc) / (2 * qa), (-qb - sqrt_disc) / (2 * qa))

            # Round-off can push the root at H(a) a few ulps past a
            slack = DEGENERACY_EPSILON * a
            candidates = [min(max(r, 0.0), a) for r in roots if -slack <= r <= a + slack]
            return candidates[0] if candidates else math.nan

        x = a + (integral - h_a) / self.y1
        return x if x >= a else math.nan


class SqrtFlareFunction(FlareCurve):
    """
    Square root: y(x) = sqrt(k·x + b) + a.

    Fully closed form. With s0 = √b and D = 2h1 - x1(y0 + y1), eliminating the
    three boundary equations gives

        s0 = (3h1(y0 - y1) - x1(y0² + y0·y1 - 2y1²)) / (3D)
        b  = s0²,   a = y0 - s0,   k = (y1 - y0)³ / (3D)

    The shape only covers profiles with K/x1 <= 2/3; beyond that s0 turns
    negative and the fit is rejected.
    """
    NAME = "Square Root"
    PARAMETER_NAMES = ("a", "b", "k")

    a: float
    b: float
    k: float

    def _fit(self, problem: BoundaryProblem) -> Optional[tuple[float, ...]]:
        y0, y1, x1, h1 = problem.y0, problem.y1, problem.x1, problem.h1

        d = 2 * h1 - x1 * (y0 + y1)
        if d == 0:
            return None

        s0 = (3 * h1 * (y0 - y1) - x1 * (y0 * y0 + y0 * y1 - 2 * y1 * y1)) / (3 * d)
        if not s0 >= 0:
            return None

        k = (y1 - y0) ** 3 / (3 * d)
        if not (math.isfinite(k) and k > 0):
            return None

        return y0 - s0, s0 * s0, k

    def _y(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.sqrt(self.k * x + self.b) + self.a

    def _integral(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        term = (self.k * x + self.b) ** 1.5 - self.b ** 1.5
        return (2.0 / (3.0 * self.k)) * term + self.a * x

    def x_from_y(self, y: float) -> float:
        """
        x = ((y - a)² - b) / k

        Returns:
            x >= 0, or NaN if y lies below the curve's range.
        """
        if not self.is_valid:
            return math.nan
        v = y - self.a
        if v < 0:
            return math.nan
        x = (v * v - self.b) / self.k
        return x if x >= 0 else math.nan
