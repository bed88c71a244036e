"""
Linear Function
===============
y = k·x + b, used for the lateral (ground speed) profile of the flare.

Every constructor that cannot produce a line (vertical line, zero-length
domain, zero integral) returns k = b = NaN instead of raising, and all
evaluations then propagate NaN.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt


@dataclass(frozen=True)
class LinearFunction:
    """
    Linear function y = k·x + b.
    """
    k: float
    b: float

    @classmethod
    def invalid(cls) -> LinearFunction:
        return cls(math.nan, math.nan)

    @classmethod
    def from_points(
        cls,
        point0: tuple[float, float],
        point1: tuple[float, float],
    ) -> LinearFunction:
        """
        Line through two points (x0, y0) and (x1, y1).

        Returns an invalid line if both points share the same x.
        """
        x0, y0 = point0
        x1, y1 = point1
        dx = x1 - x0
        if dx == 0:
            return cls.invalid()
        k = (y1 - y0) / dx
        return cls(k, y0 - k * x0)

    @classmethod
    def from_end_time(cls, b: float, x1: float, integral: float) -> LinearFunction:
        """
        Line with intercept b whose integral over [0, x1] equals `integral`.

        H = (k/2)·x1² + b·x1  →  k = 2(H - b·x1) / x1²
        """
        if x1 == 0:
            return cls.invalid()
        k = 2 * (integral - b * x1) / (x1 * x1)
        return cls(k, b)

    @classmethod
    def from_end_value(cls, b: float, y1: float, integral: float) -> LinearFunction:
        """
        Line from y = b to y = y1 accumulating `integral` on the way.

        With x1 = (y1 - b)/k the trapezoid area is (b + y1)/2 · x1, which gives
        k = (y1² - b²) / (2H).
        """
        if integral == 0:
            return cls.invalid()
        k = (y1 * y1 - b * b) / (2 * integral)
        if not math.isfinite(k) or k == 0:
            return cls.invalid()
        return cls(k, b)

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.k) and math.isfinite(self.b)

    def y(self, x: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        return self.k * x + self.b

    def x_from_y(self, y: float) -> float:
        """x = (y - b)/k, NaN for a horizontal or invalid line."""
        if self.k == 0 or math.isnan(self.k):
            return math.nan
        return (y - self.b) / self.k

    def integral(self, x: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        """∫₀ˣ (k·t + b) dt"""
        return 0.5 * self.k * x * x + self.b * x

    def x_from_integral(self, integral: float) -> float:
        """
        Solve (k/2)·x² + b·x - H = 0 for x >= 0.

        The preferred root is the one continuous with x = 0, i.e. on the
        monotonic branch that starts at the origin. The other root is used only
        when the preferred one is negative.

        Args:
            integral: Target value H of the integral.

        Returns:
            x, or NaN for a negative discriminant or when no root is non-negative.
        """
        if not self.is_valid:
            return math.nan
        if integral == 0:
            return 0.0

        k, b = self.k, self.b
        discriminant = b * b + 2 * k * integral
        if discriminant < 0:
            return math.nan

        root = math.copysign(math.sqrt(discriminant), b)
        denominator = b + root
        if denominator == 0:
            return math.nan

        # 2H / (b ± sqrt(D)) is the branch root without cancellation, and it
        # reduces to H/b when k = 0
        x = 2 * integral / denominator
        if x >= 0:
            return x

        if k == 0:
            return math.nan
        other = (-b - root) / k
        return other if other >= 0 else math.nan

    def xy_from_integral(self, integral: float) -> tuple[float, float]:
        x = self.x_from_integral(integral)
        if math.isnan(x):
            return math.nan, math.nan
        return x, self.y(x)

    def __str__(self) -> str:
        return f"LinearFunction(k: {self.k}, b: {self.b})"
