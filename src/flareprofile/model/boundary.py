"""Boundary problem shared by every curve family."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BoundaryProblem:
    """
    The four boundary constraints of a fit.

    Attributes:
        y0: Value at x = 0 (e.g. initial vertical speed, ft/min).
        y1: Value at x = x1 (e.g. touchdown vertical speed, ft/min).
        x1: Upper bound of the domain (e.g. flare time, minutes).
        h1: Integral of y over [0, x1] (e.g. height lost, ft).
    """
    y0: float
    y1: float
    x1: float
    h1: float

    @property
    def min_x1(self) -> float:
        """Smallest x1 reachable by a monotonic fit (trapezoid area, linear profile)."""
        denominator = self.y0 + self.y1
        if denominator == 0:
            return math.nan
        return 2 * self.h1 / denominator

    @property
    def max_x1(self) -> float:
        """Largest x1 reachable by a monotonic fit (rectangle area, instant change)."""
        if self.y1 == 0:
            return math.nan
        return self.h1 / self.y1

    @property
    def shape_ratio(self) -> float:
        """
        K = (h1 - y0·x1) / (y1 - y0).

        K / x1 runs from 1/2 (linear profile) to 1 (instant change) and is the
        quantity the reciprocal and exponential families solve against.
        """
        denominator = self.y1 - self.y0
        if denominator == 0:
            return math.nan
        return (self.h1 - self.y0 * self.x1) / denominator

    def is_feasible(self) -> bool:
        """
        Feasibility guard: x1 > 0, y0 < y1 < 0 and min_x1 <= x1 <= max_x1.

        NaN anywhere makes every comparison false, so NaN inputs are never feasible.
        """
        return (
            self.x1 > 0
            and self.y1 > self.y0
            and self.y1 < 0
            and self.min_x1 <= self.x1 <= self.max_x1
        )
