"""
Flare Profile Computer
======================
Combines a linear lateral (ground speed) profile with a fitted vertical speed
profile and samples the flare trajectory at a set of ground distances.

Units: speeds in ft/min, distances and heights in ft, time in minutes.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List

from flareprofile.config import (
    DEFAULT_SAMPLE_DISTANCES_FEET,
    FLARE_TIME_GUARD_MINUTES,
    SAMPLE_MERGE_THRESHOLD_FEET,
)
from flareprofile.model.curves import FlareCurve, PiecewiseLinearPlateauFunction
from flareprofile.model.linear import LinearFunction
from flareprofile.model.models import FlareModel
from flareprofile.model.points import TrajectoryPoint
from flareprofile.utils import (
    deg2rad,
    feet_per_minute_to_knots,
    knots_to_feet_per_minute,
    rad2deg,
)

logger = logging.getLogger(__name__)


def merge_sample_distances(
    distances: Iterable[float],
    threshold: float = SAMPLE_MERGE_THRESHOLD_FEET,
    maximum: float = math.inf,
) -> List[float]:
    """
    Sort candidate distances and merge the ones that are too close together.

    Distances above `maximum` (and NaN) are discarded. Scanning in ascending
    order, a distance closer than `threshold` to the last retained one replaces
    it with the larger of the two.

    Args:
        distances: Candidate ground distances (ft).
        threshold: Minimum spacing between retained distances (ft).
        maximum: Largest admissible distance (ft).

    Returns:
        Strictly increasing list of distances.

    Raises:
        ValueError: If `threshold` is negative.
    """
    if threshold < 0:
        raise ValueError(f"Merge threshold must be non-negative, got {threshold}")

    candidates = sorted(d for d in distances if not math.isnan(d) and d <= maximum)

    merged: List[float] = []
    for distance in candidates:
        if merged and distance - merged[-1] < threshold:
            merged[-1] = max(merged[-1], distance)
        else:
            merged.append(distance)
    return merged


@dataclass
class FlareProfileComputer:
    """
    Physical inputs of a landing flare.

    Attributes:
        initial_lateral_speed: Ground speed at the start of the flare (ft/min).
        touchdown_lateral_speed: Ground speed at touchdown (ft/min).
        initial_vertical_speed: Vertical speed at the start of the flare (ft/min, < 0).
        touchdown_vertical_speed: Vertical speed at touchdown (ft/min, < 0).
        touchdown_distance: Desired touchdown point measured from the flare start (ft).
        flare_height: Height above the runway where the flare starts (ft).
    """
    initial_lateral_speed: float
    touchdown_lateral_speed: float
    initial_vertical_speed: float
    touchdown_vertical_speed: float
    touchdown_distance: float
    flare_height: float

    @classmethod
    def from_knots(
        cls,
        initial_speed_knots: float,
        touchdown_speed_knots: float,
        initial_flight_path_angle: float,
        touchdown_vertical_speed: float,
        touchdown_distance: float,
        flare_height: float,
    ) -> FlareProfileComputer:
        """
        Build the inputs from cockpit units.

        Args:
            initial_speed_knots: Ground speed at the start of the flare (kt).
            touchdown_speed_knots: Ground speed at touchdown (kt).
            initial_flight_path_angle: Flight path angle at the start of the flare (deg, < 0).
            touchdown_vertical_speed: Vertical speed at touchdown (ft/min).
            touchdown_distance: Desired touchdown point from the flare start (ft).
            flare_height: Flare start height (ft).
        """
        initial_speed = knots_to_feet_per_minute(initial_speed_knots)
        return cls(
            initial_lateral_speed=initial_speed,
            touchdown_lateral_speed=knots_to_feet_per_minute(touchdown_speed_knots),
            initial_vertical_speed=math.sin(deg2rad(initial_flight_path_angle)) * initial_speed,
            touchdown_vertical_speed=touchdown_vertical_speed,
            touchdown_distance=touchdown_distance,
            flare_height=flare_height,
        )

    @classmethod
    def example(cls) -> FlareProfileComputer:
        """Typical airliner flare: 150 kt → 145 kt, -3°, -150 ft/min at touchdown, 2000 ft, 50 ft."""
        return cls.from_knots(150.0, 145.0, -3.0, -150.0, 2000.0, 50.0)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def h1(self) -> float:
        """Height change over the flare (ft), the integral of the vertical profile."""
        return -self.flare_height

    @h1.setter
    def h1(self, value: float) -> None:
        self.flare_height = -value

    @property
    def initial_speed_knots(self) -> float:
        return feet_per_minute_to_knots(self.initial_lateral_speed)

    @initial_speed_knots.setter
    def initial_speed_knots(self, value: float) -> None:
        self.initial_lateral_speed = knots_to_feet_per_minute(value)
        if value <= self.touchdown_speed_knots:
            self.touchdown_speed_knots = value - 1

    @property
    def touchdown_speed_knots(self) -> float:
        return feet_per_minute_to_knots(self.touchdown_lateral_speed)

    @touchdown_speed_knots.setter
    def touchdown_speed_knots(self, value: float) -> None:
        self.touchdown_lateral_speed = knots_to_feet_per_minute(value)
        if value >= self.initial_speed_knots:
            self.initial_speed_knots = value + 1

    @property
    def initial_flight_path_angle(self) -> float:
        """Flight path angle at the start of the flare (degrees)."""
        return rad2deg(math.atan(self.initial_vertical_speed / self.initial_lateral_speed))

    @initial_flight_path_angle.setter
    def initial_flight_path_angle(self, degrees: float) -> None:
        speed = self.initial_lateral_speed
        angle = deg2rad(degrees)
        self.initial_vertical_speed = math.sin(angle) * speed
        self.initial_lateral_speed = math.cos(angle) * speed

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------
    @property
    def minimum_flare_time(self) -> float:
        """Linear vertical profile (trapezoid area) plus the guard band (minutes)."""
        return 2 * self.h1 / (self.touchdown_vertical_speed + self.initial_vertical_speed) + FLARE_TIME_GUARD_MINUTES

    @property
    def maximum_flare_time(self) -> float:
        """Instant change to the touchdown rate (rectangle area) minus the guard band (minutes)."""
        return self.h1 / self.touchdown_vertical_speed - FLARE_TIME_GUARD_MINUTES

    @property
    def lateral_profile(self) -> LinearFunction:
        """Ground speed decaying linearly from the initial to the touchdown speed over the touchdown distance."""
        return LinearFunction.from_end_value(
            self.initial_lateral_speed,
            self.touchdown_lateral_speed,
            self.touchdown_distance,
        )

    @property
    def total_flare_time(self) -> float:
        """Time to reach the touchdown point, clamped into the feasible range (minutes)."""
        unclamped = self.lateral_profile.x_from_integral(self.touchdown_distance)
        clamped = max(self.minimum_flare_time, min(self.maximum_flare_time, unclamped))
        if clamped != unclamped:
            logger.debug(f"Flare time clamped from {unclamped:.5f} to {clamped:.5f} min")
        return clamped

    def vertical_profile(self, model: FlareModel, total_time: float | None = None) -> FlareCurve:
        """Fit the vertical speed profile of `model` over the (clamped) flare time."""
        if total_time is None:
            total_time = self.total_flare_time
        return model.fit(
            self.initial_vertical_speed,
            self.touchdown_vertical_speed,
            total_time,
            self.h1,
        )

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def key_points(
        self,
        model: FlareModel,
        sample_distances: Iterable[float] = DEFAULT_SAMPLE_DISTANCES_FEET,
        merge_threshold: float = SAMPLE_MERGE_THRESHOLD_FEET,
    ) -> List[TrajectoryPoint]:
        """
        Sample the flare trajectory.

        Args:
            model: Vertical speed model.
            sample_distances: Ground distances (ft) to sample at, in addition to
                the touchdown point (and the ramp end of the piecewise model).
            merge_threshold: Samples closer than this (ft) are merged.

        Returns:
            Trajectory points ordered by distance. The last one is the touchdown
            point at height 0.
        """
        total_time = self.total_flare_time

        lateral = LinearFunction.from_points(
            (0.0, self.initial_lateral_speed),
            (total_time, self.touchdown_lateral_speed),
        )
        vertical = self.vertical_profile(model, total_time)
        if not vertical.is_valid:
            logger.warning(
                f"{model.value} model has no solution for "
                f"y0={vertical.y0:.2f}, y1={vertical.y1:.2f}, x1={vertical.x1:.5f}, h1={vertical.h1:.2f}"
            )

        max_distance = lateral.integral(total_time)

        candidates = [*sample_distances, max_distance]
        if isinstance(vertical, PiecewiseLinearPlateauFunction):
            candidates.append(lateral.integral(vertical.a))

        distances = merge_sample_distances(candidates, merge_threshold, maximum=max_distance)

        points: List[TrajectoryPoint] = []
        for distance in distances:
            if distance == max_distance:
                points.append(TrajectoryPoint(
                    elapsed=total_time,
                    lateral_position=max_distance,
                    height_descended=self.h1,
                    lateral_rate=self.touchdown_lateral_speed,
                    vertical_rate=self.touchdown_vertical_speed,
                    height=0.0,
                ))
                continue

            t = lateral.x_from_integral(distance)
            if not t <= total_time:
                continue

            height_descended = vertical.integral(t)
            points.append(TrajectoryPoint(
                elapsed=t,
                lateral_position=distance,
                height_descended=height_descended,
                lateral_rate=lateral.y(t),
                vertical_rate=vertical.y(t),
                height=self.flare_height + height_descended,
            ))

        logger.debug(f"{model.value}: {len(points)} key points over {total_time:.5f} min")
        return points
