from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from flareprofile.utils import feet_per_minute_to_knots, minutes_to_seconds, rad2deg


@dataclass(frozen=True)
class TrajectoryPoint:
    """
    One sampled point of the flare trajectory.

    Attributes:
        elapsed: Time since the start of the flare (minutes).
        lateral_position: Ground distance since the start of the flare (ft).
        height_descended: Height change since the start of the flare (ft, <= 0).
        lateral_rate: Ground speed (ft/min).
        vertical_rate: Vertical speed (ft/min).
        height: Height above the runway (ft).
    """
    elapsed: float
    lateral_position: float
    height_descended: float
    lateral_rate: float
    vertical_rate: float
    height: float

    @property
    def elapsed_seconds(self) -> float:
        return minutes_to_seconds(self.elapsed)

    @property
    def lateral_speed_knots(self) -> float:
        return feet_per_minute_to_knots(self.lateral_rate)

    @property
    def flight_path_angle_degrees(self) -> float:
        """Flight path angle, negative while descending."""
        return rad2deg(math.atan2(self.vertical_rate, self.lateral_rate))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
