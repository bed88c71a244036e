"""Fit analytic vertical speed profiles to an aircraft's landing flare."""
from flareprofile.model.boundary import BoundaryProblem
from flareprofile.model.computer import FlareProfileComputer, merge_sample_distances
from flareprofile.model.curves import (
    ExponentialFlareFunction,
    FlareCurve,
    InverseSqrtFlareFunction,
    InverseSquareFlareFunction,
    PiecewiseLinearPlateauFunction,
    RationalFlareFunction,
    SqrtFlareFunction,
)
from flareprofile.model.linear import LinearFunction
from flareprofile.model.models import FlareModel
from flareprofile.model.points import TrajectoryPoint

__all__ = [
    "BoundaryProblem",
    "ExponentialFlareFunction",
    "FlareCurve",
    "FlareModel",
    "FlareProfileComputer",
    "InverseSqrtFlareFunction",
    "InverseSquareFlareFunction",
    "LinearFunction",
    "PiecewiseLinearPlateauFunction",
    "RationalFlareFunction",
    "SqrtFlareFunction",
    "TrajectoryPoint",
    "merge_sample_distances",
]

__version__ = "0.1.0"
