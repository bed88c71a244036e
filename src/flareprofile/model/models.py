"""
Flare Model Selector
====================
Maps the user-facing model choice onto the curve family that implements it.
"""
from __future__ import annotations

from enum import StrEnum

from flareprofile.model.curves import (
    ExponentialFlareFunction,
    FlareCurve,
    InverseSqrtFlareFunction,
    InverseSquareFlareFunction,
    PiecewiseLinearPlateauFunction,
    RationalFlareFunction,
    SqrtFlareFunction,
)


class FlareModel(StrEnum):
    EXPONENTIAL = "Exponential"
    RATIONAL = "Rational"
    INVERSE_SQRT = "Inverse Square Root"
    INVERSE_SQUARE = "Inverse Square"
    PIECEWISE_LINEAR_PLATEAU = "Piecewise Linear Plateau"
    SQRT = "Square Root"

    @property
    def curve_class(self) -> type[FlareCurve]:
        match self:
            case FlareModel.EXPONENTIAL:
                return ExponentialFlareFunction
            case FlareModel.RATIONAL:
                return RationalFlareFunction
            case FlareModel.INVERSE_SQRT:
                return InverseSqrtFlareFunction
            case FlareModel.INVERSE_SQUARE:
                return InverseSquareFlareFunction
            case FlareModel.PIECEWISE_LINEAR_PLATEAU:
                return PiecewiseLinearPlateauFunction
            case FlareModel.SQRT:
                return SqrtFlareFunction

    @property
    def description(self) -> str:
        match self:
            case FlareModel.EXPONENTIAL:
                return "Smooth saturating decay towards an asymptote."
            case FlareModel.RATIONAL:
                return "Fast initial change that dies off quickly (hard flare)."
            case FlareModel.INVERSE_SQRT:
                return "Between the rational and the exponential model."
            case FlareModel.INVERSE_SQUARE:
                return "Like the rational model, solved in closed form."
            case FlareModel.PIECEWISE_LINEAR_PLATEAU:
                return "Linear change, then constant touchdown rate."
            case FlareModel.SQRT:
                return "Square root growth, closed form; needs a gentle flare."

    def fit(self, y0: float, y1: float, x1: float, h1: float) -> FlareCurve:
        """Fit this model's curve family to the boundary problem (y0, y1, x1, h1)."""
        return self.curve_class(y0, y1, x1, h1)

    @classmethod
    def from_name(cls, name: str) -> FlareModel:
        """
        Look up a model by member name or display label, case-insensitively.

        Dashes and spaces are accepted in place of underscores, so
        "inverse-sqrt", "INVERSE_SQRT" and "Inverse Square Root" all resolve.

        Raises:
            ValueError: If no model matches.
        """
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        for model in cls:
            if key == model.name or key == model.value.upper().replace(" ", "_"):
                return model
        choices = ", ".join(model.name.lower() for model in cls)
        raise ValueError(f"Unknown flare model '{name}'. Choose from: {choices}")
