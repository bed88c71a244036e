"""
Configuration & Numeric Constants
=================================
This module serves as the central registry for the numeric constants shared
by the fitting models and the flare profile computer.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (unit factors, guard bands,
   iteration budgets) from being scattered throughout the code.
2. Reproducibility: Newton/bisection budgets and tolerances live in one place,
   so every curve family converges the same way in the app and in the tests.

Exports:
    FEET_PER_MINUTE_PER_KNOT (float): 1 kt expressed in ft/min.
    FLARE_TIME_GUARD_MINUTES (float): Guard band kept inside the flare time bounds.
    SAMPLE_MERGE_THRESHOLD_FEET (float): Distance below which samples are merged.
    DEFAULT_SAMPLE_DISTANCES_FEET (tuple): Lateral positions sampled by default.
"""

# Units
FEET_PER_MINUTE_PER_KNOT: float = 101.26855914
SECONDS_PER_MINUTE: float = 60.0

# Flare time bounds are shrunk by 0.1 s on both sides so the clamped total time
# never touches the trapezoid/rectangle limits exactly.
FLARE_TIME_GUARD_MINUTES: float = 1.0 / 600.0

# Key point sampling
SAMPLE_MERGE_THRESHOLD_FEET: float = 100.0
DEFAULT_SAMPLE_DISTANCES_FEET: tuple[float, ...] = (
    0.0, 500.0, 1000.0, 1312.0, 1500.0, 2000.0, 2500.0, 3000.0
)

# Newton iteration used to fit the shape parameters
NEWTON_MAX_ITERATIONS: int = 50
NEWTON_TOLERANCE: float = 1e-7
DERIVATIVE_GUARD: float = 1e-9

# Numeric derivative steps (forward difference)
RATIONAL_DERIVATIVE_STEP: float = 1e-6
INVERSE_SQRT_DERIVATIVE_STEP: float = 1e-5

# Inverse x(integral): Newton first, bisection as the backstop
INVERSE_TOLERANCE: float = 1e-9
INVERSE_NEWTON_ITERATIONS: int = 30
INVERSE_SLOPE_GUARD: float = 1e-12
BISECTION_ITERATIONS: int = 200

# Closed-form denominators below this are treated as zero
DEGENERACY_EPSILON: float = 1e-9

# A shape parameter is accepted only if the fitted curve reproduces the height
# (integral) to this tolerance, in ft
FIT_HEIGHT_TOLERANCE: float = 1e-9

# Bisection brackets for the shape parameter b when Newton fails, as multiples
# of its natural scale: x1 for the reciprocal families, 1/x1 for the exponential
RECIPROCAL_SHAPE_BRACKET: tuple[float, float] = (1e-14, 1e6)
EXPONENTIAL_SHAPE_BRACKET: tuple[float, float] = (1e-6, 1e6)
