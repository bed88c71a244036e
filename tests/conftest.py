import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

project_root = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(project_root))

import pytest


# (y0, y1, x1, h1): ft/min, ft/min, minutes, ft
REFERENCE_PROBLEM = (-800.0, -150.0, 0.133, -50.0)

# K/x1 = 0.55, 0.6, 0.6524: every family, the square root one included, has a solution
GENTLE_PROBLEMS = [
    (-900.0, -100.0, 0.1, -46.0),
    (-700.0, -200.0, 0.12, -48.0),
    REFERENCE_PROBLEM,
]

# K/x1 = 0.75: beyond the reach of the square root family
HARD_PROBLEM = (-600.0, -100.0, 0.2, -45.0)


@pytest.fixture
def reference_problem():
    return REFERENCE_PROBLEM
