"""
Single-variable root finding used by the curve fits.

Newton iteration with a caller-supplied derivative, plus a bisection backstop.
"""
from flareprofile.solvers.root_finding import forward_difference, solve_bisection, solve_newton

__all__ = ["solve_newton", "forward_difference", "solve_bisection"]
