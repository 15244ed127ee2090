"""Provides the special functions and continuous distributions.

special holds the numerical engines, the regularised incomplete beta
function, its inverse and the normal quantile. distribution holds the Beta,
Gaussian and Uniform distributions built on them.
"""


__all__ = [
    "distribution",
    "special",
]
