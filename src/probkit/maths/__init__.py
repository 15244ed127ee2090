"""Numerical routines for probability distributions."""

__all__ = ["stats"]
