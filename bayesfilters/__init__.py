"""Recursive Bayesian estimation: Kalman and particle filters with their model base classes."""

__version__ = "0.10.0"