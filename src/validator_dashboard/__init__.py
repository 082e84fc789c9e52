"""Validator operations dashboard: live stake, commission, rank and revenue."""

__version__ = "0.1.0"
