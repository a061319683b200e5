"""Maintenance Reporter - dependency maintenance reports over a git period."""

__version__ = "0.1.0"
