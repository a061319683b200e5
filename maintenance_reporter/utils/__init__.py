"""Shared utilities: logging, error handling and constants."""
