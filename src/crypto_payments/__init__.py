"""Confirmation tracking for on-chain crypto payments."""

__version__ = "0.1.0"
