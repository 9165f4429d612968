"""Procurement and inventory transaction engine."""

__version__ = "1.0.0"
