"""Periodic checker that emails a digest of matcha products found on a shop listing page."""

__version__ = "0.1.0"
