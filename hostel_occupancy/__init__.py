"""Hostel room allocation and occupancy reconciliation service."""

__version__ = "1.0.0"
