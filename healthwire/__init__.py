"""HealthWire patient/doctor portal client core."""

__version__ = "1.0.0"
