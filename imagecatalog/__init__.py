"""Read-only image catalogue API over MongoDB."""

__version__ = "1.0.0"
