"""Local roster manager with budget tracking."""

__version__ = "0.1.0"
