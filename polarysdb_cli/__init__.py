"""Interactive shell for PolarysDB encrypted databases."""

__version__ = "1.0.0"
