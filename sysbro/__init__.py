"""Command-line system assistant: resource statistics, disk cleanup and startup service management."""

__version__ = "1.0.0"
__all__ = ["__version__"]