"""DevEvent: event listing and booking API."""

__version__ = "0.1.0"
__author__ = "DevEvent Team"

__all__ = ["__version__", "__author__"]
