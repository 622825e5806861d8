"""Localization template compiler and styled text codec."""

__version__ = "0.1.0"
