"""Hyprland monitor scale stepping with safe config persistence."""

__version__ = "1.0.0"
