"""Waypoint: weather and trip-planning chat assistants with tool-calling agents."""

__version__ = "0.1.0"
