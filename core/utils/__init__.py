"""
Core Utilities Package

This package contains utility functions and helpers used throughout the application.

Modules:
    - time: ISO-8601 envelope timestamps and process uptime
"""

from core.utils.time import to_iso_timestamp, uptime_seconds

__all__ = ["to_iso_timestamp", "uptime_seconds"]
