"""Utility functions for the invoice dashboard."""

from .activity import flush_activity_logs, log_activity
from .numeric import from_minor_units, to_minor_units

__all__ = [
    "flush_activity_logs",
    "log_activity",
    "from_minor_units",
    "to_minor_units",
]
