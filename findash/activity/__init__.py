"""Activity logging package."""

from findash.activity.events import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from findash.activity.logger import ActivityLogger, configure_logging

__all__ = [
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
    "ActivityLogger",
    "configure_logging",
]
