"""Utility helpers package."""

from oracle.util.logging import configure_logging, get_logger, resolve_log_level
from oracle.util.observability import (
    EventLogger,
    MetricsCollector,
    ObservabilityManager,
    create_observability_manager,
)

__all__ = [
    "EventLogger",
    "MetricsCollector",
    "ObservabilityManager",
    "configure_logging",
    "create_observability_manager",
    "get_logger",
    "resolve_log_level",
]
