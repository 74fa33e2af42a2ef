"""
Observability: structured logging for the CLI and embedding callers.

Usage:
    from studyplan.observability import configure_logging, get_logger

    configure_logging("DEBUG")
    logger = get_logger(__name__)
    logger.warning("Stored timetable unreadable", extra={"key": "studyTimetable"})
"""

from .logging import HumanFormatter, JSONFormatter, configure_log_file, configure_logging, get_logger

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "configure_log_file",
    "configure_logging",
    "get_logger",
]
