"""
Monitoring for Signboard.

Components:
    StructuredLogger - JSON or line-oriented event logging

Example:
    from signboard.monitoring import configure_logging

    logger = configure_logging("debug", json_format=False)
    logger.review_entered(["very", "much"])
"""

from signboard.monitoring.logging import (
    StructuredLogger,
    LogLevel,
    LogRecord,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogRecord",
    "configure_logging",
    "get_logger",
]
