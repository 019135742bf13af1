"""Log event types for structured logging."""

from enum import StrEnum


class LogEvent(StrEnum):
    """Log event types for the plugin.

    Used with logger.info/warning/error extra dict:
        logger.info("message", extra={"event": LogEvent.VOLUME_CREATED, ...})
    """

    # Application lifecycle
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"

    # Volume events
    VOLUME_CREATED = "volume_created"
    VOLUME_REMOVED = "volume_removed"
    VOLUME_MOUNTED = "volume_mounted"
    VOLUME_UNMOUNTED = "volume_unmounted"
    VOLUME_RESIZED = "volume_resized"
    VOLUME_ROLLBACK = "volume_rollback"
    VOLUME_OPERATION_FAILED = "volume_operation_failed"

    # External tool events
    TOOL_FAILED = "tool_failed"
    TOOL_TIMEOUT = "tool_timeout"

    # Error events
    UNHANDLED_EXCEPTION = "unhandled_exception"
