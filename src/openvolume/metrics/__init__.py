"""Prometheus metrics for openvolume."""

from openvolume.metrics.collector import (
    TOOL_DURATION,
    TOOL_ERRORS,
    VOLUME_OPERATIONS,
    VOLUMES_TOTAL,
)

__all__ = [
    "TOOL_DURATION",
    "TOOL_ERRORS",
    "VOLUME_OPERATIONS",
    "VOLUMES_TOTAL",
]
