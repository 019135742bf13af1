"""Prometheus metrics definitions for openvolume.

Tracks the two things that can go wrong on a host:
- External tool calls (truncate, mkfs, resize2fs, du)
- Lifecycle operations as seen by the orchestrator
"""

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Histogram Buckets
# =============================================================================
# truncate/du are fast; mkfs and resize2fs on large images are not
_BUCKETS_TOOL = (
    0.005, 0.01, 0.025, 0.05, 0.1,
    0.25, 0.5, 1, 2.5, 5,
    10, 30, 60,
)

# =============================================================================
# External Tool Metrics
# =============================================================================

TOOL_DURATION = Histogram(
    "openvolume_tool_duration_seconds",
    "Duration of external tool invocations",
    ["tool"],  # allocate, format, grow, measure
    buckets=_BUCKETS_TOOL,
)

TOOL_ERRORS = Counter(
    "openvolume_tool_errors_total",
    "Total external tool failures",
    ["tool", "error_type"],  # error_type: exit_code, timeout, not_found, parse
)

# =============================================================================
# Lifecycle Metrics
# =============================================================================

VOLUME_OPERATIONS = Counter(
    "openvolume_volume_operations_total",
    "Total lifecycle operations by outcome",
    ["operation", "status"],  # status: OperationStatus value
)

VOLUMES_TOTAL = Gauge(
    "openvolume_volumes_total",
    "Number of volumes under the root, updated on list",
)


def _init_metrics() -> None:
    """Initialize labeled metrics with zero values."""
    for tool in ["allocate", "format", "grow", "measure"]:
        TOOL_DURATION.labels(tool=tool)
        for error_type in ["exit_code", "timeout", "not_found", "parse"]:
            TOOL_ERRORS.labels(tool=tool, error_type=error_type)

    for op in ["create", "remove", "mount", "unmount", "resize"]:
        VOLUME_OPERATIONS.labels(operation=op, status="completed")
        VOLUME_OPERATIONS.labels(operation=op, status="failed")


_init_metrics()
