"""Plugin infrastructure layer."""

from openvolume.infra.tools import ToolResult, ToolRunner, round_up

__all__ = [
    "ToolResult",
    "ToolRunner",
    "round_up",
]
