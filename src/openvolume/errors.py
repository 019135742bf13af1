"""Error handling module for openvolume.

This module defines error codes and exception classes. Runtime code raises
these exceptions; the lifecycle manager converts them into failed
OperationResults at the operation boundary, and the plugin transport sends
the message back in the "Err" field.
"""

from enum import Enum
from pathlib import Path


class ErrorCode(str, Enum):
    """Error codes for volume operations."""

    INVALID_NAME = "INVALID_NAME"
    INVALID_SIZE = "INVALID_SIZE"
    VOLUME_NOT_FOUND = "VOLUME_NOT_FOUND"
    SIZE_NOT_INCREASING = "SIZE_NOT_INCREASING"
    ALLOCATION_FAILED = "ALLOCATION_FAILED"
    RESIZE_FAILED = "RESIZE_FAILED"
    REMOVAL_FAILED = "REMOVAL_FAILED"
    TOOL_FAILURE = "TOOL_FAILURE"
    TOOL_TIMEOUT = "TOOL_TIMEOUT"


class VolumeError(Exception):
    """Base exception for openvolume.

    Attributes:
        code: The error code from ErrorCode enum.
        message: Human-readable error message.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class InvalidNameError(VolumeError):
    """Volume name is empty or would escape the volume root."""

    def __init__(self, message: str = "Invalid volume name") -> None:
        super().__init__(ErrorCode.INVALID_NAME, message)


class InvalidSizeError(VolumeError):
    """Requested capacity is unparseable or not positive."""

    def __init__(self, message: str = "Invalid size specified") -> None:
        super().__init__(ErrorCode.INVALID_SIZE, message)


class VolumeNotFoundError(VolumeError):
    """Volume directory does not exist."""

    def __init__(self, message: str = "Volume not found") -> None:
        super().__init__(ErrorCode.VOLUME_NOT_FOUND, message)


class SizeNotIncreasingError(VolumeError):
    """Resize target is not larger than the measured size."""

    def __init__(self, message: str = "Requested size must exceed current size") -> None:
        super().__init__(ErrorCode.SIZE_NOT_INCREASING, message)


class AllocationFailedError(VolumeError):
    """Volume directory or backing image could not be created."""

    def __init__(self, message: str = "Failed to create volume") -> None:
        super().__init__(ErrorCode.ALLOCATION_FAILED, message)


class ResizeFailedError(VolumeError):
    """Backing image or its filesystem could not be grown."""

    def __init__(self, message: str = "Failed to resize volume") -> None:
        super().__init__(ErrorCode.RESIZE_FAILED, message)


class RemovalFailedError(VolumeError):
    """Volume directory could not be deleted."""

    def __init__(self, message: str = "Failed to remove volume") -> None:
        super().__init__(ErrorCode.REMOVAL_FAILED, message)


class ToolFailureError(VolumeError):
    """External tool exited non-zero, was missing, or printed garbage.

    Attributes:
        operation: Tool operation name (allocate, format, grow, measure).
        target: Path the tool was pointed at.
        detail: Underlying tool message.
    """

    def __init__(
        self,
        operation: str,
        target: Path | str,
        detail: str,
        code: ErrorCode = ErrorCode.TOOL_FAILURE,
    ) -> None:
        self.operation = operation
        self.target = str(target)
        self.detail = detail
        super().__init__(code, f"{operation} failed for {target}: {detail}")


class ToolTimeoutError(ToolFailureError):
    """External tool did not finish before its deadline."""

    def __init__(self, operation: str, target: Path | str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            operation,
            target,
            f"timed out after {timeout:g}s",
            code=ErrorCode.TOOL_TIMEOUT,
        )
