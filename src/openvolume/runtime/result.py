"""Operation result types for the volume runtime."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from openvolume.errors import ErrorCode, VolumeError


class OperationStatus(str, Enum):
    """Operation status values."""

    COMPLETED = "completed"
    FAILED = "failed"

    # Create-specific
    ALREADY_EXISTS = "already_exists"

    # Remove-specific
    ALREADY_DELETED = "already_deleted"


class OperationResult(BaseModel):
    """Unified result for all lifecycle operations.

    Provides idempotent responses:
    - Create on an existing volume: ALREADY_EXISTS
    - Remove on an absent volume: ALREADY_DELETED
    - Failures: FAILED with an error code and message
    """

    status: OperationStatus
    message: str = ""
    error: ErrorCode | None = None

    # Operation-specific fields
    mountpoint: str | None = None
    scope: str | None = None
    size_bytes: int | None = None

    @classmethod
    def failed(cls, exc: VolumeError) -> OperationResult:
        return cls(status=OperationStatus.FAILED, message=exc.message, error=exc.code)

    @property
    def is_success(self) -> bool:
        """Check if operation completed or was already in desired state."""
        return self.status in (
            OperationStatus.COMPLETED,
            OperationStatus.ALREADY_EXISTS,
            OperationStatus.ALREADY_DELETED,
        )
